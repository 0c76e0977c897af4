"""
Per-vendor collations for text fields.

SQLite and MySQL spell "case-insensitive" differently. The mixin below lets a
field carry one collation per database vendor and picks the right one at
schema time. Vendors without an entry keep their default collation.
"""
from django.db import models


class MultiCollationMixin:
    """
    Mixin for CharField/TextField subclasses that need vendor-specific collations.
    """

    def __init__(self, *args, db_collations=None, db_collation=None, **kwargs):  # pylint: disable=unused-argument
        """
        ``db_collations`` maps vendor names to collations, e.g.::

          {
            'mysql': 'utf8mb4_unicode_ci',
            'sqlite': 'NOCASE'
          }

        A single ``db_collation`` is accepted for signature compatibility and ignored.
        """
        super().__init__(*args, **kwargs)
        self.db_collations = db_collations or {}

    def db_parameters(self, connection):
        """
        Add the collation matching ``connection.vendor``, if we have one.
        """
        db_params = models.Field.db_parameters(self, connection)
        if connection.vendor in self.db_collations:
            db_params["collation"] = self.db_collations[connection.vendor]
        return db_params

    def deconstruct(self):
        name, path, args, kwargs = super().deconstruct()
        if self.db_collations:
            kwargs["db_collations"] = self.db_collations
        return name, path, args, kwargs
