"""
Field helpers that keep case sensitivity consistent across database backends.

MySQL compares strings case-insensitively by default, while SQLite does not.
Vocabulary and term names must compare the same way on both, so every text
column goes through one of the helpers below. Only SQLite and MySQL get an
explicit collation; on other backends (e.g. Postgres) the columns keep the
default, case-sensitive collation, and name lookups stay case-insensitive
only because the stores query them with ``iexact``.
"""
from __future__ import annotations

from django.db import models

from .collations import MultiCollationMixin


def case_insensitive_char_field(**kwargs) -> MultiCollationCharField:
    """
    Return a case-insensitive ``MultiCollationCharField``.

    Sorting and unique indexes ignore case, so "Love" and "love" collide on a
    unique index built over this column. Any regular ``CharField`` argument may
    be overridden.
    """
    final_kwargs = {
        "null": False,
        "db_collations": {
            "sqlite": "NOCASE",
            "mysql": "utf8mb4_unicode_ci",
        },
    }
    final_kwargs.update(kwargs)

    return MultiCollationCharField(**final_kwargs)


def case_sensitive_char_field(**kwargs) -> MultiCollationCharField:
    """
    Return a case-sensitive ``MultiCollationCharField``.

    Used for machine identifiers such as record types and setting keys.
    """
    final_kwargs = {
        "null": False,
        "db_collations": {
            "sqlite": "BINARY",
            "mysql": "utf8mb4_bin",
        },
    }
    final_kwargs.update(kwargs)

    return MultiCollationCharField(**final_kwargs)


class MultiCollationCharField(MultiCollationMixin, models.CharField):
    """
    CharField with one collation per database vendor.
    """
