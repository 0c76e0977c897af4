"""
Exceptions for tag cleanup runs
"""
from __future__ import annotations

from django.utils.translation import gettext as _


class TagCleanupError(Exception):
    """
    Base exception for tag cleanup
    """

    def __init__(self, message: str = ""):
        super().__init__()
        self.message = message

    def __str__(self):
        return str(self.message)

    def __repr__(self):
        return f"{self.__class__.__name__}({str(self)})"


class BatchValidationError(TagCleanupError, ValueError):
    """
    Exception used when a caller passes an invalid offset or count
    """

    def __init__(self, name: str, value, minimum: int, **kargs):
        super().__init__(**kargs)
        self.message = _(
            "Invalid '{name}': expected an integer >= {minimum}, got {value!r}"
        ).format(name=name, minimum=minimum, value=value)


class VocabularyNotFound(TagCleanupError):
    """
    Exception used when the target vocabulary doesn't exist
    """

    def __init__(self, vocabulary_name: str, **kargs):
        super().__init__(**kargs)
        self.vocabulary_name = vocabulary_name
        self.message = _("Vocabulary '{name}' does not exist").format(name=vocabulary_name)


class TermPersistenceFailure(TagCleanupError):
    """
    Exception used when terms can't be looked up, created or deleted
    """

    def __init__(
        self,
        term_name: str,
        action: str,
        reason: str = "",
        record_id: int | None = None,
        **kargs,
    ):
        super().__init__(**kargs)
        self.term_name = term_name
        self.action = action
        self.reason = reason
        self.record_id = record_id
        self._build_message()

    def for_record(self, record_id: int) -> TermPersistenceFailure:
        """
        Attach the id of the record being cleaned when the failure happened.
        """
        self.record_id = record_id
        self._build_message()
        return self

    def _build_message(self):
        if self.term_name:
            message = _("Could not {action} term '{name}'").format(action=self.action, name=self.term_name)
        else:
            message = _("Could not {action} terms").format(action=self.action)
        if self.record_id is not None:
            message += _(" while cleaning record {record_id}").format(record_id=self.record_id)
        if self.reason:
            message += f": {self.reason}"
        self.message = message


class RecordPersistenceFailure(TagCleanupError):
    """
    Exception used when records can't be listed or loaded, or a record's
    cleaned tags can't be saved
    """

    def __init__(self, record_id: int | None, reason: str = "", action: str = "save", **kargs):
        super().__init__(**kargs)
        self.record_id = record_id
        self.action = action
        if record_id is None:
            self.message = _("Could not {action} records").format(action=action)
        else:
            self.message = _("Could not {action} record {record_id}").format(action=action, record_id=record_id)
        if reason:
            self.message += f": {reason}"
