"""
Per-operation state shared by the tag cleanup API.
"""
from __future__ import annotations

from . import conf
from .exceptions import VocabularyNotFound
from .stores import DjangoRecordStore, DjangoTermStore, RecordStore, TermStore


class CleanupContext:
    """
    Settings, stores and cached lookups for one cleanup operation.

    Every top-level API call builds a fresh context unless one is passed in.
    Anything left unspecified is read from the POEM_TAGGING settings. The
    vocabulary id is resolved on first use and kept until reset() is called.
    """

    def __init__(
        self,
        vocabulary_name: str | None = None,
        record_type: str | None = None,
        delimiter: str | None = None,
        bunch_size: int | None = None,
        bunch_time_budget: float | None = None,
        record_store: RecordStore | None = None,
        term_store: TermStore | None = None,
    ):
        self.vocabulary_name = vocabulary_name or conf.get_setting("VOCABULARY_NAME")
        self.record_type = record_type or conf.get_setting("RECORD_TYPE")
        self.delimiter = delimiter or conf.get_setting("DELIMITER")
        self.bunch_size = bunch_size or conf.get_setting("BUNCH_SIZE")
        self.bunch_time_budget = bunch_time_budget or conf.get_setting("BUNCH_TIME_BUDGET")
        self.record_store: RecordStore = record_store or DjangoRecordStore()
        self.term_store: TermStore = term_store or DjangoTermStore()
        self._vocabulary_id: int | None = None

    @property
    def vocabulary_id(self) -> int:
        """
        Id of the target vocabulary. Raises VocabularyNotFound if there is none.
        """
        if self._vocabulary_id is None:
            vocabulary_id = self.term_store.resolve_vocabulary_id(self.vocabulary_name)
            if vocabulary_id is None:
                raise VocabularyNotFound(self.vocabulary_name)
            self._vocabulary_id = vocabulary_id
        return self._vocabulary_id

    def reset(self) -> None:
        """
        Forget cached lookups, e.g. after the vocabulary was recreated.
        """
        self._vocabulary_id = None
