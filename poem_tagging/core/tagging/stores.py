"""
Storage seams used by the tag cleanup API.

The cleanup code only talks to records and terms through the two protocols
below. The Django implementations are what the app uses; tests and other
hosts may pass their own.

Database errors are translated into TermPersistenceFailure /
RecordPersistenceFailure here, so callers never have to know about the ORM.
A record that vanished between being listed and being loaded is reported
the same way.
"""
from __future__ import annotations

import logging
from typing import Protocol, Sequence, TypedDict

from django.db import DatabaseError, transaction
from django.db.models import QuerySet
from django.utils.translation import gettext as _

from .exceptions import RecordPersistenceFailure, TermPersistenceFailure
from .models import Record, Term, Vocabulary

log = logging.getLogger(__name__)


class TermRow(TypedDict):
    """
    Minimal data about a term, as returned by list_unused().
    """
    id: int
    name: str


class RecordStore(Protocol):
    """
    Ordered access to records and their tag fields.
    """

    def list_ids_of_type(self, record_type: str) -> Sequence[int]:
        ...

    def range_query(self, record_type: str, offset: int, limit: int) -> Sequence[int]:
        ...

    def load(self, record_id: int) -> Record:
        ...

    def save(self, record: Record) -> None:
        ...


class TermStore(Protocol):
    """
    Lookup, creation and deletion of vocabulary terms.
    """

    def find_by_name(self, name: str, vocabulary_name: str) -> Sequence[Term]:
        ...

    def create(self, name: str, vocabulary_id: int) -> Term:
        ...

    def delete(self, term_id: int) -> None:
        """
        Remove the term, so that list_unused() no longer returns it.
        """
        ...

    def resolve_vocabulary_id(self, name: str) -> int | None:
        ...

    def count_unused(self, vocabulary_id: int) -> int:
        ...

    def list_unused(self, vocabulary_id: int, offset: int, limit: int) -> Sequence[TermRow]:
        ...


class DjangoRecordStore:
    """
    RecordStore backed by the Record / TagReference models.
    """

    def list_ids_of_type(self, record_type: str) -> QuerySet:
        """
        Returns a QuerySet of the ids of all records of ``record_type``, in id order.
        """
        return (
            Record.objects
            .filter(record_type=record_type)
            .order_by("id")
            .values_list("id", flat=True)
        )

    def range_query(self, record_type: str, offset: int, limit: int) -> list[int]:
        try:
            return list(self.list_ids_of_type(record_type)[offset:offset + limit])
        except DatabaseError as exc:
            raise RecordPersistenceFailure(None, reason=str(exc), action="list") from exc

    def load(self, record_id: int) -> Record:
        """
        Load a record. Raises RecordPersistenceFailure if it's gone.
        """
        try:
            return Record.objects.get(pk=record_id)
        except Record.DoesNotExist as exc:
            raise RecordPersistenceFailure(record_id, reason=_("it no longer exists"), action="load") from exc
        except DatabaseError as exc:
            raise RecordPersistenceFailure(record_id, reason=str(exc), action="load") from exc

    def save(self, record: Record) -> None:
        """
        Save the record together with its tag field, all or nothing.
        """
        try:
            with transaction.atomic():
                record.save()
                record.save_tags()
        except DatabaseError as exc:
            raise RecordPersistenceFailure(record.id, reason=str(exc)) from exc


class DjangoTermStore:
    """
    TermStore backed by the Vocabulary / Term models.
    """

    def find_by_name(self, name: str, vocabulary_name: str) -> list[Term]:
        """
        Case-insensitive lookup, oldest term first.
        """
        try:
            return list(
                Term.objects
                .filter(vocabulary__name__iexact=vocabulary_name, name__iexact=name)
                .order_by("id")
            )
        except DatabaseError as exc:
            raise TermPersistenceFailure(name, "look up", reason=str(exc)) from exc

    def create(self, name: str, vocabulary_id: int) -> Term:
        try:
            term = Term.objects.create(vocabulary_id=vocabulary_id, name=name)
        except DatabaseError as exc:
            raise TermPersistenceFailure(name, "create", reason=str(exc)) from exc
        log.info("Created term %s", term)
        return term

    def delete(self, term_id: int) -> None:
        try:
            Term.objects.filter(pk=term_id).delete()
        except DatabaseError as exc:
            raise TermPersistenceFailure(f"#{term_id}", "delete", reason=str(exc)) from exc

    def resolve_vocabulary_id(self, name: str) -> int | None:
        return (
            Vocabulary.objects
            .filter(name__iexact=name)
            .values_list("id", flat=True)
            .first()
        )

    def unused_terms(self, vocabulary_id: int) -> QuerySet:
        """
        Returns a QuerySet of the terms of the vocabulary that no record references.
        """
        return Term.objects.filter(vocabulary_id=vocabulary_id, tagreference__isnull=True)

    def count_unused(self, vocabulary_id: int) -> int:
        try:
            return self.unused_terms(vocabulary_id).count()
        except DatabaseError as exc:
            raise TermPersistenceFailure("", "count unused", reason=str(exc)) from exc

    def list_unused(self, vocabulary_id: int, offset: int, limit: int) -> list[TermRow]:
        try:
            qs = self.unused_terms(vocabulary_id).order_by("id").values("id", "name")
            return list(qs[offset:offset + limit])
        except DatabaseError as exc:
            raise TermPersistenceFailure("", "list unused", reason=str(exc)) from exc
