"""
Useful utilities for testing the tag cleanup code.
"""
from __future__ import annotations

from poem_tagging.core.tagging.models import Record, TagReference, Term, Vocabulary


def tag_names(record_id: int) -> list[str]:
    """
    Names of the record's tags as stored in the database, in order.
    """
    return [tag.term.name for tag in Record.objects.get(pk=record_id).tags]


def tag_ids(record_id: int) -> list[int]:
    """
    Term ids of the record's tags as stored in the database, in order.
    """
    return [tag.term_id for tag in Record.objects.get(pk=record_id).tags]


def create_record(vocabulary: Vocabulary, *names: str, record_type="poem", title="") -> Record:
    """
    Create a record tagged with the given term names, creating the terms as needed.

    Repeated names reuse the same term, so duplicates can be set up.
    """
    record = Record.objects.create(record_type=record_type, title=title)
    for position, name in enumerate(names):
        term = Term.objects.filter(vocabulary=vocabulary, name=name).first()
        if term is None:
            term = Term.objects.create(vocabulary=vocabulary, name=name)
        TagReference.objects.create(record=record, term=term, position=position)
    return record
