"""
Tagging app base data models
"""
from __future__ import annotations

import logging

from django.db import models, transaction
from django.utils.functional import cached_property
from django.utils.translation import gettext_lazy as _

from poem_tagging.lib.fields import case_insensitive_char_field, case_sensitive_char_field

log = logging.getLogger(__name__)


class Vocabulary(models.Model):
    """
    A named collection of Terms, e.g. the "tags" vocabulary.
    """

    id = models.BigAutoField(primary_key=True)
    name = case_insensitive_char_field(
        max_length=255,
        unique=True,
        help_text=_("Machine name used to look up this vocabulary, e.g. 'tags'."),
    )
    description = models.TextField(
        blank=True,
        help_text=_("Provides extra information about what the vocabulary is used for."),
    )

    class Meta:
        verbose_name_plural = "vocabularies"

    def __repr__(self):
        """
        Developer-facing representation of a Vocabulary.
        """
        return str(self)

    def __str__(self):
        """
        User-facing string representation of a Vocabulary.
        """
        return f"<{self.__class__.__name__}> ({self.id}) {self.name}"


class Term(models.Model):
    """
    A single entry of a Vocabulary which Records can reference.

    Names are compared case-insensitively when looked up, but nothing in the
    database stops two case variants of the same name from existing.
    """

    id = models.BigAutoField(primary_key=True)
    vocabulary = models.ForeignKey(
        Vocabulary,
        on_delete=models.CASCADE,
        help_text=_("Vocabulary this term belongs to."),
    )
    name = case_insensitive_char_field(
        max_length=255,
        help_text=_("Display name of the term."),
    )

    class Meta:
        indexes = [
            models.Index(fields=["vocabulary", "name"], name="pt_term_vocabulary_name_idx"),
        ]

    def __repr__(self):
        """
        Developer-facing representation of a Term.
        """
        return str(self)

    def __str__(self):
        """
        User-facing string representation of a Term.
        """
        return f"<{self.__class__.__name__}> ({self.id}) {self.name}"

    def clean(self):
        """
        Don't allow leading or trailing whitespace.
        """
        self.name = self.name.strip()


class Record(models.Model):
    """
    A piece of content (e.g. a poem) carrying an ordered list of tags.

    Records are enumerated in id order so a batch can be resumed from any
    offset.
    """

    id = models.BigAutoField(primary_key=True)
    record_type = case_sensitive_char_field(
        max_length=64,
        db_index=True,
        help_text=_("Content type of the record, e.g. 'poem'."),
    )
    title = models.CharField(max_length=255, blank=True)

    def __repr__(self):
        """
        Developer-facing representation of a Record.
        """
        return str(self)

    def __str__(self):
        """
        User-facing string representation of a Record.
        """
        return f"<{self.__class__.__name__}> ({self.id}) {self.record_type}: {self.title}"

    @cached_property
    def tags(self) -> list[TagReference]:
        """
        The record's tag field: its TagReferences in display order.

        Assign a new list to this attribute and call save_tags() to rewrite it.
        """
        return list(
            self.tag_references.select_related("term").order_by("position", "id")
        )

    def save_tags(self) -> None:
        """
        Replace the stored tag references with the contents of ``self.tags``.
        """
        tags = self.tags
        with transaction.atomic():
            self.tag_references.all().delete()
            TagReference.objects.bulk_create([
                TagReference(record=self, term_id=tag.term_id, position=position)
                for position, tag in enumerate(tags)
            ])
        log.debug("Saved %d tags on %s", len(tags), self)


class TagReference(models.Model):
    """
    Links a Record to a Term.

    Several references on the same record may point at the same Term; the
    cleanup tools remove such duplicates.
    """

    id = models.BigAutoField(primary_key=True)
    record = models.ForeignKey(
        Record,
        on_delete=models.CASCADE,
        related_name="tag_references",
    )
    term = models.ForeignKey(
        Term,
        on_delete=models.CASCADE,
        help_text=_("Term this reference points at."),
    )
    position = models.PositiveIntegerField(
        default=0,
        help_text=_("Order of this tag within the record's tag field."),
    )

    class Meta:
        indexes = [
            models.Index(fields=["record", "position"], name="pt_tagref_record_position_idx"),
        ]

    def __repr__(self):
        """
        Developer-facing representation of a TagReference.
        """
        return str(self)

    def __str__(self):
        """
        User-facing string representation of a TagReference.
        """
        return f"<{self.__class__.__name__}> {self.record_id}: {self.term_id}"

    @property
    def name(self) -> str:
        """
        Name of the referenced Term.
        """
        return self.term.name
