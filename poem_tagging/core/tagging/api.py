"""
Tag cleanup API

Records whose tag field was typed with '#' between tags instead of commas
end up referencing terms like "#love #family". The functions here repair
those records and garbage-collect the terms nobody references any more.

Batch operations never raise for store failures or a missing vocabulary.
They return an Outcome holding the counts reached so far and the error that
stopped them, so callers can report partial progress. Every record and term
change is committed on its own: a failed run leaves earlier work in place,
and is resumed by starting a new run at ``start_offset + processed``.

Invalid arguments raise BatchValidationError before the stores are touched.

No permissions are enforced here, and nothing guards against two runs over
the same records at the same time; the last write wins.
"""
from __future__ import annotations

import logging
from functools import partial
from typing import Any, Iterable, Protocol, Sequence

from attrs import asdict
from django.utils.translation import gettext as _

from . import conf
from .bunches import BunchTimer, iter_bunches
from .context import CleanupContext
from .data import FixOutcome, FixSummary, Outcome, ReclaimOutcome, ReclaimSummary
from .exceptions import BatchValidationError, TagCleanupError, TermPersistenceFailure
from .models import CleanupRun, CleanupRunKind, CleanupSetting, TagReference, Term
from .models.utils import TAG_INPUT_SEPARATOR, split_tag_name
from .stores import TermRow

log = logging.getLogger(__name__)

# Names of the persisted run parameters
LAST_FIX_START = "fix_tags_start"
LAST_FIX_COUNT = "fix_tags_count"
LAST_RECLAIM_COUNT = "reclaim_count"


class Reporter(Protocol):
    """
    Anything that accepts free-text progress messages, e.g. a CleanupRun.
    """

    def add_log(self, message: str) -> Any:
        ...


def cleanse_one(
    tags: Sequence[TagReference],
    context: CleanupContext,
    record_id: int | None = None,
) -> list[TagReference]:
    """
    Returns a cleaned copy of a record's tag list.

    Tags whose name doesn't contain the delimiter are kept as they are.
    The others are split into sub-tag names, and each of those is resolved to
    an existing term of the vocabulary (case-insensitively, first match) or
    created. Finally, duplicate references to the same term are dropped,
    keeping the first one.

    ``tags`` itself is not modified. Raises TermPersistenceFailure if a
    term can't be created; pass ``record_id`` so the error can name it.
    """
    delimiter = context.delimiter
    cleaned: list[TagReference] = []
    for tag in tags:
        name = tag.term.name
        if delimiter not in name:
            cleaned.append(tag)
            continue
        for candidate in split_tag_name(name, delimiter):
            term = _resolve_term(candidate, context, record_id)
            cleaned.append(TagReference(term=term))
    return _dedupe(cleaned)


def fix_batch(
    start_offset: int,
    count: int,
    context: CleanupContext | None = None,
    reporter: Reporter | None = None,
    summary: FixSummary | None = None,
) -> FixOutcome:
    """
    Cleans the tags of up to ``count`` records, starting at ``start_offset``.

    Records of the configured type are visited in id order, a bunch at a
    time. Records without tags are only counted. The run stops once
    ``count`` records were processed or there are no more records.

    Counts accumulate in ``summary`` when one is passed, so they are still
    available if an unexpected exception escapes.
    """
    _validate_int("start_offset", start_offset, minimum=0)
    _validate_int("count", count, minimum=1)
    context = context or CleanupContext()
    summary = summary if summary is not None else FixSummary()

    _report(reporter, _(
        "Fixing tags of up to {count} '{type}' records, starting at offset {offset}"
    ).format(count=count, type=context.record_type, offset=start_offset))

    try:
        # Resolve the vocabulary before touching any record.
        context.vocabulary_id  # pylint: disable=pointless-statement
        timer = BunchTimer(context.bunch_time_budget)
        fetch = partial(context.record_store.range_query, context.record_type)
        for record_ids in iter_bunches(fetch, context.bunch_size, offset=start_offset):
            timer.rearm()
            for record_id in record_ids:
                _fix_record(record_id, context, summary)
                summary.processed += 1
                if summary.processed == count:
                    break
            timer.check(f"Bunch of {len(record_ids)} records")
            log.info("Processed %d of %d records", summary.processed, count)
            if summary.processed == count:
                break
    except TagCleanupError as exc:
        _report(reporter, _("Stopped after {processed} records: {error}").format(
            processed=summary.processed, error=exc,
        ))
        return Outcome(summary, exc)

    _report(reporter, _(
        "Processed {processed} records: {with_tags} with tags, {without_tags} without tags"
    ).format(
        processed=summary.processed,
        with_tags=summary.with_tags,
        without_tags=summary.without_tags,
    ))
    return Outcome(summary)


def reclaim(
    max_to_remove: int,
    context: CleanupContext | None = None,
    reporter: Reporter | None = None,
    summary: ReclaimSummary | None = None,
) -> ReclaimOutcome:
    """
    Deletes up to ``max_to_remove`` terms of the vocabulary that no record uses.

    Terms are deleted in id order. There is no re-check between listing a
    term as unused and deleting it, so a term tagged in the meantime is
    deleted anyway (together with its new reference).

    Like fix_batch(), counts accumulate in ``summary`` when one is passed.
    """
    _validate_int("max_to_remove", max_to_remove, minimum=1)
    context = context or CleanupContext()
    summary = summary if summary is not None else ReclaimSummary()

    _report(reporter, _("Removing up to {count} unused terms from '{vocabulary}'").format(
        count=max_to_remove, vocabulary=context.vocabulary_name,
    ))

    try:
        fetch = partial(context.term_store.list_unused, context.vocabulary_id)
        timer = BunchTimer(context.bunch_time_budget)
        # Deleted terms drop out of the unused list, so don't advance past them.
        for rows in iter_bunches(fetch, context.bunch_size, consuming=True):
            timer.rearm()
            for row in rows:
                _delete_term(row, context)
                summary.removed += 1
                if summary.removed == max_to_remove:
                    break
            timer.check(f"Bunch of {len(rows)} terms")
            log.info("Removed %d of %d terms", summary.removed, max_to_remove)
            if summary.removed == max_to_remove:
                break
    except TagCleanupError as exc:
        _report(reporter, _("Stopped after removing {removed} terms: {error}").format(
            removed=summary.removed, error=exc,
        ))
        return Outcome(summary, exc)

    _report(reporter, _("Removed {removed} unused terms").format(removed=summary.removed))
    return Outcome(summary)


def count_unused(context: CleanupContext | None = None) -> int:
    """
    Returns how many terms of the vocabulary no record uses.

    Raises VocabularyNotFound if the vocabulary doesn't exist.
    """
    context = context or CleanupContext()
    return context.term_store.count_unused(context.vocabulary_id)


def normalize_tag_input(text: str, delimiter: str | None = None) -> str:
    """
    Turn '#'-separated tag input into the comma-separated form the platform expects.

    "#love #family" becomes ", love , family".
    """
    delimiter = delimiter or conf.get_setting("DELIMITER")
    return text.replace(delimiter, f"{TAG_INPUT_SEPARATOR} ")


def tag_record(record_id: int, text: str, context: CleanupContext | None = None) -> list[TagReference]:
    """
    Replaces a record's tags with the ones typed in ``text``.

    ``text`` may separate tags with commas or with the delimiter. Terms are
    resolved or created the same way as in cleanse_one(), and duplicates
    are dropped. Unlike the batch operations, failures are raised.
    """
    context = context or CleanupContext()
    normalized = normalize_tag_input(text, context.delimiter)
    names = [name.strip() for name in normalized.split(TAG_INPUT_SEPARATOR)]
    record = context.record_store.load(record_id)
    record.tags = _dedupe(
        TagReference(term=_resolve_term(name, context, record_id))
        for name in names
        if name
    )
    context.record_store.save(record)
    return record.tags


def get_run_setting(name: str, default: Any = None) -> Any:
    """
    Returns a persisted run parameter, e.g. the last start offset used.
    """
    setting = CleanupSetting.objects.filter(name=name).first()
    if setting is None or setting.value is None:
        return default
    return setting.value


def set_run_setting(name: str, value: Any) -> None:
    """
    Persists a run parameter for the next invocation.
    """
    CleanupSetting.objects.update_or_create(name=name, defaults={"value": value})


def fix_batch_with_run(
    start_offset: int,
    count: int,
    context: CleanupContext | None = None,
) -> tuple[FixOutcome, CleanupRun]:
    """
    Runs fix_batch() and records its log and counts in a new CleanupRun.

    Unexpected exceptions are logged on the run, which is then closed with
    the counts reached, before they are re-raised.
    """
    # Bad input must not leave a run behind.
    _validate_int("start_offset", start_offset, minimum=0)
    _validate_int("count", count, minimum=1)
    run = CleanupRun.create(CleanupRunKind.FIX_TAGS)
    summary = FixSummary()
    try:
        outcome = fix_batch(start_offset, count, context=context, reporter=run, summary=summary)
    except Exception as exception:
        _abort_run(run, summary, exception)
        raise
    _finish_run(run, outcome)
    return outcome, run


def reclaim_with_run(
    max_to_remove: int,
    context: CleanupContext | None = None,
) -> tuple[ReclaimOutcome, CleanupRun]:
    """
    Runs reclaim() and records its log and counts in a new CleanupRun.

    Unexpected exceptions are handled as in fix_batch_with_run().
    """
    # Bad input must not leave a run behind.
    _validate_int("max_to_remove", max_to_remove, minimum=1)
    run = CleanupRun.create(CleanupRunKind.RECLAIM_TERMS)
    summary = ReclaimSummary()
    try:
        outcome = reclaim(max_to_remove, context=context, reporter=run, summary=summary)
    except Exception as exception:
        _abort_run(run, summary, exception)
        raise
    _finish_run(run, outcome)
    return outcome, run


def _abort_run(run: CleanupRun, summary: FixSummary | ReclaimSummary, exception: Exception) -> None:
    log.exception("Cleanup run %s failed", run.id)
    run.record_counts(**asdict(summary))
    run.log_exception(exception)


def _finish_run(run: CleanupRun, outcome: Outcome) -> None:
    run.record_counts(**asdict(outcome.summary))
    if outcome.error is None:
        run.end_success()
    else:
        run.log_exception(outcome.error)


def _fix_record(record_id: int, context: CleanupContext, summary: FixSummary) -> None:
    """
    Cleans and saves a single record, updating the summary counters.
    """
    record = context.record_store.load(record_id)
    if not record.tags:
        summary.without_tags += 1
        return
    # The whole list is computed before saving, so a failure here never
    # leaves a half-cleaned record behind.
    record.tags = cleanse_one(record.tags, context, record_id=record.id)
    context.record_store.save(record)
    summary.with_tags += 1


def _resolve_term(name: str, context: CleanupContext, record_id: int | None) -> Term:
    """
    Returns the first term matching ``name`` (case-insensitively), creating it if needed.
    """
    try:
        matches = context.term_store.find_by_name(name, context.vocabulary_name)
        if matches:
            return matches[0]
        return context.term_store.create(name, context.vocabulary_id)
    except TermPersistenceFailure as exc:
        if record_id is not None:
            exc.for_record(record_id)
        raise


def _delete_term(row: TermRow, context: CleanupContext) -> None:
    try:
        context.term_store.delete(row["id"])
    except TermPersistenceFailure as exc:
        raise TermPersistenceFailure(row["name"], "delete", reason=exc.reason) from exc
    log.debug("Deleted unused term (%s) %s", row["id"], row["name"])


def _dedupe(tags: Iterable[TagReference]) -> list[TagReference]:
    """
    Drops references to a term already referenced earlier in the list.
    """
    seen: set[int] = set()
    result = []
    for tag in tags:
        if tag.term_id in seen:
            continue
        seen.add(tag.term_id)
        result.append(tag)
    return result


def _validate_int(name: str, value: Any, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise BatchValidationError(name, value, minimum)


def _report(reporter: Reporter | None, message: str) -> None:
    log.info(message)
    if reporter is not None:
        reporter.add_log(message)
