"""
Data returned by the tag cleanup API
"""
from __future__ import annotations

from typing import Generic, TypeVar

from attrs import asdict, define, field

from .exceptions import TagCleanupError


@define
class FixSummary:
    """
    Counters accumulated by fix_batch().
    """

    with_tags: int = 0
    without_tags: int = 0
    processed: int = 0


@define
class ReclaimSummary:
    """
    Counters accumulated by reclaim().
    """

    removed: int = 0


SummaryT = TypeVar("SummaryT", FixSummary, ReclaimSummary)


@define
class Outcome(Generic[SummaryT]):
    """
    Result of a batch operation: the counts reached, plus the error that
    stopped the run early, if any.

    The counts are meaningful either way; work done before an error stays
    committed.
    """

    summary: SummaryT
    error: TagCleanupError | None = field(default=None)

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> dict:
        """
        Plain-data form, e.g. for a celery result backend.
        """
        result = asdict(self.summary)
        result["ok"] = self.ok
        result["error"] = str(self.error) if self.error else None
        return result


FixOutcome = Outcome[FixSummary]
ReclaimOutcome = Outcome[ReclaimSummary]
