"""
Windowed ("bunched") iteration over ordered, offset-limited sources.

Both cleanup operations walk a potentially large ordered result set. Fetching
it in bunches keeps every single query bounded, and lets a run be resumed
later from any offset.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Iterator, Sequence, TypeVar

log = logging.getLogger(__name__)

RowT = TypeVar("RowT")

# fetch(offset, limit) -> at most `limit` rows starting at `offset`
FetchFn = Callable[[int, int], Sequence[RowT]]


def iter_bunches(
    fetch: FetchFn[RowT],
    bunch_size: int,
    offset: int = 0,
    consuming: bool = False,
) -> Iterator[Sequence[RowT]]:
    """
    Lazily yield successive bunches of rows from ``fetch``.

    The offset advances by the number of rows actually returned, and the
    iteration ends on the first empty or short bunch. Stop consuming the
    iterator to stop fetching.

    Set ``consuming`` when processing a bunch removes its rows from the
    source (e.g. deleting unused terms): the next bunch is then fetched from
    the same offset, since the rows before it are gone. If a consumed bunch
    comes back unchanged, nothing was removed and the iteration ends.
    """
    if bunch_size < 1:
        raise ValueError(f"bunch_size must be positive, not {bunch_size}")
    previous = None
    while True:
        rows = fetch(offset, bunch_size)
        if not rows:
            return
        if consuming and rows == previous:
            log.warning("The %d rows at offset %d were not consumed, stopping", len(rows), offset)
            return
        previous = rows
        log.debug("Fetched %d rows at offset %d", len(rows), offset)
        yield rows
        if len(rows) < bunch_size:
            return
        if not consuming:
            offset += len(rows)


class BunchTimer:
    """
    Soft time budget for processing one bunch.

    Call rearm() before each bunch. Nothing is interrupted when the budget
    runs out; overruns are only reported, so the bunch size can be tuned.
    """

    def __init__(self, budget: float, clock: Callable[[], float] = time.monotonic):
        self.budget = budget
        self._clock = clock
        self._started = clock()

    def rearm(self) -> None:
        self._started = self._clock()

    @property
    def elapsed(self) -> float:
        return self._clock() - self._started

    @property
    def expired(self) -> bool:
        return self.elapsed > self.budget

    def check(self, what: str) -> bool:
        """
        Log a warning if the budget was exceeded. Returns True if it was.
        """
        if self.expired:
            log.warning(
                "%s took %.1f seconds, over the %s second budget",
                what, self.elapsed, self.budget,
            )
            return True
        return False
