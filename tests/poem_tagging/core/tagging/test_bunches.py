"""
Test the bunch iterator and time budget
"""
from __future__ import annotations

from unittest import TestCase

import ddt  # type: ignore[import]

from poem_tagging.core.tagging.bunches import BunchTimer, iter_bunches


class FakeSource:
    """
    Ordered source of integers that records every fetch.
    """

    def __init__(self, size: int):
        self.rows = list(range(size))
        self.calls: list[tuple[int, int]] = []

    def fetch(self, offset: int, limit: int) -> list[int]:
        self.calls.append((offset, limit))
        return self.rows[offset:offset + limit]

    def fetch_and_consume(self, offset: int, limit: int) -> list[int]:
        rows = self.fetch(offset, limit)
        del self.rows[offset:offset + len(rows)]
        return rows


@ddt.ddt
class TestIterBunches(TestCase):
    """
    Test iter_bunches()
    """

    @ddt.data(
        # size, bunch_size, expected offsets fetched
        (0, 5, [0]),
        (3, 5, [0]),
        (5, 5, [0, 5]),
        (12, 5, [0, 5, 10]),
        (15, 5, [0, 5, 10, 15]),
    )
    @ddt.unpack
    def test_offsets(self, size, bunch_size, expected_offsets) -> None:
        source = FakeSource(size)
        rows = [row for bunch in iter_bunches(source.fetch, bunch_size) for row in bunch]
        assert rows == list(range(size))
        assert [offset for offset, _limit in source.calls] == expected_offsets
        assert all(limit == bunch_size for _offset, limit in source.calls)

    def test_start_offset(self) -> None:
        source = FakeSource(12)
        bunches = list(iter_bunches(source.fetch, 5, offset=4))
        assert bunches == [[4, 5, 6, 7, 8], [9, 10, 11]]

    def test_lazy(self) -> None:
        source = FakeSource(100)
        bunches = iter_bunches(source.fetch, 10)
        assert not source.calls
        next(bunches)
        next(bunches)
        assert len(source.calls) == 2

    def test_not_restartable(self) -> None:
        source = FakeSource(4)
        bunches = iter_bunches(source.fetch, 10)
        assert list(bunches) == [[0, 1, 2, 3]]
        assert not list(bunches)

    def test_consuming(self) -> None:
        source = FakeSource(12)
        bunches = list(iter_bunches(source.fetch_and_consume, 5, consuming=True))
        assert bunches == [[0, 1, 2, 3, 4], [5, 6, 7, 8, 9], [10, 11]]
        assert [offset for offset, _limit in source.calls] == [0, 0, 0]
        assert not source.rows

    def test_consuming_stops_without_progress(self) -> None:
        source = FakeSource(12)
        with self.assertLogs("poem_tagging.core.tagging.bunches", level="WARNING") as logs:
            bunches = list(iter_bunches(source.fetch, 5, consuming=True))
        assert bunches == [[0, 1, 2, 3, 4]]
        assert source.calls == [(0, 5), (0, 5)]
        assert "were not consumed" in logs.output[0]

    @ddt.data(0, -1)
    def test_invalid_bunch_size(self, bunch_size) -> None:
        with self.assertRaises(ValueError):
            next(iter_bunches(FakeSource(3).fetch, bunch_size))


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class TestBunchTimer(TestCase):
    """
    Test BunchTimer
    """

    def test_within_budget(self) -> None:
        clock = FakeClock()
        timer = BunchTimer(30, clock=clock)
        clock.now += 29
        assert not timer.expired
        assert not timer.check("Bunch of 500 records")

    def test_over_budget(self) -> None:
        clock = FakeClock()
        timer = BunchTimer(30, clock=clock)
        clock.now += 31
        assert timer.expired
        with self.assertLogs("poem_tagging.core.tagging.bunches", level="WARNING") as logs:
            assert timer.check("Bunch of 500 records")
        assert "Bunch of 500 records took 31.0 seconds" in logs.output[0]

    def test_rearm(self) -> None:
        clock = FakeClock()
        timer = BunchTimer(30, clock=clock)
        clock.now += 31
        timer.rearm()
        assert timer.elapsed == 0
        assert not timer.expired
