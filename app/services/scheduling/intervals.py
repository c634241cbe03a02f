# ===== app/services/scheduling/intervals.py =====
"""
Half-open interval arithmetic shared by slot generation and booking checks.

Every interval here is [start, end): touching endpoints never overlap.
The availability calculator and the booking transaction both decide
capacity through `has_capacity`, so a slot that is advertised can always
be reserved as long as nothing was written in between.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, Iterator, List, Sequence, Tuple

Interval = Tuple[datetime, datetime]


@dataclass(frozen=True)
class TimeRange:
    """An open range on a given day"""
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"Range end {self.end} is before start {self.start}")

    @classmethod
    def on_day(cls, day: date, start_time: time, end_time: time) -> "TimeRange":
        return cls(datetime.combine(day, start_time), datetime.combine(day, end_time))

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return overlaps(self.start, self.end, start, end)


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """True iff [a_start, a_end) and [b_start, b_end) share at least one instant"""
    return a_start < b_end and b_start < a_end


def count_overlapping(intervals: Iterable[Interval], start: datetime, end: datetime) -> int:
    """Number of intervals overlapping [start, end)"""
    return sum(1 for i_start, i_end in intervals if overlaps(i_start, i_end, start, end))


def has_capacity(
        intervals: Iterable[Interval],
        start: datetime,
        end: datetime,
        capacity: int
) -> bool:
    """
    Capacity rule: a window can take one more booking while fewer than
    `capacity` active bookings overlap it.
    """
    return count_overlapping(intervals, start, end) < capacity


def subtract(ranges: Sequence[TimeRange], cut: TimeRange) -> List[TimeRange]:
    """
    Remove `cut` from every range.

    A range overlapping the cut keeps at most two pieces: the part before
    the cut starts and the part after it ends. Ranges that don't overlap
    are kept whole.
    """
    remaining: List[TimeRange] = []
    for current in ranges:
        if not current.overlaps(cut.start, cut.end):
            remaining.append(current)
            continue
        if current.start < cut.start:
            remaining.append(TimeRange(current.start, cut.start))
        if current.end > cut.end:
            remaining.append(TimeRange(cut.end, current.end))
    return remaining


def iter_windows(
        open_range: TimeRange,
        duration: timedelta,
        step: timedelta
) -> Iterator[Interval]:
    """Candidate [p, p + duration) windows stepping from the range start"""
    cursor = open_range.start
    while cursor + duration <= open_range.end:
        yield cursor, cursor + duration
        cursor += step
