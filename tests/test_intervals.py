from datetime import datetime, time, timedelta

import pytest

from app.services.scheduling.intervals import (
    TimeRange,
    count_overlapping,
    has_capacity,
    iter_windows,
    overlaps,
    subtract,
)
from conftest import MONDAY, at


def test_touching_intervals_do_not_overlap():
    assert not overlaps(at(9), at(10), at(10), at(11))
    assert not overlaps(at(10), at(11), at(9), at(10))


def test_partial_overlap_is_symmetric():
    assert overlaps(at(9), at(10), at(9, 30), at(10, 30))
    assert overlaps(at(9, 30), at(10, 30), at(9), at(10))


def test_containment_overlaps():
    assert overlaps(at(9), at(12), at(10), at(11))
    assert overlaps(at(10), at(11), at(9), at(12))


def test_subtract_splits_range_around_cut():
    open_range = TimeRange.on_day(MONDAY, time(9), time(18))
    cut = TimeRange.on_day(MONDAY, time(12), time(13))

    assert subtract([open_range], cut) == [
        TimeRange(at(9), at(12)),
        TimeRange(at(13), at(18)),
    ]


def test_subtract_keeps_disjoint_ranges_whole():
    morning = TimeRange(at(9), at(12))
    afternoon = TimeRange(at(14), at(18))

    assert subtract([morning, afternoon], TimeRange(at(12), at(14))) == [morning, afternoon]


def test_subtract_cut_covering_range_removes_it():
    assert subtract([TimeRange(at(10), at(11))], TimeRange(at(9), at(12))) == []


def test_subtract_cut_at_range_edge_leaves_one_piece():
    assert subtract([TimeRange(at(9), at(18))], TimeRange(at(8), at(10))) == [TimeRange(at(10), at(18))]


def test_time_range_rejects_reversed_bounds():
    with pytest.raises(ValueError):
        TimeRange(at(10), at(9))


def test_iter_windows_only_yields_windows_that_fit():
    windows = list(iter_windows(TimeRange(at(9), at(11)), timedelta(minutes=60), timedelta(minutes=30)))

    assert windows == [
        (at(9), at(10)),
        (at(9, 30), at(10, 30)),
        (at(10), at(11)),
    ]


def test_iter_windows_range_shorter_than_duration():
    assert list(iter_windows(TimeRange(at(9), at(9, 45)), timedelta(minutes=60), timedelta(minutes=15))) == []


def test_has_capacity_counts_against_capacity():
    booked = [(at(10), at(11)), (at(10, 30), at(11, 30))]

    assert count_overlapping(booked, at(10, 45), at(11)) == 2
    assert not has_capacity(booked, at(10, 45), at(11), capacity=2)
    assert has_capacity(booked, at(10, 45), at(11), capacity=3)
    # Only the second booking overlaps [11:00, 12:00)
    assert has_capacity(booked, at(11), at(12), capacity=2)
    assert has_capacity(booked, at(11, 30), at(12, 30), capacity=1)


def test_has_capacity_with_no_bookings():
    assert has_capacity([], datetime(2030, 1, 7, 9), datetime(2030, 1, 7, 10), capacity=1)
