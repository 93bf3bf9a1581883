"""Tests for the timeline merge"""
from datetime import datetime

import pytest

from streambean.exceptions import ScheduleValidationError, ValidationError
from streambean.services.fetch_types import ScheduleSegment
from streambean.services.schedule_normalizer import normalize_schedule
from tests.factories import at, make_segment


def windows(timeline: list[ScheduleSegment]) -> list[tuple[datetime, datetime]]:
    return [(segment.since, segment.till) for segment in timeline]


def assert_timeline_invariants(timeline: list[ScheduleSegment]) -> None:
    for segment in timeline:
        assert segment.since < segment.till
    for previous, current in zip(timeline, timeline[1:]):
        assert previous.since <= current.since
        assert current.since >= previous.till
        assert (previous.since, previous.till) != (current.since, current.till)


def test_empty_input():
    assert normalize_schedule([]) == []


def test_overlap_is_pushed_to_previous_end():
    timeline = normalize_schedule([make_segment(10, 20), make_segment(15, 25)])

    assert windows(timeline) == [(at(10), at(20)), (at(20), at(25))]


def test_fully_covered_segment_is_dropped():
    timeline = normalize_schedule([make_segment(10, 30), make_segment(15, 20)])

    assert windows(timeline) == [(at(10), at(30))]


def test_exact_duplicates_collapse():
    timeline = normalize_schedule([make_segment(10, 20, "b1"), make_segment(10, 20, "b2")])

    assert windows(timeline) == [(at(10), at(20))]
    assert timeline[0].broadcaster_id == "b1"


def test_shift_to_zero_duration_is_dropped():
    timeline = normalize_schedule([make_segment(10, 20), make_segment(15, 20)])

    assert windows(timeline) == [(at(10), at(20))]


def test_same_start_shorter_segment_is_dropped():
    # Shares the predecessor's start but is not a full duplicate
    timeline = normalize_schedule([make_segment(10, 20, "b1"), make_segment(10, 15, "b2")])

    assert windows(timeline) == [(at(10), at(20))]


def test_same_start_longer_segment_keeps_its_tail():
    timeline = normalize_schedule([make_segment(10, 20, "b1"), make_segment(10, 25, "b2")])

    assert windows(timeline) == [(at(10), at(20)), (at(20), at(25))]
    assert timeline[1].broadcaster_id == "b2"


def test_equal_starts_keep_input_order():
    timeline = normalize_schedule([make_segment(10, 30, "long"), make_segment(10, 20, "short")])

    assert [segment.broadcaster_id for segment in timeline] == ["long"]


def test_input_is_sorted_by_start():
    timeline = normalize_schedule([
        make_segment(40, 50, "c"),
        make_segment(0, 10, "a"),
        make_segment(20, 30, "b"),
    ])

    assert [segment.broadcaster_id for segment in timeline] == ["a", "b", "c"]


def test_chained_overlaps_are_resolved_against_last_accepted():
    timeline = normalize_schedule([make_segment(0, 30), make_segment(10, 40), make_segment(20, 50)])

    assert windows(timeline) == [(at(0), at(30)), (at(30), at(40)), (at(40), at(50))]


def test_long_segment_absorbs_everything_inside_it():
    timeline = normalize_schedule([make_segment(0, 100), make_segment(10, 20), make_segment(50, 60)])

    assert windows(timeline) == [(at(0), at(100))]


def test_non_overlapping_input_is_returned_sorted_and_unchanged():
    segments = [make_segment(30, 40, "c"), make_segment(0, 10, "a"), make_segment(10, 20, "b")]

    timeline = normalize_schedule(segments)

    assert timeline == sorted(segments, key=lambda segment: segment.since)


def test_normalizing_twice_changes_nothing():
    segments = [
        make_segment(0, 30),
        make_segment(10, 40),
        make_segment(35, 45),
        make_segment(35, 45),
        make_segment(60, 70),
        make_segment(65, 66),
    ]

    once = normalize_schedule(segments)

    assert normalize_schedule(once) == once


def test_invariants_hold_for_messy_input():
    segments = [
        make_segment(start, start + length, f"b{index}")
        for index, (start, length) in enumerate(
            [(0, 60), (5, 10), (30, 45), (30, 45), (70, 5), (72, 1), (74, 30), (100, 4), (100, 8), (90, 20)]
        )
    ]

    timeline = normalize_schedule(segments)

    assert_timeline_invariants(timeline)


def test_input_segments_are_not_modified():
    first = make_segment(10, 20, "b1", title="First")
    second = make_segment(15, 25, "b2", title="Second")

    timeline = normalize_schedule([first, second])

    assert second.since == at(15)
    assert timeline[1] is not second
    assert timeline[1].extra == {"title": "Second"}
    assert timeline[1].broadcaster_id == "b2"


def test_naive_timestamps_are_rejected():
    naive = ScheduleSegment(broadcaster_id="b1", since=datetime(2025, 1, 1, 10), till=datetime(2025, 1, 1, 11))

    with pytest.raises(ScheduleValidationError):
        normalize_schedule([naive])


def test_inverted_segment_is_rejected():
    inverted = ScheduleSegment(broadcaster_id="b1", since=at(20), till=at(10))

    with pytest.raises(ValidationError):
        normalize_schedule([make_segment(0, 5), inverted])
