"""
Schedule Normalizer

Merges schedule segments from independent broadcasters into one timeline:
sorted by start, no overlaps, no empty windows, no repeated windows.
"""
import logging
from typing import Iterable

from streambean.services.fetch_types import ScheduleSegment


logger = logging.getLogger(__name__)


def normalize_schedule(segments: Iterable[ScheduleSegment]) -> list[ScheduleSegment]:
    """
    Build a non-overlapping timeline from unordered segments.

    Segments are sorted by start (ties keep input order). Each one is then
    compared against the last accepted segment only: if it starts before
    that one ends, a copy starting at the previous end takes its place.
    Copies left with no duration, and exact repeats of the previous window,
    are dropped. Input segments are never modified.

    Args:
        segments: Segments from any number of broadcasters

    Returns:
        The merged timeline

    Raises:
        ScheduleValidationError: If a segment has naive timestamps or since >= till
    """
    items = list(segments)
    for item in items:
        item.validate()

    timeline: list[ScheduleSegment] = []
    dropped = 0
    for item in sorted(items, key=lambda segment: segment.since):
        if not timeline:
            timeline.append(item)
            continue

        last = timeline[-1]
        if item.since < last.till:
            item = item.starting_at(last.till)

        if item.is_degenerate:
            # Fully covered by the previous segment
            dropped += 1
            continue
        if (item.since, item.till) == (last.since, last.till):
            dropped += 1
            continue

        timeline.append(item)

    if dropped:
        logger.debug("Normalization dropped %s of %s segments", dropped, len(items))
    return timeline
