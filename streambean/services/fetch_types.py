"""
Shared types used across the timeslot pipeline.

Upstream records are validated with pydantic at the resolver/fetcher
boundary; ScheduleSegment is the immutable in-memory value the normalizer
works on.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict

from streambean.exceptions import ScheduleValidationError
from streambean.utils.timezone import format_utc, is_aware, parse_iso8601_to_utc


class LiveStreamRecord(BaseModel):
    """Item of Helix GET /streams"""
    model_config = ConfigDict(extra="allow")

    user_id: str
    user_login: str | None = None
    thumbnail_url: str | None = None


class SegmentCategory(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str | None = None


class ScheduleSegmentRecord(BaseModel):
    """Item of the `segments` list of Helix GET /schedule"""
    model_config = ConfigDict(extra="allow")

    start_time: str
    end_time: str
    id: str | None = None
    title: str | None = None
    is_recurring: bool | None = None
    canceled_until: str | None = None
    category: SegmentCategory | None = None


class ChannelRecord(BaseModel):
    """Item of Helix GET /channels"""
    model_config = ConfigDict(extra="allow")

    broadcaster_id: str
    broadcaster_name: str | None = None
    game_name: str | None = None
    game_id: str | None = None
    tags: list[str] | None = None


@dataclass(frozen=True, slots=True)
class ScheduleSegment:
    """One scheduled broadcast window owned by a broadcaster."""
    broadcaster_id: str
    since: datetime
    till: datetime
    channel_category_id: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_record(cls, broadcaster_id: str, record: ScheduleSegmentRecord) -> ScheduleSegment:
        since = parse_iso8601_to_utc(record.start_time)
        till = parse_iso8601_to_utc(record.end_time)
        if since >= till:
            raise ScheduleValidationError(
                f"Segment {record.id} of broadcaster {broadcaster_id} ends before it starts",
                {"broadcaster_id": broadcaster_id, "segment_id": record.id},
            )
        return cls(
            broadcaster_id=broadcaster_id,
            since=since,
            till=till,
            channel_category_id=record.category.id if record.category else None,
            extra=record.model_dump(exclude={"start_time", "end_time"}),
        )

    def validate(self) -> None:
        """Raise ScheduleValidationError unless since/till form a valid window."""
        if not is_aware(self.since) or not is_aware(self.till):
            raise ScheduleValidationError(
                f"Segment of broadcaster {self.broadcaster_id} has non timezone-aware timestamps",
                {"broadcaster_id": self.broadcaster_id},
            )
        if self.since >= self.till:
            raise ScheduleValidationError(
                f"Segment of broadcaster {self.broadcaster_id} has since >= till",
                {"broadcaster_id": self.broadcaster_id},
            )

    def starting_at(self, since: datetime) -> ScheduleSegment:
        """Copy of this segment with a new start"""
        return replace(self, since=since)

    @property
    def is_degenerate(self) -> bool:
        return self.since >= self.till

    def to_dict(self) -> dict[str, Any]:
        payload = {
            "broadcaster_id": self.broadcaster_id,
            "since": format_utc(self.since),
            "till": format_utc(self.till),
            "channelUuid": self.channel_category_id,
        }
        for key, value in self.extra.items():
            payload.setdefault(key, value)
        return payload


__all__ = [
    "LiveStreamRecord",
    "SegmentCategory",
    "ScheduleSegmentRecord",
    "ChannelRecord",
    "ScheduleSegment",
]
