import logging
from typing import Any, Iterable

from pydantic import ValidationError as PydanticValidationError

from streambean.exceptions import MalformedUpstreamRecord
from streambean.services.fetch_types import LiveStreamRecord


logger = logging.getLogger(__name__)


def parse_live_streams(records: Iterable[Any]) -> list[LiveStreamRecord]:
    """
    Validate raw Helix stream items.

    Raises:
        MalformedUpstreamRecord: If an item lacks a broadcaster id
    """
    streams = []
    for position, record in enumerate(records):
        try:
            streams.append(LiveStreamRecord.model_validate(record))
        except PydanticValidationError as exc:
            logger.error("Malformed live stream record at position %s: %s", position, exc)
            raise MalformedUpstreamRecord(
                "Live stream record is missing its broadcaster id",
                {"position": position},
            ) from exc
    return streams


def resolve_broadcaster_ids(streams: Iterable[LiveStreamRecord]) -> list[str]:
    """
    Distinct broadcaster ids in order of first appearance.

    Args:
        streams: Live stream records for one category

    Returns:
        Broadcaster ids, empty when nobody is live
    """
    seen: set[str] = set()
    broadcaster_ids = []
    for stream in streams:
        if stream.user_id not in seen:
            seen.add(stream.user_id)
            broadcaster_ids.append(stream.user_id)
    return broadcaster_ids
