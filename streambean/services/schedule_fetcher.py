"""
Schedule Fetcher

Looks up the schedule of many broadcasters concurrently. A lookup that
fails for any reason contributes nothing; it never fails the batch.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Sequence

from pydantic import ValidationError as PydanticValidationError

from streambean.exceptions import PerBroadcasterFetchFailure, ScheduleValidationError
from streambean.services.fetch_types import ScheduleSegment, ScheduleSegmentRecord
from streambean.services.twitch_client import TwitchClient
from streambean.utils.logging_helpers import log_upstream_failure


logger = logging.getLogger(__name__)

SCHEDULE_ENDPOINT = "schedule"


def parse_schedule_segments(broadcaster_id: str, data: Any) -> list[ScheduleSegment]:
    """
    Turn the `data` member of a /schedule response into tagged segments.

    Raises:
        PerBroadcasterFetchFailure: If the payload does not have the expected shape
    """
    if data is None:
        return []
    if not isinstance(data, dict):
        raise PerBroadcasterFetchFailure(broadcaster_id, "schedule payload is not an object")

    raw_segments = data.get("segments") or []
    if not isinstance(raw_segments, list):
        raise PerBroadcasterFetchFailure(broadcaster_id, "schedule segments is not a list")

    try:
        return [
            ScheduleSegment.from_record(broadcaster_id, ScheduleSegmentRecord.model_validate(raw))
            for raw in raw_segments
        ]
    except (PydanticValidationError, ScheduleValidationError, ValueError) as exc:
        raise PerBroadcasterFetchFailure(broadcaster_id, f"malformed segment: {exc}") from exc


class ScheduleFetcher:
    """Fan-out/fan-in schedule lookups for a set of broadcasters."""

    def __init__(
        self,
        client: TwitchClient,
        *,
        max_concurrency: int = 0,
        lookup_timeout: float = 0,
    ) -> None:
        self._client = client
        self._semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency > 0 else None
        self._lookup_timeout = lookup_timeout if lookup_timeout > 0 else None

    async def fetch(
        self,
        broadcaster_ids: Sequence[str],
        *,
        access_token: str | None = None,
    ) -> list[ScheduleSegment]:
        """
        Fetch every broadcaster's schedule and flatten the results.

        Args:
            broadcaster_ids: Broadcasters to look up
            access_token: Token shared by all lookups of this batch

        Returns:
            Union of all segments, unordered
        """
        if not broadcaster_ids:
            return []

        tasks = [
            asyncio.create_task(self._fetch_one(broadcaster_id, access_token))
            for broadcaster_id in broadcaster_ids
        ]
        results = await asyncio.gather(*tasks)

        segments = [segment for result in results for segment in result]
        contributing = sum(1 for result in results if result)
        logger.info(
            "Fetched %s schedule segments from %s/%s broadcasters",
            len(segments),
            contributing,
            len(broadcaster_ids),
        )
        return segments

    async def _fetch_one(self, broadcaster_id: str, access_token: str | None) -> list[ScheduleSegment]:
        try:
            async with self._semaphore or contextlib.nullcontext():
                if self._lookup_timeout:
                    return await asyncio.wait_for(
                        self._lookup(broadcaster_id, access_token),
                        timeout=self._lookup_timeout,
                    )
                return await self._lookup(broadcaster_id, access_token)
        except Exception as exc:
            log_upstream_failure(logger, SCHEDULE_ENDPOINT, broadcaster_id, exc, level=logging.WARNING)
            return []

    async def _lookup(self, broadcaster_id: str, access_token: str | None) -> list[ScheduleSegment]:
        data = await self._client.query(
            SCHEDULE_ENDPOINT,
            {"broadcaster_id": broadcaster_id},
            access_token=access_token,
        )
        segments = parse_schedule_segments(broadcaster_id, data)
        logger.debug("Broadcaster %s: %s schedule segments", broadcaster_id, len(segments))
        return segments
