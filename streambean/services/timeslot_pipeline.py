"""
Timeslot Aggregation Pipeline

category -> live streams -> broadcasters -> schedules -> merged timeline
"""
from __future__ import annotations

import logging
from typing import Any, Mapping

from streambean.config import CategoryConfig, CustomSettings
from streambean.exceptions import UnknownCategory, UpstreamUnavailable
from streambean.services.broadcaster_resolver import parse_live_streams, resolve_broadcaster_ids
from streambean.services.fetch_types import LiveStreamRecord, ScheduleSegment
from streambean.services.schedule_fetcher import ScheduleFetcher
from streambean.services.schedule_normalizer import normalize_schedule
from streambean.services.twitch_client import TwitchClient
from streambean.utils.logging_helpers import log_section_end, log_section_start, log_timeline_summary


logger = logging.getLogger(__name__)

STREAMS_ENDPOINT = "streams"


def resolve_category(categories: Mapping[str, CategoryConfig], category_key: str | None) -> CategoryConfig:
    """
    Look up a client-facing category key.

    Raises:
        UnknownCategory: If the key is blank or not configured
    """
    if not category_key or category_key not in categories:
        raise UnknownCategory(category_key or "")
    return categories[category_key]


async def fetch_live_streams(
    client: TwitchClient,
    category: CategoryConfig,
    *,
    page_size: int,
    access_token: str | None = None,
) -> list[LiveStreamRecord]:
    """
    Single page of live streams for a category.

    Raises:
        UpstreamAuthFailure: If no token could be acquired
        UpstreamUnavailable: If the lookup fails or the payload is not a list
        MalformedUpstreamRecord: If a stream record lacks its broadcaster id
    """
    data: Any = await client.query(
        STREAMS_ENDPOINT,
        {"game_id": category.id, "first": page_size},
        access_token=access_token,
    )
    if not isinstance(data, list):
        raise UpstreamUnavailable(
            "Live streams payload is not a list",
            STREAMS_ENDPOINT,
            {"game_id": category.id},
        )
    return parse_live_streams(data)


class TimeslotPipeline:
    """Builds the merged programming timeline for one category."""

    def __init__(
        self,
        client: TwitchClient,
        categories: Mapping[str, CategoryConfig],
        fetcher: ScheduleFetcher,
        *,
        streams_page_size: int = 100,
    ) -> None:
        self._client = client
        self._categories = categories
        self._fetcher = fetcher
        self._streams_page_size = streams_page_size

    @classmethod
    def from_settings(cls, config: CustomSettings, client: TwitchClient) -> TimeslotPipeline:
        fetcher = ScheduleFetcher(
            client,
            max_concurrency=config.schedule_fetch_concurrency,
            lookup_timeout=config.schedule_lookup_timeout_sec,
        )
        return cls(
            client,
            config.category_table(),
            fetcher,
            streams_page_size=config.streams_page_size,
        )

    async def run(self, category_key: str | None) -> list[ScheduleSegment]:
        """
        Merged timeline for a category.

        Args:
            category_key: Client-facing category key (e.g. 'music')

        Returns:
            Timeline sorted by start; empty when nobody in the category is live

        Raises:
            UnknownCategory: Before any upstream call, if the key is not configured
            UpstreamAuthFailure, UpstreamUnavailable: If live stream discovery fails
        """
        category = resolve_category(self._categories, category_key)
        section = f"timeslots for {category_key} ({category.id})"
        log_section_start(logger, section)

        # One token for the whole invocation
        access_token = await self._client.get_access_token()

        streams = await fetch_live_streams(
            self._client,
            category,
            page_size=self._streams_page_size,
            access_token=access_token,
        )
        broadcaster_ids = resolve_broadcaster_ids(streams)
        if not broadcaster_ids:
            logger.info("No live broadcasters in category %s", category_key)
            log_section_end(logger, section)
            return []

        segments = await self._fetcher.fetch(broadcaster_ids, access_token=access_token)
        timeline = normalize_schedule(segments)

        log_timeline_summary(logger, category_key, len(broadcaster_ids), len(segments), len(timeline))
        log_section_end(logger, section)
        return timeline
