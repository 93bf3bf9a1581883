"""
Catalog Service

Read-only lookups against Twitch reshaped for clients: categories, live
streams, schedules, channel details, videos and search.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from streambean.config import CategoryConfig, CustomSettings
from streambean.exceptions import MalformedUpstreamRecord, NotFound, UpstreamUnavailable, ValidationError
from streambean.services.fetch_types import ChannelRecord
from streambean.services.schedule_fetcher import SCHEDULE_ENDPOINT
from streambean.services.timeslot_pipeline import fetch_live_streams, resolve_category
from streambean.services.twitch_client import TwitchClient
from streambean.utils.logging_helpers import log_upstream_failure


logger = logging.getLogger(__name__)

THUMBNAIL_WIDTH = "960"
THUMBNAIL_HEIGHT = "540"
VIDEOS_PAGE_SIZE = 100


def _require(value: str | None, message: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(message)
    return value.strip()


def _as_records(data: Any, endpoint: str) -> list[dict[str, Any]]:
    if not isinstance(data, list):
        raise UpstreamUnavailable(f"Response from Twitch {endpoint} is not a list", endpoint)
    return [record for record in data if isinstance(record, dict)]


def format_schedule(data: Any) -> list[dict[str, Any]]:
    """Reshape the `data` member of a /schedule response for clients"""
    if not isinstance(data, dict):
        return []
    segments = data.get("segments") or []
    return [
        {
            "id": segment.get("id"),
            "startTime": segment.get("start_time"),
            "endTime": segment.get("end_time"),
            "title": segment.get("title"),
            "isRecurring": segment.get("is_recurring"),
        }
        for segment in segments
        if isinstance(segment, dict)
    ]


class CatalogService:
    """Passthrough lookups that reshape Helix records."""

    def __init__(
        self,
        client: TwitchClient,
        categories: Mapping[str, CategoryConfig],
        *,
        base_url: str,
        streams_page_size: int = 100,
        search_page_size: int = 20,
    ) -> None:
        self._client = client
        self._categories = categories
        self._base_url = base_url.rstrip("/")
        self._streams_page_size = streams_page_size
        self._search_page_size = search_page_size

    @classmethod
    def from_settings(cls, config: CustomSettings, client: TwitchClient) -> CatalogService:
        return cls(
            client,
            config.category_table(),
            base_url=config.base_url,
            streams_page_size=config.streams_page_size,
            search_page_size=config.search_page_size,
        )

    def list_categories(self) -> dict[str, dict[str, str]]:
        return {key: category.model_dump() for key, category in self._categories.items()}

    async def get_live_streams(self, category_key: str | None) -> list[dict[str, Any]]:
        """
        Live streams in a category with player and thumbnail URLs filled in

        Args:
            category_key: Client-facing category key

        Returns:
            Stream records as returned by Twitch plus `player_url`
            (None when the stream has no login)
        """
        category = resolve_category(self._categories, category_key)
        streams = await fetch_live_streams(self._client, category, page_size=self._streams_page_size)

        enriched = []
        for stream in streams:
            record = stream.model_dump()
            record["player_url"] = f"{self._base_url}/player/{stream.user_login}" if stream.user_login else None
            if stream.thumbnail_url:
                record["thumbnail_url"] = (
                    stream.thumbnail_url
                    .replace("{width}", THUMBNAIL_WIDTH)
                    .replace("{height}", THUMBNAIL_HEIGHT)
                )
            enriched.append(record)
        logger.info("Found %s live streams in %s", len(enriched), category_key)
        return enriched

    async def _query_schedule_tolerant(self, broadcaster_id: str, access_token: str | None = None) -> Any:
        """Schedule lookup where an upstream error means 'no schedule'"""
        try:
            return await self._client.query(
                SCHEDULE_ENDPOINT,
                {"broadcaster_id": broadcaster_id},
                access_token=access_token,
            )
        except (UpstreamUnavailable, MalformedUpstreamRecord) as exc:
            log_upstream_failure(logger, SCHEDULE_ENDPOINT, broadcaster_id, exc, level=logging.WARNING)
            return None

    async def get_schedule(self, broadcaster_id: str | None) -> list[dict[str, Any]]:
        broadcaster_id = _require(broadcaster_id, "Broadcaster ID is required")
        data = await self._query_schedule_tolerant(broadcaster_id)
        return format_schedule(data)

    async def get_broadcaster(self, broadcaster_id: str | None) -> dict[str, Any]:
        """
        Channel information together with its schedule

        The channel and schedule lookups run concurrently; only the channel
        lookup is required.

        Raises:
            NotFound: If Twitch knows no channel with this id
        """
        broadcaster_id = _require(broadcaster_id, "Broadcaster ID is required")
        access_token = await self._client.get_access_token()

        channel_data, schedule_data = await asyncio.gather(
            self._client.query(
                "channels",
                {"broadcaster_id": broadcaster_id},
                access_token=access_token,
            ),
            self._query_schedule_tolerant(broadcaster_id, access_token),
        )

        channels = _as_records(channel_data, "channels")
        if not channels:
            raise NotFound("Broadcaster not found", {"broadcaster_id": broadcaster_id})
        try:
            channel = ChannelRecord.model_validate(channels[0])
        except PydanticValidationError as exc:
            raise MalformedUpstreamRecord(
                "Channel record is missing its broadcaster id",
                {"broadcaster_id": broadcaster_id},
            ) from exc

        return {
            "id": channel.broadcaster_id,
            "name": channel.broadcaster_name,
            "category_name": channel.game_name,
            "category_id": channel.game_id,
            "tags": channel.tags or [],
            "schedule": format_schedule(schedule_data),
        }

    async def get_videos(self, broadcaster_id: str | None) -> list[dict[str, Any]]:
        broadcaster_id = _require(broadcaster_id, "Broadcaster ID is required")
        data = await self._client.query(
            "videos",
            {"user_id": broadcaster_id, "first": VIDEOS_PAGE_SIZE},
        )
        return [
            {
                "id": video.get("id"),
                "title": video.get("title"),
                "thumbnailUrl": video.get("thumbnail_url"),
                "url": video.get("url"),
                "publishedAt": video.get("published_at"),
                "duration": video.get("duration"),
                "viewCount": video.get("view_count"),
            }
            for video in _as_records(data, "videos")
        ]

    async def search_categories(self, query: str | None) -> list[dict[str, Any]]:
        query = _require(query, "Search query is required")
        data = await self._client.query(
            "search/categories",
            {"query": query, "first": self._search_page_size},
        )
        return [
            {
                "id": category.get("id"),
                "name": category.get("name"),
                "boxArtUrl": category.get("box_art_url"),
            }
            for category in _as_records(data, "search/categories")
        ]

    async def search_channels(self, query: str | None) -> list[dict[str, Any]]:
        query = _require(query, "Search query is required")
        data = await self._client.query(
            "search/channels",
            {"query": query, "first": self._search_page_size, "live_only": False},
        )
        return [
            {
                "id": channel.get("id"),
                "displayName": channel.get("display_name"),
                "name": channel.get("broadcaster_login"),
                "thumbnailUrl": channel.get("thumbnail_url"),
                "isLive": channel.get("is_live"),
                "gameId": channel.get("game_id"),
                "gameName": channel.get("game_name"),
            }
            for channel in _as_records(data, "search/channels")
        ]
