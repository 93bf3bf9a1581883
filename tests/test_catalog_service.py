"""Tests for the passthrough lookups"""
from types import MappingProxyType

import pytest

from streambean.exceptions import (
    NotFound,
    UnknownCategory,
    UpstreamAuthFailure,
    UpstreamUnavailable,
    ValidationError,
)
from streambean.services.catalog_service import CatalogService, format_schedule
from tests.factories import FakeTwitchClient, iso, raw_segment, stream


@pytest.fixture
def catalog(fake_client: FakeTwitchClient, categories) -> CatalogService:
    return CatalogService(
        fake_client,
        MappingProxyType(categories),
        base_url="https://api.example.test/",
        streams_page_size=100,
        search_page_size=20,
    )


def test_list_categories(catalog: CatalogService):
    assert catalog.list_categories() == {
        "music": {"id": "26936", "name": "Music"},
        "art": {"id": "509664", "name": "Art"},
    }


@pytest.mark.asyncio
async def test_live_streams_are_enriched(catalog: CatalogService, fake_client: FakeTwitchClient):
    fake_client.respond("streams", [stream("1", login="alice")])

    (record,) = await catalog.get_live_streams("music")

    assert record["player_url"] == "https://api.example.test/player/alice"
    assert record["thumbnail_url"] == "https://static-cdn.jtvnw.net/previews-ttv/live_user_1-960x540.jpg"
    assert record["title"] == "Live now"
    assert fake_client.calls_to("streams")[0][1] == {"game_id": "26936", "first": 100}


@pytest.mark.asyncio
async def test_live_stream_without_login_has_no_player_url(catalog: CatalogService, fake_client: FakeTwitchClient):
    record = stream("1")
    del record["user_login"]
    fake_client.respond("streams", [record])

    (enriched,) = await catalog.get_live_streams("music")

    assert enriched["player_url"] is None
    assert enriched["user_id"] == "1"


@pytest.mark.asyncio
async def test_live_streams_unknown_category(catalog: CatalogService, fake_client: FakeTwitchClient):
    with pytest.raises(UnknownCategory):
        await catalog.get_live_streams("knitting")
    assert fake_client.calls == []


def test_format_schedule():
    data = {"segments": [raw_segment(0, 60, "s1")]}

    assert format_schedule(data) == [
        {"id": "s1", "startTime": iso(0), "endTime": iso(60), "title": "Show s1", "isRecurring": False}
    ]
    assert format_schedule(None) == []
    assert format_schedule({"segments": None}) == []


@pytest.mark.asyncio
async def test_schedule_upstream_error_means_empty(catalog: CatalogService, fake_client: FakeTwitchClient):
    fake_client.respond("schedule", UpstreamUnavailable("Twitch returned HTTP 404 for schedule", "schedule"))

    assert await catalog.get_schedule("42") == []


@pytest.mark.asyncio
async def test_schedule_auth_failure_propagates(catalog: CatalogService, fake_client: FakeTwitchClient):
    fake_client.token_error = UpstreamAuthFailure("Failed to get access token")

    with pytest.raises(UpstreamAuthFailure):
        await catalog.get_schedule("42")


@pytest.mark.asyncio
@pytest.mark.parametrize("blank", ["", "   ", None])
async def test_blank_ids_and_queries_are_rejected(catalog: CatalogService, blank):
    for lookup in (catalog.get_schedule, catalog.get_broadcaster, catalog.get_videos,
                   catalog.search_categories, catalog.search_channels):
        with pytest.raises(ValidationError):
            await lookup(blank)


@pytest.mark.asyncio
async def test_broadcaster_with_schedule(catalog: CatalogService, fake_client: FakeTwitchClient):
    fake_client.respond("channels", [{
        "broadcaster_id": "42",
        "broadcaster_login": "alice",
        "broadcaster_name": "Alice",
        "game_id": "26936",
        "game_name": "Music",
        "tags": ["English"],
    }])
    fake_client.respond("schedule", {"segments": [raw_segment(0, 60, "s1")]})

    broadcaster = await catalog.get_broadcaster("42")

    assert broadcaster["id"] == "42"
    assert broadcaster["name"] == "Alice"
    assert broadcaster["category_name"] == "Music"
    assert broadcaster["category_id"] == "26936"
    assert broadcaster["tags"] == ["English"]
    assert [item["id"] for item in broadcaster["schedule"]] == ["s1"]
    assert fake_client.token_requests == 1


@pytest.mark.asyncio
async def test_broadcaster_without_schedule(catalog: CatalogService, fake_client: FakeTwitchClient):
    fake_client.respond("channels", [{"broadcaster_id": "42", "broadcaster_name": "Alice", "tags": None}])
    fake_client.respond("schedule", UpstreamUnavailable("Twitch returned HTTP 404 for schedule", "schedule"))

    broadcaster = await catalog.get_broadcaster("42")

    assert broadcaster["schedule"] == []
    assert broadcaster["tags"] == []


@pytest.mark.asyncio
async def test_unknown_broadcaster(catalog: CatalogService, fake_client: FakeTwitchClient):
    fake_client.respond("channels", [])
    fake_client.respond("schedule", {"segments": []})

    with pytest.raises(NotFound):
        await catalog.get_broadcaster("404")


@pytest.mark.asyncio
async def test_videos_are_reshaped(catalog: CatalogService, fake_client: FakeTwitchClient):
    fake_client.respond("videos", [{
        "id": "v1",
        "title": "Past broadcast",
        "thumbnail_url": "https://example.test/v1.jpg",
        "url": "https://www.twitch.tv/videos/v1",
        "published_at": "2025-10-01T10:00:00Z",
        "duration": "1h2m3s",
        "view_count": 12,
        "language": "en",
    }])

    videos = await catalog.get_videos("42")

    assert videos == [{
        "id": "v1",
        "title": "Past broadcast",
        "thumbnailUrl": "https://example.test/v1.jpg",
        "url": "https://www.twitch.tv/videos/v1",
        "publishedAt": "2025-10-01T10:00:00Z",
        "duration": "1h2m3s",
        "viewCount": 12,
    }]
    assert fake_client.calls_to("videos")[0][1] == {"user_id": "42", "first": 100}


@pytest.mark.asyncio
async def test_search_categories(catalog: CatalogService, fake_client: FakeTwitchClient):
    fake_client.respond("search/categories", [{"id": "743", "name": "Chess", "box_art_url": "https://example.test/box.jpg"}])

    assert await catalog.search_categories("chess") == [
        {"id": "743", "name": "Chess", "boxArtUrl": "https://example.test/box.jpg"}
    ]
    assert fake_client.calls_to("search/categories")[0][1] == {"query": "chess", "first": 20}


@pytest.mark.asyncio
async def test_search_channels(catalog: CatalogService, fake_client: FakeTwitchClient):
    fake_client.respond("search/channels", [{
        "id": "42",
        "display_name": "Alice",
        "broadcaster_login": "alice",
        "thumbnail_url": "https://example.test/alice.jpg",
        "is_live": True,
        "game_id": "743",
        "game_name": "Chess",
    }])

    (channel,) = await catalog.search_channels("alice")

    assert channel == {
        "id": "42",
        "displayName": "Alice",
        "name": "alice",
        "thumbnailUrl": "https://example.test/alice.jpg",
        "isLive": True,
        "gameId": "743",
        "gameName": "Chess",
    }
    assert fake_client.calls_to("search/channels")[0][1]["live_only"] is False
