from typing import Annotated, Any
import logging

from fastapi import APIRouter, Depends, Query

from streambean.dependencies import get_catalog_service, get_timeslot_pipeline
from streambean.exceptions import ValidationError
from streambean.schemas import (
    BroadcasterResponse,
    CategoryResponse,
    CategorySearchResponse,
    ChannelSearchResponse,
    ScheduleItemResponse,
    VideoResponse,
)
from streambean.services import CatalogService, TimeslotPipeline


logger = logging.getLogger(__name__)

main_router = APIRouter()

CatalogDep = Annotated[CatalogService, Depends(get_catalog_service)]


@main_router.get("/health")
async def health_check() -> dict:
    """Health check endpoint"""
    return {"status": "ok"}


@main_router.get("/categories", response_model=dict[str, CategoryResponse])
async def list_categories(catalog: CatalogDep) -> dict:
    """Configured categories keyed by client-facing key"""
    return catalog.list_categories()


@main_router.get("/streams/{category}")
async def get_streams(category: str, catalog: CatalogDep) -> list[dict[str, Any]]:
    """Live streams in a category with player and thumbnail URLs"""
    logger.info("Fetching streams for %s", category)
    return await catalog.get_live_streams(category)


@main_router.get("/timeslots")
async def get_timeslots(
    pipeline: Annotated[TimeslotPipeline, Depends(get_timeslot_pipeline)],
    category: str | None = Query(None, description="Category key, see /categories"),
) -> list[dict[str, Any]]:
    """
    Merged, non-overlapping schedule of everybody live in a category

    Returns:
        Segments ordered by start time; empty when nobody is live
    """
    if not category:
        raise ValidationError("Category query parameter is required")
    logger.info("Fetching timeslots for %s", category)
    timeline = await pipeline.run(category)
    return [segment.to_dict() for segment in timeline]


@main_router.get("/schedule/{broadcaster_id}", response_model=list[ScheduleItemResponse])
async def get_schedule(broadcaster_id: str, catalog: CatalogDep) -> list[dict]:
    """Schedule of one broadcaster"""
    logger.info("Fetching schedule for broadcaster %s", broadcaster_id)
    return await catalog.get_schedule(broadcaster_id)


@main_router.get("/broadcasters/{broadcaster_id}", response_model=BroadcasterResponse)
async def get_broadcaster(broadcaster_id: str, catalog: CatalogDep) -> dict:
    """Channel information together with its schedule"""
    logger.info("Fetching channel information for %s", broadcaster_id)
    return await catalog.get_broadcaster(broadcaster_id)


@main_router.get("/videos/{broadcaster_id}", response_model=list[VideoResponse])
async def get_videos(broadcaster_id: str, catalog: CatalogDep) -> list[dict]:
    logger.info("Fetching videos for %s", broadcaster_id)
    return await catalog.get_videos(broadcaster_id)


@main_router.get("/search/categories", response_model=list[CategorySearchResponse])
async def search_categories(
    catalog: CatalogDep,
    query: str | None = Query(None, description="Search text"),
) -> list[dict]:
    logger.info("Searching categories: %s", query)
    return await catalog.search_categories(query)


@main_router.get("/search/channels", response_model=list[ChannelSearchResponse])
async def search_channels(
    catalog: CatalogDep,
    query: str | None = Query(None, description="Search text"),
) -> list[dict]:
    logger.info("Searching channels: %s", query)
    return await catalog.search_channels(query)
