"""
Services package for Streambean API

This package contains all business logic and service layer components.
"""
from streambean.services.catalog_service import CatalogService
from streambean.services.schedule_fetcher import ScheduleFetcher
from streambean.services.schedule_normalizer import normalize_schedule
from streambean.services.timeslot_pipeline import TimeslotPipeline
from streambean.services.twitch_client import TwitchClient

__all__ = [
    'CatalogService',
    'ScheduleFetcher',
    'normalize_schedule',
    'TimeslotPipeline',
    'TwitchClient',
]
