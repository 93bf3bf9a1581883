"""
Dependency Injection Configuration

FastAPI dependency providers wiring settings, the shared HTTP connection
pool and the services together per request. Tests override
get_twitch_client to run the services against a fake upstream.
"""
from typing import Annotated

import httpx
from fastapi import Depends, Request

from streambean.config import CustomSettings, get_settings
from streambean.services import CatalogService, TimeslotPipeline, TwitchClient


def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Shared connection pool created in the application lifespan

    Raises:
        RuntimeError: If the application was started without its lifespan
    """
    http_client = getattr(request.app.state, "http_client", None)
    if http_client is None:
        raise RuntimeError("HTTP client not initialized. Was the lifespan run?")
    return http_client


def get_twitch_client(
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
    config: Annotated[CustomSettings, Depends(get_settings)],
) -> TwitchClient:
    return TwitchClient.from_settings(config, http_client)


def get_timeslot_pipeline(
    client: Annotated[TwitchClient, Depends(get_twitch_client)],
    config: Annotated[CustomSettings, Depends(get_settings)],
) -> TimeslotPipeline:
    return TimeslotPipeline.from_settings(config, client)


def get_catalog_service(
    client: Annotated[TwitchClient, Depends(get_twitch_client)],
    config: Annotated[CustomSettings, Depends(get_settings)],
) -> CatalogService:
    return CatalogService.from_settings(config, client)
