"""
HTML pages embedding the landing page and the Twitch player
"""
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from streambean.config import CustomSettings, get_settings


# Setup templates
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

pages_router = APIRouter()


@pages_router.get("/", response_class=HTMLResponse)
async def landing(request: Request, config: Annotated[CustomSettings, Depends(get_settings)]):
    """Landing page"""
    return templates.TemplateResponse(
        request, "landing.html", {"iframe_url": config.landing_iframe_url}
    )


@pages_router.get("/player/{channel_name}", response_class=HTMLResponse)
async def player(request: Request, channel_name: str):
    """Page embedding the Twitch player for a channel"""
    return templates.TemplateResponse(request, "player.html", {"channel": channel_name})
