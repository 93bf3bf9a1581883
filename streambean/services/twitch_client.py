"""
Twitch Helix client

Acquires app access tokens (client-credentials grant) and issues read
queries against the Helix API. No retries: a failed call is reported to the
caller, which decides whether it is fatal.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from streambean.config import CustomSettings
from streambean.exceptions import UpstreamAuthFailure, UpstreamUnavailable
from streambean.utils.logging_helpers import log_upstream_failure


logger = logging.getLogger(__name__)


class TwitchClient:
    """Thin async wrapper around the Twitch OAuth and Helix endpoints."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        client_id: str,
        client_secret: str,
        auth_url: str = "https://id.twitch.tv/oauth2/token",
        api_base_url: str = "https://api.twitch.tv/helix",
    ) -> None:
        self._http = http
        self._client_id = client_id
        self._client_secret = client_secret
        self._auth_url = auth_url
        self._api_base_url = api_base_url.rstrip("/")

    @classmethod
    def from_settings(cls, config: CustomSettings, http: httpx.AsyncClient) -> TwitchClient:
        return cls(
            http,
            client_id=config.twitch_client_id,
            client_secret=config.twitch_client_secret,
            auth_url=config.twitch_auth_url,
            api_base_url=config.twitch_api_base_url,
        )

    async def get_access_token(self) -> str:
        """
        Get an app access token from Twitch.

        Returns:
            Bearer token for Helix requests

        Raises:
            UpstreamAuthFailure: If credentials are missing or the token request fails
        """
        if not self._client_id or not self._client_secret:
            raise UpstreamAuthFailure("Twitch credentials are not configured")

        logger.debug("Getting Twitch access token...")
        try:
            response = await self._http.post(
                self._auth_url,
                params={
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "grant_type": "client_credentials",
                },
            )
            response.raise_for_status()
            token = response.json().get("access_token")
        except (httpx.HTTPError, ValueError) as exc:
            log_upstream_failure(logger, self._auth_url, None, exc)
            raise UpstreamAuthFailure("Failed to get access token") from exc

        if not token:
            logger.error("Token response from %s carried no access_token", self._auth_url)
            raise UpstreamAuthFailure("Failed to get access token")
        return token

    async def query(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        *,
        access_token: str | None = None,
    ) -> Any:
        """
        Fetch data from a Helix endpoint.

        Args:
            endpoint: Path below the Helix base URL (e.g. 'streams')
            params: Query parameters
            access_token: Token to reuse; a new one is acquired when omitted

        Returns:
            The `data` member of the response (a list for most endpoints,
            an object for /schedule)

        Raises:
            UpstreamAuthFailure: If no token could be acquired
            UpstreamUnavailable: If the request fails or returns an error status or a body without `data`
        """
        token = access_token or await self.get_access_token()
        endpoint = endpoint.strip("/")
        url = f"{self._api_base_url}/{endpoint}"
        identifier = _identifier_from_params(params)

        try:
            response = await self._http.get(
                url,
                params=_encode_params(params),
                headers={
                    "Client-ID": self._client_id,
                    "Authorization": f"Bearer {token}",
                },
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            log_upstream_failure(logger, endpoint, identifier, exc)
            raise UpstreamUnavailable(
                f"Twitch returned HTTP {exc.response.status_code} for {endpoint}",
                endpoint,
                {"status": exc.response.status_code},
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            log_upstream_failure(logger, endpoint, identifier, exc)
            raise UpstreamUnavailable(f"Request to Twitch {endpoint} failed", endpoint) from exc

        if not isinstance(body, dict) or "data" not in body:
            logger.error("Twitch %s response has no data member (id=%s)", endpoint, identifier)
            raise UpstreamUnavailable(f"Response from Twitch {endpoint} has no data member", endpoint)
        return body["data"]


def _encode_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    """Helix expects lowercase booleans in query strings"""
    if params is None:
        return None
    return {
        key: str(value).lower() if isinstance(value, bool) else value
        for key, value in params.items()
    }


def _identifier_from_params(params: dict[str, Any] | None) -> str | None:
    if not params:
        return None
    for key in ("broadcaster_id", "user_id", "game_id", "query"):
        if key in params:
            return str(params[key])
    return None
