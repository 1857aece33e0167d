"""
Steam Web API integration for FaceitLens.

Only one call is needed: resolving a steamcommunity.com/id/<vanity> handle to
a Steam64 ID. Requires STEAM_API_KEY; without it vanity URLs cannot be
resolved and lookups fall back to nickname search.
"""

from __future__ import annotations

import logging
import re

import httpx

from faceitlens.core.config import SteamConfig
from faceitlens.core.errors import (
    NotFoundError,
    NotFoundStage,
    UpstreamAuthError,
    UpstreamError,
    error_from_status,
)

logger = logging.getLogger(__name__)

STEAM_API_BASE = "https://api.steampowered.com"
STEAM_ID64_PATTERN = re.compile(r"^\d{17}$")

# ResolveVanityURL success code
VANITY_SUCCESS = 1


class SteamClient:
    """Async client for the Steam Web API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = STEAM_API_BASE,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_config(
        cls, config: SteamConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> SteamClient:
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
            transport=transport,
        )

    @property
    def configured(self) -> bool:
        """Whether an API key is available."""
        return bool(self.api_key)

    async def resolve_vanity_url(self, handle: str) -> str:
        """Resolve a vanity handle to a Steam64 ID.

        Args:
            handle: The <handle> part of steamcommunity.com/id/<handle>

        Returns:
            Steam64 ID (17-digit string)

        Raises:
            UpstreamAuthError: No API key, or Steam rejected it
            NotFoundError: Steam reports no match for the handle
            UpstreamError: Transport failure or malformed response
        """
        if not self.api_key:
            raise UpstreamAuthError("Steam API key is not configured (STEAM_API_KEY)")

        url = f"{self.base_url}/ISteamUser/ResolveVanityURL/v0001/"
        params = {"key": self.api_key, "vanityurl": handle}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                resp = await client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.warning(f"Steam API error resolving vanity URL: {e}")
            raise UpstreamError(f"Steam API request failed: {e}") from e

        if resp.status_code in (401, 403):
            raise UpstreamAuthError("Steam API key was rejected (STEAM_API_KEY)")
        if resp.status_code >= 400:
            raise error_from_status(resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            raise UpstreamError("Steam API returned invalid JSON", resp.status_code) from e

        data = body.get("response") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            raise UpstreamError("Steam API returned an unexpected response", resp.status_code)

        steam_id = str(data.get("steamid") or "")
        if data.get("success") != VANITY_SUCCESS or not STEAM_ID64_PATTERN.match(steam_id):
            logger.info(f"Steam vanity handle not resolved: {handle} ({data.get('message', '')})")
            raise NotFoundError(stage=NotFoundStage.VANITY)

        logger.debug(f"Resolved vanity handle {handle} to {steam_id}")
        return steam_id
