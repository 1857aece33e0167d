"""
FaceitLens FACEIT API Integration

Async client for FACEIT's public Data API (v4): player lookup by nickname or
Steam ID, profile, lifetime CS2 stats and recent match stats.

Upstream failures are converted to the faceitlens.core.errors hierarchy here,
so callers never see httpx exceptions.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from faceitlens.core.config import FaceitConfig
from faceitlens.core.errors import UpstreamAuthError, UpstreamError, error_from_status
from faceitlens.core.schemas import MatchRecord

logger = logging.getLogger(__name__)

# FACEIT API base URL
FACEIT_API_BASE = "https://open.faceit.com/data/v4"


def extract_error_message(response: httpx.Response) -> str | None:
    """Best-effort human message from an upstream error body."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    errors = body.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        if errors[0].get("message"):
            return str(errors[0]["message"])
    if isinstance(body.get("message"), str):
        return body["message"]
    return None


class FACEITClient:
    """
    Client for interacting with the FACEIT API.

    Requires a FACEIT API key which can be obtained from:
    https://developers.faceit.com/

    Example:
        >>> import asyncio
        >>> from faceitlens.integrations.faceit import FACEITClient
        >>>
        >>> client = FACEITClient(api_key="your-api-key")
        >>> player = asyncio.run(client.lookup_by_nickname("s1mple"))
        >>> print(player["player_id"])
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = FACEIT_API_BASE,
        game: str = "cs2",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the FACEIT client.

        Args:
            api_key: FACEIT API key
            base_url: Data API root
            game: Game id used for lookups and stats
            timeout_seconds: Per-request timeout
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.game = game
        self.timeout_seconds = timeout_seconds
        self._transport = transport

        if not self.api_key:
            logger.warning(
                "No FACEIT API key provided. Set FACEIT_API_KEY environment "
                "variable or pass api_key parameter."
            )

    @classmethod
    def from_config(
        cls, config: FaceitConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> FACEITClient:
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            game=config.game,
            timeout_seconds=config.timeout_seconds,
            transport=transport,
        )

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}", "Accept": "application/json"}

    async def _get_json(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """GET an endpoint and decode JSON, raising the domain errors on failure."""
        if not self.api_key:
            raise UpstreamAuthError()

        url = f"{self.base_url}{endpoint}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.get(url, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"FACEIT API request failed: {e}")
            raise UpstreamError(f"FACEIT API request failed: {e}") from e

        if response.status_code >= 400:
            message = extract_error_message(response)
            logger.debug(f"FACEIT API {endpoint} returned {response.status_code}: {message}")
            raise error_from_status(response.status_code, message)

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError("FACEIT API returned invalid JSON", response.status_code) from e

    # ------------------------------------------------------------------
    # Player lookup
    # ------------------------------------------------------------------

    async def lookup_by_platform_id(self, steam_id: str) -> dict[str, Any]:
        """
        Get player reference by Steam ID.

        Args:
            steam_id: Steam ID (64-bit format)

        Returns:
            Raw player payload (includes "player_id")

        Raises:
            NotFoundError: No FACEIT account is linked to the Steam ID
        """
        return await self._get_json(
            "/players", params={"game": self.game, "game_player_id": steam_id}
        )

    async def lookup_by_nickname(self, nickname: str) -> dict[str, Any]:
        """
        Get player reference by FACEIT nickname.

        Args:
            nickname: FACEIT username, passed through verbatim

        Returns:
            Raw player payload (includes "player_id")
        """
        return await self._get_json("/players", params={"nickname": nickname})

    # ------------------------------------------------------------------
    # Player data
    # ------------------------------------------------------------------

    async def fetch_profile(self, player_id: str) -> dict[str, Any]:
        """Get the full player profile."""
        return await self._get_json(f"/players/{player_id}")

    async def fetch_lifetime_stats(self, player_id: str) -> dict[str, Any]:
        """Get lifetime stats and segments for the configured game."""
        return await self._get_json(f"/players/{player_id}/stats/{self.game}")

    async def fetch_match_stats(self, player_id: str, limit: int) -> list[MatchRecord]:
        """
        Get per-match stats for the most recent matches.

        Each item carries a "stats" block (Kills, Deaths, ADR, Result, ...).
        """
        data = await self._get_json(
            f"/players/{player_id}/games/{self.game}/stats", params={"limit": limit}
        )
        return self._items(data)

    async def fetch_match_history(self, player_id: str, limit: int) -> list[MatchRecord]:
        """
        Get the player's match history.

        Items are match summaries; most carry no per-player "stats" block.
        """
        data = await self._get_json(
            f"/players/{player_id}/history", params={"game": self.game, "limit": limit}
        )
        return self._items(data)

    @staticmethod
    def _items(data: Any) -> list[MatchRecord]:
        if not isinstance(data, dict):
            return []
        items = data.get("items")
        return list(items) if isinstance(items, list) else []
