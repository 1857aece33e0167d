"""
Player lookup service: the single entry point for presentation layers.

Resolves the query, aggregates stats and converts every domain failure into
an ErrorResult with a machine-readable kind.
"""

from __future__ import annotations

import logging

import httpx

from faceitlens.aggregator import StatsAggregator
from faceitlens.core.config import FaceitLensConfig, get_config
from faceitlens.core.errors import ErrorKind, ErrorResult, FaceitLensError
from faceitlens.core.schemas import PlayerStatsBundle
from faceitlens.integrations.faceit import FACEITClient
from faceitlens.integrations.steam import SteamClient
from faceitlens.resolver import IdentityResolver

logger = logging.getLogger(__name__)


class PlayerStatsService:
    """Resolve + aggregate, with errors returned as values."""

    def __init__(
        self,
        resolver: IdentityResolver,
        aggregator: StatsAggregator,
        default_match_limit: int = 30,
    ):
        self.resolver = resolver
        self.aggregator = aggregator
        self.default_match_limit = default_match_limit

    @classmethod
    def from_config(
        cls,
        config: FaceitLensConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> PlayerStatsService:
        """Build the service and its clients from configuration."""
        config = config or get_config()
        faceit = FACEITClient.from_config(config.faceit, transport=transport)
        steam = SteamClient.from_config(config.steam, transport=transport)
        return cls(
            resolver=IdentityResolver(faceit, steam),
            aggregator=StatsAggregator(
                faceit,
                default_language=config.faceit.default_language,
                max_match_limit=config.faceit.max_match_limit,
            ),
            default_match_limit=config.faceit.default_match_limit,
        )

    async def get_player_stats_bundle(
        self,
        raw_query: str,
        recent_match_limit: int | None = None,
        language: str | None = None,
    ) -> PlayerStatsBundle | ErrorResult:
        """
        Look up a player and build their stats bundle.

        Args:
            raw_query: Nickname, Steam ID, or Steam profile / vanity URL
            recent_match_limit: Recent matches to aggregate. None uses the
                configured default; 0 skips recent matches.
            language: Language for the FACEIT profile URL (config default
                when None)

        Returns:
            PlayerStatsBundle on success, ErrorResult otherwise
        """
        limit = self.default_match_limit if recent_match_limit is None else recent_match_limit

        try:
            player_id = await self.resolver.resolve(raw_query)
            return await self.aggregator.aggregate(player_id, max(limit, 0), language)
        except FaceitLensError as e:
            if e.kind in (ErrorKind.INVALID_INPUT, ErrorKind.PLAYER_NOT_FOUND):
                logger.info(f"Lookup for '{raw_query}' failed: {e.message}")
            else:
                logger.error(f"FACEIT API Error for '{raw_query}': {e.message}")
            return ErrorResult.from_exception(e)
