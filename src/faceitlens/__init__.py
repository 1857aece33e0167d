"""
FaceitLens - FACEIT CS2 Player Lookup

Finds a FACEIT player from a nickname, Steam ID64, Steam profile URL or Steam
vanity URL, and condenses their recent matches into summary metrics
(K/D, HS%, ADR, win rate).

Usage:
    import asyncio
    from faceitlens import PlayerStatsService

    service = PlayerStatsService.from_config()
    bundle = asyncio.run(service.get_player_stats_bundle("s1mple", 30))
    print(bundle.recent_aggregated.to_display())
"""

__version__ = "0.1.0"
__author__ = "FaceitLens Contributors"


def __getattr__(name):
    """Lazy import for the network-facing modules."""
    if name == "PlayerStatsService":
        from faceitlens.service import PlayerStatsService
        return PlayerStatsService
    elif name == "IdentityResolver":
        from faceitlens.resolver import IdentityResolver
        return IdentityResolver
    elif name == "StatsAggregator":
        from faceitlens.aggregator import StatsAggregator
        return StatsAggregator
    elif name == "fold_recent_matches":
        from faceitlens.aggregator import fold_recent_matches
        return fold_recent_matches
    elif name == "SearchHistory":
        from faceitlens.history import SearchHistory
        return SearchHistory
    raise AttributeError(f"module 'faceitlens' has no attribute '{name}'")


__all__ = [
    # Version
    "__version__",
    # Pipeline
    "PlayerStatsService",
    "IdentityResolver",
    "StatsAggregator",
    "fold_recent_matches",
    "SearchHistory",
]
