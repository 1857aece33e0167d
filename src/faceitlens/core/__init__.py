"""
FaceitLens Core - Foundation modules shared by the lookup pipeline.

This module contains:
- config: Application configuration management
- errors: Error taxonomy and ErrorResult
- schemas: Data contracts for module boundaries
- aliases: Ordered label lookup for FACEIT stat dictionaries
- thresholds: Good/average/bad reference values
- utils: Number parsing and timing helpers
"""

from faceitlens.core.errors import (
    ErrorKind,
    ErrorResult,
    FaceitLensError,
    InvalidInputError,
    NotFoundError,
    NotFoundStage,
    UpstreamAuthError,
    UpstreamError,
    UpstreamRateLimitError,
)
from faceitlens.core.schemas import (
    AggregatedRecentStats,
    GameInfo,
    LifetimeStats,
    MatchRecord,
    ParsedQuery,
    PlatformIdentifier,
    PlayerProfile,
    PlayerStatsBundle,
    SearchHistoryEntry,
)

__all__ = [
    # Errors
    "ErrorKind",
    "ErrorResult",
    "FaceitLensError",
    "InvalidInputError",
    "NotFoundError",
    "NotFoundStage",
    "UpstreamAuthError",
    "UpstreamError",
    "UpstreamRateLimitError",
    # Schemas (data contracts)
    "AggregatedRecentStats",
    "GameInfo",
    "LifetimeStats",
    "MatchRecord",
    "ParsedQuery",
    "PlatformIdentifier",
    "PlayerProfile",
    "PlayerStatsBundle",
    "SearchHistoryEntry",
]
