"""
Shared utilities for the FaceitLens API.

Contains request/response models, dependency providers and the mapping from
ErrorKind to HTTP status used across route modules.
"""

import logging
from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from faceitlens import __version__
from faceitlens.core.config import get_config
from faceitlens.core.errors import ErrorKind, ErrorResult
from faceitlens.history import InMemoryStore, SearchHistory
from faceitlens.service import PlayerStatsService

logger = logging.getLogger(__name__)

# =============================================================================
# Request / Response Models
# =============================================================================


class LookupRequest(BaseModel):
    """Body of POST /api/faceit."""

    model_config = ConfigDict(populate_by_name=True)

    input: str = Field(..., description="Nickname, Steam ID64 or Steam profile URL")
    matches_limit: int | None = Field(
        default=None,
        alias="matchesLimit",
        ge=0,
        le=100,
        description="Recent matches to aggregate (default 30, 0 disables)",
    )
    lang: str | None = Field(
        default=None,
        description="Profile URL language (en, ru, zh, es, de); server default when omitted",
    )


class HistoryEntryResponse(BaseModel):
    input: str
    timestamp: int
    playerName: str | None = None
    steamId: str | None = None


# =============================================================================
# Error Mapping
# =============================================================================

STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.PLAYER_NOT_FOUND: 404,
    ErrorKind.UPSTREAM_AUTH: 500,  # our configuration, not the caller's fault
    ErrorKind.UPSTREAM_RATE_LIMIT: 429,
}


def status_for_error(result: ErrorResult) -> int:
    """HTTP status for an ErrorResult; upstream errors reuse the upstream status."""
    if result.kind in STATUS_BY_KIND:
        return STATUS_BY_KIND[result.kind]
    if result.status_code and result.status_code >= 400:
        return result.status_code
    return 500


def error_response(result: ErrorResult) -> JSONResponse:
    return JSONResponse(status_code=status_for_error(result), content=result.to_dict())


# =============================================================================
# Dependencies
# =============================================================================

_service: PlayerStatsService | None = None
_history: SearchHistory | None = None


def get_service() -> PlayerStatsService:
    """Lazily build the lookup service from global configuration."""
    global _service
    if _service is None:
        _service = PlayerStatsService.from_config(get_config())
    return _service


def get_history() -> SearchHistory:
    """Process-local search history."""
    global _history
    if _history is None:
        _history = SearchHistory.from_config(get_config().history, store=InMemoryStore())
    return _history


def health_payload() -> dict[str, Any]:
    config = get_config()
    return {
        "status": "ok",
        "version": __version__,
        "faceit_api_key": bool(config.faceit.api_key),
        "steam_vanity_resolution": bool(config.steam.api_key),
    }
