"""
Player lookup route handlers.

Endpoints:
- POST /api/faceit - resolve a player and return their stats bundle
- GET /api/history - recent successful lookups
- DELETE /api/history - clear the history
- DELETE /api/history/{entry} - remove one history entry
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from faceitlens.api.shared import (
    HistoryEntryResponse,
    LookupRequest,
    error_response,
    get_history,
    get_service,
)
from faceitlens.core.errors import ErrorResult, InvalidInputError
from faceitlens.history import SearchHistory, normalize_language
from faceitlens.service import PlayerStatsService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["lookup"])


@router.post("/api/faceit")
async def lookup_player(
    body: LookupRequest,
    service: PlayerStatsService = Depends(get_service),
    history: SearchHistory = Depends(get_history),
) -> Any:
    """Resolve the input to a FACEIT player and aggregate their stats."""
    try:
        language = normalize_language(body.lang) if body.lang else None
    except InvalidInputError as e:
        return error_response(ErrorResult.from_exception(e))

    result = await service.get_player_stats_bundle(body.input, body.matches_limit, language)

    if isinstance(result, ErrorResult):
        return error_response(result)

    history.add(
        body.input.strip(),
        player_name=result.player.nickname or None,
        steam_id=result.player.steam_id_64 or None,
    )
    return JSONResponse(content=result.to_dict())


@router.get("/api/history", response_model=list[HistoryEntryResponse])
async def list_history(history: SearchHistory = Depends(get_history)) -> list[dict[str, Any]]:
    """Recent lookups, newest first."""
    return [entry.to_dict() for entry in history.entries()]


@router.delete("/api/history")
async def clear_history(history: SearchHistory = Depends(get_history)) -> dict[str, Any]:
    history.clear()
    return {"cleared": True}


@router.delete("/api/history/{entry}")
async def remove_history_entry(
    entry: str, history: SearchHistory = Depends(get_history)
) -> dict[str, Any]:
    if not history.remove(entry):
        raise HTTPException(status_code=404, detail="History entry not found")
    return {"removed": entry}
