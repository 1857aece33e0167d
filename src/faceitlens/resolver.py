"""
Identity Resolution for FACEIT player lookups.

Turns free-text input into a FACEIT player_id. Accepted shapes:
- a bare Steam ID64, or any text containing a standalone 17-digit run
- https://steamcommunity.com/profiles/<steamid64>
- https://steamcommunity.com/id/<vanity> (needs STEAM_API_KEY)
- anything else is treated as a FACEIT nickname

Resolution order:
1. Extract a Steam ID (digits, then /profiles/ URL)
2. Resolve a vanity handle through Steam; failures fall back to step 4
3. Steam ID -> FACEIT lookup (404 is terminal)
4. Nickname -> FACEIT lookup using the whole trimmed input

Each network stage returns a StageResult instead of raising, so the chain
reads as a sequence and each stage can be tested on its own.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import ParseResult, urlparse

from faceitlens.core.errors import (
    FaceitLensError,
    InvalidInputError,
    NotFoundError,
    NotFoundStage,
    UpstreamAuthError,
)
from faceitlens.core.schemas import ParsedQuery, PlatformIdentifier
from faceitlens.integrations.faceit import FACEITClient
from faceitlens.integrations.steam import SteamClient

logger = logging.getLogger(__name__)

STEAM_COMMUNITY_HOST = "steamcommunity.com"

# A 17-digit run not glued to further digits
STEAM_ID_RUN = re.compile(r"(?<!\d)(\d{17})(?!\d)")
PROFILES_PATH = re.compile(r"^/profiles/(\d+)/?$")
VANITY_PATH = re.compile(r"^/id/([^/\s?#]+)/?$")
HAS_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


# =============================================================================
# Pure extraction
# =============================================================================


def extract_steam_id(text: str) -> str | None:
    """Return the first standalone 17-digit run in the text."""
    match = STEAM_ID_RUN.search(text)
    return match.group(1) if match else None


def _parse_steam_url(text: str) -> ParseResult | None:
    """Parse text as a steamcommunity.com URL, adding https:// if missing."""
    candidate = text if HAS_SCHEME.match(text) else f"https://{text}"
    try:
        parsed = urlparse(candidate)
        host = (parsed.hostname or "").lower()
    except ValueError:
        return None

    if host == STEAM_COMMUNITY_HOST or host.endswith("." + STEAM_COMMUNITY_HOST):
        return parsed
    return None


def extract_profile_url_id(text: str) -> str | None:
    """Steam ID from a steamcommunity.com/profiles/<digits> URL."""
    parsed = _parse_steam_url(text)
    if parsed is None:
        return None
    match = PROFILES_PATH.match(parsed.path)
    return match.group(1) if match else None


def extract_vanity_handle(text: str) -> str | None:
    """Handle from a steamcommunity.com/id/<handle> URL."""
    parsed = _parse_steam_url(text)
    if parsed is None:
        return None
    match = VANITY_PATH.match(parsed.path)
    return match.group(1) if match else None


def parse_query(raw_query: str | None) -> ParsedQuery:
    """
    Classify a raw query without touching the network.

    Raises:
        InvalidInputError: Empty input, or two different Steam IDs found
    """
    text = (raw_query or "").strip()
    if not text:
        raise InvalidInputError("Enter a FACEIT nickname, Steam ID or Steam profile URL")

    direct_id = extract_steam_id(text)
    url_id = extract_profile_url_id(text)
    if direct_id and url_id and direct_id != url_id:
        raise InvalidInputError(f"Input contains conflicting Steam IDs: {direct_id}, {url_id}")

    steam_id = direct_id or url_id
    if steam_id:
        return ParsedQuery(text=text, identifier=PlatformIdentifier.from_steam_id(steam_id))

    handle = extract_vanity_handle(text)
    if handle:
        return ParsedQuery(text=text, identifier=PlatformIdentifier.from_vanity(handle))

    return ParsedQuery(text=text)


# =============================================================================
# Network stages
# =============================================================================


class StageOutcome(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class StageResult:
    """Tagged outcome of one resolution stage."""

    outcome: StageOutcome
    value: str | None = None
    error: FaceitLensError | None = None

    @classmethod
    def found(cls, value: str) -> StageResult:
        return cls(StageOutcome.FOUND, value=value)

    @classmethod
    def not_found(cls, error: FaceitLensError | None = None) -> StageResult:
        return cls(StageOutcome.NOT_FOUND, error=error)

    @classmethod
    def failed(cls, error: FaceitLensError) -> StageResult:
        return cls(StageOutcome.ERROR, error=error)

    def unwrap(self) -> str:
        """Return the value or raise the carried error."""
        if self.outcome is StageOutcome.FOUND and self.value:
            return self.value
        raise self.error or NotFoundError()


def _player_id(payload: Any) -> str | None:
    if isinstance(payload, dict) and payload.get("player_id"):
        return str(payload["player_id"])
    return None


async def resolve_vanity_stage(steam: SteamClient | None, handle: str) -> StageResult:
    """
    Vanity handle -> Steam ID.

    Only rejected credentials are fatal; every other failure is reported as
    NOT_FOUND so the caller can fall back to nickname search.
    """
    if steam is None or not steam.configured:
        logger.info(f"STEAM_API_KEY not set, skipping vanity resolution for '{handle}'")
        return StageResult.not_found(NotFoundError(stage=NotFoundStage.VANITY))

    try:
        return StageResult.found(await steam.resolve_vanity_url(handle))
    except UpstreamAuthError as e:
        return StageResult.failed(e)
    except FaceitLensError as e:
        logger.warning(f"Vanity resolution failed for '{handle}', trying nickname search: {e}")
        return StageResult.not_found(e)


async def lookup_platform_stage(faceit: FACEITClient, steam_id: str) -> StageResult:
    """Steam ID -> FACEIT player_id."""
    try:
        payload = await faceit.lookup_by_platform_id(steam_id)
    except NotFoundError:
        return StageResult.not_found(NotFoundError(stage=NotFoundStage.PLATFORM_ID))
    except FaceitLensError as e:
        return StageResult.failed(e)

    player_id = _player_id(payload)
    if player_id is None:
        return StageResult.not_found(NotFoundError(stage=NotFoundStage.GENERIC))
    return StageResult.found(player_id)


async def lookup_nickname_stage(faceit: FACEITClient, nickname: str) -> StageResult:
    """FACEIT nickname -> FACEIT player_id."""
    try:
        payload = await faceit.lookup_by_nickname(nickname)
    except NotFoundError:
        return StageResult.not_found(NotFoundError(stage=NotFoundStage.NICKNAME))
    except FaceitLensError as e:
        return StageResult.failed(e)

    player_id = _player_id(payload)
    if player_id is None:
        return StageResult.not_found(NotFoundError(stage=NotFoundStage.GENERIC))
    return StageResult.found(player_id)


# =============================================================================
# Resolver
# =============================================================================


class IdentityResolver:
    """
    Resolves arbitrary user input to a FACEIT player_id.

    Example:
        >>> resolver = IdentityResolver(FACEITClient(api_key="..."))
        >>> player_id = asyncio.run(resolver.resolve("76561198012345678"))
    """

    def __init__(self, faceit: FACEITClient, steam: SteamClient | None = None):
        self.faceit = faceit
        self.steam = steam

    async def resolve(self, raw_query: str) -> str:
        """
        Resolve a raw query to a FACEIT player_id.

        Raises:
            InvalidInputError: Empty or contradictory input
            NotFoundError: Tagged with the stage that missed
            UpstreamAuthError / UpstreamRateLimitError / UpstreamError
        """
        parsed = parse_query(raw_query)
        steam_id = parsed.steam_id

        if parsed.vanity_handle:
            vanity = await resolve_vanity_stage(self.steam, parsed.vanity_handle)
            if vanity.outcome is StageOutcome.ERROR:
                raise vanity.error  # type: ignore[misc]
            if vanity.outcome is StageOutcome.FOUND:
                steam_id = vanity.value

        if steam_id:
            logger.debug(f"Looking up FACEIT player by Steam ID {steam_id}")
            result = await lookup_platform_stage(self.faceit, steam_id)
        else:
            logger.debug(f"Looking up FACEIT player by nickname '{parsed.text}'")
            result = await lookup_nickname_stage(self.faceit, parsed.text)

        return result.unwrap()
