"""
Error taxonomy for player lookups.

Every failure the resolver, the aggregator or the upstream clients can raise
derives from FaceitLensError and carries a machine-readable ErrorKind, so the
presentation layer can branch on the kind while showing its own text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Machine-readable error categories exposed to the presentation layer."""

    INVALID_INPUT = "INVALID_INPUT"
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    UPSTREAM_AUTH = "UPSTREAM_AUTH"
    UPSTREAM_RATE_LIMIT = "UPSTREAM_RATE_LIMIT"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"


class NotFoundStage(str, Enum):
    """Resolution stage that failed to find the player."""

    PLATFORM_ID = "platform_id"  # Steam ID not linked to a FACEIT account
    NICKNAME = "nickname"
    VANITY = "vanity"  # Steam vanity handle did not resolve
    GENERIC = "generic"


class FaceitLensError(Exception):
    """Base class for lookup failures."""

    kind: ErrorKind = ErrorKind.UPSTREAM_ERROR
    default_message = "Failed to fetch player statistics"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(FaceitLensError):
    """The query is empty or cannot be interpreted."""

    kind = ErrorKind.INVALID_INPUT
    default_message = "Invalid input"


class NotFoundError(FaceitLensError):
    """The player does not exist at the stage that looked for it."""

    kind = ErrorKind.PLAYER_NOT_FOUND

    _STAGE_MESSAGES = {
        NotFoundStage.PLATFORM_ID: "No FACEIT player is linked to this Steam ID",
        NotFoundStage.NICKNAME: "No FACEIT player with this nickname",
        NotFoundStage.VANITY: "Steam vanity URL could not be resolved",
        NotFoundStage.GENERIC: "Player not found",
    }

    def __init__(self, message: str | None = None, stage: NotFoundStage = NotFoundStage.GENERIC):
        self.stage = stage
        super().__init__(message or self._STAGE_MESSAGES[stage])


class UpstreamAuthError(FaceitLensError):
    """Credentials for an upstream service are missing or rejected."""

    kind = ErrorKind.UPSTREAM_AUTH
    default_message = (
        "API authorization failed. Make sure FACEIT_API_KEY is set in the environment."
    )


class UpstreamRateLimitError(FaceitLensError):
    """The upstream service throttled the request."""

    kind = ErrorKind.UPSTREAM_RATE_LIMIT
    default_message = "API rate limit exceeded. Please try again later."


class UpstreamError(FaceitLensError):
    """Any other transport or service failure."""

    kind = ErrorKind.UPSTREAM_ERROR

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


def error_from_status(status_code: int, message: str | None = None) -> FaceitLensError:
    """Map an upstream HTTP status to the matching exception."""
    if status_code in (401, 403):
        return UpstreamAuthError()
    if status_code == 404:
        return NotFoundError(message)
    if status_code == 429:
        return UpstreamRateLimitError()
    return UpstreamError(message, status_code=status_code)


@dataclass(frozen=True)
class ErrorResult:
    """Failure outcome handed to the presentation layer."""

    kind: ErrorKind
    message: str
    status_code: int | None = None

    @classmethod
    def from_exception(cls, exc: FaceitLensError) -> ErrorResult:
        return cls(
            kind=exc.kind,
            message=exc.message,
            status_code=getattr(exc, "status_code", None),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "error": self.message}
