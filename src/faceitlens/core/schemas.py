"""
FaceitLens Data Contracts

Every structure that crosses the resolver / aggregator / presentation
boundary is defined here.

Producers: resolver.py, aggregator.py, history.py
Consumers: service.py, cli.py, api/
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from faceitlens.core.utils import parse_stat_number

# Raw per-match row as returned by FACEIT; stats live under "stats" when present
MatchRecord = dict[str, Any]


# ============================================================
# IDENTITY
# ============================================================


@dataclass(frozen=True)
class PlatformIdentifier:
    """A Steam ID64 or a vanity handle still needing resolution, never both."""

    steam_id: str | None = None
    vanity_handle: str | None = None

    def __post_init__(self) -> None:
        if (self.steam_id is None) == (self.vanity_handle is None):
            raise ValueError("PlatformIdentifier needs exactly one of steam_id or vanity_handle")

    @classmethod
    def from_steam_id(cls, steam_id: str) -> PlatformIdentifier:
        return cls(steam_id=steam_id)

    @classmethod
    def from_vanity(cls, handle: str) -> PlatformIdentifier:
        return cls(vanity_handle=handle)


@dataclass(frozen=True)
class ParsedQuery:
    """What the pure extraction stages found in a raw query."""

    text: str  # trimmed input, reused verbatim as the nickname fallback
    identifier: PlatformIdentifier | None = None

    @property
    def steam_id(self) -> str | None:
        return self.identifier.steam_id if self.identifier else None

    @property
    def vanity_handle(self) -> str | None:
        return self.identifier.vanity_handle if self.identifier else None


# ============================================================
# PROFILE & LIFETIME
# ============================================================


@dataclass
class GameInfo:
    """Per-game block of a FACEIT profile."""

    faceit_elo: int = 0
    skill_level: int = 0  # 1-10
    region: str = ""
    game_player_id: str = ""
    game_player_name: str = ""
    game_profile_id: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> GameInfo:
        return cls(
            faceit_elo=int(parse_stat_number(data.get("faceit_elo"))),
            skill_level=int(parse_stat_number(data.get("skill_level"))),
            region=data.get("region") or "",
            game_player_id=data.get("game_player_id") or "",
            game_player_name=data.get("game_player_name") or "",
            game_profile_id=data.get("game_profile_id") or "",
        )


@dataclass
class PlayerProfile:
    """FACEIT player profile information."""

    player_id: str
    nickname: str
    avatar: str = ""
    country: str = ""
    steam_id_64: str = ""
    faceit_url: str = ""
    games: dict[str, GameInfo] = field(default_factory=dict)

    @property
    def cs2(self) -> GameInfo | None:
        return self.games.get("cs2")

    @property
    def country_code(self) -> str | None:
        return self.country.upper() if self.country else None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class LifetimeStats:
    """Cumulative stats: label -> string value, plus per-map/mode segments."""

    lifetime: dict[str, Any] = field(default_factory=dict)
    segments: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Any) -> LifetimeStats:
        data = data if isinstance(data, dict) else {}
        lifetime = data.get("lifetime")
        segments = data.get("segments")
        return cls(
            lifetime=lifetime if isinstance(lifetime, dict) else {},
            segments=segments if isinstance(segments, list) else [],
        )


# ============================================================
# AGGREGATION
# ============================================================


@dataclass(frozen=True)
class AggregatedRecentStats:
    """Rates derived from the recent match list; values are unrounded."""

    matches: int = 0
    wins: int = 0
    win_rate: float = 0.0
    kd: float = 0.0
    headshot_percent: float = 0.0
    adr: float = 0.0
    avg_kills: float = 0.0
    avg_deaths: float = 0.0
    matches_with_stats: int = 0

    def to_display(self) -> dict[str, Any]:
        """Rounded values for rendering (K/D two decimals, the rest one)."""
        return {
            "matches": self.matches,
            "wins": self.wins,
            "kd": f"{self.kd:.2f}",
            "headshot": f"{self.headshot_percent:.1f}",
            "winRate": f"{self.win_rate:.1f}",
            "avgKills": f"{self.avg_kills:.1f}",
            "avgDeaths": f"{self.avg_deaths:.1f}",
            "adr": f"{self.adr:.1f}",
        }

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class PlayerStatsBundle:
    """Everything the presentation layer needs for one player."""

    player: PlayerProfile
    lifetime: LifetimeStats
    recent_aggregated: AggregatedRecentStats | None = None
    recent_raw: list[MatchRecord] = field(default_factory=list)
    adr: str | float | None = None  # lifetime ADR, or recent ADR as fallback
    map_segments: list[dict[str, Any]] = field(default_factory=list)
    other_segments: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "player": self.player.to_dict(),
            "games": {name: asdict(game) for name, game in self.player.games.items()},
            "lifetime": self.lifetime.lifetime,
            "segments": self.lifetime.segments,
            "mapSegments": self.map_segments,
            "otherSegments": self.other_segments,
            "adr": self.adr,
            "recentAggregated": (
                self.recent_aggregated.to_dict() if self.recent_aggregated else None
            ),
            "recentDisplay": (
                self.recent_aggregated.to_display() if self.recent_aggregated else None
            ),
            "recentMatchesStats": self.recent_raw,
        }


# ============================================================
# HISTORY
# ============================================================


@dataclass
class SearchHistoryEntry:
    """A successful lookup remembered for the history sidebar."""

    input: str
    timestamp: int  # epoch milliseconds
    player_name: str | None = None
    steam_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "input": self.input,
            "timestamp": self.timestamp,
            "playerName": self.player_name,
            "steamId": self.steam_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SearchHistoryEntry:
        return cls(
            input=str(data["input"]),
            timestamp=int(data.get("timestamp") or 0),
            player_name=data.get("playerName"),
            steam_id=data.get("steamId"),
        )
