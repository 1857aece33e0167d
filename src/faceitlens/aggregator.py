"""
Stats aggregation for a resolved FACEIT player.

Fetches profile, lifetime stats and recent matches, then folds the recent
match list into summary rates (K/D, HS%, ADR, win rate, average K and D).

Recent matches are enrichment: if both the per-game stats endpoint and the
history endpoint fail, aggregation continues with an empty list.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from faceitlens.core.aliases import (
    LIFETIME_ADR,
    MATCH_ADR,
    MATCH_DAMAGE,
    MATCH_DEATHS,
    MATCH_HEADSHOT_PCT,
    MATCH_HEADSHOTS,
    MATCH_KILLS,
    MATCH_RESULT,
    MATCH_ROUNDS,
)
from faceitlens.core.errors import FaceitLensError
from faceitlens.core.schemas import (
    AggregatedRecentStats,
    GameInfo,
    LifetimeStats,
    MatchRecord,
    PlayerProfile,
    PlayerStatsBundle,
)
from faceitlens.core.utils import parse_stat_number, safe_divide, timed
from faceitlens.integrations.faceit import FACEITClient

logger = logging.getLogger(__name__)

LANGUAGE_PLACEHOLDER = "{lang}"
DEFAULT_PROFILE_URL = "https://www.faceit.com/{lang}/players/{nickname}"

# Segment labels containing one of these are map segments
MAP_KEYWORDS = (
    "mirage",
    "dust",
    "inferno",
    "ancient",
    "anubis",
    "vertigo",
    "overpass",
    "nuke",
    "cache",
    "train",
)


# =============================================================================
# Folding
# =============================================================================


@dataclass
class _Totals:
    kills: float = 0.0
    deaths: float = 0.0
    headshots: float = 0.0
    headshot_eligible_kills: float = 0.0
    damage: float = 0.0
    rounds: float = 0.0
    wins: int = 0
    matches_with_stats: int = 0


def is_win(result: Any) -> bool:
    """Only the literal 1 (number or "1") counts as a win."""
    if isinstance(result, bool):
        return False
    return result == 1 or result == "1"


def _accumulate(totals: _Totals, stats: Mapping[str, Any]) -> None:
    """Add one match's stats block to the running totals."""
    kills = parse_stat_number(MATCH_KILLS.lookup(stats, "0"))
    deaths = parse_stat_number(MATCH_DEATHS.lookup(stats, "0"))
    rounds = parse_stat_number(MATCH_ROUNDS.lookup(stats, "0"))
    adr = parse_stat_number(MATCH_ADR.lookup(stats, "0"))
    damage = parse_stat_number(MATCH_DAMAGE.lookup(stats, "0"))

    if is_win(MATCH_RESULT.lookup(stats)):
        totals.wins += 1

    totals.kills += kills
    totals.deaths += deaths

    if adr > 0 and rounds > 0:
        totals.damage += adr * rounds
    elif damage > 0:
        totals.damage += damage
    totals.rounds += rounds or 1

    # Each policy adds kills to the HS denominator, independent of totals.kills
    if MATCH_HEADSHOT_PCT.present(stats):
        pct = parse_stat_number(MATCH_HEADSHOT_PCT.lookup(stats, "0"))
        totals.headshots += kills * pct / 100
    else:
        raw = str(MATCH_HEADSHOTS.lookup(stats, "0"))
        value = parse_stat_number(raw)
        if "%" in raw:
            totals.headshots += kills * value / 100
        else:
            totals.headshots += value
    totals.headshot_eligible_kills += kills


def fold_recent_matches(records: Iterable[MatchRecord]) -> AggregatedRecentStats:
    """
    Fold recent match records into summary rates.

    Rates are computed once over the summed totals. Records without a stats
    block count as played matches (win rate denominator) but not toward the
    average kills/deaths denominator.

    Args:
        records: Items from the recent matches endpoint

    Returns:
        AggregatedRecentStats with unrounded values
    """
    items = list(records)
    totals = _Totals()

    for item in items:
        stats = item.get("stats") if isinstance(item, Mapping) else None
        if not isinstance(stats, Mapping):
            continue
        totals.matches_with_stats += 1
        _accumulate(totals, stats)

    matches = len(items)
    return AggregatedRecentStats(
        matches=matches,
        wins=totals.wins,
        win_rate=safe_divide(totals.wins, matches) * 100,
        kd=safe_divide(totals.kills, totals.deaths, default=totals.kills),
        headshot_percent=safe_divide(totals.headshots, totals.headshot_eligible_kills) * 100,
        adr=safe_divide(totals.damage, totals.rounds),
        avg_kills=safe_divide(totals.kills, totals.matches_with_stats),
        avg_deaths=safe_divide(totals.deaths, totals.matches_with_stats),
        matches_with_stats=totals.matches_with_stats,
    )


def resolve_lifetime_adr(
    lifetime: Mapping[str, Any] | None, recent: AggregatedRecentStats | None
) -> str | float | None:
    """
    ADR to display: the lifetime value under any known label, unchanged.

    Falls back to the recent-match ADR only when recent matches exist; a
    lifetime value is never replaced.
    """
    value = LIFETIME_ADR.lookup(lifetime)
    if value is not None:
        return value
    if recent is not None and recent.matches > 0:
        return recent.adr
    return None


def split_segments(
    segments: Iterable[dict[str, Any]],
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Split lifetime segments into (map segments, everything else)."""
    maps: list[dict[str, Any]] = []
    others: list[dict[str, Any]] = []
    for segment in segments:
        label = str(segment.get("label") or "").lower()
        if label and any(keyword in label for keyword in MAP_KEYWORDS):
            maps.append(segment)
        else:
            others.append(segment)
    return maps, others


# =============================================================================
# Profile parsing
# =============================================================================


def normalize_profile_url(url: str | None, nickname: str, language: str) -> str:
    """Fill the {lang} placeholder FACEIT leaves in profile URLs."""
    url = url or DEFAULT_PROFILE_URL.replace("{nickname}", nickname)
    if LANGUAGE_PLACEHOLDER in url:
        url = url.replace(LANGUAGE_PLACEHOLDER, language)
    return url


def parse_profile(data: dict[str, Any], language: str = "en") -> PlayerProfile:
    """Parse player data from the profile endpoint."""
    games = data.get("games") if isinstance(data.get("games"), dict) else {}
    nickname = data.get("nickname") or ""

    return PlayerProfile(
        player_id=data.get("player_id") or "",
        nickname=nickname,
        avatar=data.get("avatar") or "",
        country=data.get("country") or "",
        steam_id_64=data.get("steam_id_64") or "",
        faceit_url=normalize_profile_url(data.get("faceit_url"), nickname, language),
        games={
            name: GameInfo.from_api(block)
            for name, block in games.items()
            if isinstance(block, dict)
        },
    )


# =============================================================================
# Aggregator
# =============================================================================


class StatsAggregator:
    """Builds a PlayerStatsBundle for a FACEIT player_id."""

    def __init__(
        self,
        faceit: FACEITClient,
        default_language: str = "en",
        max_match_limit: int = 100,
    ):
        self.faceit = faceit
        self.default_language = default_language
        self.max_match_limit = max_match_limit

    async def fetch_recent_matches(self, player_id: str, limit: int) -> list[MatchRecord]:
        """
        Recent match records: per-game stats first, match history second.

        The fallback only runs after the primary has failed. Both failing
        yields an empty list.
        """
        limit = min(limit, self.max_match_limit)
        try:
            return await self.faceit.fetch_match_stats(player_id, limit)
        except FaceitLensError as e:
            logger.warning(f"Failed to fetch recent matches stats: {e}")

        try:
            return await self.faceit.fetch_match_history(player_id, limit)
        except FaceitLensError as e:
            logger.warning(f"Failed to fetch recent matches (fallback): {e}")

        return []

    async def _fetch_required(self, player_id: str) -> tuple[Any, Any]:
        """Profile and lifetime stats, cancelling the sibling on first failure."""
        try:
            async with asyncio.TaskGroup() as group:
                profile = group.create_task(self.faceit.fetch_profile(player_id))
                lifetime = group.create_task(self.faceit.fetch_lifetime_stats(player_id))
        except ExceptionGroup as eg:
            # Surface the first domain error unwrapped
            raise eg.exceptions[0] from None
        return profile.result(), lifetime.result()

    @timed
    async def aggregate(
        self, player_id: str, recent_match_limit: int, language: str | None = None
    ) -> PlayerStatsBundle:
        """
        Fetch and aggregate everything for one player.

        Profile and lifetime stats are fetched concurrently and are both
        required; the first failure cancels the other fetch and propagates.

        Args:
            player_id: FACEIT player_id from the resolver
            recent_match_limit: Number of recent matches; 0 skips them
            language: Profile URL language, defaults to default_language

        Returns:
            PlayerStatsBundle
        """
        profile_data, lifetime_data = await self._fetch_required(player_id)

        recent_raw: list[MatchRecord] = []
        if recent_match_limit > 0:
            recent_raw = await self.fetch_recent_matches(player_id, recent_match_limit)

        player = parse_profile(
            profile_data if isinstance(profile_data, dict) else {},
            language or self.default_language,
        )
        lifetime = LifetimeStats.from_api(lifetime_data)
        recent = fold_recent_matches(recent_raw) if recent_raw else None
        map_segments, other_segments = split_segments(lifetime.segments)

        return PlayerStatsBundle(
            player=player,
            lifetime=lifetime,
            recent_aggregated=recent,
            recent_raw=recent_raw,
            adr=resolve_lifetime_adr(lifetime.lifetime, recent),
            map_segments=map_segments,
            other_segments=other_segments,
        )
