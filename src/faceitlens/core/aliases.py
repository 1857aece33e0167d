"""
Ordered alias resolution for label-keyed stat dictionaries.

FACEIT returns statistics as {"Human Readable Label": value} mappings whose
labels are not stable across players, endpoints or time. Each semantic metric
is therefore declared once here as a StatAlias: an ordered list of known
labels, optionally followed by a fuzzy key predicate.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


@dataclass(frozen=True)
class StatAlias:
    """A metric known under several labels, tried in priority order."""

    name: str
    labels: tuple[str, ...]
    fuzzy: Callable[[str], bool] | None = None

    def find_key(self, stats: Mapping[str, Any] | None) -> str | None:
        """Return the first label holding a non-blank value, or None."""
        if not stats:
            return None
        for label in self.labels:
            if not _is_blank(stats.get(label)):
                return label
        if self.fuzzy is not None:
            for key, value in stats.items():
                if isinstance(key, str) and self.fuzzy(key.lower()) and not _is_blank(value):
                    return key
        return None

    def lookup(self, stats: Mapping[str, Any] | None, default: Any = None) -> Any:
        """Return the value under the highest-priority label present."""
        key = self.find_key(stats)
        if key is None:
            return default
        return stats[key]  # type: ignore[index]

    def present(self, stats: Mapping[str, Any] | None) -> bool:
        """True when any declared label exists as a key, even with a blank value."""
        if not stats:
            return False
        return any(label in stats for label in self.labels)


def _looks_like_adr(key: str) -> bool:
    return "damage" in key and ("round" in key or "adr" in key)


# =============================================================================
# Lifetime stats (GET /players/{id}/stats/cs2 -> "lifetime")
# =============================================================================

LIFETIME_ADR = StatAlias(
    "adr",
    (
        "Average Damage per Round",
        "Average Damage",
        "ADR",
        "Average Damage/Round",
    ),
    fuzzy=_looks_like_adr,
)
LIFETIME_KD = StatAlias("kd", ("Average K/D Ratio", "K/D Ratio"))
LIFETIME_HEADSHOTS = StatAlias("headshot", ("Average Headshots %", "Headshots %"))
LIFETIME_MATCHES = StatAlias("matches", ("Matches",))
LIFETIME_WINS = StatAlias("wins", ("Wins",))
LIFETIME_WIN_RATE = StatAlias("win_rate", ("Win Rate %",))
LIFETIME_LONGEST_STREAK = StatAlias("longest_win_streak", ("Longest Win Streak",))

# =============================================================================
# Per-match stats (GET /players/{id}/games/cs2/stats -> items[].stats)
# =============================================================================

MATCH_KILLS = StatAlias("kills", ("Kills",))
MATCH_DEATHS = StatAlias("deaths", ("Deaths",))
MATCH_ROUNDS = StatAlias("rounds", ("Rounds",))
MATCH_ADR = StatAlias("adr", ("ADR",))
MATCH_DAMAGE = StatAlias("damage", ("Damage",))
MATCH_RESULT = StatAlias("result", ("Result",))
MATCH_HEADSHOTS = StatAlias("headshots", ("Headshots",))
MATCH_HEADSHOT_PCT = StatAlias("headshot_pct", ("Headshots %",))
