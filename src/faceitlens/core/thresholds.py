"""
Reference values for CS2 FACEIT statistics.

Used by the presentation layer to colour a stat as above, at or below the
typical FACEIT level.
"""

import re
from typing import Literal

Indicator = Literal["good", "average", "bad"]
StatKind = Literal["kd", "headshot", "winRate", "elo", "adr"]

STATS_THRESHOLDS: dict[str, dict[str, float]] = {
    "kd": {"good": 1.1, "average": 0.95, "bad": 0.9},
    "headshot": {"good": 50, "average": 40, "bad": 35},  # %
    "winRate": {"good": 55, "average": 50, "bad": 45},  # %
    "elo": {"good": 2000, "average": 1500, "bad": 1000},
    "adr": {"good": 85, "average": 75, "bad": 70},
}

_LEADING_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def get_stat_indicator(value: float, kind: StatKind) -> Indicator:
    """Classify a value against the thresholds for its stat kind."""
    thresholds = STATS_THRESHOLDS[kind]

    if value >= thresholds["good"]:
        return "good"
    if value >= thresholds["average"]:
        return "average"
    return "bad"


def format_stat_value(value: str | float | int) -> float:
    """Coerce a displayed stat ("1,15", "48%", 0.98) to a float."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    cleaned = re.sub(r"[^\d.,]", "", str(value)).replace(",", ".", 1)
    match = _LEADING_NUMBER.match(cleaned)
    return float(match.group(0)) if match else 0.0
