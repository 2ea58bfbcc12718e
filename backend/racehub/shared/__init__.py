"""
Shared utilities (NOT business logic).

Usage:
    from racehub.shared import clean_name, parse_finish_time
    from racehub.shared.constants import MatchStatus
"""
from .normalize import (
    clean_name,
    clean_location,
    display_name,
    normalize_gender,
    normalize_state,
    parse_location_city,
    parse_location_state,
)
from .formatters import parse_finish_time, format_time
from .constants import (
    Gender,
    RaceDistance,
    MatchStatus,
    ScoringSystem,
)

__all__ = [
    # Normalization
    "clean_name",
    "clean_location",
    "display_name",
    "normalize_gender",
    "normalize_state",
    "parse_location_city",
    "parse_location_state",
    # Formatting
    "parse_finish_time",
    "format_time",
    # Constants
    "Gender",
    "RaceDistance",
    "MatchStatus",
    "ScoringSystem",
]
