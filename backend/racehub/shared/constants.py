"""
Shared enums and constants.

Single source of truth for the string codes stored in the database
and exchanged with providers.
"""

from enum import Enum


class Gender(str, Enum):
    """Normalized runner gender."""
    MALE = "M"
    FEMALE = "F"
    NON_BINARY = "NB"


class RaceDistance(str, Enum):
    """Standard race distances."""
    MARATHON = "marathon"
    HALF_MARATHON = "half-marathon"
    TEN_MILE = "10-mile"
    TEN_K = "10k"
    FIVE_K = "5k"
    OTHER = "other"


# Distance in miles for the standard distances
DISTANCE_MILES: dict[RaceDistance, float] = {
    RaceDistance.MARATHON: 26.2,
    RaceDistance.HALF_MARATHON: 13.1,
    RaceDistance.TEN_MILE: 10.0,
    RaceDistance.TEN_K: 6.2,
    RaceDistance.FIVE_K: 3.1,
}


class MatchStatus(str, Enum):
    """
    Status of a RunnerMatch audit record.

    - AUTO_MATCHED: linked without review
    - APPROVED: linked, result flagged for review (or approved by admin)
    - PENDING: ambiguous, waiting for admin
    - REJECTED: admin rejected the candidate
    """
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    AUTO_MATCHED = "auto_matched"


class ScoringSystem(str, Enum):
    """How a series aggregates results. Only POINTS is implemented."""
    POINTS = "points"
    TIME = "time"
    PLACEMENT = "placement"


# Similarity weights (sum to 100)
NAME_WEIGHT = 40
AGE_WEIGHT = 25
GENDER_WEIGHT = 15
LOCATION_WEIGHT = 20
CITY_POINTS = 15
STATE_POINTS = 5

# Age difference (years) -> points
AGE_POINTS: dict[int, int] = {
    0: 25,
    1: 20,
    2: 15,
}
AGE_NEAR_MAX_DIFF = 5
AGE_NEAR_POINTS = 10

# Leaderboard age group label -> inclusive age range
AGE_GROUPS: dict[str, tuple[int, int]] = {
    "18-29": (18, 29),
    "30-39": (30, 39),
    "40-49": (40, 49),
    "50-59": (50, 59),
    "60+": (60, 120),
}
