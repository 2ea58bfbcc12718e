"""
Race series module: series membership, points and standings.

Usage:
    from racehub.features.series import SeriesService, compute_leaderboard
"""

from .models import RaceSeries, RaceSeriesRace, SeriesParticipant
from .scoring import (
    PointsRules,
    ScoredResult,
    SeriesLeaderboard,
    SeriesStanding,
    base_points,
    compute_leaderboard,
    result_points,
    size_bonus,
)
from .repository import (
    RaceSeriesRepository,
    RaceSeriesRaceRepository,
    SeriesParticipantRepository,
    SqlSeriesStore,
)
from .service import SeriesService

__all__ = [
    # Models
    "RaceSeries",
    "RaceSeriesRace",
    "SeriesParticipant",
    # Scoring
    "PointsRules",
    "ScoredResult",
    "SeriesLeaderboard",
    "SeriesStanding",
    "base_points",
    "compute_leaderboard",
    "result_points",
    "size_bonus",
    # Repositories
    "RaceSeriesRepository",
    "RaceSeriesRaceRepository",
    "SeriesParticipantRepository",
    "SqlSeriesStore",
    # Service
    "SeriesService",
]
