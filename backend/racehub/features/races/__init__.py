"""
Races module: races, results, the provider import pipeline and result queries.

Usage:
    from racehub.features.races import ResultImportService, Race, Result
"""

from .models import Race, Result
from .repository import RaceRepository, ResultRepository
from .imports import ImportRecordError, ImportReport, ResultImportService
from .stats import RunnerStats, calculate_runner_stats
from .service import ResultQueryService, RunnerProfile

__all__ = [
    "Race",
    "Result",
    "RaceRepository",
    "ResultRepository",
    "ImportRecordError",
    "ImportReport",
    "ResultImportService",
    "RunnerStats",
    "calculate_runner_stats",
    "ResultQueryService",
    "RunnerProfile",
]
