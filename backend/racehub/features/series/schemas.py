"""
Series schemas.

Pydantic models for API request/response.
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from racehub.features.runners.schemas import RunnerResponse
from racehub.shared.constants import ScoringSystem


class SeriesCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    year: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    scoring_system: ScoringSystem = ScoringSystem.POINTS
    minimum_races: int = Field(default=2, ge=1, le=10)
    max_races_for_score: Optional[int] = Field(default=None, ge=1)
    is_active: bool = True
    is_private: bool = False


class SeriesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    year: int
    scoring_system: str
    minimum_races: int
    max_races_for_score: Optional[int] = None
    is_active: bool = True
    is_private: bool = False


class SeriesRaceAdd(BaseModel):
    points_multiplier: Decimal = Field(default=Decimal("1.00"), gt=0)


class StandingResultSchema(BaseModel):
    race_id: int
    result_id: int
    finish_time: str
    overall_place: Optional[int] = None
    points: int


class StandingSchema(BaseModel):
    rank: int
    runner: Optional[RunnerResponse] = None
    runner_id: int
    total_points: int
    average_points: float
    races_completed: int
    best_race_points: int
    results: List[StandingResultSchema] = []


class LeaderboardResponse(BaseModel):
    series: SeriesResponse
    standings: List[StandingSchema] = []
    total_participants: int
