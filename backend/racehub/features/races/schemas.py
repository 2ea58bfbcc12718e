"""
Race and import schemas.

Pydantic models for API request/response.
"""
from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from racehub.features.runners.schemas import RunnerResponse
from racehub.shared.constants import RaceDistance


class RaceCreate(BaseModel):
    """Race metadata sent with an import batch."""
    name: str = Field(..., min_length=1)
    date: date
    distance: RaceDistance = RaceDistance.OTHER
    distance_miles: Optional[float] = None
    city: Optional[str] = None
    state: Optional[str] = None
    results_url: Optional[str] = None


class RaceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    date: date
    distance: str
    distance_miles: Optional[float] = None
    city: Optional[str] = None
    state: Optional[str] = None
    total_finishers: int = 0
    average_time: Optional[str] = None


class ImportRequest(BaseModel):
    """Batch of provider rows for one race."""
    race: RaceCreate
    results: List[dict[str, Any]]
    source_provider: str = Field(..., min_length=1)


class ImportErrorResponse(BaseModel):
    index: int
    raw_name: Optional[str] = None
    source_provider: str
    message: str


class ImportStatsResponse(BaseModel):
    imported: int
    matched: int
    new_runners: int
    needs_review: int
    errors: List[ImportErrorResponse] = []


class ImportResponse(BaseModel):
    race: RaceResponse
    import_results: ImportStatsResponse


class ResultReviewResponse(BaseModel):
    """Result flagged for review, with provenance."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    runner_id: int
    race_id: int
    finish_time: str
    overall_place: Optional[int] = None
    gender_place: Optional[int] = None
    age_group_place: Optional[int] = None
    matching_score: int
    needs_review: bool
    raw_runner_name: Optional[str] = None
    raw_location: Optional[str] = None
    raw_age: Optional[int] = None
    source_provider: Optional[str] = None
    imported_at: Optional[datetime] = None


class ResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    runner_id: int
    race_id: int
    finish_time: str
    overall_place: Optional[int] = None
    gender_place: Optional[int] = None
    age_group_place: Optional[int] = None
    notes: Optional[str] = None
    matching_score: int = 100
    needs_review: bool = False


class RaceResultResponse(ResultResponse):
    """Result in a race listing, with its runner."""
    runner: RunnerResponse


class RunnerResultResponse(ResultResponse):
    """Result in a runner's history, with its race."""
    race: RaceResponse


class LeaderboardEntryResponse(BaseModel):
    id: int
    runner: RunnerResponse
    race: RaceResponse
    result: ResultResponse


class RunnerPageResponse(BaseModel):
    total: int
    runners: List[RunnerResponse]


class RunnerStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    marathon_pr: Optional[str] = None
    half_marathon_pr: Optional[str] = None
    races_this_year: int = 0
    age_group_wins: int = 0
    total_races: int = 0


class RunnerProfileResponse(BaseModel):
    runner: RunnerResponse
    stats: RunnerStatsResponse
    results: List[RunnerResultResponse] = []
