"""
Runner schemas.

Pydantic models for provider input and API responses.
"""
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from racehub.shared.errors import InvalidRawResultError


# Provider column aliases -> RawRunnerData field
PROVIDER_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("name", "runner_name"),
    "gender": ("gender", "sex"),
    "finish_time": ("finish_time", "finishTime", "time"),
    "overall_place": ("overall_place", "place"),
    "source_result_id": ("source_result_id", "id"),
}


class RawRunnerData(BaseModel):
    """
    One provider result before identity resolution.

    Provider-specific keys are kept as extra fields and end up in the
    RunnerMatch audit snapshot untouched.
    """
    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    finish_time: str = Field(..., min_length=1)
    age: Optional[int] = None
    gender: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    location: Optional[str] = None  # "City, ST" from some providers
    email: Optional[str] = None

    # Placement and provenance (import only)
    overall_place: Optional[int] = None
    gender_place: Optional[int] = None
    age_group_place: Optional[int] = None
    source_result_id: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("age", "overall_place", "gender_place", "age_group_place", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Providers send "" for unknown numbers."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("age")
    @classmethod
    def positive_age(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            return None
        return v

    @field_validator("source_result_id", mode="before")
    @classmethod
    def id_to_str(cls, v):
        if v is None:
            return None
        return str(v)

    @classmethod
    def from_provider_row(cls, row: dict[str, Any]) -> "RawRunnerData":
        """
        Build from a provider row, resolving the known column aliases.

        Raises:
            InvalidRawResultError: required fields missing or invalid
        """
        data = dict(row)
        for field_name, aliases in PROVIDER_ALIASES.items():
            if data.get(field_name) not in (None, ""):
                continue
            for alias in aliases:
                if data.get(alias) not in (None, ""):
                    data[field_name] = data[alias]
                    break
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidRawResultError(
                f"invalid result for {data.get('name')!r}: {problems}"
            ) from e

    def snapshot(self) -> dict[str, Any]:
        """JSON-safe copy for the audit log."""
        return self.model_dump(mode="json", exclude_none=True)


class MatchRequest(BaseModel):
    """Request to resolve a single raw result."""
    raw_runner_data: dict[str, Any]
    source_provider: str
    source_race_id: str


class RunnerResponse(BaseModel):
    """Runner as returned by the API."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    alternate_names: List[str] = []
    gender: str
    age: Optional[int] = None
    city: Optional[str] = None
    state: Optional[str] = None
    verified: bool = False
    matching_confidence: int = 100


class MatchResponse(BaseModel):
    """Outcome of resolving a raw result."""
    runner: RunnerResponse
    match_score: int
    needs_review: bool


class RunnerMatchResponse(BaseModel):
    """RunnerMatch audit record."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    candidate_runner_id: Optional[int] = None
    raw_runner_data: dict[str, Any]
    match_score: int
    match_reasons: List[str] = []
    status: str
    source_provider: str
    source_race_id: str
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ReviewRequest(BaseModel):
    """Approve / reject body."""
    reviewed_by: str = Field(..., min_length=1)


class DuplicatePairResponse(BaseModel):
    """Two existing runners that look like the same person."""
    runner: RunnerResponse
    duplicate: RunnerResponse
    score: int
    reasons: List[str] = []
