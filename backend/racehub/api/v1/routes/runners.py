"""
Runner API Routes

Runner listing and profiles, single-record matching and duplicate detection.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from racehub.db.session import get_async_db
from racehub.features.races.schemas import (
    RunnerPageResponse,
    RunnerProfileResponse,
    RunnerResultResponse,
    RunnerStatsResponse,
)
from racehub.features.races.service import ResultQueryService
from racehub.features.runners.matching import RunnerMatchingService
from racehub.features.runners.repository import SqlRunnerStore
from racehub.features.runners.review import RunnerReviewService
from racehub.features.runners.schemas import (
    DuplicatePairResponse,
    MatchRequest,
    MatchResponse,
    RawRunnerData,
    RunnerResponse,
)
from racehub.shared.errors import InvalidRawResultError, RunnerNotFoundError

router = APIRouter()


@router.post("/runners/match", response_model=MatchResponse)
async def match_runner(
    request: MatchRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Resolve one raw result to a runner (creates the runner if needed)."""
    try:
        raw = RawRunnerData.from_provider_row(request.raw_runner_data)
    except InvalidRawResultError as e:
        raise HTTPException(status_code=422, detail=str(e))

    service = RunnerMatchingService(SqlRunnerStore(db))
    outcome = await service.resolve(raw, request.source_provider, request.source_race_id)
    return MatchResponse(
        runner=RunnerResponse.model_validate(outcome.runner),
        match_score=outcome.match_score,
        needs_review=outcome.needs_review,
    )


@router.get("/runners/duplicates", response_model=list[DuplicatePairResponse])
async def find_duplicates(
    min_score: int | None = Query(default=None, ge=0, le=100),
    db: AsyncSession = Depends(get_async_db),
):
    """Pairs of existing runners that look like the same person."""
    pairs = await RunnerReviewService(db).find_potential_duplicates(min_score)
    return [
        DuplicatePairResponse(
            runner=RunnerResponse.model_validate(p.runner),
            duplicate=RunnerResponse.model_validate(p.duplicate),
            score=p.score,
            reasons=p.reasons,
        )
        for p in pairs
    ]


@router.get("/runners", response_model=RunnerPageResponse)
async def list_runners(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_async_db),
):
    runners, total = await ResultQueryService(db).list_runners(limit=limit, offset=offset)
    return RunnerPageResponse(
        total=total,
        runners=[RunnerResponse.model_validate(r) for r in runners],
    )


@router.get("/runners/{runner_id}", response_model=RunnerProfileResponse)
async def get_runner_profile(
    runner_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    """Runner with marathon/half PRs, races this year and age group wins."""
    try:
        profile = await ResultQueryService(db).get_runner_profile(runner_id)
    except RunnerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return RunnerProfileResponse(
        runner=RunnerResponse.model_validate(profile.runner),
        stats=RunnerStatsResponse.model_validate(profile.stats),
        results=[RunnerResultResponse.model_validate(r) for r in profile.results],
    )
