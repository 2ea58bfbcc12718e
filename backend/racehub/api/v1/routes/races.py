"""
Race and Result API Routes

Fastest-times leaderboard, races and their results.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from racehub.db.session import get_async_db
from racehub.features.races.schemas import (
    LeaderboardEntryResponse,
    RaceResponse,
    RaceResultResponse,
    ResultResponse,
    RunnerResultResponse,
)
from racehub.features.races.service import ResultQueryService
from racehub.features.runners.schemas import RunnerResponse
from racehub.shared.constants import Gender, RaceDistance
from racehub.shared.errors import RaceNotFoundError, RunnerNotFoundError

router = APIRouter()


@router.get("/leaderboard", response_model=list[LeaderboardEntryResponse])
async def get_leaderboard(
    distance: RaceDistance | None = Query(default=None),
    gender: Gender | None = Query(default=None),
    age_group: str | None = Query(default=None, description='"18-29", "30-39", "40-49", "50-59" or "60+"'),
    search: str | None = Query(default=None),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_async_db),
):
    """Fastest finish times across all races."""
    results = await ResultQueryService(db).leaderboard(
        distance=distance.value if distance else None,
        gender=gender.value if gender else None,
        age_group=age_group,
        search=search,
        limit=limit,
        offset=offset,
    )
    return [
        LeaderboardEntryResponse(
            id=r.id,
            runner=RunnerResponse.model_validate(r.runner),
            race=RaceResponse.model_validate(r.race),
            result=ResultResponse.model_validate(r),
        )
        for r in results
    ]


@router.get("/races", response_model=list[RaceResponse])
async def list_races(db: AsyncSession = Depends(get_async_db)):
    """All races, newest first."""
    return await ResultQueryService(db).list_races()


@router.get("/races/{race_id}", response_model=RaceResponse)
async def get_race(
    race_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    try:
        return await ResultQueryService(db).get_race(race_id)
    except RaceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/results/race/{race_id}", response_model=list[RaceResultResponse])
async def get_race_results(
    race_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    """Results of one race by overall place."""
    try:
        return await ResultQueryService(db).get_race_results(race_id)
    except RaceNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/results/runner/{runner_id}", response_model=list[RunnerResultResponse])
async def get_runner_results(
    runner_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    """Results of one runner, most recent race first."""
    try:
        return await ResultQueryService(db).get_runner_results(runner_id)
    except RunnerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
