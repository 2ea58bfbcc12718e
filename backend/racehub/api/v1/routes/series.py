"""
Race Series API Routes

Series administration and leaderboards.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from racehub.db.session import get_async_db
from racehub.features.runners.schemas import RunnerResponse
from racehub.features.series.schemas import (
    LeaderboardResponse,
    SeriesCreate,
    SeriesRaceAdd,
    SeriesResponse,
    StandingResultSchema,
    StandingSchema,
)
from racehub.features.series.service import SeriesService
from racehub.shared.errors import (
    RaceMissingError,
    RaceNotFoundError,
    RunnerNotFoundError,
    ScoringSystemNotImplementedError,
    SeriesNotFoundError,
    SeriesRaceExistsError,
)

router = APIRouter()


@router.post("", response_model=SeriesResponse, status_code=201)
async def create_series(
    request: SeriesCreate,
    db: AsyncSession = Depends(get_async_db),
):
    data = request.model_dump()
    data["scoring_system"] = request.scoring_system.value
    return await SeriesService(db).create_series(**data)


@router.get("", response_model=list[SeriesResponse])
async def list_series(
    year: int | None = Query(default=None),
    db: AsyncSession = Depends(get_async_db),
):
    """Active series, optionally for one year."""
    return await SeriesService(db).list_active(year)


@router.post("/{series_id}/races/{race_id}", status_code=201)
async def add_series_race(
    series_id: int,
    race_id: int,
    request: SeriesRaceAdd | None = None,
    db: AsyncSession = Depends(get_async_db),
):
    multiplier = request.points_multiplier if request else SeriesRaceAdd().points_multiplier
    try:
        row = await SeriesService(db).add_race(series_id, race_id, multiplier)
    except (SeriesNotFoundError, RaceNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SeriesRaceExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {
        "series_id": row.series_id,
        "race_id": row.race_id,
        "series_race_number": row.series_race_number,
        "points_multiplier": str(row.points_multiplier),
    }


@router.delete("/{series_id}/races/{race_id}", status_code=204)
async def remove_series_race(
    series_id: int,
    race_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    try:
        removed = await SeriesService(db).remove_race(series_id, race_id)
    except SeriesNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if not removed:
        raise HTTPException(status_code=404, detail=f"Race {race_id} is not in series {series_id}")


@router.get("/{series_id}/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    series_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    """Series standings."""
    try:
        leaderboard = await SeriesService(db).get_leaderboard(series_id)
    except (SeriesNotFoundError, RaceMissingError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ScoringSystemNotImplementedError as e:
        raise HTTPException(status_code=501, detail=str(e))

    standings = [
        StandingSchema(
            rank=s.rank,
            runner=RunnerResponse.model_validate(s.runner) if s.runner is not None else None,
            runner_id=s.runner_id,
            total_points=s.total_points,
            average_points=round(s.average_points, 1),
            races_completed=s.races_completed,
            best_race_points=s.best_race_points,
            results=[
                StandingResultSchema(
                    race_id=scored.race_id,
                    result_id=scored.result.id,
                    finish_time=scored.result.finish_time,
                    overall_place=scored.result.overall_place,
                    points=scored.points,
                )
                for scored in s.results
            ],
        )
        for s in leaderboard.standings
    ]
    return LeaderboardResponse(
        series=SeriesResponse.model_validate(leaderboard.series),
        standings=standings,
        total_participants=leaderboard.total_participants,
    )


@router.post("/{series_id}/participants/{runner_id}", status_code=201)
async def add_series_participant(
    series_id: int,
    runner_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    """Allow a runner into a private series."""
    try:
        await SeriesService(db).add_participant(series_id, runner_id)
    except (SeriesNotFoundError, RunnerNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"series_id": series_id, "runner_id": runner_id}


@router.delete("/{series_id}/participants/{runner_id}", status_code=204)
async def remove_series_participant(
    series_id: int,
    runner_id: int,
    db: AsyncSession = Depends(get_async_db),
):
    try:
        removed = await SeriesService(db).remove_participant(series_id, runner_id)
    except SeriesNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if not removed:
        raise HTTPException(status_code=404, detail=f"Runner {runner_id} is not in series {series_id}")
