"""
Review API Routes

Admin review queue: pending matches, flagged results, approve/reject.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from racehub.db.session import get_async_db
from racehub.features.races.schemas import ResultReviewResponse
from racehub.features.runners.review import RunnerReviewService
from racehub.features.runners.schemas import ReviewRequest, RunnerMatchResponse
from racehub.shared.errors import MatchAlreadyReviewedError, RunnerMatchNotFoundError

router = APIRouter()


@router.get("/runner-matches", response_model=list[RunnerMatchResponse])
async def list_pending_matches(
    limit: int = Query(default=100, ge=1, le=1000),
    db: AsyncSession = Depends(get_async_db),
):
    """Matches waiting for a reviewer."""
    return await RunnerReviewService(db).list_pending_matches(limit=limit)


@router.get("/runner-reviews", response_model=list[ResultReviewResponse])
async def list_results_needing_review(
    limit: int = Query(default=100, ge=1, le=1000),
    db: AsyncSession = Depends(get_async_db),
):
    """Imported results flagged for review."""
    return await RunnerReviewService(db).list_results_needing_review(limit=limit)


@router.patch("/runner-matches/{match_id}/approve", response_model=RunnerMatchResponse)
async def approve_match(
    match_id: int,
    request: ReviewRequest,
    db: AsyncSession = Depends(get_async_db),
):
    try:
        return await RunnerReviewService(db).approve_match(match_id, request.reviewed_by)
    except RunnerMatchNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except MatchAlreadyReviewedError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.patch("/runner-matches/{match_id}/reject", response_model=RunnerMatchResponse)
async def reject_match(
    match_id: int,
    request: ReviewRequest,
    db: AsyncSession = Depends(get_async_db),
):
    try:
        return await RunnerReviewService(db).reject_match(match_id, request.reviewed_by)
    except RunnerMatchNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except MatchAlreadyReviewedError as e:
        raise HTTPException(status_code=409, detail=str(e))
