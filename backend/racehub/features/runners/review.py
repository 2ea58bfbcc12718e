"""
Admin review workflow for match decisions.

Approve/reject only records the reviewer's verdict on the RunnerMatch.
Result rows linked during import are left as they are.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from racehub.config import settings
from racehub.features.races.models import Result
from racehub.shared.constants import MatchStatus
from racehub.shared.errors import MatchAlreadyReviewedError, RunnerMatchNotFoundError

from . import similarity
from .models import Runner, RunnerMatch
from .repository import RunnerMatchRepository, RunnerRepository

logger = logging.getLogger(__name__)


@dataclass
class DuplicatePair:
    """Two existing runners that score as the same person."""

    runner: Runner
    duplicate: Runner
    score: int
    reasons: list[str] = field(default_factory=list)


def find_potential_duplicates(
    runners: list[Runner],
    min_score: int | None = None,
) -> list[DuplicatePair]:
    """
    Pair up runners whose mutual score reaches min_score.

    Each unordered pair is reported once, best score first. O(n^2).
    """
    threshold = settings.min_match_threshold if min_score is None else min_score
    pairs: list[DuplicatePair] = []
    for i, runner in enumerate(runners):
        for other in runners[i + 1:]:
            score = similarity.score(runner, other)
            if score >= threshold:
                pairs.append(
                    DuplicatePair(
                        runner=runner,
                        duplicate=other,
                        score=score,
                        reasons=similarity.reasons(runner, other),
                    )
                )
    pairs.sort(key=lambda p: p.score, reverse=True)
    return pairs


class RunnerReviewService:
    """Review queue operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.matches = RunnerMatchRepository(db)
        self.runners = RunnerRepository(db)

    async def approve_match(self, match_id: int, reviewed_by: str) -> RunnerMatch:
        return await self._review(match_id, MatchStatus.APPROVED, reviewed_by)

    async def reject_match(self, match_id: int, reviewed_by: str) -> RunnerMatch:
        return await self._review(match_id, MatchStatus.REJECTED, reviewed_by)

    async def _review(
        self,
        match_id: int,
        status: MatchStatus,
        reviewed_by: str,
    ) -> RunnerMatch:
        """
        Apply the one allowed transition to a RunnerMatch.

        Raises:
            RunnerMatchNotFoundError: unknown match_id
            MatchAlreadyReviewedError: a reviewer already acted on it
        """
        match = await self.matches.get_by_id(match_id)
        if match is None:
            raise RunnerMatchNotFoundError(match_id)
        if match.is_reviewed or match.status == MatchStatus.REJECTED.value:
            raise MatchAlreadyReviewedError(match_id, match.status)

        match = await self.matches.mark_reviewed(match, status, reviewed_by)
        await self.db.commit()
        logger.info(f"RunnerMatch {match_id} {status.value} by {reviewed_by}")
        return match

    async def list_pending_matches(self, limit: int = 100) -> list[RunnerMatch]:
        return await self.matches.get_pending(limit=limit)

    async def list_results_needing_review(self, limit: int = 100) -> list[Result]:
        """Results flagged during import, newest first."""
        result = await self.db.execute(
            select(Result)
            .where(Result.needs_review == True)  # noqa: E712
            .order_by(Result.imported_at.desc(), Result.id.desc())
            .limit(limit)
        )
        return list(result.unique().scalars().all())

    async def find_potential_duplicates(self, min_score: int | None = None) -> list[DuplicatePair]:
        runners = await self.runners.get_all()
        return find_potential_duplicates(runners, min_score)
