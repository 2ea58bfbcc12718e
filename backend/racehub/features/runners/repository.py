"""
Runner repositories.

Data access layer for Runner and RunnerMatch models, plus the
SqlRunnerStore adapter the matching engine talks to.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from racehub.shared.constants import MatchStatus
from racehub.shared.repository import BaseRepository
from .models import Runner, RunnerMatch


class RunnerRepository(BaseRepository[Runner]):
    """Repository for Runner operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Runner)

    async def add_alternate_name(self, runner: Runner, name: str) -> Runner:
        """
        Record a name variant seen for this runner.

        No-op if the exact string is already known.
        """
        known = list(runner.alternate_names or [])
        if name in known:
            return runner
        # Reassign so the JSON column is flagged dirty
        return await self.update(runner, alternate_names=known + [name])

    async def set_verified(self, runner: Runner, verified: bool = True) -> Runner:
        return await self.update(runner, verified=verified)


class RunnerMatchRepository(BaseRepository[RunnerMatch]):
    """Repository for RunnerMatch audit records."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, RunnerMatch)

    async def get_pending(self, limit: int = 100) -> list[RunnerMatch]:
        """
        Get matches waiting for review, oldest first.

        Args:
            limit: Maximum records to return
        """
        result = await self.db.execute(
            select(RunnerMatch)
            .where(RunnerMatch.status == MatchStatus.PENDING.value)
            .order_by(RunnerMatch.created_at, RunnerMatch.id)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_for_source(self, source_provider: str, source_race_id: str) -> list[RunnerMatch]:
        return await self.get_all(
            source_provider=source_provider,
            source_race_id=source_race_id,
        )

    async def mark_reviewed(
        self,
        match: RunnerMatch,
        status: MatchStatus,
        reviewed_by: str,
    ) -> RunnerMatch:
        """
        Apply the single approve/reject transition.

        Args:
            match: Match to update
            status: APPROVED or REJECTED
            reviewed_by: Reviewer identifier
        """
        return await self.update(
            match,
            status=status.value,
            reviewed_by=reviewed_by,
            reviewed_at=datetime.utcnow(),
        )


class SqlRunnerStore:
    """
    Persistence collaborator for RunnerMatchingService backed by SQLAlchemy.

    All writes go through the caller's session; commit() makes them
    visible to other sessions.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.runners = RunnerRepository(db)
        self.matches = RunnerMatchRepository(db)

    async def get_all_runners(self) -> list[Runner]:
        return await self.runners.get_all()

    async def create_runner(self, data: dict[str, Any]) -> Runner:
        return await self.runners.create(**data)

    async def create_runner_match(self, data: dict[str, Any]) -> RunnerMatch:
        return await self.matches.create(**data)

    async def add_alternate_name(self, runner: Runner, name: str) -> Runner:
        return await self.runners.add_alternate_name(runner, name)

    async def commit(self) -> None:
        await self.db.commit()
