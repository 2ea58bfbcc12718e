"""
Race and result repositories.

Data access layer for Race and Result models.
"""

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from racehub.features.runners.models import Runner
from racehub.shared.formatters import format_time
from racehub.shared.repository import BaseRepository
from .models import Race, Result


class RaceRepository(BaseRepository[Race]):
    """Repository for Race operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Race)

    async def get_recent(self) -> list[Race]:
        """All races, newest first."""
        result = await self.db.execute(select(Race).order_by(Race.date.desc(), Race.id.desc()))
        return list(result.scalars().all())

    async def refresh_aggregates(self, race: Race) -> Race:
        """
        Recompute total_finishers and average_time from stored results.

        Args:
            race: Race to update

        Returns:
            Updated race
        """
        results = await ResultRepository(self.db).get_for_race(race.id)
        if not results:
            return await self.update(race, total_finishers=0, average_time=None)

        seconds = [r.finish_seconds for r in results]
        return await self.update(
            race,
            total_finishers=len(results),
            average_time=format_time(round(sum(seconds) / len(seconds))),
        )


class ResultRepository(BaseRepository[Result]):
    """Repository for Result operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Result)

    async def get_for_race(self, race_id: int) -> list[Result]:
        """Results of one race by overall place (unplaced last)."""
        result = await self.db.execute(
            select(Result)
            .where(Result.race_id == race_id)
            .order_by(Result.overall_place.is_(None), Result.overall_place, Result.id)
        )
        return list(result.unique().scalars().all())

    async def get_for_races(self, race_ids: Iterable[int]) -> list[Result]:
        """
        All results for a set of races.

        Args:
            race_ids: Race IDs

        Returns:
            Results ordered by race then ID
        """
        race_ids = list(race_ids)
        if not race_ids:
            return []
        result = await self.db.execute(
            select(Result)
            .where(Result.race_id.in_(race_ids))
            .order_by(Result.race_id, Result.id)
        )
        return list(result.unique().scalars().all())

    async def get_for_runner(self, runner_id: int) -> list[Result]:
        """Results of one runner, most recent race first."""
        result = await self.db.execute(
            select(Result)
            .join(Race, Result.race_id == Race.id)
            .where(Result.runner_id == runner_id)
            .order_by(Race.date.desc(), Result.id.desc())
        )
        return list(result.unique().scalars().all())

    async def search(
        self,
        distance: str | None = None,
        gender: str | None = None,
        age_range: tuple[int, int] | None = None,
    ) -> list[Result]:
        """
        Results filtered by race distance and runner gender/age.

        Args:
            distance: Race distance code ("marathon", "10k", ...)
            gender: Runner gender code ("M", "F", "NB")
            age_range: Inclusive runner age range; runners without an age are excluded

        Returns:
            Matching results ordered by ID
        """
        query = (
            select(Result)
            .join(Runner, Result.runner_id == Runner.id)
            .join(Race, Result.race_id == Race.id)
        )
        if distance:
            query = query.where(Race.distance == distance)
        if gender:
            query = query.where(Runner.gender == gender)
        if age_range:
            query = query.where(Runner.age.between(*age_range))

        result = await self.db.execute(query.order_by(Result.id))
        return list(result.unique().scalars().all())
