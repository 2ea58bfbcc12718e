"""
Race series repositories.

Data access layer for RaceSeries, RaceSeriesRace and SeriesParticipant,
plus the SqlSeriesStore read adapter used for leaderboards.
"""

from decimal import Decimal
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from racehub.features.races.models import Race, Result
from racehub.features.races.repository import RaceRepository, ResultRepository
from racehub.shared.repository import BaseRepository
from .models import RaceSeries, RaceSeriesRace, SeriesParticipant


class RaceSeriesRepository(BaseRepository[RaceSeries]):
    """Repository for RaceSeries operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, RaceSeries)

    async def get_active(self, year: int | None = None) -> list[RaceSeries]:
        """Active series, optionally for one year."""
        if year is None:
            return await self.get_all(is_active=True)
        return await self.get_all(is_active=True, year=year)


class RaceSeriesRaceRepository(BaseRepository[RaceSeriesRace]):
    """Repository for series race membership."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, RaceSeriesRace)

    async def get_for_series(self, series_id: int) -> list[RaceSeriesRace]:
        """Membership rows ordered by series race number."""
        result = await self.db.execute(
            select(RaceSeriesRace)
            .where(RaceSeriesRace.series_id == series_id)
            .order_by(RaceSeriesRace.series_race_number, RaceSeriesRace.id)
        )
        return list(result.scalars().all())

    async def add_race(
        self,
        series_id: int,
        race_id: int,
        points_multiplier: Decimal = Decimal("1.00"),
    ) -> RaceSeriesRace:
        """
        Append a race to a series.

        Args:
            series_id: Series ID
            race_id: Race ID
            points_multiplier: Points multiplier for this race

        Returns:
            Membership row numbered after the current last race
        """
        result = await self.db.execute(
            select(func.max(RaceSeriesRace.series_race_number))
            .where(RaceSeriesRace.series_id == series_id)
        )
        last_number = result.scalar() or 0
        return await self.create(
            series_id=series_id,
            race_id=race_id,
            series_race_number=last_number + 1,
            points_multiplier=points_multiplier,
        )

    async def remove_race(self, series_id: int, race_id: int) -> bool:
        """Remove a race from a series. Returns False if it was not a member."""
        row = await self.get_by(series_id=series_id, race_id=race_id)
        if row is None:
            return False
        await self.delete(row)
        return True


class SeriesParticipantRepository(BaseRepository[SeriesParticipant]):
    """Repository for private series allowlists."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, SeriesParticipant)

    async def get_runner_ids(self, series_id: int) -> list[int]:
        result = await self.db.execute(
            select(SeriesParticipant.runner_id)
            .where(SeriesParticipant.series_id == series_id)
            .order_by(SeriesParticipant.runner_id)
        )
        return list(result.scalars().all())

    async def add_participant(self, series_id: int, runner_id: int) -> SeriesParticipant:
        existing = await self.get_by(series_id=series_id, runner_id=runner_id)
        if existing:
            return existing
        return await self.create(series_id=series_id, runner_id=runner_id)

    async def remove_participant(self, series_id: int, runner_id: int) -> bool:
        row = await self.get_by(series_id=series_id, runner_id=runner_id)
        if row is None:
            return False
        await self.delete(row)
        return True


class SqlSeriesStore:
    """Read-side persistence collaborator for series scoring."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.series = RaceSeriesRepository(db)
        self.series_races = RaceSeriesRaceRepository(db)
        self.participants = SeriesParticipantRepository(db)
        self.races = RaceRepository(db)
        self.results = ResultRepository(db)

    async def get_series(self, series_id: int) -> RaceSeries | None:
        return await self.series.get_by_id(series_id)

    async def get_series_races(self, series_id: int) -> list[RaceSeriesRace]:
        return await self.series_races.get_for_series(series_id)

    async def get_races(self, race_ids: Iterable[int]) -> list[Race]:
        return await self.races.get_by_ids(race_ids)

    async def get_results_for_races(self, race_ids: Iterable[int]) -> list[Result]:
        return await self.results.get_for_races(race_ids)

    async def get_private_series_participants(self, series_id: int) -> list[int]:
        return await self.participants.get_runner_ids(series_id)
