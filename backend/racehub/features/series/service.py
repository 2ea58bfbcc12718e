"""SeriesService: series administration and leaderboards."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from racehub.config import settings
from racehub.features.runners.repository import RunnerRepository
from racehub.shared.errors import (
    RaceNotFoundError,
    RunnerNotFoundError,
    SeriesNotFoundError,
    SeriesRaceExistsError,
)

from .models import RaceSeries, RaceSeriesRace, SeriesParticipant
from .scoring import PointsRules, SeriesLeaderboard, compute_leaderboard
from .repository import SqlSeriesStore

logger = logging.getLogger(__name__)


class SeriesService:
    """Creates series, manages membership and computes standings."""

    def __init__(self, db: AsyncSession, rules: PointsRules | None = None):
        self.db = db
        self.store = SqlSeriesStore(db)
        self.rules = rules

    async def create_series(self, **fields: Any) -> RaceSeries:
        series = await self.store.series.create(**fields)
        await self.db.commit()
        logger.info(f"Created series {series.id} ({series.name})")
        return series

    async def list_active(self, year: int | None = None) -> list[RaceSeries]:
        return await self.store.series.get_active(year)

    async def add_race(
        self,
        series_id: int,
        race_id: int,
        points_multiplier: Decimal = Decimal("1.00"),
    ) -> RaceSeriesRace:
        """
        Append a race to a series.

        Raises:
            SeriesNotFoundError: unknown series
            RaceNotFoundError: unknown race
            SeriesRaceExistsError: race is already in the series
        """
        await self._require_series(series_id)
        if await self.store.races.get_by_id(race_id) is None:
            raise RaceNotFoundError(race_id)
        if await self.store.series_races.get_by(series_id=series_id, race_id=race_id):
            raise SeriesRaceExistsError(series_id, race_id)

        row = await self.store.series_races.add_race(series_id, race_id, points_multiplier)
        await self.db.commit()
        return row

    async def remove_race(self, series_id: int, race_id: int) -> bool:
        await self._require_series(series_id)
        removed = await self.store.series_races.remove_race(series_id, race_id)
        await self.db.commit()
        return removed

    async def add_participant(self, series_id: int, runner_id: int) -> SeriesParticipant:
        await self._require_series(series_id)
        if await RunnerRepository(self.db).get_by_id(runner_id) is None:
            raise RunnerNotFoundError(runner_id)
        row = await self.store.participants.add_participant(series_id, runner_id)
        await self.db.commit()
        return row

    async def remove_participant(self, series_id: int, runner_id: int) -> bool:
        await self._require_series(series_id)
        removed = await self.store.participants.remove_participant(series_id, runner_id)
        await self.db.commit()
        return removed

    async def get_leaderboard(self, series_id: int) -> SeriesLeaderboard:
        """
        Compute standings for a series.

        All reads share one session transaction, so the leaderboard never
        sees a half-finished import.

        Raises:
            SeriesNotFoundError: unknown series
            RaceMissingError: series references a deleted race
            ScoringSystemNotImplementedError: series is not points-scored
        """
        if settings.leaderboard_isolation_level and not self.db.in_transaction():
            await self.db.connection(
                execution_options={"isolation_level": settings.leaderboard_isolation_level}
            )

        series = await self._require_series(series_id)
        series_races = await self.store.get_series_races(series_id)
        race_ids = [sr.race_id for sr in series_races]
        races = await self.store.get_races(race_ids)
        results = await self.store.get_results_for_races(race_ids)

        participants = None
        if series.is_private:
            participants = await self.store.get_private_series_participants(series_id)

        leaderboard = compute_leaderboard(
            series,
            series_races,
            races,
            results,
            participant_ids=participants,
            rules=self.rules,
        )
        logger.debug(
            f"Series {series_id} leaderboard: {leaderboard.total_participants} runners "
            f"from {len(results)} results in {len(race_ids)} races"
        )
        return leaderboard

    async def _require_series(self, series_id: int) -> RaceSeries:
        series = await self.store.get_series(series_id)
        if series is None:
            raise SeriesNotFoundError(series_id)
        return series
