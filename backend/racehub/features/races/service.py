"""
Read-side queries over races and results.

Fastest-times leaderboard, race result lists and runner profiles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from racehub.features.runners.models import Runner
from racehub.features.runners.repository import RunnerRepository
from racehub.shared.errors import RaceNotFoundError, RunnerNotFoundError

from .models import Race, Result
from .repository import RaceRepository, ResultRepository
from .stats import RunnerStats, age_group_range, calculate_runner_stats, fastest_first, search_by_name

logger = logging.getLogger(__name__)


@dataclass
class RunnerProfile:
    """Runner with career stats and results, most recent first."""

    runner: Runner
    stats: RunnerStats
    results: list[Result] = field(default_factory=list)


class ResultQueryService:
    """Read-only views over imported results."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.races = RaceRepository(db)
        self.results = ResultRepository(db)
        self.runners = RunnerRepository(db)

    async def leaderboard(
        self,
        distance: str | None = None,
        gender: str | None = None,
        age_group: str | None = None,
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Result]:
        """
        Fastest finish times across all races.

        Args:
            distance: Race distance code, None for all distances
            gender: Runner gender code, None for all
            age_group: Age group label ("18-29" ... "60+"), None for all ages
            search: Partial runner name
            limit: Page size
            offset: Entries to skip

        Returns:
            One page of results, fastest first
        """
        results = await self.results.search(
            distance=distance,
            gender=gender,
            age_range=age_group_range(age_group),
        )
        if search:
            results = search_by_name(results, search)

        page = fastest_first(results)[offset:offset + limit]
        logger.debug(f"Leaderboard: {len(results)} matching results, returning {len(page)}")
        return page

    async def list_races(self) -> list[Race]:
        return await self.races.get_recent()

    async def get_race(self, race_id: int) -> Race:
        race = await self.races.get_by_id(race_id)
        if race is None:
            raise RaceNotFoundError(race_id)
        return race

    async def get_race_results(self, race_id: int) -> list[Result]:
        await self.get_race(race_id)
        return await self.results.get_for_race(race_id)

    async def list_runners(self, limit: int = 100, offset: int = 0) -> tuple[list[Runner], int]:
        """One page of runners ordered by ID, plus the total count."""
        runners = await self.runners.get_page(limit=limit, offset=offset)
        return runners, await self.runners.count()

    async def get_runner(self, runner_id: int) -> Runner:
        runner = await self.runners.get_by_id(runner_id)
        if runner is None:
            raise RunnerNotFoundError(runner_id)
        return runner

    async def get_runner_results(self, runner_id: int) -> list[Result]:
        await self.get_runner(runner_id)
        return await self.results.get_for_runner(runner_id)

    async def get_runner_profile(self, runner_id: int, year: int | None = None) -> RunnerProfile:
        """
        Runner with PRs, races this year and age group wins.

        Args:
            runner_id: Runner ID
            year: Year counted as "this year" (defaults to today's)

        Raises:
            RunnerNotFoundError: unknown runner
        """
        runner = await self.get_runner(runner_id)
        results = await self.results.get_for_runner(runner_id)
        stats = calculate_runner_stats(results, year or date.today().year)
        return RunnerProfile(runner=runner, stats=stats, results=results)
