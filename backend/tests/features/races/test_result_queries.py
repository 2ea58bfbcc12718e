"""
Tests for ResultQueryService against a real session.
"""

from datetime import date

import pytest
import pytest_asyncio

from racehub.features.races.repository import RaceRepository, ResultRepository
from racehub.features.races.service import ResultQueryService
from racehub.features.runners.repository import RunnerRepository
from racehub.shared.errors import RaceNotFoundError, RunnerNotFoundError


@pytest_asyncio.fixture
async def seeded(db_session):
    """
    Two marathons and a half:

    Marcus (M, 32)  - marathon 2:15:32, marathon 2:18:00, half 1:05:10
    Sarah  (F, 28)  - marathon 2:20:00, half 1:09:00
    Alex   (M, 45)  - marathon 2:50:00
    Pat    (NB, -)  - half 1:30:00
    """
    runners = RunnerRepository(db_session)
    races = RaceRepository(db_session)
    results = ResultRepository(db_session)

    marcus = await runners.create(name="Marcus Johnson", alternate_names=["Marcus Johnson"], gender="M", age=32)
    sarah = await runners.create(name="Sarah Chen", alternate_names=["Sarah Chen", "Sarah J. Chen"], gender="F", age=28)
    alex = await runners.create(name="Alex Thompson", alternate_names=["Alex Thompson"], gender="M", age=45)
    pat = await runners.create(name="Pat Rivera", alternate_names=["Pat Rivera"], gender="NB")

    bay = await races.create(name="Bay Marathon", date=date(2026, 4, 5), distance="marathon")
    coast = await races.create(name="Coast Marathon", date=date(2025, 10, 12), distance="marathon")
    half = await races.create(name="Oakland Half", date=date(2026, 3, 1), distance="half-marathon")

    rows = [
        (marcus, bay, "2:15:32", 1, 1),
        (sarah, bay, "2:20:00", 2, 1),
        (alex, bay, "2:50:00", 3, 2),
        (marcus, coast, "2:18:00", 1, 1),
        (marcus, half, "1:05:10", 1, 1),
        (sarah, half, "1:09:00", 2, 1),
        (pat, half, "1:30:00", 3, None),
    ]
    for runner, race, finish_time, place, age_group_place in rows:
        await results.create(
            runner_id=runner.id,
            race_id=race.id,
            finish_time=finish_time,
            overall_place=place,
            age_group_place=age_group_place,
        )
    await db_session.commit()

    return {
        "runners": {r.name: r.id for r in (marcus, sarah, alex, pat)},
        "races": {r.name: r.id for r in (bay, coast, half)},
    }


def names(results):
    return [(r.runner.name, r.finish_time) for r in results]


class TestLeaderboard:
    """Tests for ResultQueryService.leaderboard."""

    @pytest.mark.asyncio
    async def test_fastest_first(self, db_session, seeded):
        board = await ResultQueryService(db_session).leaderboard()

        assert names(board)[:3] == [
            ("Marcus Johnson", "1:05:10"),
            ("Sarah Chen", "1:09:00"),
            ("Pat Rivera", "1:30:00"),
        ]
        assert len(board) == 7

    @pytest.mark.asyncio
    async def test_filter_by_distance_and_gender(self, db_session, seeded):
        board = await ResultQueryService(db_session).leaderboard(distance="marathon", gender="M")

        assert names(board) == [
            ("Marcus Johnson", "2:15:32"),
            ("Marcus Johnson", "2:18:00"),
            ("Alex Thompson", "2:50:00"),
        ]

    @pytest.mark.asyncio
    async def test_filter_by_age_group(self, db_session, seeded):
        board = await ResultQueryService(db_session).leaderboard(age_group="40-49")

        assert names(board) == [("Alex Thompson", "2:50:00")]

    @pytest.mark.asyncio
    async def test_age_group_excludes_unknown_age(self, db_session, seeded):
        board = await ResultQueryService(db_session).leaderboard(distance="half-marathon", age_group="18-29")

        assert names(board) == [("Sarah Chen", "1:09:00")]

    @pytest.mark.asyncio
    async def test_search_matches_alternate_names(self, db_session, seeded):
        board = await ResultQueryService(db_session).leaderboard(search="sarah j")

        assert names(board) == [("Sarah Chen", "1:09:00"), ("Sarah Chen", "2:20:00")]

    @pytest.mark.asyncio
    async def test_pagination(self, db_session, seeded):
        service = ResultQueryService(db_session)

        first = await service.leaderboard(distance="marathon", limit=2)
        second = await service.leaderboard(distance="marathon", limit=2, offset=2)

        assert [r.finish_time for r in first] == ["2:15:32", "2:18:00"]
        assert [r.finish_time for r in second] == ["2:20:00", "2:50:00"]


class TestRaceQueries:
    """Races and race results."""

    @pytest.mark.asyncio
    async def test_list_races_newest_first(self, db_session, seeded):
        races = await ResultQueryService(db_session).list_races()

        assert [r.name for r in races] == ["Bay Marathon", "Oakland Half", "Coast Marathon"]

    @pytest.mark.asyncio
    async def test_race_results_by_place(self, db_session, seeded):
        results = await ResultQueryService(db_session).get_race_results(seeded["races"]["Oakland Half"])

        assert [r.runner.name for r in results] == ["Marcus Johnson", "Sarah Chen", "Pat Rivera"]

    @pytest.mark.asyncio
    async def test_unknown_race(self, db_session):
        service = ResultQueryService(db_session)

        with pytest.raises(RaceNotFoundError):
            await service.get_race(404)
        with pytest.raises(RaceNotFoundError):
            await service.get_race_results(404)


class TestRunnerQueries:
    """Runner listing and profiles."""

    @pytest.mark.asyncio
    async def test_list_runners_page_and_total(self, db_session, seeded):
        runners, total = await ResultQueryService(db_session).list_runners(limit=2, offset=1)

        assert [r.name for r in runners] == ["Sarah Chen", "Alex Thompson"]
        assert total == 4

    @pytest.mark.asyncio
    async def test_runner_profile(self, db_session, seeded):
        marcus_id = seeded["runners"]["Marcus Johnson"]

        profile = await ResultQueryService(db_session).get_runner_profile(marcus_id, year=2026)

        assert profile.runner.id == marcus_id
        assert profile.stats.marathon_pr == "2:15:32"
        assert profile.stats.half_marathon_pr == "1:05:10"
        assert profile.stats.races_this_year == 2
        assert profile.stats.age_group_wins == 3
        assert profile.stats.total_races == 3
        assert [r.race.name for r in profile.results] == ["Bay Marathon", "Oakland Half", "Coast Marathon"]

    @pytest.mark.asyncio
    async def test_runner_without_results(self, db_session):
        runner = await RunnerRepository(db_session).create(name="New Runner", alternate_names=[], gender="F")
        await db_session.commit()

        profile = await ResultQueryService(db_session).get_runner_profile(runner.id, year=2026)

        assert profile.results == []
        assert profile.stats.marathon_pr is None
        assert profile.stats.total_races == 0

    @pytest.mark.asyncio
    async def test_unknown_runner(self, db_session):
        service = ResultQueryService(db_session)

        with pytest.raises(RunnerNotFoundError):
            await service.get_runner_profile(404)
        with pytest.raises(RunnerNotFoundError):
            await service.get_runner_results(404)
