"""
API tests through the ASGI app with the database dependency overridden.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from racehub.db.session import get_async_db
from racehub.main import app


@pytest_asyncio.fixture
async def client(db_session):
    async def override_db():
        yield db_session

    app.dependency_overrides[get_async_db] = override_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def import_payload(name, results):
    return {
        "race": {"name": name, "date": "2026-05-03", "distance": "10k"},
        "results": results,
        "source_provider": "runsignup",
    }


MARCUS = {
    "name": "Marcus Johnson", "age": 32, "gender": "M",
    "city": "San Francisco", "state": "CA", "finish_time": "40:12", "overall_place": 1,
}
SARAH = {
    "name": "Sarah Chen", "age": 28, "gender": "F",
    "city": "San Francisco", "state": "CA", "finish_time": "41:30", "overall_place": 2,
}


async def import_race(client, name, results):
    response = await client.post("/api/v1/import/race-results", json=import_payload(name, results))
    assert response.status_code == 200
    return response.json()


class TestHealth:
    """Health endpoint."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestImportRoutes:
    """POST /import/race-results."""

    @pytest.mark.asyncio
    async def test_import(self, client):
        body = await import_race(client, "Bay 10K", [
            MARCUS,
            SARAH,
            {"name": "No Time"},
        ])

        assert body["race"]["name"] == "Bay 10K"
        assert body["race"]["total_finishers"] == 2
        assert body["race"]["average_time"] == "40:51"
        assert body["race"]["distance_miles"] == 6.2

        stats = body["import_results"]
        assert stats["imported"] == 2
        assert stats["new_runners"] == 2
        assert stats["matched"] == 0
        assert [e["index"] for e in stats["errors"]] == [2]
        assert stats["errors"][0]["raw_name"] == "No Time"

    @pytest.mark.asyncio
    async def test_invalid_race(self, client):
        payload = import_payload("", [MARCUS])

        response = await client.post("/api/v1/import/race-results", json=payload)

        assert response.status_code == 422


class TestRunnerRoutes:
    """Runner matching and duplicates."""

    @pytest.mark.asyncio
    async def test_match_creates_then_reuses(self, client):
        request = {
            "raw_runner_data": {**MARCUS},
            "source_provider": "runsignup",
            "source_race_id": "r-1",
        }

        first = await client.post("/api/v1/runners/match", json=request)
        second = await client.post("/api/v1/runners/match", json=request)

        assert first.status_code == 200
        assert first.json()["match_score"] == 100
        assert first.json()["needs_review"] is False
        assert second.json()["runner"]["id"] == first.json()["runner"]["id"]

    @pytest.mark.asyncio
    async def test_match_rejects_invalid_record(self, client):
        response = await client.post("/api/v1/runners/match", json={
            "raw_runner_data": {"age": 30},
            "source_provider": "runsignup",
            "source_race_id": "r-1",
        })

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_duplicates(self, client):
        await import_race(client, "Bay 10K", [MARCUS])
        await import_race(client, "Oakland 10K", [{**MARCUS, "age": 40, "city": "Oakland"}])

        response = await client.get("/api/v1/runners/duplicates")

        assert response.status_code == 200
        pairs = response.json()
        assert len(pairs) == 1
        assert pairs[0]["score"] == 60
        assert pairs[0]["runner"]["name"] == "Marcus Johnson"

    @pytest.mark.asyncio
    async def test_list_runners(self, client):
        await import_race(client, "Bay 10K", [MARCUS, SARAH])

        response = await client.get("/api/v1/runners", params={"limit": 1})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert [r["name"] for r in body["runners"]] == ["Marcus Johnson"]

    @pytest.mark.asyncio
    async def test_runner_profile(self, client):
        body = await import_race(client, "Bay 10K", [{**MARCUS, "age_group_place": 1}])
        marcus_id = (await client.get("/api/v1/runners")).json()["runners"][0]["id"]

        response = await client.get(f"/api/v1/runners/{marcus_id}")

        assert response.status_code == 200
        profile = response.json()
        assert profile["runner"]["name"] == "Marcus Johnson"
        assert profile["stats"]["marathon_pr"] is None
        assert profile["stats"]["age_group_wins"] == 1
        assert profile["stats"]["total_races"] == 1
        assert [r["race"]["id"] for r in profile["results"]] == [body["race"]["id"]]

    @pytest.mark.asyncio
    async def test_unknown_runner_profile(self, client):
        response = await client.get("/api/v1/runners/404")

        assert response.status_code == 404
        assert "runner not found" in response.json()["detail"]


class TestRaceQueryRoutes:
    """Leaderboard, races and race results."""

    @pytest.mark.asyncio
    async def test_leaderboard(self, client):
        await import_race(client, "Bay 10K", [SARAH, MARCUS])

        everyone = (await client.get("/api/v1/leaderboard")).json()
        women = (await client.get("/api/v1/leaderboard", params={"gender": "F"})).json()
        marathons = (await client.get("/api/v1/leaderboard", params={"distance": "marathon"})).json()

        assert [e["runner"]["name"] for e in everyone] == ["Marcus Johnson", "Sarah Chen"]
        assert everyone[0]["result"]["finish_time"] == "40:12"
        assert everyone[0]["race"]["name"] == "Bay 10K"
        assert [e["runner"]["name"] for e in women] == ["Sarah Chen"]
        assert marathons == []

    @pytest.mark.asyncio
    async def test_leaderboard_pagination_and_search(self, client):
        await import_race(client, "Bay 10K", [MARCUS, SARAH])

        second = (await client.get("/api/v1/leaderboard", params={"limit": 1, "offset": 1})).json()
        found = (await client.get("/api/v1/leaderboard", params={"search": "chen"})).json()

        assert [e["runner"]["name"] for e in second] == ["Sarah Chen"]
        assert [e["runner"]["name"] for e in found] == ["Sarah Chen"]

    @pytest.mark.asyncio
    async def test_leaderboard_rejects_unknown_gender(self, client):
        response = await client.get("/api/v1/leaderboard", params={"gender": "X"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_races_and_results(self, client):
        body = await import_race(client, "Bay 10K", [SARAH, MARCUS])
        race_id = body["race"]["id"]

        races = (await client.get("/api/v1/races")).json()
        race = (await client.get(f"/api/v1/races/{race_id}")).json()
        results = (await client.get(f"/api/v1/results/race/{race_id}")).json()
        runner_results = (await client.get(f"/api/v1/results/runner/{results[0]['runner_id']}")).json()

        assert [r["id"] for r in races] == [race_id]
        assert race["total_finishers"] == 2
        assert [r["runner"]["name"] for r in results] == ["Marcus Johnson", "Sarah Chen"]
        assert [r["race"]["name"] for r in runner_results] == ["Bay 10K"]

    @pytest.mark.asyncio
    async def test_unknown_race(self, client):
        race = await client.get("/api/v1/races/404")
        results = await client.get("/api/v1/results/race/404")
        runner_results = await client.get("/api/v1/results/runner/404")

        assert race.status_code == 404
        assert results.status_code == 404
        assert runner_results.status_code == 404


class TestReviewRoutes:
    """Review queue endpoints."""

    @pytest.mark.asyncio
    async def test_review_flow(self, client):
        await import_race(client, "Bay 10K", [MARCUS])
        await import_race(client, "Oakland 10K", [{**MARCUS, "age": 40, "city": "Oakland"}])

        pending = (await client.get("/api/v1/runner-matches")).json()
        assert len(pending) == 1
        assert pending[0]["status"] == "pending"
        assert pending[0]["match_score"] == 60

        flagged = (await client.get("/api/v1/runner-reviews")).json()
        assert len(flagged) == 1
        assert flagged[0]["raw_runner_name"] == "Marcus Johnson"
        assert flagged[0]["raw_location"] == "Oakland, CA"

        match_id = pending[0]["id"]
        approved = await client.patch(
            f"/api/v1/runner-matches/{match_id}/approve", json={"reviewed_by": "admin"}
        )
        assert approved.status_code == 200
        assert approved.json()["status"] == "approved"
        assert approved.json()["reviewed_by"] == "admin"

        again = await client.patch(
            f"/api/v1/runner-matches/{match_id}/reject", json={"reviewed_by": "admin"}
        )
        assert again.status_code == 409

        assert (await client.get("/api/v1/runner-matches")).json() == []

    @pytest.mark.asyncio
    async def test_unknown_match(self, client):
        response = await client.patch("/api/v1/runner-matches/999/approve", json={"reviewed_by": "admin"})

        assert response.status_code == 404


class TestSeriesRoutes:
    """Series administration and leaderboard."""

    @pytest.mark.asyncio
    async def test_leaderboard(self, client):
        first = await import_race(client, "Bay 10K", [MARCUS, SARAH])
        second = await import_race(client, "Oakland 10K", [
            {**SARAH, "overall_place": 1},
            {**MARCUS, "overall_place": 3},
        ])
        third = await import_race(client, "Berkeley 10K", [{**SARAH, "overall_place": 4}])

        created = await client.post("/api/v1/race-series", json={"name": "Bay Series", "year": 2026})
        assert created.status_code == 201
        series_id = created.json()["id"]

        for body in (first, second, third):
            response = await client.post(f"/api/v1/race-series/{series_id}/races/{body['race']['id']}")
            assert response.status_code == 201

        response = await client.get(f"/api/v1/race-series/{series_id}/leaderboard")

        assert response.status_code == 200
        board = response.json()
        assert board["total_participants"] == 2
        assert [s["runner"]["name"] for s in board["standings"]] == ["Sarah Chen", "Marcus Johnson"]
        assert [s["total_points"] for s in board["standings"]] == [296, 198]
        assert [s["rank"] for s in board["standings"]] == [1, 2]
        assert board["standings"][0]["races_completed"] == 3
        assert board["standings"][0]["average_points"] == 98.7

    @pytest.mark.asyncio
    async def test_multiplier(self, client):
        first = await import_race(client, "Bay 10K", [MARCUS])
        second = await import_race(client, "Oakland 10K", [MARCUS])
        series_id = (await client.post("/api/v1/race-series", json={"name": "Bay Series", "year": 2026})).json()["id"]

        await client.post(f"/api/v1/race-series/{series_id}/races/{first['race']['id']}")
        added = await client.post(
            f"/api/v1/race-series/{series_id}/races/{second['race']['id']}",
            json={"points_multiplier": "1.5"},
        )

        assert added.json()["series_race_number"] == 2
        board = (await client.get(f"/api/v1/race-series/{series_id}/leaderboard")).json()
        assert board["standings"][0]["total_points"] == 250

    @pytest.mark.asyncio
    async def test_remove_race(self, client):
        body = await import_race(client, "Bay 10K", [MARCUS])
        series_id = (await client.post("/api/v1/race-series", json={"name": "Bay Series", "year": 2026})).json()["id"]
        race_id = body["race"]["id"]
        await client.post(f"/api/v1/race-series/{series_id}/races/{race_id}")

        removed = await client.delete(f"/api/v1/race-series/{series_id}/races/{race_id}")
        missing = await client.delete(f"/api/v1/race-series/{series_id}/races/{race_id}")

        assert removed.status_code == 204
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_add_race_twice_conflicts(self, client):
        body = await import_race(client, "Bay 10K", [MARCUS])
        series_id = (await client.post("/api/v1/race-series", json={"name": "Bay Series", "year": 2026})).json()["id"]
        race_id = body["race"]["id"]

        first = await client.post(f"/api/v1/race-series/{series_id}/races/{race_id}")
        second = await client.post(f"/api/v1/race-series/{series_id}/races/{race_id}")

        assert first.status_code == 201
        assert second.status_code == 409
        assert "already in series" in second.json()["detail"]

    @pytest.mark.asyncio
    async def test_add_unknown_race_or_runner(self, client):
        series_id = (await client.post("/api/v1/race-series", json={"name": "Bay Series", "year": 2026})).json()["id"]

        race = await client.post(f"/api/v1/race-series/{series_id}/races/404")
        runner = await client.post(f"/api/v1/race-series/{series_id}/participants/404")

        assert race.status_code == 404
        assert "race not found" in race.json()["detail"]
        assert runner.status_code == 404
        assert "runner not found" in runner.json()["detail"]

    @pytest.mark.asyncio
    async def test_unknown_series(self, client):
        response = await client.get("/api/v1/race-series/404/leaderboard")

        assert response.status_code == 404
        assert "series not found" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_time_scoring_returns_501(self, client):
        body = await import_race(client, "Bay 10K", [MARCUS])
        created = await client.post(
            "/api/v1/race-series", json={"name": "Time Trial", "year": 2026, "scoring_system": "time"}
        )
        series_id = created.json()["id"]
        await client.post(f"/api/v1/race-series/{series_id}/races/{body['race']['id']}")

        response = await client.get(f"/api/v1/race-series/{series_id}/leaderboard")

        assert response.status_code == 501

    @pytest.mark.asyncio
    async def test_private_series_participants(self, client):
        first = await import_race(client, "Bay 10K", [MARCUS, SARAH])
        second = await import_race(client, "Oakland 10K", [MARCUS, SARAH])
        created = await client.post(
            "/api/v1/race-series", json={"name": "Club", "year": 2026, "is_private": True}
        )
        series_id = created.json()["id"]
        for body in (first, second):
            await client.post(f"/api/v1/race-series/{series_id}/races/{body['race']['id']}")

        duplicates_free = (await client.get("/api/v1/runners/duplicates")).json()
        assert duplicates_free == []

        match = await client.post("/api/v1/runners/match", json={
            "raw_runner_data": SARAH, "source_provider": "runsignup", "source_race_id": "x",
        })
        sarah_id = match.json()["runner"]["id"]

        added = await client.post(f"/api/v1/race-series/{series_id}/participants/{sarah_id}")
        assert added.status_code == 201

        board = (await client.get(f"/api/v1/race-series/{series_id}/leaderboard")).json()
        assert [s["runner_id"] for s in board["standings"]] == [sarah_id]

    @pytest.mark.asyncio
    async def test_list_active_series(self, client):
        await client.post("/api/v1/race-series", json={"name": "Bay Series", "year": 2026})
        await client.post("/api/v1/race-series", json={"name": "Old Series", "year": 2025})
        await client.post("/api/v1/race-series", json={"name": "Retired", "year": 2026, "is_active": False})

        all_active = (await client.get("/api/v1/race-series")).json()
        this_year = (await client.get("/api/v1/race-series", params={"year": 2026})).json()

        assert [s["name"] for s in all_active] == ["Bay Series", "Old Series"]
        assert [s["name"] for s in this_year] == ["Bay Series"]
