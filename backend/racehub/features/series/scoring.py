"""
Series scoring engine (pure, no I/O).

Points per result:
    base  = max(0, 101 - overall_place)     (0 when the place is unknown)
    bonus = min(5 * (finishers // 100), 25) (larger fields earn more)
    points = round((base + bonus) * points_multiplier)

Standings rank runners by total points; equal totals get consecutive
ranks (no shared places), ordered by runner ID.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Iterable, Protocol, Sequence

from racehub.config import settings
from racehub.shared.constants import ScoringSystem
from racehub.shared.errors import RaceMissingError, ScoringSystemNotImplementedError


class ResultLike(Protocol):
    runner_id: int
    race_id: int
    overall_place: int | None


class SeriesRaceLike(Protocol):
    race_id: int
    points_multiplier: Any


@dataclass(frozen=True)
class PointsRules:
    """Constants of the points formula."""

    base: int = 101
    size_bonus_per_100: int = 5
    size_bonus_cap: int = 25
    apply_multiplier: bool = True

    @classmethod
    def from_settings(cls) -> "PointsRules":
        return cls(
            base=settings.points_base,
            size_bonus_per_100=settings.size_bonus_per_100,
            size_bonus_cap=settings.size_bonus_cap,
            apply_multiplier=settings.apply_points_multiplier,
        )


@dataclass
class ScoredResult:
    """A result with the points it earned in the series."""

    result: Any
    race_id: int
    points: int


@dataclass
class SeriesStanding:
    """One runner's aggregated position in a series."""

    runner_id: int
    runner: Any
    total_points: int
    average_points: float
    races_completed: int
    best_race_points: int
    results: list[ScoredResult] = field(default_factory=list)
    scoring_results: list[ScoredResult] = field(default_factory=list)
    rank: int = 0


@dataclass
class SeriesLeaderboard:
    """Standings for one series."""

    series: Any
    standings: list[SeriesStanding] = field(default_factory=list)

    @property
    def total_participants(self) -> int:
        return len(self.standings)


# =============================================================================
# Points
# =============================================================================

def base_points(overall_place: int | None, rules: PointsRules = PointsRules()) -> int:
    """1st = 100, 2nd = 99, ... 100th = 1, then 0."""
    if not overall_place or overall_place < 1:
        return 0
    return max(0, rules.base - overall_place)


def size_bonus(finishers: int, rules: PointsRules = PointsRules()) -> int:
    """+5 per full 100 finishers, capped."""
    if finishers <= 0:
        return 0
    return min(rules.size_bonus_per_100 * (finishers // 100), rules.size_bonus_cap)


def result_points(
    overall_place: int | None,
    finishers: int,
    multiplier: Any = 1,
    rules: PointsRules = PointsRules(),
) -> int:
    """Points one result earns."""
    points = base_points(overall_place, rules) + size_bonus(finishers, rules)
    if not rules.apply_multiplier or multiplier is None:
        return points
    scaled = Decimal(points) * Decimal(str(multiplier))
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# =============================================================================
# Leaderboard
# =============================================================================

def compute_leaderboard(
    series: Any,
    series_races: Sequence[SeriesRaceLike],
    races: Sequence[Any],
    results: Iterable[ResultLike],
    participant_ids: Iterable[int] | None = None,
    rules: PointsRules | None = None,
) -> SeriesLeaderboard:
    """
    Build the standings of a series.

    Args:
        series: Series (scoring_system, minimum_races, max_races_for_score, is_private)
        series_races: Race membership rows (race_id, points_multiplier)
        races: Race rows for those IDs (id, total_finishers)
        results: Results for those races
        participant_ids: Allowlist, used only when the series is private
        rules: Points constants (defaults from settings)

    Raises:
        RaceMissingError: a series race has no matching race row
        ScoringSystemNotImplementedError: series is not points-scored
    """
    if not series_races:
        return SeriesLeaderboard(series=series)

    engine = SCORING_ENGINES.get(_scoring_system(series))
    if engine is None:
        raise ScoringSystemNotImplementedError(str(series.scoring_system))

    races_by_id = {race.id: race for race in races}
    missing = [sr.race_id for sr in series_races if sr.race_id not in races_by_id]
    if missing:
        raise RaceMissingError(series.id, missing)

    allowlist = None
    if series.is_private:
        allowlist = set(participant_ids or ())

    standings = engine(series, series_races, races_by_id, results, allowlist, rules or PointsRules.from_settings())
    return SeriesLeaderboard(series=series, standings=standings)


def _points_standings(
    series: Any,
    series_races: Sequence[SeriesRaceLike],
    races_by_id: dict[int, Any],
    results: Iterable[ResultLike],
    allowlist: set[int] | None,
    rules: PointsRules,
) -> list[SeriesStanding]:
    multipliers = {sr.race_id: sr.points_multiplier for sr in series_races}

    series_results = [r for r in results if r.race_id in multipliers]

    # Field size: stored total, else every stored result, allowlisted or not
    counted: dict[int, int] = {}
    for r in series_results:
        counted[r.race_id] = counted.get(r.race_id, 0) + 1

    in_series = [
        r for r in series_results
        if allowlist is None or r.runner_id in allowlist
    ]
    finishers = {
        race_id: (races_by_id[race_id].total_finishers or counted.get(race_id, 0))
        for race_id in multipliers
    }

    by_runner: dict[int, list[ScoredResult]] = {}
    runners: dict[int, Any] = {}
    for r in in_series:
        points = result_points(r.overall_place, finishers[r.race_id], multipliers[r.race_id], rules)
        by_runner.setdefault(r.runner_id, []).append(
            ScoredResult(result=r, race_id=r.race_id, points=points)
        )
        runners.setdefault(r.runner_id, getattr(r, "runner", None))

    standings: list[SeriesStanding] = []
    for runner_id, scored in by_runner.items():
        if len(scored) < series.minimum_races:
            continue

        ranked = sorted(scored, key=lambda s: s.points, reverse=True)
        scoring = ranked[:series.max_races_for_score] if series.max_races_for_score else ranked
        total = sum(s.points for s in scoring)

        standings.append(
            SeriesStanding(
                runner_id=runner_id,
                runner=runners[runner_id],
                total_points=total,
                average_points=total / len(scoring),
                races_completed=len(scored),
                best_race_points=ranked[0].points,
                results=scored,
                scoring_results=scoring,
            )
        )

    standings.sort(key=lambda s: (-s.total_points, s.runner_id))
    for index, standing in enumerate(standings):
        standing.rank = index + 1
    return standings


def _scoring_system(series: Any) -> ScoringSystem | None:
    try:
        return ScoringSystem(series.scoring_system)
    except ValueError:
        return None


SCORING_ENGINES: dict[ScoringSystem, Callable[..., list[SeriesStanding]]] = {
    ScoringSystem.POINTS: _points_standings,
    # TIME and PLACEMENT are declared on series but have no engine yet
}
