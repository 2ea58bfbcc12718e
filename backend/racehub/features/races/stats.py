"""Statistics and search for race results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from racehub.shared.constants import AGE_GROUPS, RaceDistance

from .models import Result


@dataclass
class RunnerStats:
    """Career summary for one runner."""

    marathon_pr: str | None
    half_marathon_pr: str | None
    races_this_year: int
    age_group_wins: int
    total_races: int


def age_group_range(label: str | None) -> tuple[int, int] | None:
    """Inclusive age range for a leaderboard age group ("30-39", "60+").

    Unknown labels mean "all ages".
    """
    if not label:
        return None
    return AGE_GROUPS.get(label)


def search_by_name(results: Sequence[Result], query: str) -> list[Result]:
    """Case-insensitive partial match on the runner's name or a known variant."""
    query_lower = query.strip().lower()
    if not query_lower:
        return list(results)

    found = []
    for r in results:
        names = [r.runner.name, *(r.runner.alternate_names or [])]
        if any(query_lower in name.lower() for name in names):
            found.append(r)
    return found


def fastest_first(results: Sequence[Result]) -> list[Result]:
    """Sort by finish time; equal times keep import order."""
    return sorted(results, key=lambda r: (r.finish_seconds, r.id))


def personal_record(results: Sequence[Result], distance: RaceDistance) -> Result | None:
    """Fastest result at one distance, or None if the runner never raced it."""
    at_distance = [r for r in results if r.race.distance == distance.value]
    if not at_distance:
        return None
    return fastest_first(at_distance)[0]


def calculate_runner_stats(results: Sequence[Result], year: int) -> RunnerStats:
    """Calculate PRs and counters from all of a runner's results.

    Args:
        results: Every result of the runner, with race loaded
        year: Calendar year counted as "this year"
    """
    marathon = personal_record(results, RaceDistance.MARATHON)
    half = personal_record(results, RaceDistance.HALF_MARATHON)

    return RunnerStats(
        marathon_pr=marathon.finish_time if marathon else None,
        half_marathon_pr=half.finish_time if half else None,
        races_this_year=sum(1 for r in results if r.race.date.year == year),
        age_group_wins=sum(1 for r in results if r.age_group_place == 1),
        total_races=len(results),
    )
