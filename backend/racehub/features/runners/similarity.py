"""
Similarity scoring between a raw provider result and a known runner.

Four independent sub-scores with weights summing to 100:
name 40, age 25, gender 15, location 20 (city 15 + state 5).
Missing age or gender earns nothing but still counts in the denominator,
so sparse records score lower instead of being judged on what is present.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

from rapidfuzz.distance import Levenshtein

from racehub.shared.constants import (
    AGE_NEAR_MAX_DIFF,
    AGE_NEAR_POINTS,
    AGE_POINTS,
    CITY_POINTS,
    GENDER_WEIGHT,
    NAME_WEIGHT,
    STATE_POINTS,
)
from racehub.shared.normalize import (
    clean_location,
    clean_name,
    normalize_gender,
    normalize_state,
    parse_location_city,
    parse_location_state,
)


class RawLike(Protocol):
    name: str
    age: int | None
    gender: str | None
    city: str | None
    state: str | None
    location: str | None


class RunnerLike(Protocol):
    name: str
    age: int | None
    gender: str | None
    city: str | None
    state: str | None


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-factor points (already weighted) for one raw/runner pair."""

    name_similarity: float  # 0-100, before weighting
    name_points: float
    age_points: int
    gender_points: int
    city_points: int
    state_points: int

    @property
    def total(self) -> int:
        raw = (
            self.name_points
            + self.age_points
            + self.gender_points
            + self.city_points
            + self.state_points
        )
        return _round_half_up(raw)


def name_similarity(name1: str, name2: str) -> float:
    """
    Similarity of two names on a 0-100 scale.

    - 100: identical after cleaning
    - 90: same token count and same first+last tokens, or first/last swapped
    - 70: only the first or only the last token matches
      (covers middle names and initials: "sarah j chen" vs "sarah chen")
    - otherwise: Levenshtein similarity of the cleaned strings
    """
    clean1 = clean_name(name1)
    clean2 = clean_name(name2)
    if not clean1 or not clean2:
        return 0.0

    if clean1 == clean2:
        return 100.0

    parts1 = clean1.split(" ")
    parts2 = clean2.split(" ")

    if len(parts1) >= 2 and len(parts2) >= 2:
        first_match = parts1[0] == parts2[0]
        last_match = parts1[-1] == parts2[-1]
        swapped = parts1[0] == parts2[-1] and parts1[-1] == parts2[0]

        if len(parts1) == len(parts2) and ((first_match and last_match) or swapped):
            return 90.0
        if first_match or last_match:
            return 70.0

    distance = Levenshtein.distance(clean1, clean2)
    max_length = max(len(clean1), len(clean2))
    return max(0.0, (max_length - distance) / max_length * 100)


def age_points(raw_age: int | None, runner_age: int | None) -> int:
    """25 / 20 / 15 / 10 / 0 by age difference; 0 if either is missing."""
    if not raw_age or not runner_age:
        return 0
    diff = abs(raw_age - runner_age)
    if diff in AGE_POINTS:
        return AGE_POINTS[diff]
    if diff <= AGE_NEAR_MAX_DIFF:
        return AGE_NEAR_POINTS
    return 0


def gender_points(raw_gender: str | None, runner_gender: str | None) -> int:
    if not raw_gender or not runner_gender:
        return 0
    if normalize_gender(raw_gender) == normalize_gender(runner_gender):
        return GENDER_WEIGHT
    return 0


def raw_city(raw: RawLike) -> str | None:
    return raw.city or parse_location_city(getattr(raw, "location", None))


def raw_state(raw: RawLike) -> str | None:
    return raw.state or parse_location_state(getattr(raw, "location", None))


def city_matches(raw: RawLike, runner: RunnerLike) -> bool:
    city = clean_location(raw_city(raw))
    return bool(city) and city == clean_location(runner.city)


def state_matches(raw: RawLike, runner: RunnerLike) -> bool:
    state = normalize_state(raw_state(raw))
    return bool(state) and state == normalize_state(runner.state)


def score_breakdown(raw: RawLike, runner: RunnerLike) -> ScoreBreakdown:
    """Compute every sub-score for a raw/runner pair."""
    similarity = name_similarity(raw.name, runner.name)
    return ScoreBreakdown(
        name_similarity=similarity,
        name_points=similarity * NAME_WEIGHT / 100,
        age_points=age_points(raw.age, runner.age),
        gender_points=gender_points(raw.gender, runner.gender),
        city_points=CITY_POINTS if city_matches(raw, runner) else 0,
        state_points=STATE_POINTS if state_matches(raw, runner) else 0,
    )


def score(raw: RawLike, runner: RunnerLike) -> int:
    """Match score 0-100."""
    return score_breakdown(raw, runner).total


def reasons(raw: RawLike, runner: RunnerLike) -> list[str]:
    """Human-readable match signals, in a fixed order, for the audit log."""
    breakdown = score_breakdown(raw, runner)
    result: list[str] = []

    if breakdown.name_similarity >= 90:
        result.append("Exact name match")
    elif breakdown.name_similarity >= 70:
        result.append("Similar name")

    if raw.age and runner.age and abs(raw.age - runner.age) <= 1:
        result.append("Age match")

    if breakdown.gender_points:
        result.append("Gender match")

    if breakdown.city_points:
        result.append("City match")

    if breakdown.state_points:
        result.append("State match")

    return result


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
