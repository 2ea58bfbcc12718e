"""
Domain exceptions.

Services raise these; API routes translate them to HTTP errors and the
import pipeline records them per row.
"""


class RaceHubError(Exception):
    """Base class for all domain errors."""


class InvalidRawResultError(RaceHubError, ValueError):
    """Raw provider record is missing required fields or is malformed."""


class RunnerMatchNotFoundError(RaceHubError, LookupError):
    """RunnerMatch audit record does not exist."""

    def __init__(self, match_id: int):
        super().__init__(f"runner match not found: {match_id}")
        self.match_id = match_id


class MatchAlreadyReviewedError(RaceHubError):
    """RunnerMatch has already been approved or rejected by a reviewer."""

    def __init__(self, match_id: int, status: str):
        super().__init__(f"runner match {match_id} already reviewed ({status})")
        self.match_id = match_id
        self.status = status


class SeriesNotFoundError(RaceHubError, LookupError):
    """Race series does not exist."""

    def __init__(self, series_id: int):
        super().__init__(f"series not found: {series_id}")
        self.series_id = series_id


class RaceMissingError(RaceHubError, LookupError):
    """Series references a race that no longer exists."""

    def __init__(self, series_id: int, race_ids: list[int]):
        ids = ", ".join(str(r) for r in race_ids)
        super().__init__(f"race missing: series {series_id} references race(s) {ids}")
        self.series_id = series_id
        self.race_ids = race_ids


class ScoringSystemNotImplementedError(RaceHubError, NotImplementedError):
    """Series uses a scoring system that has no engine yet."""

    def __init__(self, scoring_system: str):
        super().__init__(f"scoring system not implemented: {scoring_system}")
        self.scoring_system = scoring_system


class RaceNotFoundError(RaceHubError, LookupError):
    """Race does not exist."""

    def __init__(self, race_id: int):
        super().__init__(f"race not found: {race_id}")
        self.race_id = race_id


class RunnerNotFoundError(RaceHubError, LookupError):
    """Runner does not exist."""

    def __init__(self, runner_id: int):
        super().__init__(f"runner not found: {runner_id}")
        self.runner_id = runner_id


class SeriesRaceExistsError(RaceHubError):
    """Race is already part of the series."""

    def __init__(self, series_id: int, race_id: int):
        super().__init__(f"race {race_id} is already in series {series_id}")
        self.series_id = series_id
        self.race_id = race_id
