"""
Runner identity resolution.

Matches an incoming provider result against known runners and decides
whether to reuse one, create a new one, or flag the result for review.

Decision thresholds (defaults, see Settings):
    best score >= 95        auto-match, no review
    best score in [85, 95)  reuse runner, result flagged for review
    best score in [60, 85)  create a new runner, match logged as pending
    no candidate >= 60      create a new runner, nothing logged

The find -> decide -> create sequence for one identity runs under a
per-identity lock and is committed before the lock is released, so two
concurrent imports of the same unseen runner cannot both create it.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Protocol, Sequence

from racehub.config import settings
from racehub.shared.constants import MatchStatus
from racehub.shared.normalize import clean_name, display_name, normalize_gender, normalize_state

from . import similarity
from .models import Runner, RunnerMatch
from .schemas import RawRunnerData

logger = logging.getLogger(__name__)


class RunnerStore(Protocol):
    """Persistence operations the matching engine needs."""

    async def get_all_runners(self) -> Sequence[Runner]: ...

    async def create_runner(self, data: dict[str, Any]) -> Runner: ...

    async def create_runner_match(self, data: dict[str, Any]) -> RunnerMatch: ...

    async def add_alternate_name(self, runner: Runner, name: str) -> Runner: ...

    async def commit(self) -> None: ...


class Decision(str, Enum):
    """Which resolution path was taken."""
    AUTO_MATCH = "auto_match"
    MATCH_WITH_REVIEW = "match_with_review"
    CREATE_WITH_REVIEW = "create_with_review"
    CREATE = "create"


@dataclass
class MatchCandidate:
    """An existing runner scored against a raw result."""

    runner: Runner
    score: int
    reasons: list[str] = field(default_factory=list)


@dataclass
class MatchOutcome:
    """Result of resolving one raw result."""

    runner: Runner
    match_score: int
    needs_review: bool
    decision: Decision
    match_record: RunnerMatch | None = None

    @property
    def created(self) -> bool:
        """True if a new runner was created for this result."""
        return self.decision in (Decision.CREATE, Decision.CREATE_WITH_REVIEW)


# =============================================================================
# Per-identity locking
# =============================================================================

class IdentityLocks:
    """
    asyncio locks keyed on the cleaned runner name.

    Entries are dropped once no task holds or waits on them.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: defaultdict[str, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                self._locks.pop(key, None)

    def __len__(self) -> int:
        return len(self._locks)


# Shared by every service instance in the process
identity_locks = IdentityLocks()


# =============================================================================
# Candidate finder
# =============================================================================

def blocking_keys(name: str) -> set[str]:
    """Initials of the first and last name tokens ("Marcus Johnson" -> {"m", "j"})."""
    parts = clean_name(name).split(" ")
    return {p[0] for p in (parts[0], parts[-1]) if p}


class CandidateFinder:
    """
    Scores every known runner against a raw result.

    Read-only. Cost is O(number of runners) per result unless blocking is
    enabled, in which case only runners sharing a first/last initial with
    the raw name are scored.
    """

    def __init__(
        self,
        min_threshold: int | None = None,
        use_blocking: bool | None = None,
    ):
        self.min_threshold = (
            settings.min_match_threshold if min_threshold is None else min_threshold
        )
        self.use_blocking = (
            settings.candidate_blocking if use_blocking is None else use_blocking
        )

    def shortlist(self, raw: RawRunnerData, runners: Sequence[Runner]) -> list[Runner]:
        if not self.use_blocking:
            return list(runners)
        keys = blocking_keys(raw.name)
        return [r for r in runners if blocking_keys(r.name) & keys]

    def find_candidates(
        self,
        raw: RawRunnerData,
        runners: Sequence[Runner],
    ) -> list[MatchCandidate]:
        """
        Candidates scoring at least min_threshold, best first.

        Ties keep the order of `runners`.
        """
        candidates: list[MatchCandidate] = []
        for runner in self.shortlist(raw, runners):
            score = similarity.score(raw, runner)
            if score >= self.min_threshold:
                candidates.append(
                    MatchCandidate(
                        runner=runner,
                        score=score,
                        reasons=similarity.reasons(raw, runner),
                    )
                )
        candidates.sort(key=lambda c: c.score, reverse=True)
        return candidates


# =============================================================================
# Match decision engine
# =============================================================================

class RunnerMatchingService:
    """Find-or-create a runner for each raw provider result."""

    def __init__(
        self,
        store: RunnerStore,
        finder: CandidateFinder | None = None,
        locks: IdentityLocks | None = None,
        auto_match_threshold: int | None = None,
        high_confidence_threshold: int | None = None,
    ):
        self.store = store
        self.finder = finder or CandidateFinder()
        self.locks = locks or identity_locks
        self.auto_match_threshold = (
            settings.auto_match_threshold
            if auto_match_threshold is None else auto_match_threshold
        )
        self.high_confidence_threshold = (
            settings.high_confidence_threshold
            if high_confidence_threshold is None else high_confidence_threshold
        )

    async def resolve(
        self,
        raw: RawRunnerData,
        source_provider: str,
        source_race_id: str,
    ) -> MatchOutcome:
        """
        Resolve a raw result to a runner.

        Args:
            raw: Validated provider record
            source_provider: Provider name (e.g. "runsignup")
            source_race_id: Provider or local race ID

        Returns:
            MatchOutcome with the runner, score and review flag
        """
        async with self.locks.hold(clean_name(raw.name)):
            runners = await self.store.get_all_runners()
            candidates = self.finder.find_candidates(raw, runners)
            outcome = await self._decide(raw, candidates, source_provider, source_race_id)
            await self.store.commit()
        return outcome

    async def _decide(
        self,
        raw: RawRunnerData,
        candidates: list[MatchCandidate],
        source_provider: str,
        source_race_id: str,
    ) -> MatchOutcome:
        if not candidates:
            runner = await self.create_runner_from_raw(raw)
            logger.info(f"New runner {runner.id} created for {raw.name!r} (no candidates)")
            return MatchOutcome(
                runner=runner,
                match_score=100,
                needs_review=False,
                decision=Decision.CREATE,
            )

        best = candidates[0]

        if best.score >= self.auto_match_threshold:
            record = await self._log_match(raw, best, source_provider, source_race_id, MatchStatus.AUTO_MATCHED)
            await self.store.add_alternate_name(best.runner, raw.name)
            logger.info(f"Auto-matched {raw.name!r} to runner {best.runner.id} (score {best.score})")
            return MatchOutcome(
                runner=best.runner,
                match_score=best.score,
                needs_review=False,
                decision=Decision.AUTO_MATCH,
                match_record=record,
            )

        if best.score >= self.high_confidence_threshold:
            record = await self._log_match(raw, best, source_provider, source_race_id, MatchStatus.APPROVED)
            await self.store.add_alternate_name(best.runner, raw.name)
            logger.info(
                f"Matched {raw.name!r} to runner {best.runner.id} "
                f"(score {best.score}, flagged for review)"
            )
            return MatchOutcome(
                runner=best.runner,
                match_score=best.score,
                needs_review=True,
                decision=Decision.MATCH_WITH_REVIEW,
                match_record=record,
            )

        # Ambiguous: never link to an uncertain candidate
        record = await self._log_match(raw, best, source_provider, source_race_id, MatchStatus.PENDING)
        runner = await self.create_runner_from_raw(raw)
        logger.info(
            f"New runner {runner.id} created for {raw.name!r}; "
            f"candidate {best.runner.id} (score {best.score}) pending review"
        )
        return MatchOutcome(
            runner=runner,
            match_score=best.score,
            needs_review=True,
            decision=Decision.CREATE_WITH_REVIEW,
            match_record=record,
        )

    async def create_runner_from_raw(self, raw: RawRunnerData) -> Runner:
        """Create a runner from raw data. Missing age/city/state stay empty."""
        state = similarity.raw_state(raw)
        data = {
            "name": display_name(raw.name) or raw.name,
            "alternate_names": [raw.name],
            "email": raw.email,
            "gender": normalize_gender(raw.gender),
            "age": raw.age,
            "city": similarity.raw_city(raw),
            "state": normalize_state(state) if state else None,
            "verified": False,
            "matching_confidence": 100,
        }
        return await self.store.create_runner(data)

    async def _log_match(
        self,
        raw: RawRunnerData,
        match: MatchCandidate,
        source_provider: str,
        source_race_id: str,
        status: MatchStatus,
    ) -> RunnerMatch:
        return await self.store.create_runner_match({
            "candidate_runner_id": match.runner.id,
            "raw_runner_data": raw.snapshot(),
            "match_score": match.score,
            "match_reasons": list(match.reasons),
            "status": status.value,
            "source_provider": source_provider,
            "source_race_id": str(source_race_id),
        })
