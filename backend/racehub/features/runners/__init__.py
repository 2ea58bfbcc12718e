"""
Runner identity module.

Usage:
    from racehub.features.runners import RunnerMatchingService, SqlRunnerStore

Models:
- Runner: Resolved runner identity
- RunnerMatch: Audit log of match decisions

Services:
- CandidateFinder: Scores known runners against a raw result
- RunnerMatchingService: Auto-match / review / create decisions
- RunnerReviewService: Approve / reject, review queue, duplicates
"""

from .models import Runner, RunnerMatch
from .schemas import RawRunnerData
from .repository import RunnerRepository, RunnerMatchRepository, SqlRunnerStore
from .matching import (
    CandidateFinder,
    Decision,
    IdentityLocks,
    MatchCandidate,
    MatchOutcome,
    RunnerMatchingService,
    RunnerStore,
)
from .review import DuplicatePair, RunnerReviewService, find_potential_duplicates

__all__ = [
    # Models
    "Runner",
    "RunnerMatch",
    # Schemas
    "RawRunnerData",
    # Repositories
    "RunnerRepository",
    "RunnerMatchRepository",
    "SqlRunnerStore",
    # Matching
    "CandidateFinder",
    "Decision",
    "IdentityLocks",
    "MatchCandidate",
    "MatchOutcome",
    "RunnerMatchingService",
    "RunnerStore",
    # Review
    "DuplicatePair",
    "RunnerReviewService",
    "find_potential_duplicates",
]
