"""
Runner-related models.

Models:
- Runner: Stable runner identity resolved from provider results
- RunnerMatch: Append-only audit log of match decisions
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean, Integer, ForeignKey, JSON
from sqlalchemy.orm import relationship

from racehub.models.base import Base
from racehub.shared.constants import MatchStatus


class Runner(Base):
    """
    Runner identity.

    Created once by the matching engine (or manual entry). Afterwards only
    alternate names and verification change. Age is the age at the first
    observed result and is never recalculated.
    """

    __tablename__ = "runners"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    alternate_names = Column(JSON, nullable=False, default=list)
    email = Column(String(255), nullable=True)

    gender = Column(String(2), nullable=False, default="M")  # "M" | "F" | "NB"
    age = Column(Integer, nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)

    verified = Column(Boolean, default=False)
    matching_confidence = Column(Integer, default=100)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    results = relationship(
        "Result",
        back_populates="runner",
        lazy="select",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Runner {self.id} ({self.name})>"


class RunnerMatch(Base):
    """
    Audit record of one match decision.

    candidate_runner_id is NULL when the decision was to create a new
    runner without a candidate. Only the approve/reject transition ever
    updates a row (status, reviewed_by, reviewed_at).
    """

    __tablename__ = "runner_matches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    candidate_runner_id = Column(
        Integer,
        ForeignKey("runners.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Snapshot of the provider record
    raw_runner_data = Column(JSON, nullable=False)

    match_score = Column(Integer, nullable=False)
    match_reasons = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default=MatchStatus.PENDING.value, index=True)

    # Provenance
    source_provider = Column(String(50), nullable=False)
    source_race_id = Column(String(50), nullable=False)

    # Review
    reviewed_by = Column(String(100), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    candidate_runner = relationship("Runner", lazy="joined")

    def __repr__(self):
        return f"<RunnerMatch {self.id} score={self.match_score} status={self.status}>"

    @property
    def is_reviewed(self) -> bool:
        return self.reviewed_at is not None
