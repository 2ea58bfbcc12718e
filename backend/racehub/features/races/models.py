"""
Race and result models.

Models:
- Race: One race edition (name, date, distance)
- Result: One runner's finish in a race, with import provenance
"""

from datetime import datetime
from sqlalchemy import (
    Column, String, Date, DateTime, Boolean, Integer, Numeric, Text, ForeignKey,
)
from sqlalchemy.orm import relationship

from racehub.models.base import Base
from racehub.shared.constants import RaceDistance
from racehub.shared.formatters import parse_finish_time


class Race(Base):
    """A race edition. Treated as immutable once results exist."""

    __tablename__ = "races"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    date = Column(Date, nullable=False)
    distance = Column(String(20), nullable=False, default=RaceDistance.OTHER.value)
    distance_miles = Column(Numeric(5, 2), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)

    # Aggregates, refreshed after each import
    total_finishers = Column(Integer, nullable=False, default=0)
    average_time = Column(String(10), nullable=True)  # "H:MM:SS"

    results_url = Column(String(500), nullable=True)

    results = relationship(
        "Result",
        back_populates="race",
        lazy="select",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Race {self.id} ({self.name} {self.date})>"


class Result(Base):
    """
    A single finish.

    One result per (runner, race) is expected but not enforced:
    re-importing the same race can produce duplicates.
    """

    __tablename__ = "results"

    id = Column(Integer, primary_key=True, autoincrement=True)
    runner_id = Column(Integer, ForeignKey("runners.id", ondelete="CASCADE"), nullable=False, index=True)
    race_id = Column(Integer, ForeignKey("races.id", ondelete="CASCADE"), nullable=False, index=True)

    finish_time = Column(String(10), nullable=False)  # "2:15:32" or "45:10"
    overall_place = Column(Integer, nullable=True)
    gender_place = Column(Integer, nullable=True)
    age_group_place = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    # Provenance
    source_provider = Column(String(50), nullable=True)
    source_result_id = Column(String(100), nullable=True)
    raw_runner_name = Column(String(200), nullable=True)
    raw_location = Column(String(200), nullable=True)
    raw_age = Column(Integer, nullable=True)

    # Matching
    matching_score = Column(Integer, nullable=False, default=100)
    needs_review = Column(Boolean, nullable=False, default=False, index=True)

    imported_at = Column(DateTime, default=datetime.utcnow)

    runner = relationship("Runner", back_populates="results", lazy="joined")
    race = relationship("Race", back_populates="results", lazy="joined")

    def __repr__(self):
        return f"<Result {self.id} runner={self.runner_id} race={self.race_id} {self.finish_time}>"

    @property
    def finish_seconds(self) -> int:
        return parse_finish_time(self.finish_time)
