"""
Race series models.

Models:
- RaceSeries: Named collection of races scored into one standings table
- RaceSeriesRace: Race membership with order and points multiplier
- SeriesParticipant: Allowlist entry for private series
"""

from datetime import datetime
from decimal import Decimal
from sqlalchemy import (
    Column, String, Date, DateTime, Boolean, Integer, Numeric, Text, ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from racehub.models.base import Base
from racehub.shared.constants import ScoringSystem


class RaceSeries(Base):
    """A series of races with shared standings."""

    __tablename__ = "race_series"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    year = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    scoring_system = Column(String(20), nullable=False, default=ScoringSystem.POINTS.value)
    minimum_races = Column(Integer, nullable=False, default=2)
    max_races_for_score = Column(Integer, nullable=True)  # NULL = count all

    is_active = Column(Boolean, default=True)
    is_private = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    series_races = relationship(
        "RaceSeriesRace",
        back_populates="series",
        lazy="select",
        order_by="RaceSeriesRace.series_race_number",
        cascade="all, delete-orphan"
    )

    participants = relationship(
        "SeriesParticipant",
        lazy="select",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<RaceSeries {self.id} ({self.name} {self.year})>"


class RaceSeriesRace(Base):
    """Join row: race N of a series."""

    __tablename__ = "race_series_races"
    __table_args__ = (
        UniqueConstraint("series_id", "race_id", name="uq_series_race"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    series_id = Column(Integer, ForeignKey("race_series.id", ondelete="CASCADE"), nullable=False, index=True)
    race_id = Column(Integer, ForeignKey("races.id"), nullable=False)
    series_race_number = Column(Integer, nullable=False, default=1)
    points_multiplier = Column(Numeric(4, 2), nullable=False, default=Decimal("1.00"))

    series = relationship("RaceSeries", back_populates="series_races")

    def __repr__(self):
        return f"<RaceSeriesRace series={self.series_id} race={self.race_id} #{self.series_race_number}>"


class SeriesParticipant(Base):
    """Runner allowed into a private series."""

    __tablename__ = "series_participants"
    __table_args__ = (
        UniqueConstraint("series_id", "runner_id", name="uq_series_participant"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    series_id = Column(Integer, ForeignKey("race_series.id", ondelete="CASCADE"), nullable=False, index=True)
    runner_id = Column(Integer, ForeignKey("runners.id", ondelete="CASCADE"), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
