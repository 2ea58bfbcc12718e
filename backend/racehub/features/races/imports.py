"""
Result import pipeline.

Feeds each provider row of a batch through validation, identity
resolution and Result creation. A failing row is rolled back and
reported; the rest of the batch continues.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from racehub.features.runners.matching import RunnerMatchingService
from racehub.features.runners.repository import SqlRunnerStore
from racehub.features.runners.schemas import RawRunnerData
from racehub.shared.errors import RaceHubError
from racehub.shared.formatters import parse_finish_time

from .models import Race, Result
from .repository import RaceRepository, ResultRepository

logger = logging.getLogger(__name__)


@dataclass
class ImportRecordError:
    """One rejected row, with enough context for a manual retry."""

    index: int
    raw_name: str | None
    source_provider: str
    message: str


@dataclass
class ImportReport:
    """Statistics for one import batch."""

    imported: int = 0
    matched: int = 0
    new_runners: int = 0
    needs_review: int = 0
    errors: list[ImportRecordError] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class ResultImportService:
    """Imports provider result rows for one race."""

    def __init__(
        self,
        db: AsyncSession,
        matcher: RunnerMatchingService | None = None,
    ):
        self.db = db
        self.matcher = matcher or RunnerMatchingService(SqlRunnerStore(db))
        self.races = RaceRepository(db)
        self.results = ResultRepository(db)

    async def import_results(
        self,
        race: Race,
        rows: Iterable[dict[str, Any]],
        source_provider: str,
    ) -> ImportReport:
        """
        Import a batch of provider rows into a race.

        Args:
            race: Persisted race the rows belong to
            rows: Provider rows (dicts, provider aliases accepted)
            source_provider: Provider name recorded on results and matches

        Returns:
            ImportReport with per-row errors
        """
        race_id = race.id
        report = ImportReport()

        for index, row in enumerate(rows):
            try:
                raw = RawRunnerData.from_provider_row(row)
                parse_finish_time(raw.finish_time)

                outcome = await self.matcher.resolve(raw, source_provider, str(race_id))
                await self._create_result(race_id, raw, outcome.runner.id,
                                          outcome.match_score, outcome.needs_review,
                                          source_provider)
                await self.db.commit()
            except RaceHubError as e:
                await self._reject_row(report, index, row, source_provider, e)
                logger.warning(
                    f"Import row {index} ({_row_name(row)!r}, {source_provider}) rejected: {e}"
                )
                continue
            except SQLAlchemyError as e:
                await self._reject_row(report, index, row, source_provider, e)
                logger.error(
                    f"Import row {index} ({_row_name(row)!r}, {source_provider}) failed to persist: {e}"
                )
                continue

            report.imported += 1
            if outcome.created:
                report.new_runners += 1
            else:
                report.matched += 1
            if outcome.needs_review:
                report.needs_review += 1

        race = await self.races.get_by_id(race_id)
        await self.races.refresh_aggregates(race)
        await self.db.commit()

        logger.info(
            f"Imported {report.imported} results into race {race_id} from {source_provider}: "
            f"{report.matched} matched, {report.new_runners} new, "
            f"{report.needs_review} for review, {len(report.errors)} errors"
        )
        return report

    async def _reject_row(
        self,
        report: ImportReport,
        index: int,
        row: dict[str, Any],
        source_provider: str,
        error: Exception,
    ) -> None:
        """Roll back to the last committed row and record the failure."""
        await self.db.rollback()
        report.errors.append(
            ImportRecordError(
                index=index,
                raw_name=_row_name(row),
                source_provider=source_provider,
                message=str(error),
            )
        )

    async def _create_result(
        self,
        race_id: int,
        raw: RawRunnerData,
        runner_id: int,
        matching_score: int,
        needs_review: bool,
        source_provider: str,
    ) -> Result:
        raw_location = raw.location
        if not raw_location and (raw.city or raw.state):
            raw_location = ", ".join(p for p in (raw.city, raw.state) if p)

        return await self.results.create(
            runner_id=runner_id,
            race_id=race_id,
            finish_time=raw.finish_time,
            overall_place=raw.overall_place,
            gender_place=raw.gender_place,
            age_group_place=raw.age_group_place,
            notes=raw.notes,
            source_provider=source_provider,
            source_result_id=raw.source_result_id,
            raw_runner_name=raw.name,
            raw_location=raw_location,
            raw_age=raw.age,
            matching_score=matching_score,
            needs_review=needs_review,
            imported_at=datetime.utcnow(),
        )


def _row_name(row: dict[str, Any]) -> str | None:
    return row.get("name") or row.get("runner_name")
