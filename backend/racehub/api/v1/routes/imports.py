"""
Import API Routes

Endpoint for importing a provider's results for one race.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from racehub.db.session import get_async_db
from racehub.features.races.imports import ResultImportService
from racehub.features.races.repository import RaceRepository
from racehub.features.races.schemas import (
    ImportErrorResponse,
    ImportRequest,
    ImportResponse,
    ImportStatsResponse,
    RaceResponse,
)
from racehub.shared.constants import DISTANCE_MILES

router = APIRouter()


@router.post("/race-results", response_model=ImportResponse)
async def import_race_results(
    request: ImportRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Create the race and import its results, collecting per-row errors."""
    race_data = request.race.model_dump()
    race_data["distance"] = request.race.distance.value
    if race_data["distance_miles"] is None:
        race_data["distance_miles"] = DISTANCE_MILES.get(request.race.distance)
    race = await RaceRepository(db).create(**race_data)
    await db.commit()
    race_id = race.id

    service = ResultImportService(db)
    report = await service.import_results(race, request.results, request.source_provider)

    race = await RaceRepository(db).get_by_id(race_id)
    return ImportResponse(
        race=RaceResponse.model_validate(race),
        import_results=ImportStatsResponse(
            imported=report.imported,
            matched=report.matched,
            new_runners=report.new_runners,
            needs_review=report.needs_review,
            errors=[ImportErrorResponse(**vars(e)) for e in report.errors],
        ),
    )
