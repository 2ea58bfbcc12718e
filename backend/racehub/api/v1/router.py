"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from racehub.api.v1.routes import imports, races, runners, matches, series

api_router = APIRouter()

api_router.include_router(imports.router, prefix="/import", tags=["Import"])
api_router.include_router(races.router, tags=["Races"])
api_router.include_router(runners.router, tags=["Runners"])
api_router.include_router(matches.router, tags=["Review"])
api_router.include_router(series.router, prefix="/race-series", tags=["Series"])
