"""
Database Models

Feature models live in features/ and are imported lazily here to avoid
circular imports (feature models import Base from this package).
"""

from racehub.models.base import Base


def load_models() -> None:
    """Import every feature model so it is registered on Base.metadata."""
    from racehub.features.runners import models as _runners  # noqa: F401
    from racehub.features.races import models as _races  # noqa: F401
    from racehub.features.series import models as _series  # noqa: F401


def __getattr__(name):
    if name in ("Runner", "RunnerMatch"):
        from racehub.features.runners import models
        return getattr(models, name)
    if name in ("Race", "Result"):
        from racehub.features.races import models
        return getattr(models, name)
    if name in ("RaceSeries", "RaceSeriesRace", "SeriesParticipant"):
        from racehub.features.series import models
        return getattr(models, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Base",
    "load_models",
    "Runner",
    "RunnerMatch",
    "Race",
    "Result",
    "RaceSeries",
    "RaceSeriesRace",
    "SeriesParticipant",
]
