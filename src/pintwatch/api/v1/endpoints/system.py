"""System and transparency endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from pintwatch.core.settings import settings
from pintwatch.services.amenities import AMENITY_LABELS
from pintwatch.services.reports import REPORT_TYPES_BY_ENTITY

router = APIRouter(prefix="/system", tags=["system", "transparency"])


@router.get("/config")
async def get_public_config() -> dict[str, object]:
    """Return a sanitized snapshot of the engine's public configuration.

    Excludes secrets and connection strings; suitable for transparency UIs.
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
            "debug": settings.debug,
        },
        "engine": settings.engine_constants,
        "amenities": AMENITY_LABELS,
        "report_types": {
            entity_type.value: list(report_types)
            for entity_type, report_types in REPORT_TYPES_BY_ENTITY.items()
        },
        "timezone": settings.local_timezone,
    }
