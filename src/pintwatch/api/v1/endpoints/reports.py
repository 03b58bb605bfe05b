"""Report submission endpoint; anonymous reports are accepted."""

from __future__ import annotations

from fastapi import APIRouter, status

from pintwatch.api.v1.dependencies import OptionalUserDep, SessionDep
from pintwatch.db.time import utcnow
from pintwatch.schemas.report import ReportCreate, ReportResponse
from pintwatch.services.reports import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=ReportResponse)
async def create_report(
    payload: ReportCreate,
    user_id: OptionalUserDep,
    db: SessionDep,
) -> ReportResponse:
    """File a report against a pub, price, deal, amenity, review or photo."""
    report = ReportService.create(
        db,
        entity_type=payload.entity_type,
        entity_id=payload.entity_id,
        report_type=payload.report_type,
        reporter_id=user_id,
        details=payload.details,
        now=utcnow(),
    )
    db.commit()
    db.refresh(report)
    return ReportResponse.model_validate(report)
