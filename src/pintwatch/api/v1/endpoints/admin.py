"""Admin endpoints: moderation queue, decisions, profile flags and report triage."""

from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from pintwatch.api.v1.dependencies import CurrentUserDep, ModerationServiceDep, SessionDep
from pintwatch.db.time import utcnow
from pintwatch.models import PubPhoto, ReportStatus
from pintwatch.schemas.content import (
    ModerationDecision,
    ModerationQueueResponse,
    PhotoResponse,
    ProfileFlagsUpdate,
    ProfileResponse,
    ReviewResponse,
)
from pintwatch.schemas.report import ReportResponse, ReportTriage
from pintwatch.services.moderation import ContentKind, Decision, average_rating
from pintwatch.services.reports import ReportService

router = APIRouter(prefix="/admin", tags=["admin"])


def _review_response(review) -> ReviewResponse:
    return ReviewResponse.model_validate(review).model_copy(
        update={"average_rating": average_rating(review)}
    )


@router.get("/queue", response_model=ModerationQueueResponse)
async def get_moderation_queue(
    admin_id: CurrentUserDep,
    db: SessionDep,
    moderation: ModerationServiceDep,
) -> ModerationQueueResponse:
    """Return reviews and photos awaiting a decision."""
    queue = moderation.pending_queue(db, admin_id)
    return ModerationQueueResponse(
        reviews=[_review_response(review) for review in queue["reviews"]],
        photos=[PhotoResponse.model_validate(photo) for photo in queue["photos"]],
    )


@router.post("/{kind}/{item_id}/decision", response_model=None)
async def decide(
    kind: ContentKind,
    item_id: int,
    payload: ModerationDecision,
    admin_id: CurrentUserDep,
    db: SessionDep,
    moderation: ModerationServiceDep,
) -> ReviewResponse | PhotoResponse | Response:
    """Approve, approve-and-trust, or reject (delete) a pending item."""
    item = moderation.decide(db, admin_id, kind, item_id, Decision(payload.decision))
    db.commit()
    if item is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    db.refresh(item)
    if isinstance(item, PubPhoto):
        return PhotoResponse.model_validate(item)
    return _review_response(item)


@router.patch("/profiles/{user_id}", response_model=ProfileResponse)
async def update_profile_flags(
    user_id: str,
    payload: ProfileFlagsUpdate,
    admin_id: CurrentUserDep,
    db: SessionDep,
    moderation: ModerationServiceDep,
) -> ProfileResponse:
    """Set or revoke a profile's trusted/admin flags."""
    profile = moderation.set_profile_flags(
        db,
        admin_id,
        user_id,
        is_trusted=payload.is_trusted,
        is_admin=payload.is_admin,
    )
    db.commit()
    db.refresh(profile)
    return ProfileResponse.model_validate(profile)


@router.get("/reports", response_model=list[ReportResponse])
async def list_reports(
    admin_id: CurrentUserDep,
    db: SessionDep,
    moderation: ModerationServiceDep,
    status_filter: ReportStatus | None = Query(None, alias="status"),
) -> list[ReportResponse]:
    """List reports, newest first."""
    moderation.require_admin(db, admin_id)
    return [ReportResponse.model_validate(report) for report in ReportService.list_reports(db, status_filter)]


@router.post("/reports/{report_id}/triage", response_model=ReportResponse)
async def triage_report(
    report_id: int,
    payload: ReportTriage,
    admin_id: CurrentUserDep,
    db: SessionDep,
    moderation: ModerationServiceDep,
) -> ReportResponse:
    """Resolve or dismiss a pending report."""
    moderation.require_admin(db, admin_id)
    report = ReportService.triage(db, admin_id, report_id, ReportStatus(payload.status), utcnow())
    db.commit()
    db.refresh(report)
    return ReportResponse.model_validate(report)
