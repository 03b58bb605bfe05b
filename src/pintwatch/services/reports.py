"""Report triage: pending reports are resolved or dismissed by an admin, once."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from pintwatch.core.errors import InvalidTransition, NotFound, ValidationError
from pintwatch.models import EntityType, Report, ReportStatus

logger = logging.getLogger(__name__)

# Every EntityType must appear here; see allowed_report_types.
REPORT_TYPES_BY_ENTITY: dict[EntityType, tuple[str, ...]] = {
    EntityType.PUB: ("pub_closed", "inappropriate", "other"),
    EntityType.PRICE: ("price_wrong", "other"),
    EntityType.DEAL: ("deal_expired", "price_wrong", "other"),
    EntityType.AMENITY: ("other",),
    EntityType.REVIEW: ("inappropriate", "other"),
    EntityType.PHOTO: ("inappropriate", "other"),
}

TERMINAL_STATUSES = (ReportStatus.RESOLVED, ReportStatus.DISMISSED)


def allowed_report_types(entity_type: EntityType) -> tuple[str, ...]:
    try:
        return REPORT_TYPES_BY_ENTITY[entity_type]
    except KeyError:  # pragma: no cover - guarded by the module test
        raise ValueError(f"No report types registered for {entity_type!r}") from None


def next_status(current: ReportStatus, outcome: ReportStatus) -> ReportStatus:
    """Return the status after triage, enforcing pending -> resolved|dismissed."""
    if outcome not in TERMINAL_STATUSES:
        raise ValidationError("Reports can only be resolved or dismissed", field="status")
    if current is not ReportStatus.PENDING:
        raise InvalidTransition(f"Report is already {current.value}")
    return outcome


class ReportService:
    """Creates reports and applies admin triage."""

    @staticmethod
    def create(
        db: Session,
        *,
        entity_type: EntityType,
        entity_id: str,
        report_type: str,
        reporter_id: str | None = None,
        details: str | None = None,
        now: datetime,
    ) -> Report:
        """File a report; anonymous reporters are accepted."""
        if not entity_id:
            raise ValidationError("entity_id is required", field="entity_id")
        if report_type not in allowed_report_types(entity_type):
            raise ValidationError(
                f"Report type {report_type!r} does not apply to {entity_type.value}",
                field="report_type",
            )
        report = Report(
            entity_type=entity_type.value,
            entity_id=entity_id,
            report_type=report_type,
            reporter_id=reporter_id,
            details=(details or "").strip() or None,
            status=ReportStatus.PENDING.value,
            created_at=now,
        )
        db.add(report)
        db.flush()
        return report

    @staticmethod
    def triage(
        db: Session,
        admin_id: str,
        report_id: int,
        outcome: ReportStatus,
        now: datetime,
    ) -> Report:
        """Move a pending report to a terminal status.

        The caller must already have checked that ``admin_id`` is an admin.
        """
        report = db.get(Report, report_id)
        if report is None:
            raise NotFound("Report not found")
        report.status = next_status(ReportStatus(report.status), outcome).value
        report.reviewed_by = admin_id
        report.reviewed_at = now
        db.flush()
        logger.info("Report %s %s by %s", report.id, report.status, admin_id)
        return report

    @staticmethod
    def list_reports(db: Session, status: ReportStatus | None = None) -> list[Report]:
        query = db.query(Report)
        if status is not None:
            query = query.filter(Report.status == status.value)
        return query.order_by(Report.created_at.desc(), Report.id.desc()).all()
