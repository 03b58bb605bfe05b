"""Models tracking user reports against listed content."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pintwatch.db.session import Base
from pintwatch.db.time import utcnow


class EntityType(str, Enum):
    """Closed set of subjects that can be voted on, verified or reported."""

    PUB = "pub"
    PRICE = "price"
    DEAL = "deal"
    AMENITY = "amenity"
    REVIEW = "review"
    PHOTO = "photo"


class ReportStatus(str, Enum):
    """Report triage states. ``reviewed`` is reserved; admins only resolve or dismiss."""

    PENDING = "pending"
    REVIEWED = "reviewed"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class Report(Base):
    """A flag raised by any user (or anonymously) against a subject."""

    __tablename__ = "report"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'reviewed', 'resolved', 'dismissed')",
            name="ck_report_status",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(64), nullable=False)
    reporter_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    report_type: Mapped[str] = mapped_column(String(40), nullable=False)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ReportStatus.PENDING.value
    )
    reviewed_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
