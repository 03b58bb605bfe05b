"""SQLAlchemy model for the trust-bearing subset of a user profile."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pintwatch.db.session import Base
from pintwatch.db.time import utcnow


class Profile(Base):
    """Per-user profile consulted by the moderation gate.

    Identity and sign-in live in the external auth provider; only the flags
    that gate auto-approval are kept here.
    """

    __tablename__ = "profile"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_trusted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    total_contributions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
