"""Models for moderated user content: reviews and photos."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from pintwatch.db.session import Base
from pintwatch.db.time import utcnow

RATING_CATEGORIES = (
    "pint_quality",
    "ambience",
    "food_quality",
    "staff_friendliness",
    "safety",
    "value_for_money",
)


class Review(Base):
    """One review per (pub, user); resubmission overwrites in place."""

    __tablename__ = "review"
    __table_args__ = (
        UniqueConstraint("pub_id", "user_id", name="uq_review_pub_user"),
        *(
            CheckConstraint(
                f"{category} IS NULL OR {category} BETWEEN 1 AND 5",
                name=f"ck_review_{category}",
            )
            for category in RATING_CATEGORIES
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pub_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("pub.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)

    pint_quality: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    ambience: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    food_quality: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    staff_friendliness: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    safety: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    value_for_money: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class PubPhoto(Base):
    """A photo submitted for a pub; the file itself lives in external storage."""

    __tablename__ = "pub_photo"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pub_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("pub.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    storage_path: Mapped[str] = mapped_column(Text, nullable=False)
    caption: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
