"""Models for price records, deals and the vote/verification logs behind them."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from pintwatch.db.session import Base
from pintwatch.db.time import utcnow


class PriceRecord(Base):
    """A submitted price, optionally a deal.

    ``upvotes``, ``downvotes`` and ``verification_count`` are caches of the
    PriceVote and PriceVerification logs; they are only ever changed in the
    same transaction as the row that justifies the change.
    """

    __tablename__ = "price"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_price_positive"),
        Index("ix_price_pub_drink", "pub_id", "drink_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pub_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("pub.id", ondelete="CASCADE"), nullable=False
    )

    # Targeting: exactly one of drink_id / drink_ids / deal_target sentinel, or none (food only).
    drink_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("drink.id"), nullable=True
    )
    drink_ids: Mapped[list[int] | None] = mapped_column(JSON, nullable=True)
    # "all_pints" or "all_drinks" when a sentinel applies.
    deal_target: Mapped[str | None] = mapped_column(String(20), nullable=True)

    price: Mapped[float] = mapped_column(Numeric(8, 2, asdecimal=False), nullable=False)

    is_deal: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    deal_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    deal_title: Mapped[str | None] = mapped_column(Text, nullable=True)
    deal_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    food_item: Mapped[str | None] = mapped_column(Text, nullable=True)
    deal_schedule: Mapped[str | None] = mapped_column(Text, nullable=True)
    deal_start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deal_end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    submitted_by: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    verification_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class PriceVote(Base):
    """Per-user up/down vote on a price record."""

    __tablename__ = "price_vote"
    __table_args__ = (
        CheckConstraint("vote_type IN ('up', 'down')", name="ck_price_vote_type"),
        Index("ix_price_vote_price_id", "price_id"),
    )

    price_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("price.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # Composite primary key prevents duplicate votes from the same user.
    voter_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    vote_type: Mapped[str] = mapped_column(String(4), nullable=False)


class PriceVerification(Base):
    """A user's latest statement on whether a price is still accurate."""

    __tablename__ = "price_verification"

    price_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("price.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    is_accurate: Mapped[bool] = mapped_column(Boolean, nullable=False)
    proposed_price: Mapped[float | None] = mapped_column(
        Numeric(8, 2, asdecimal=False), nullable=True
    )
    verified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
