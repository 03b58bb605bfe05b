"""initial consensus schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
AMENITIES = (
    "has_food",
    "has_live_music",
    "shows_sports",
    "has_outdoor_seating",
    "has_pool",
    "has_darts",
    "has_board_games",
    "is_speakeasy",
)
RATINGS = (
    "pint_quality",
    "ambience",
    "food_quality",
    "staff_friendliness",
    "safety",
    "value_for_money",
)


def upgrade() -> None:
    """Create pubs, prices, votes, verifications, content, reports and profiles."""
    op.create_table(
        "profile",
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("is_trusted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("total_contributions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )
    op.create_table(
        "pub",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("address", sa.Text(), nullable=False, server_default=""),
        sa.Column(
            "is_permanently_closed", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        *(
            sa.Column(amenity, sa.Boolean(), nullable=False, server_default=sa.false())
            for amenity in AMENITIES
        ),
        *(
            sa.Column(f"hours_{day}_{edge}", sa.Time(), nullable=True)
            for day in WEEKDAYS
            for edge in ("open", "close")
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "drink",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("category", sa.String(length=20), nullable=False, server_default="beer"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "price",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("pub_id", sa.Integer(), nullable=False),
        sa.Column("drink_id", sa.Integer(), nullable=True),
        sa.Column("drink_ids", sa.JSON(), nullable=True),
        sa.Column("deal_target", sa.String(length=20), nullable=True),
        sa.Column("price", sa.Numeric(precision=8, scale=2), nullable=False),
        sa.Column("is_deal", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deal_type", sa.String(length=20), nullable=True),
        sa.Column("deal_title", sa.Text(), nullable=True),
        sa.Column("deal_description", sa.Text(), nullable=True),
        sa.Column("food_item", sa.Text(), nullable=True),
        sa.Column("deal_schedule", sa.Text(), nullable=True),
        sa.Column("deal_start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deal_end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("submitted_by", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("upvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("downvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("verification_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("price > 0", name="ck_price_positive"),
        sa.ForeignKeyConstraint(["pub_id"], ["pub.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["drink_id"], ["drink.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_price_pub_drink", "price", ["pub_id", "drink_id"])
    op.create_table(
        "price_vote",
        sa.Column("price_id", sa.Integer(), nullable=False),
        sa.Column("voter_id", sa.String(length=64), nullable=False),
        sa.Column("vote_type", sa.String(length=4), nullable=False),
        sa.CheckConstraint("vote_type IN ('up', 'down')", name="ck_price_vote_type"),
        sa.ForeignKeyConstraint(["price_id"], ["price.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("price_id", "voter_id"),
    )
    op.create_index("ix_price_vote_price_id", "price_vote", ["price_id"])
    op.create_table(
        "price_verification",
        sa.Column("price_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("is_accurate", sa.Boolean(), nullable=False),
        sa.Column("proposed_price", sa.Numeric(precision=8, scale=2), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["price_id"], ["price.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("price_id", "user_id"),
    )
    op.create_table(
        "amenity_vote",
        sa.Column("pub_id", sa.Integer(), nullable=False),
        sa.Column("amenity", sa.String(length=40), nullable=False),
        sa.Column("voter_id", sa.String(length=64), nullable=False),
        sa.Column("vote", sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(["pub_id"], ["pub.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("pub_id", "amenity", "voter_id"),
    )
    op.create_index("ix_amenity_vote_pub_amenity", "amenity_vote", ["pub_id", "amenity"])
    op.create_table(
        "review",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("pub_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        *(sa.Column(rating, sa.SmallInteger(), nullable=True) for rating in RATINGS),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        *(
            sa.CheckConstraint(
                f"{rating} IS NULL OR {rating} BETWEEN 1 AND 5", name=f"ck_review_{rating}"
            )
            for rating in RATINGS
        ),
        sa.ForeignKeyConstraint(["pub_id"], ["pub.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("pub_id", "user_id", name="uq_review_pub_user"),
    )
    op.create_table(
        "pub_photo",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("pub_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("storage_path", sa.Text(), nullable=False),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("is_approved", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["pub_id"], ["pub.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "report",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("entity_type", sa.String(length=20), nullable=False),
        sa.Column("entity_id", sa.String(length=64), nullable=False),
        sa.Column("reporter_id", sa.String(length=64), nullable=True),
        sa.Column("report_type", sa.String(length=40), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("reviewed_by", sa.String(length=64), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "status IN ('pending', 'reviewed', 'resolved', 'dismissed')",
            name="ck_report_status",
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_table("report")
    op.drop_table("pub_photo")
    op.drop_table("review")
    op.drop_index("ix_amenity_vote_pub_amenity", table_name="amenity_vote")
    op.drop_table("amenity_vote")
    op.drop_table("price_verification")
    op.drop_index("ix_price_vote_price_id", table_name="price_vote")
    op.drop_table("price_vote")
    op.drop_index("ix_price_pub_drink", table_name="price")
    op.drop_table("price")
    op.drop_table("drink")
    op.drop_table("pub")
    op.drop_table("profile")
