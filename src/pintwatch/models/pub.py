"""SQLAlchemy models for pubs, their weekly hours and the drink catalogue."""

from __future__ import annotations

from datetime import datetime, time

from sqlalchemy import Boolean, DateTime, Integer, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column

from pintwatch.db.session import Base
from pintwatch.db.time import utcnow

# Monday first, matching datetime.weekday().
WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class Pub(Base):
    """A pub listing.

    Amenity flags are canonical values that the amenity consensus engine may
    overwrite; opening hours are one nullable (open, close) pair per weekday.
    """

    __tablename__ = "pub"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_permanently_closed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    has_food: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_live_music: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    shows_sports: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_outdoor_seating: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_pool: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_darts: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_board_games: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_speakeasy: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    hours_monday_open: Mapped[time | None] = mapped_column(Time, nullable=True)
    hours_monday_close: Mapped[time | None] = mapped_column(Time, nullable=True)
    hours_tuesday_open: Mapped[time | None] = mapped_column(Time, nullable=True)
    hours_tuesday_close: Mapped[time | None] = mapped_column(Time, nullable=True)
    hours_wednesday_open: Mapped[time | None] = mapped_column(Time, nullable=True)
    hours_wednesday_close: Mapped[time | None] = mapped_column(Time, nullable=True)
    hours_thursday_open: Mapped[time | None] = mapped_column(Time, nullable=True)
    hours_thursday_close: Mapped[time | None] = mapped_column(Time, nullable=True)
    hours_friday_open: Mapped[time | None] = mapped_column(Time, nullable=True)
    hours_friday_close: Mapped[time | None] = mapped_column(Time, nullable=True)
    hours_saturday_open: Mapped[time | None] = mapped_column(Time, nullable=True)
    hours_saturday_close: Mapped[time | None] = mapped_column(Time, nullable=True)
    hours_sunday_open: Mapped[time | None] = mapped_column(Time, nullable=True)
    hours_sunday_close: Mapped[time | None] = mapped_column(Time, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def weekly_hours(self) -> list[tuple[time | None, time | None]]:
        """Return the seven (open, close) pairs, Monday first."""
        return [
            (getattr(self, f"hours_{day}_open"), getattr(self, f"hours_{day}_close"))
            for day in WEEKDAYS
        ]


class Drink(Base):
    """Catalogue entry a price or deal can target."""

    __tablename__ = "drink"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    # "beer" or "cider".
    category: Mapped[str] = mapped_column(String(20), nullable=False, default="beer")
