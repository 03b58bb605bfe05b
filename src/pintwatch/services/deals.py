"""Deal normalisation and live/expired status.

Deal submissions arrive in several shapes (one drink, a choice of drinks,
"all pints", "all drinks", food only, food combos). ``normalize`` folds them
into a single targeting value; a sentinel target and an explicit drink list
never coexist.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, time
from enum import Enum
from typing import Union

from sqlalchemy.orm import Session

from pintwatch.core.errors import InvalidTransition, NotFound, PermissionDenied, ValidationError
from pintwatch.db.time import as_utc
from pintwatch.models import Drink, PriceRecord
from pintwatch.services.prices import credit_contribution, get_pub_or_404, validate_price

logger = logging.getLogger(__name__)

STATUS_ACTIVE = "active"
STATUS_EXPIRED = "expired"

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class DealType(str, Enum):
    DRINK_ONLY = "drink_only"
    FOOD_ONLY = "food_only"
    FOOD_COMBO = "food_combo"


class DealTarget(str, Enum):
    SPECIFIC = "specific"
    ALL_PINTS = "all_pints"
    ALL_DRINKS = "all_drinks"


@dataclass(frozen=True)
class Single:
    drink_id: int


@dataclass(frozen=True)
class MultiChoice:
    drink_ids: tuple[int, ...]


@dataclass(frozen=True)
class AllPints:
    pass


@dataclass(frozen=True)
class AllDrinks:
    pass


@dataclass(frozen=True)
class NoDrinks:
    """Food-only deal; no drink targeting."""


Targeting = Union[Single, MultiChoice, AllPints, AllDrinks, NoDrinks]


def normalize(
    deal_type: DealType,
    deal_target: DealTarget,
    drink_ids: Sequence[int] = (),
    food_item: str | None = None,
) -> Targeting:
    """Validate a deal submission and return its canonical targeting.

    Raises:
        ValidationError: If a drink deal in specific mode selects no drinks,
            or a food deal lacks a food item.
    """
    has_food = bool(food_item and food_item.strip())
    if deal_type in (DealType.FOOD_ONLY, DealType.FOOD_COMBO) and not has_food:
        raise ValidationError("Please enter a food item", field="food_item")

    if deal_type is DealType.FOOD_ONLY:
        return NoDrinks()
    if deal_target is DealTarget.ALL_PINTS:
        return AllPints()
    if deal_target is DealTarget.ALL_DRINKS:
        return AllDrinks()

    unique_ids = tuple(dict.fromkeys(drink_ids))
    if not unique_ids:
        raise ValidationError("Please select at least one drink", field="drink_ids")
    if len(unique_ids) == 1:
        return Single(unique_ids[0])
    return MultiChoice(unique_ids)


def targeting_columns(targeting: Targeting) -> dict[str, object]:
    """Map a targeting value onto the price record's storage columns."""
    columns: dict[str, object] = {"drink_id": None, "drink_ids": None, "deal_target": None}
    if isinstance(targeting, Single):
        columns["drink_id"] = targeting.drink_id
    elif isinstance(targeting, MultiChoice):
        columns["drink_ids"] = list(targeting.drink_ids)
    elif isinstance(targeting, AllPints):
        columns["deal_target"] = DealTarget.ALL_PINTS.value
    elif isinstance(targeting, AllDrinks):
        columns["deal_target"] = DealTarget.ALL_DRINKS.value
    return columns


def targeting_of(record: PriceRecord) -> Targeting:
    """Rebuild the targeting value from a stored record."""
    if record.deal_target == DealTarget.ALL_PINTS.value:
        return AllPints()
    if record.deal_target == DealTarget.ALL_DRINKS.value:
        return AllDrinks()
    if record.drink_ids:
        return MultiChoice(tuple(record.drink_ids))
    if record.drink_id is not None:
        return Single(record.drink_id)
    return NoDrinks()


def describe_targeting(targeting: Targeting, drink_names: dict[int, str]) -> str:
    if isinstance(targeting, AllPints):
        return "All Pints"
    if isinstance(targeting, AllDrinks):
        return "All Drinks"
    if isinstance(targeting, Single):
        return drink_names.get(targeting.drink_id, "Unknown")
    if isinstance(targeting, MultiChoice):
        return " or ".join(drink_names.get(drink_id, "Unknown") for drink_id in targeting.drink_ids)
    return "Food"


def derive_status(deal_end_date: datetime | None, now: datetime) -> str:
    """Return ``expired`` iff an end date is set and strictly before ``now``.

    The start date is deliberately ignored: upcoming deals show as active.
    """
    if deal_end_date is not None and as_utc(deal_end_date) < as_utc(now):
        return STATUS_EXPIRED
    return STATUS_ACTIVE


def build_schedule(
    days: Sequence[str],
    start_time: time | None = None,
    end_time: time | None = None,
) -> str | None:
    """Render selected days and an optional time range as schedule text."""
    unknown = [day for day in days if day not in DAY_NAMES]
    if unknown:
        raise ValidationError(f"Unknown day: {unknown[0]}", field="days")
    selected = [day for day in DAY_NAMES if day in set(days)]

    if len(selected) == 7:
        schedule = "Daily"
    elif selected == list(DAY_NAMES[:5]):
        schedule = "Mon-Fri"
    elif selected == ["Sat", "Sun"]:
        schedule = "Weekends"
    else:
        schedule = ", ".join(selected)

    if start_time is not None and end_time is not None:
        window = f"{start_time:%H:%M}-{end_time:%H:%M}"
        schedule = f"{schedule} {window}" if schedule else window
    return schedule or None


class DealService:
    """Creates, expires and lists deals stored as price records."""

    @staticmethod
    def submit(
        db: Session,
        user_id: str,
        *,
        pub_id: int,
        deal_type: DealType,
        deal_target: DealTarget,
        drink_ids: Sequence[int],
        food_item: str | None,
        price: float,
        now: datetime,
        deal_title: str | None = None,
        deal_description: str | None = None,
        days: Sequence[str] = (),
        start_time: time | None = None,
        end_time: time | None = None,
        deal_start_date: datetime | None = None,
        deal_end_date: datetime | None = None,
    ) -> PriceRecord:
        """Validate, normalise and store a deal."""
        amount = validate_price(price)
        targeting = normalize(deal_type, deal_target, drink_ids, food_item)
        schedule = build_schedule(days, start_time, end_time)
        get_pub_or_404(db, pub_id)

        wanted = set()
        if isinstance(targeting, Single):
            wanted = {targeting.drink_id}
        elif isinstance(targeting, MultiChoice):
            wanted = set(targeting.drink_ids)
        if wanted:
            known = {row[0] for row in db.query(Drink.id).filter(Drink.id.in_(wanted)).all()}
            if wanted - known:
                raise ValidationError("Unknown drink selected", field="drink_ids")

        record = PriceRecord(
            pub_id=pub_id,
            price=amount,
            is_deal=True,
            deal_type=deal_type.value,
            deal_title=(deal_title or "").strip() or None,
            deal_description=(deal_description or "").strip() or None,
            food_item=food_item.strip() if deal_type is not DealType.DRINK_ONLY and food_item else None,
            deal_schedule=schedule,
            deal_start_date=deal_start_date,
            deal_end_date=deal_end_date,
            submitted_by=user_id,
            created_at=now,
            **targeting_columns(targeting),
        )
        db.add(record)
        credit_contribution(db, user_id)
        db.flush()
        return record

    @staticmethod
    def get_deal(db: Session, deal_id: int) -> PriceRecord:
        deal = db.get(PriceRecord, deal_id)
        if deal is None or not deal.is_deal:
            raise NotFound("Deal not found")
        return deal

    def expire(self, db: Session, user_id: str, is_admin: bool, deal_id: int, now: datetime) -> PriceRecord:
        """Expire a deal now; only its submitter or an admin may do so.

        Raises:
            PermissionDenied: If the caller neither submitted the deal nor is an admin.
            InvalidTransition: If the deal has already expired.
        """
        deal = self.get_deal(db, deal_id)
        if deal.submitted_by != user_id and not is_admin:
            raise PermissionDenied("Only the submitter or an admin can expire this deal")
        if derive_status(deal.deal_end_date, now) == STATUS_EXPIRED:
            raise InvalidTransition(f"Deal {deal.id} has already expired")
        deal.deal_end_date = now
        db.flush()
        logger.info("Deal %s expired by %s", deal.id, user_id)
        return deal

    @staticmethod
    def list_deals(
        db: Session, now: datetime, *, pub_id: int | None = None, status: str | None = None
    ) -> list[PriceRecord]:
        """Return deals newest first, optionally filtered by pub and derived status."""
        query = db.query(PriceRecord).filter(PriceRecord.is_deal.is_(True))
        if pub_id is not None:
            query = query.filter(PriceRecord.pub_id == pub_id)
        deals = query.order_by(PriceRecord.created_at.desc(), PriceRecord.id.desc()).all()
        if status is None:
            return deals
        return [deal for deal in deals if derive_status(deal.deal_end_date, now) == status]
