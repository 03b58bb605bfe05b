"""Tests for storing, expiring and listing deals."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.orm import Session

from pintwatch.core.errors import InvalidTransition, PermissionDenied, ValidationError
from pintwatch.models import Drink, PriceRecord, Profile, Pub
from pintwatch.services.deals import (
    STATUS_ACTIVE,
    STATUS_EXPIRED,
    AllPints,
    DealService,
    DealTarget,
    DealType,
    MultiChoice,
    derive_status,
    targeting_of,
)
from tests.conftest import OTHER_USER_ID, USER_ID

NOW = datetime(2026, 10, 17, 18, 0, tzinfo=UTC)


@pytest.fixture()
def service() -> DealService:
    return DealService()


def make_deal(db: Session, service: DealService, pub: Pub, **overrides) -> PriceRecord:
    fields = {
        "pub_id": pub.id,
        "deal_type": DealType.DRINK_ONLY,
        "deal_target": DealTarget.ALL_PINTS,
        "drink_ids": [],
        "food_item": None,
        "price": 5.0,
        "now": NOW,
    }
    fields.update(overrides)
    return service.submit(db, USER_ID, **fields)


def test_all_pints_deal_stores_no_drink_list(
    db_session: Session, service: DealService, pub: Pub, drinks: dict[str, Drink]
) -> None:
    deal = make_deal(
        db_session,
        service,
        pub,
        drink_ids=[drinks["Guinness"].id, drinks["Heineken"].id],
        days=["Mon", "Tue", "Wed", "Thu", "Fri"],
    )

    assert deal.is_deal
    assert deal.deal_target == "all_pints"
    assert deal.drink_id is None
    assert deal.drink_ids is None
    assert deal.deal_schedule == "Mon-Fri"
    assert targeting_of(deal) == AllPints()


def test_multi_choice_deal(
    db_session: Session, service: DealService, pub: Pub, drinks: dict[str, Drink]
) -> None:
    ids = [drinks["Guinness"].id, drinks["Bulmers"].id]
    deal = make_deal(db_session, service, pub, deal_target=DealTarget.SPECIFIC, drink_ids=ids)

    assert targeting_of(deal) == MultiChoice(tuple(ids))


def test_unknown_drink_is_rejected(db_session: Session, service: DealService, pub: Pub) -> None:
    with pytest.raises(ValidationError):
        make_deal(db_session, service, pub, deal_target=DealTarget.SPECIFIC, drink_ids=[999])
    assert db_session.query(PriceRecord).count() == 0


def test_future_start_date_is_still_listed_as_active(
    db_session: Session, service: DealService, pub: Pub
) -> None:
    deal = make_deal(db_session, service, pub, deal_start_date=NOW + timedelta(days=7))

    assert service.list_deals(db_session, NOW, status=STATUS_ACTIVE) == [deal]


def test_past_end_date_is_expired(db_session: Session, service: DealService, pub: Pub) -> None:
    deal = make_deal(db_session, service, pub, deal_end_date=NOW - timedelta(days=1))

    assert derive_status(deal.deal_end_date, NOW) == STATUS_EXPIRED
    assert service.list_deals(db_session, NOW, status=STATUS_ACTIVE) == []
    assert service.list_deals(db_session, NOW, status=STATUS_EXPIRED) == [deal]


def test_expire_by_submitter(db_session: Session, service: DealService, pub: Pub) -> None:
    deal = make_deal(db_session, service, pub)

    service.expire(db_session, USER_ID, False, deal.id, NOW)

    assert derive_status(deal.deal_end_date, NOW + timedelta(seconds=1)) == STATUS_EXPIRED


def test_expire_by_stranger_is_denied(db_session: Session, service: DealService, pub: Pub) -> None:
    deal = make_deal(db_session, service, pub)

    with pytest.raises(PermissionDenied):
        service.expire(db_session, OTHER_USER_ID, False, deal.id, NOW)
    service.expire(db_session, OTHER_USER_ID, True, deal.id, NOW)


def test_expiring_an_expired_deal_is_rejected(
    db_session: Session, service: DealService, pub: Pub
) -> None:
    deal = make_deal(db_session, service, pub)
    service.expire(db_session, USER_ID, False, deal.id, NOW)

    with pytest.raises(InvalidTransition):
        service.expire(db_session, USER_ID, False, deal.id, NOW + timedelta(minutes=5))
    assert deal.deal_end_date.replace(tzinfo=UTC) == NOW


def test_food_deal_keeps_food_item(
    db_session: Session, service: DealService, pub: Pub, profiles: dict[str, Profile]
) -> None:
    deal = make_deal(db_session, service, pub, deal_type=DealType.FOOD_ONLY, food_item=" Toastie ")

    assert deal.food_item == "Toastie"
    assert deal.deal_target is None
    assert profiles[USER_ID].total_contributions == 1
