"""Tests for price submission, voting and verification against the ORM."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.orm import Session

from pintwatch.core.errors import NotFound, ValidationError
from pintwatch.models import Drink, PriceRecord, Profile, Pub
from pintwatch.services.price_confidence import LEVEL_HIGH, LEVEL_LOW, LEVEL_MEDIUM
from pintwatch.services.prices import VOTE_DOWN, VOTE_UP, PriceService
from pintwatch.services.voting import VoteApplied
from tests.conftest import OTHER_USER_ID, TRUSTED_USER_ID, USER_ID

NOW = datetime(2026, 10, 17, 20, 0, tzinfo=UTC)


@pytest.fixture()
def service() -> PriceService:
    return PriceService()


@pytest.fixture()
def price(
    db_session: Session,
    service: PriceService,
    pub: Pub,
    drinks: dict[str, Drink],
    profiles: dict[str, Profile],
) -> PriceRecord:
    return service.submit_price(
        db_session,
        USER_ID,
        pub_id=pub.id,
        drink_id=drinks["Guinness"].id,
        price=6.2,
        now=NOW,
    )


def test_submit_price_credits_contribution(price: PriceRecord, profiles: dict[str, Profile]) -> None:
    assert price.price == 6.2
    assert not price.is_deal
    assert profiles[USER_ID].total_contributions == 1


@pytest.mark.parametrize("amount", [0, -1.5])
def test_submit_price_rejects_non_positive(
    db_session: Session, service: PriceService, pub: Pub, drinks: dict[str, Drink], amount: float
) -> None:
    with pytest.raises(ValidationError):
        service.submit_price(
            db_session, USER_ID, pub_id=pub.id, drink_id=drinks["Guinness"].id, price=amount, now=NOW
        )
    assert db_session.query(PriceRecord).count() == 0


def test_submit_price_unknown_pub(db_session: Session, service: PriceService, drinks: dict[str, Drink]) -> None:
    with pytest.raises(NotFound):
        service.submit_price(
            db_session, USER_ID, pub_id=999, drink_id=drinks["Guinness"].id, price=5.0, now=NOW
        )


def test_vote_toggle_and_replace_keep_counters_consistent(
    db_session: Session, service: PriceService, price: PriceRecord
) -> None:
    """Counters match the raw vote rows after every kind of cast."""
    sequence = [
        (USER_ID, VOTE_UP, VoteApplied.ADDED),
        (OTHER_USER_ID, VOTE_UP, VoteApplied.ADDED),
        (USER_ID, VOTE_DOWN, VoteApplied.REPLACED),
        (OTHER_USER_ID, VOTE_UP, VoteApplied.REMOVED),
        (TRUSTED_USER_ID, VOTE_DOWN, VoteApplied.ADDED),
        (USER_ID, VOTE_DOWN, VoteApplied.REMOVED),
        (USER_ID, VOTE_UP, VoteApplied.ADDED),
    ]
    for voter, choice, expected in sequence:
        result = service.vote(db_session, price.id, voter, choice)
        assert result.applied is expected

        tally = service.votes.tally(db_session, {"price_id": price.id})
        assert price.upvotes == tally.count(VOTE_UP)
        assert price.downvotes == tally.count(VOTE_DOWN)

    assert (price.upvotes, price.downvotes) == (1, 1)


def test_vote_rejects_unknown_choice(db_session: Session, service: PriceService, price: PriceRecord) -> None:
    with pytest.raises(ValidationError):
        service.vote(db_session, price.id, USER_ID, "sideways")


def test_recount_repairs_drifted_counters(
    db_session: Session, service: PriceService, price: PriceRecord
) -> None:
    service.vote(db_session, price.id, USER_ID, VOTE_UP)
    service.verify(db_session, price.id, OTHER_USER_ID, is_accurate=True, proposed_price=None, now=NOW)
    price.upvotes = 40
    price.verification_count = 9

    service.recount(db_session, price.id)

    assert price.upvotes == 1
    assert price.downvotes == 0
    assert price.verification_count == 1


def test_verification_is_upserted_per_user(
    db_session: Session, service: PriceService, price: PriceRecord
) -> None:
    service.verify(db_session, price.id, OTHER_USER_ID, is_accurate=True, proposed_price=None, now=NOW)
    service.verify(db_session, price.id, OTHER_USER_ID, is_accurate=True, proposed_price=None, now=NOW)

    assert price.verification_count == 1
    assert price.last_verified_at == NOW


def test_dissent_records_proposal_without_changing_price(
    db_session: Session, service: PriceService, price: PriceRecord
) -> None:
    service.verify(
        db_session, price.id, OTHER_USER_ID, is_accurate=True, proposed_price=None, now=NOW - timedelta(days=1)
    )
    service.verify(db_session, price.id, OTHER_USER_ID, is_accurate=False, proposed_price=6.5, now=NOW)

    assert price.price == 6.2
    assert price.verification_count == 0
    assert price.last_verified_at is None

    confidence = service.confidence(db_session, price, NOW)
    assert confidence.level == LEVEL_LOW
    assert confidence.dissent_count == 1
    assert confidence.proposed_price == 6.5


def test_dissent_rejects_invalid_proposal(
    db_session: Session, service: PriceService, price: PriceRecord
) -> None:
    with pytest.raises(ValidationError) as excinfo:
        service.verify(db_session, price.id, OTHER_USER_ID, is_accurate=False, proposed_price=0, now=NOW)

    assert excinfo.value.field == "proposed_price"


def test_confidence_levels_follow_recent_verifications(
    db_session: Session, service: PriceService, price: PriceRecord
) -> None:
    assert service.confidence(db_session, price, NOW).level == LEVEL_LOW

    service.verify(db_session, price.id, USER_ID, is_accurate=True, proposed_price=None, now=NOW)
    assert service.confidence(db_session, price, NOW).level == LEVEL_MEDIUM

    for voter in (OTHER_USER_ID, TRUSTED_USER_ID):
        service.verify(db_session, price.id, voter, is_accurate=True, proposed_price=None, now=NOW)
    assert service.confidence(db_session, price, NOW).level == LEVEL_HIGH
    assert service.confidence(db_session, price, NOW + timedelta(days=31)).level == LEVEL_LOW


def test_votes_do_not_affect_confidence(
    db_session: Session, service: PriceService, price: PriceRecord
) -> None:
    for voter in (USER_ID, OTHER_USER_ID, TRUSTED_USER_ID):
        service.vote(db_session, price.id, voter, VOTE_UP)

    assert service.confidence(db_session, price, NOW).level == LEVEL_LOW


def test_history_lists_plain_prices_oldest_first(
    db_session: Session, service: PriceService, pub: Pub, drinks: dict[str, Drink], price: PriceRecord
) -> None:
    later = service.submit_price(
        db_session,
        OTHER_USER_ID,
        pub_id=pub.id,
        drink_id=drinks["Guinness"].id,
        price=6.4,
        now=NOW + timedelta(days=3),
    )
    service.submit_price(
        db_session,
        OTHER_USER_ID,
        pub_id=pub.id,
        drink_id=drinks["Heineken"].id,
        price=6.9,
        now=NOW,
    )

    history = service.history(db_session, pub.id, drinks["Guinness"].id)

    assert [record.id for record in history] == [price.id, later.id]
