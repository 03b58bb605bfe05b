"""Price submission, voting and verification backed by the ORM."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from pintwatch.core.errors import NotFound, ValidationError
from pintwatch.core.settings import settings
from pintwatch.db.upsert import insert_or_lock
from pintwatch.models import Drink, PriceRecord, PriceVerification, PriceVote, Profile, Pub
from pintwatch.services.price_confidence import PriceConfidence, classify, freshness
from pintwatch.services.voting import VoteResult, VoteTally, bump_counter

logger = logging.getLogger(__name__)

VOTE_UP = "up"
VOTE_DOWN = "down"
PRICE_COUNTERS = {VOTE_UP: "upvotes", VOTE_DOWN: "downvotes"}


def validate_price(value: float | None, field: str = "price") -> float:
    """Reject missing or non-positive prices."""
    if value is None or value <= 0:
        raise ValidationError("Please enter a valid price greater than zero", field=field)
    return round(float(value), 2)


def credit_contribution(db: Session, user_id: str) -> None:
    """Increment a profile's contribution count if the profile exists."""
    profile = db.get(Profile, user_id)
    if profile is not None:
        bump_counter(db, profile, "total_contributions", 1)


def get_pub_or_404(db: Session, pub_id: int) -> Pub:
    pub = db.get(Pub, pub_id)
    if pub is None:
        raise NotFound("Pub not found")
    return pub


class PriceService:
    """Service handling price records and the signals users attach to them."""

    def __init__(self) -> None:
        self.votes = VoteTally(
            PriceVote,
            subject_columns=("price_id",),
            voter_column="voter_id",
            choice_column="vote_type",
            options=(VOTE_UP, VOTE_DOWN),
        )

    @staticmethod
    def get_price(db: Session, price_id: int) -> PriceRecord:
        price = db.get(PriceRecord, price_id)
        if price is None:
            raise NotFound("Price not found")
        return price

    @staticmethod
    def submit_price(
        db: Session,
        user_id: str,
        *,
        pub_id: int,
        drink_id: int,
        price: float,
        now: datetime,
    ) -> PriceRecord:
        """Record a plain (non-deal) price for one drink at one pub."""
        amount = validate_price(price)
        get_pub_or_404(db, pub_id)
        if db.get(Drink, drink_id) is None:
            raise ValidationError("Unknown drink", field="drink_id")

        record = PriceRecord(
            pub_id=pub_id,
            drink_id=drink_id,
            price=amount,
            is_deal=False,
            submitted_by=user_id,
            created_at=now,
        )
        db.add(record)
        credit_contribution(db, user_id)
        db.flush()
        return record

    def vote(self, db: Session, price_id: int, voter_id: str, vote_type: str) -> VoteResult:
        """Cast an up/down vote, keeping the price's counters in step."""
        price = self.get_price(db, price_id)
        return self.votes.cast_vote(
            db,
            {"price_id": price.id},
            voter_id,
            vote_type,
            counter_row=price,
            counter_fields=PRICE_COUNTERS,
        )

    def verify(
        self,
        db: Session,
        price_id: int,
        user_id: str,
        *,
        is_accurate: bool,
        proposed_price: float | None,
        now: datetime,
    ) -> PriceVerification:
        """Upsert the user's verification of a price.

        A dissent may carry a proposed price; it is stored as a correction
        signal and the record's ``price`` is left untouched.
        """
        price = self.get_price(db, price_id)
        if is_accurate:
            proposed_price = None
        elif proposed_price is not None:
            proposed_price = validate_price(proposed_price, field="proposed_price")

        fields = {"is_accurate": is_accurate, "proposed_price": proposed_price, "verified_at": now}
        verification, created = insert_or_lock(
            db, PriceVerification, {"price_id": price.id, "user_id": user_id}, fields
        )
        was_accurate = not created and verification.is_accurate
        for name, value in fields.items():
            setattr(verification, name, value)
        db.flush()

        if is_accurate and not was_accurate:
            bump_counter(db, price, "verification_count", 1)
        elif was_accurate and not is_accurate:
            bump_counter(db, price, "verification_count", -1)

        if is_accurate:
            price.last_verified_at = now
        else:
            price.last_verified_at = (
                db.query(func.max(PriceVerification.verified_at))
                .filter(
                    PriceVerification.price_id == price.id,
                    PriceVerification.is_accurate.is_(True),
                )
                .scalar()
            )
            if proposed_price is not None:
                logger.info(
                    "Price %s disputed by %s: %.2f proposed against %.2f",
                    price.id,
                    user_id,
                    proposed_price,
                    price.price,
                )
        return verification

    def recount(self, db: Session, price_id: int) -> PriceRecord:
        """Rebuild the cached counters of a price from the raw vote and verification rows."""
        price = self.get_price(db, price_id)
        tally = self.votes.tally(db, {"price_id": price.id})
        price.upvotes = tally.count(VOTE_UP)
        price.downvotes = tally.count(VOTE_DOWN)
        price.verification_count = (
            db.query(PriceVerification)
            .filter(
                PriceVerification.price_id == price.id,
                PriceVerification.is_accurate.is_(True),
            )
            .count()
        )
        db.flush()
        return price

    @staticmethod
    def confidence(db: Session, price: PriceRecord, now: datetime) -> PriceConfidence:
        verifications = (
            db.query(PriceVerification).filter(PriceVerification.price_id == price.id).all()
        )
        return classify(
            verifications,
            now,
            high_threshold=settings.price_high_confidence_threshold,
            window_days=settings.price_verification_window_days,
        )

    @staticmethod
    def freshness(price: PriceRecord, now: datetime) -> str:
        return freshness(
            price.created_at,
            now,
            fresh_days=settings.price_fresh_days,
            stale_days=settings.price_stale_days,
        )

    @staticmethod
    def history(db: Session, pub_id: int, drink_id: int) -> list[PriceRecord]:
        """Return the plain prices for one drink at one pub, oldest first."""
        get_pub_or_404(db, pub_id)
        return (
            db.query(PriceRecord)
            .filter(
                PriceRecord.pub_id == pub_id,
                PriceRecord.drink_id == drink_id,
                PriceRecord.is_deal.is_(False),
            )
            .order_by(PriceRecord.created_at, PriceRecord.id)
            .all()
        )
