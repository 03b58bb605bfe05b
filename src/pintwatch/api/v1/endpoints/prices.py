"""Price submission, voting and verification endpoints."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, status
from sqlalchemy.orm import Session

from pintwatch.api.v1.dependencies import CurrentUserDep, SessionDep, UtcNowDep
from pintwatch.db.time import utcnow
from pintwatch.models import PriceRecord
from pintwatch.schemas.price import (
    ConfidenceResponse,
    PriceCreate,
    PriceDetailResponse,
    PriceResponse,
    VerificationCreate,
    VerificationResponse,
)
from pintwatch.schemas.vote import PriceVoteCreate, VoteResponse
from pintwatch.services.prices import VOTE_DOWN, VOTE_UP, PriceService

router = APIRouter(prefix="/prices", tags=["prices"])
price_service = PriceService()


def build_price_detail(db: Session, price: PriceRecord, now: datetime) -> PriceDetailResponse:
    """Attach score, confidence and freshness to a price record."""
    confidence = price_service.confidence(db, price, now)
    base = PriceResponse.model_validate(price).model_dump()
    return PriceDetailResponse(
        **base,
        score=price.upvotes - price.downvotes,
        confidence=ConfidenceResponse(
            level=confidence.level,
            recent_verifications=confidence.recent_verifications,
            dissent_count=confidence.dissent_count,
            proposed_price=confidence.proposed_price,
            last_verified_at=confidence.last_verified_at,
        ),
        freshness=price_service.freshness(price, now),
    )


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=PriceDetailResponse)
async def submit_price(
    payload: PriceCreate,
    user_id: CurrentUserDep,
    db: SessionDep,
) -> PriceDetailResponse:
    """Submit a drink price for a pub."""
    now = utcnow()
    price = price_service.submit_price(
        db,
        user_id,
        pub_id=payload.pub_id,
        drink_id=payload.drink_id,
        price=payload.price,
        now=now,
    )
    db.commit()
    db.refresh(price)
    return build_price_detail(db, price, now)


@router.get("/{price_id}", response_model=PriceDetailResponse)
async def get_price(price_id: int, db: SessionDep, now: UtcNowDep) -> PriceDetailResponse:
    """Return a price with its confidence level and freshness."""
    price = price_service.get_price(db, price_id)
    return build_price_detail(db, price, now)


@router.post("/{price_id}/votes", response_model=VoteResponse)
async def vote_on_price(
    price_id: int,
    payload: PriceVoteCreate,
    user_id: CurrentUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Cast, switch or withdraw an up/down vote on a price."""
    result = price_service.vote(db, price_id, user_id, payload.vote_type)
    db.commit()
    price = price_service.get_price(db, price_id)
    return VoteResponse(
        applied=result.applied.value,
        current=result.current,
        counts={VOTE_UP: price.upvotes, VOTE_DOWN: price.downvotes},
        total=price.upvotes + price.downvotes,
    )


@router.post("/{price_id}/verifications", response_model=VerificationResponse)
async def verify_price(
    price_id: int,
    payload: VerificationCreate,
    user_id: CurrentUserDep,
    db: SessionDep,
) -> VerificationResponse:
    """Confirm a price, or dispute it with an optional corrected value."""
    verification = price_service.verify(
        db,
        price_id,
        user_id,
        is_accurate=payload.is_accurate,
        proposed_price=payload.proposed_price,
        now=utcnow(),
    )
    db.commit()
    db.refresh(verification)
    return VerificationResponse.model_validate(verification)
