"""Pub status, amenity consensus and per-pub listing endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from pintwatch.api.v1.dependencies import (
    CurrentUserDep,
    LocalNowDep,
    OptionalUserDep,
    SessionDep,
    UtcNowDep,
)
from pintwatch.core.settings import settings
from pintwatch.schemas.content import ReviewResponse
from pintwatch.schemas.price import PriceDetailResponse
from pintwatch.schemas.pub import OpeningStatusResponse
from pintwatch.schemas.vote import AmenitySummary, AmenityVoteCreate, AmenityVoteResponse
from pintwatch.services.amenities import AmenityService
from pintwatch.services.moderation import ModerationService, average_rating
from pintwatch.services.opening_hours import resolve_status
from pintwatch.services.prices import PriceService, get_pub_or_404

from .prices import build_price_detail

router = APIRouter(prefix="/pubs", tags=["pubs"])
amenity_service = AmenityService()


@router.get("/{pub_id}/status", response_model=OpeningStatusResponse)
async def get_opening_status(pub_id: int, db: SessionDep, now: LocalNowDep) -> OpeningStatusResponse:
    """Resolve whether the pub is open at the given (or current) local time."""
    pub = get_pub_or_404(db, pub_id)
    resolved = resolve_status(
        pub.weekly_hours(),
        now,
        pub.is_permanently_closed,
        closing_soon_minutes=settings.closing_soon_minutes,
    )
    return OpeningStatusResponse(
        pub_id=pub.id,
        state=resolved.state,
        is_open=resolved.is_open,
        detail=resolved.detail,
        minutes=resolved.minutes,
        today_hours=resolved.today_hours,
    )


@router.get("/{pub_id}/amenities", response_model=list[AmenitySummary])
async def get_amenities(
    pub_id: int, db: SessionDep, user_id: OptionalUserDep
) -> list[AmenitySummary]:
    """List every amenity with its canonical value and vote tallies."""
    pub = get_pub_or_404(db, pub_id)
    return [AmenitySummary(**row) for row in amenity_service.summary(db, pub, user_id)]


@router.post("/{pub_id}/amenities/votes", response_model=AmenityVoteResponse)
async def vote_on_amenity(
    pub_id: int,
    payload: AmenityVoteCreate,
    user_id: CurrentUserDep,
    db: SessionDep,
) -> AmenityVoteResponse:
    """Vote on an amenity and apply the consensus outcome to the pub."""
    pub = get_pub_or_404(db, pub_id)
    result, decision = amenity_service.cast_vote(db, pub, payload.amenity, user_id, payload.vote)
    db.commit()
    claim = amenity_service.claim(db, pub.id, payload.amenity)
    return AmenityVoteResponse(
        applied=result.applied.value,
        current=result.current,
        counts={"yes": claim.yes_votes, "no": claim.no_votes},
        total=claim.total_votes,
        consensus_value=decision.new_value,
        changed=decision.changed,
        current_value=getattr(pub, payload.amenity),
    )


@router.get("/{pub_id}/reviews", response_model=list[ReviewResponse])
async def list_reviews(pub_id: int, db: SessionDep) -> list[ReviewResponse]:
    """List approved reviews only; pending reviews are visible to admins alone."""
    reviews = ModerationService.approved_reviews(db, pub_id)
    return [
        ReviewResponse.model_validate(review).model_copy(
            update={"average_rating": average_rating(review)}
        )
        for review in reviews
    ]


@router.get("/{pub_id}/prices/history", response_model=list[PriceDetailResponse])
async def price_history(
    pub_id: int,
    db: SessionDep,
    now: UtcNowDep,
    drink_id: int = Query(...),
) -> list[PriceDetailResponse]:
    """Return the price history of one drink at one pub, oldest first."""
    return [build_price_detail(db, price, now) for price in PriceService.history(db, pub_id, drink_id)]
