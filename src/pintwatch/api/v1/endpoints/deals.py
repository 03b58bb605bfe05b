"""Deal submission, listing and expiry endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Query, status
from sqlalchemy.orm import Session

from pintwatch.api.v1.dependencies import (
    CurrentUserDep,
    ModerationServiceDep,
    SessionDep,
    UtcNowDep,
)
from pintwatch.db.time import utcnow
from pintwatch.models import Drink, PriceRecord
from pintwatch.schemas.price import DealCreate, DealResponse, PriceResponse
from pintwatch.services.deals import (
    STATUS_EXPIRED,
    DealService,
    derive_status,
    describe_targeting,
    targeting_of,
)

router = APIRouter(prefix="/deals", tags=["deals"])
deal_service = DealService()


def build_deal_response(
    db: Session, deal: PriceRecord, now: datetime, *, status_override: str | None = None
) -> DealResponse:
    names = {drink.id: drink.name for drink in db.query(Drink).all()}
    return DealResponse(
        **PriceResponse.model_validate(deal).model_dump(),
        deal_type=deal.deal_type,
        deal_title=deal.deal_title,
        deal_description=deal.deal_description,
        food_item=deal.food_item,
        deal_schedule=deal.deal_schedule,
        deal_start_date=deal.deal_start_date,
        deal_end_date=deal.deal_end_date,
        status=status_override or derive_status(deal.deal_end_date, now),
        targeting=describe_targeting(targeting_of(deal), names),
    )


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=DealResponse)
async def submit_deal(payload: DealCreate, user_id: CurrentUserDep, db: SessionDep) -> DealResponse:
    """Submit a deal; it is listed immediately, even with a future start date."""
    now = utcnow()
    deal = deal_service.submit(
        db,
        user_id,
        pub_id=payload.pub_id,
        deal_type=payload.deal_type,
        deal_target=payload.deal_target,
        drink_ids=payload.drink_ids,
        food_item=payload.food_item,
        price=payload.price,
        now=now,
        deal_title=payload.deal_title,
        deal_description=payload.deal_description,
        days=payload.days,
        start_time=payload.start_time,
        end_time=payload.end_time,
        deal_start_date=payload.deal_start_date,
        deal_end_date=payload.deal_end_date,
    )
    db.commit()
    db.refresh(deal)
    return build_deal_response(db, deal, now)


@router.get("/", response_model=list[DealResponse])
async def list_deals(
    db: SessionDep,
    now: UtcNowDep,
    pub_id: int | None = Query(None),
    status_filter: Literal["active", "expired"] | None = Query(None, alias="status"),
) -> list[DealResponse]:
    """List deals, optionally only active or only expired ones."""
    deals = deal_service.list_deals(db, now, pub_id=pub_id, status=status_filter)
    return [build_deal_response(db, deal, now) for deal in deals]


@router.post("/{deal_id}/expire", response_model=DealResponse)
async def expire_deal(
    deal_id: int,
    user_id: CurrentUserDep,
    db: SessionDep,
    moderation: ModerationServiceDep,
) -> DealResponse:
    """Mark a deal as expired now (submitter or admin only)."""
    now = utcnow()
    trust = moderation.trust_of(db, user_id)
    deal = deal_service.expire(db, user_id, trust.is_admin, deal_id, now)
    db.commit()
    db.refresh(deal)
    # The end date equals now, which derive_status still counts as active.
    return build_deal_response(db, deal, now, status_override=STATUS_EXPIRED)
