"""Price, verification and deal Pydantic schemas."""
from __future__ import annotations

from datetime import datetime, time

from pydantic import BaseModel, ConfigDict, Field

from pintwatch.services.deals import DealTarget, DealType


class PriceCreate(BaseModel):
    """Schema for submitting a plain drink price."""

    pub_id: int
    drink_id: int
    price: float


class VerificationCreate(BaseModel):
    """Schema for confirming or disputing a price."""

    is_accurate: bool
    proposed_price: float | None = Field(
        default=None,
        description="Corrected price when disputing; ignored when confirming",
    )


class VerificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    price_id: int
    user_id: str
    is_accurate: bool
    proposed_price: float | None
    verified_at: datetime


class ConfidenceResponse(BaseModel):
    level: str
    recent_verifications: int
    dissent_count: int
    proposed_price: float | None
    last_verified_at: datetime | None


class PriceResponse(BaseModel):
    """Price record as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    pub_id: int
    drink_id: int | None
    drink_ids: list[int] | None
    deal_target: str | None
    price: float
    is_deal: bool
    submitted_by: str
    created_at: datetime
    upvotes: int
    downvotes: int
    verification_count: int
    last_verified_at: datetime | None


class PriceDetailResponse(PriceResponse):
    score: int
    confidence: ConfidenceResponse
    freshness: str


class DealCreate(BaseModel):
    """Schema for submitting a deal."""

    pub_id: int
    deal_type: DealType = DealType.DRINK_ONLY
    deal_target: DealTarget = DealTarget.SPECIFIC
    drink_ids: list[int] = Field(default_factory=list)
    food_item: str | None = None
    price: float
    deal_title: str | None = None
    deal_description: str | None = None
    days: list[str] = Field(default_factory=list, description="Mon..Sun")
    start_time: time | None = None
    end_time: time | None = None
    deal_start_date: datetime | None = None
    deal_end_date: datetime | None = None


class DealResponse(PriceResponse):
    deal_type: str | None
    deal_title: str | None
    deal_description: str | None
    food_item: str | None
    deal_schedule: str | None
    deal_start_date: datetime | None
    deal_end_date: datetime | None
    status: str
    targeting: str
