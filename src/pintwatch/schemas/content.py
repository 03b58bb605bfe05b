"""Review, photo and moderation Pydantic schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ReviewCreate(BaseModel):
    """Schema for submitting (or resubmitting) a review."""

    pub_id: int
    pint_quality: int | None = None
    ambience: int | None = None
    food_quality: int | None = None
    staff_friendliness: int | None = None
    safety: int | None = None
    value_for_money: int | None = None
    comment: str | None = Field(default=None, max_length=2000)


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    pub_id: int
    user_id: str
    pint_quality: int | None
    ambience: int | None
    food_quality: int | None
    staff_friendliness: int | None
    safety: int | None
    value_for_money: int | None
    comment: str | None
    is_approved: bool
    created_at: datetime
    average_rating: float = 0.0


class PhotoCreate(BaseModel):
    pub_id: int
    storage_path: str
    caption: str | None = None


class PhotoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    pub_id: int
    user_id: str
    storage_path: str
    caption: str | None
    is_approved: bool
    created_at: datetime


class ModerationDecision(BaseModel):
    """Schema for an admin decision on a pending review or photo."""

    decision: Literal["approve", "approve_and_trust", "reject"]


class ModerationQueueResponse(BaseModel):
    reviews: list[ReviewResponse]
    photos: list[PhotoResponse]


class ProfileFlagsUpdate(BaseModel):
    is_trusted: bool | None = None
    is_admin: bool | None = None


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    display_name: str | None
    is_trusted: bool
    is_admin: bool
    total_contributions: int
