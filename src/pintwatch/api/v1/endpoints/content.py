"""Review and photo submission endpoints; both pass the moderation gate."""

from __future__ import annotations

from fastapi import APIRouter, status

from pintwatch.api.v1.dependencies import CurrentUserDep, ModerationServiceDep, SessionDep
from pintwatch.models.content import RATING_CATEGORIES
from pintwatch.schemas.content import PhotoCreate, PhotoResponse, ReviewCreate, ReviewResponse
from pintwatch.services.moderation import average_rating

router = APIRouter(tags=["content"])


@router.post("/reviews", status_code=status.HTTP_201_CREATED, response_model=ReviewResponse)
async def submit_review(
    payload: ReviewCreate,
    user_id: CurrentUserDep,
    db: SessionDep,
    moderation: ModerationServiceDep,
) -> ReviewResponse:
    """Create or overwrite the caller's review of a pub."""
    review = moderation.submit_review(
        db,
        user_id,
        pub_id=payload.pub_id,
        ratings={category: getattr(payload, category) for category in RATING_CATEGORIES},
        comment=payload.comment,
    )
    db.commit()
    db.refresh(review)
    return ReviewResponse.model_validate(review).model_copy(
        update={"average_rating": average_rating(review)}
    )


@router.post("/photos", status_code=status.HTTP_201_CREATED, response_model=PhotoResponse)
async def submit_photo(
    payload: PhotoCreate,
    user_id: CurrentUserDep,
    db: SessionDep,
    moderation: ModerationServiceDep,
) -> PhotoResponse:
    """Record a photo already uploaded to storage."""
    photo = moderation.submit_photo(
        db,
        user_id,
        pub_id=payload.pub_id,
        storage_path=payload.storage_path,
        caption=payload.caption,
    )
    db.commit()
    db.refresh(photo)
    return PhotoResponse.model_validate(photo)
