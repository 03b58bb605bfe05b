"""Moderation gate for reviews and photos.

Every submission passes the gate once: trusted users and admins publish
immediately, everyone else lands in the admin queue. Admins then approve,
approve and promote the submitter to trusted, or reject (which deletes the
item outright). Editing an approved item is a fresh submission and is gated
again against the submitter's trust at that moment.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pintwatch.core.errors import (
    DependencyUnavailable,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from pintwatch.db.time import utcnow
from pintwatch.db.upsert import insert_or_lock
from pintwatch.models import Profile, PubPhoto, Review
from pintwatch.models.content import RATING_CATEGORIES
from pintwatch.services.prices import credit_contribution, get_pub_or_404

logger = logging.getLogger(__name__)


class ContentKind(str, Enum):
    """Content types that pass through the gate."""

    REVIEW = "review"
    PHOTO = "photo"


class Decision(str, Enum):
    """Admin actions on a pending item."""

    APPROVE = "approve"
    APPROVE_AND_TRUST = "approve_and_trust"
    REJECT = "reject"


@dataclass(frozen=True)
class TrustLevel:
    """Trust subset of a profile as seen by the gate."""

    is_trusted: bool = False
    is_admin: bool = False

    @property
    def auto_approves(self) -> bool:
        return self.is_trusted or self.is_admin


TrustReader = Callable[[Session, str], TrustLevel]


def read_profile_trust(db: Session, user_id: str) -> TrustLevel:
    """Read trust flags from the profile table; no profile means untrusted."""
    profile = db.get(Profile, user_id)
    if profile is None:
        return TrustLevel()
    return TrustLevel(is_trusted=profile.is_trusted, is_admin=profile.is_admin)


def validate_ratings(ratings: dict[str, int | None], comment: str | None) -> str | None:
    """Check review ratings and return the normalised comment.

    Raises:
        ValidationError: If a rating is outside 1..5, an unknown category is
            given, or neither a rating nor a comment is present.
    """
    unknown = set(ratings) - set(RATING_CATEGORIES)
    if unknown:
        raise ValidationError(f"Unknown rating category: {sorted(unknown)[0]}", field="ratings")
    for category, value in ratings.items():
        if value is not None and not 1 <= value <= 5:
            raise ValidationError(f"{category} must be between 1 and 5", field=category)

    cleaned = comment.strip() if comment else None
    if not any(value is not None for value in ratings.values()) and not cleaned:
        raise ValidationError("Please provide at least one rating or a comment")
    return cleaned or None


def average_rating(review: Any) -> float:
    """Mean of the ratings a review provides, 0 when it provides none."""
    values = [getattr(review, category) for category in RATING_CATEGORIES]
    provided = [value for value in values if value is not None]
    if not provided:
        return 0.0
    return sum(provided) / len(provided)


class ModerationService:
    """Service handling the submission gate and admin decisions."""

    def __init__(self, trust_reader: TrustReader = read_profile_trust) -> None:
        self.trust_reader = trust_reader

    def trust_of(self, db: Session, user_id: str) -> TrustLevel:
        """Look up trust, failing closed when the lookup cannot complete."""
        try:
            return self.trust_reader(db, user_id)
        except (SQLAlchemyError, DependencyUnavailable) as err:
            logger.warning("Trust lookup failed for %s: %s", user_id, err)
            raise DependencyUnavailable("Trust lookup unavailable; submission rejected") from err

    def require_admin(self, db: Session, user_id: str) -> TrustLevel:
        trust = self.trust_of(db, user_id)
        if not trust.is_admin:
            raise PermissionDenied("Admin access required")
        return trust

    def submit_review(
        self,
        db: Session,
        user_id: str,
        *,
        pub_id: int,
        ratings: dict[str, int | None],
        comment: str | None = None,
    ) -> Review:
        """Create or overwrite the user's review of a pub and gate it."""
        cleaned = validate_ratings(ratings, comment)
        get_pub_or_404(db, pub_id)
        trust = self.trust_of(db, user_id)

        fields = {category: ratings.get(category) for category in RATING_CATEGORIES}
        fields.update(comment=cleaned, is_approved=trust.auto_approves, created_at=utcnow())
        review, created = insert_or_lock(
            db, Review, {"pub_id": pub_id, "user_id": user_id}, fields
        )
        # An overwrite is re-gated and re-dated like a fresh submission.
        for name, value in fields.items():
            setattr(review, name, value)
        if created:
            credit_contribution(db, user_id)
        db.flush()
        return review

    def submit_photo(
        self,
        db: Session,
        user_id: str,
        *,
        pub_id: int,
        storage_path: str,
        caption: str | None = None,
    ) -> PubPhoto:
        """Record an uploaded photo and gate it."""
        if not storage_path or not storage_path.strip():
            raise ValidationError("A storage path is required", field="storage_path")
        get_pub_or_404(db, pub_id)
        trust = self.trust_of(db, user_id)

        photo = PubPhoto(
            pub_id=pub_id,
            user_id=user_id,
            storage_path=storage_path.strip(),
            caption=(caption or "").strip() or None,
            is_approved=trust.auto_approves,
        )
        db.add(photo)
        credit_contribution(db, user_id)
        db.flush()
        return photo

    @staticmethod
    def _load(db: Session, kind: ContentKind, item_id: int) -> Review | PubPhoto:
        model = Review if kind is ContentKind.REVIEW else PubPhoto
        item = db.get(model, item_id)
        if item is None:
            raise NotFound(f"{kind.value.capitalize()} not found")
        return item

    def decide(
        self,
        db: Session,
        admin_id: str,
        kind: ContentKind,
        item_id: int,
        decision: Decision,
    ) -> Review | PubPhoto | None:
        """Apply an admin decision to a pending item.

        Returns:
            The approved item, or None when it was rejected and deleted.

        Raises:
            PermissionDenied: If the caller is not an admin.
            InvalidTransition: If the item is not pending.
        """
        self.require_admin(db, admin_id)
        item = self._load(db, kind, item_id)
        if item.is_approved:
            raise InvalidTransition(f"{kind.value.capitalize()} {item_id} is not pending")

        if decision is Decision.REJECT:
            db.delete(item)
            db.flush()
            logger.info("Admin %s rejected %s %s", admin_id, kind.value, item_id)
            return None

        item.is_approved = True
        logger.info("Admin %s approved %s %s", admin_id, kind.value, item_id)
        if decision is Decision.APPROVE_AND_TRUST:
            profile = db.get(Profile, item.user_id)
            if profile is None:
                profile = Profile(user_id=item.user_id)
                db.add(profile)
            profile.is_trusted = True
            logger.info("Admin %s promoted %s to trusted", admin_id, item.user_id)
        db.flush()
        return item

    def pending_queue(self, db: Session, admin_id: str) -> dict[str, list[Any]]:
        """Return pending reviews and photos, oldest first."""
        self.require_admin(db, admin_id)
        return {
            "reviews": (
                db.query(Review)
                .filter(Review.is_approved.is_(False))
                .order_by(Review.created_at, Review.id)
                .all()
            ),
            "photos": (
                db.query(PubPhoto)
                .filter(PubPhoto.is_approved.is_(False))
                .order_by(PubPhoto.created_at, PubPhoto.id)
                .all()
            ),
        }

    @staticmethod
    def approved_reviews(db: Session, pub_id: int) -> list[Review]:
        get_pub_or_404(db, pub_id)
        return (
            db.query(Review)
            .filter(Review.pub_id == pub_id, Review.is_approved.is_(True))
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )

    def set_profile_flags(
        self,
        db: Session,
        admin_id: str,
        user_id: str,
        *,
        is_trusted: bool | None = None,
        is_admin: bool | None = None,
    ) -> Profile:
        """Explicitly set trust/admin flags; the only path that revokes trust."""
        self.require_admin(db, admin_id)
        profile = db.get(Profile, user_id)
        if profile is None:
            raise NotFound("Profile not found")
        if is_trusted is not None:
            profile.is_trusted = is_trusted
        if is_admin is not None:
            profile.is_admin = is_admin
        db.flush()
        logger.info(
            "Admin %s set flags on %s: trusted=%s admin=%s",
            admin_id,
            user_id,
            profile.is_trusted,
            profile.is_admin,
        )
        return profile
