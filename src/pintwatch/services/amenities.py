"""Crowd consensus over boolean pub amenities.

``reconcile`` is the pure decision: below quorum or without a clear lead it
returns no value, otherwise the majority answer. ``AmenityService`` is the
collaborator that records votes and writes accepted decisions back onto the
pub; the decision itself never touches storage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from pintwatch.core.errors import ValidationError
from pintwatch.core.settings import settings
from pintwatch.models import AmenityVote, Pub
from pintwatch.services.voting import Tally, VoteResult, VoteTally

logger = logging.getLogger(__name__)

AMENITY_LABELS = {
    "has_food": "Serves Food",
    "has_live_music": "Live Music",
    "shows_sports": "Shows Sports",
    "has_outdoor_seating": "Outdoor Seating",
    "has_pool": "Pool Table",
    "has_darts": "Darts",
    "has_board_games": "Board Games",
    "is_speakeasy": "Speakeasy",
}
AMENITY_KEYS = tuple(AMENITY_LABELS)


@dataclass(frozen=True)
class AmenityClaim:
    """Aggregated yes/no votes for one (pub, amenity) pair."""

    yes_votes: int = 0
    no_votes: int = 0

    @property
    def total_votes(self) -> int:
        return self.yes_votes + self.no_votes

    @classmethod
    def from_tally(cls, tally: Tally) -> AmenityClaim:
        return cls(yes_votes=tally.count(True), no_votes=tally.count(False))


@dataclass(frozen=True)
class AmenityDecision:
    """Consensus outcome; ``changed`` means the canonical flag should be overwritten."""

    new_value: bool | None
    changed: bool = False


def reconcile(
    claim: AmenityClaim,
    current_value: bool | None = None,
    *,
    quorum: int = 3,
    min_margin: int = 1,
) -> AmenityDecision:
    """Decide the consensus value of an amenity.

    Args:
        claim: The vote summary for the pair.
        current_value: The pub's present canonical flag, if known.
        quorum: Minimum total votes before any decision is made.
        min_margin: Lead one side needs over the other; 1 is a strict majority.

    Returns:
        An AmenityDecision whose ``new_value`` is None when there is too
        little signal or no sufficient lead (ties always yield None).
    """
    if claim.total_votes < quorum:
        return AmenityDecision(new_value=None)

    lead = claim.yes_votes - claim.no_votes
    if abs(lead) < max(min_margin, 1):
        return AmenityDecision(new_value=None)

    new_value = lead > 0
    return AmenityDecision(new_value=new_value, changed=new_value != current_value)


def require_amenity(amenity: str) -> str:
    if amenity not in AMENITY_LABELS:
        raise ValidationError(f"Unknown amenity: {amenity}", field="amenity")
    return amenity


class AmenityService:
    """Records amenity votes and applies consensus to the pub record."""

    def __init__(self) -> None:
        self.votes = VoteTally(
            AmenityVote,
            subject_columns=("pub_id", "amenity"),
            voter_column="voter_id",
            choice_column="vote",
            options=(True, False),
        )

    def claim(self, db: Session, pub_id: int, amenity: str) -> AmenityClaim:
        tally = self.votes.tally(db, {"pub_id": pub_id, "amenity": require_amenity(amenity)})
        return AmenityClaim.from_tally(tally)

    def reconcile(self, db: Session, pub: Pub, amenity: str) -> AmenityDecision:
        """Run consensus for one pair against the pub's current flag."""
        return reconcile(
            self.claim(db, pub.id, amenity),
            getattr(pub, amenity),
            quorum=settings.amenity_quorum,
            min_margin=settings.amenity_min_margin,
        )

    def cast_vote(
        self, db: Session, pub: Pub, amenity: str, voter_id: str, vote: bool
    ) -> tuple[VoteResult, AmenityDecision]:
        """Cast a vote, re-run consensus and apply any resulting overwrite."""
        require_amenity(amenity)
        result = self.votes.cast_vote(
            db, {"pub_id": pub.id, "amenity": amenity}, voter_id, vote
        )
        decision = self.reconcile(db, pub, amenity)
        if decision.changed:
            logger.info(
                "Amenity %s on pub %s overwritten by consensus: %s -> %s",
                amenity,
                pub.id,
                getattr(pub, amenity),
                decision.new_value,
            )
            setattr(pub, amenity, decision.new_value)
            db.flush()
        return result, decision

    def summary(self, db: Session, pub: Pub, voter_id: str | None = None) -> list[dict[str, object]]:
        """Return every amenity's current value, tallies and the caller's vote."""
        rows: list[dict[str, object]] = []
        for key, label in AMENITY_LABELS.items():
            claim = self.claim(db, pub.id, key)
            my_vote = None
            if voter_id is not None:
                my_vote = self.votes.current_choice(
                    db, {"pub_id": pub.id, "amenity": key}, voter_id
                )
            rows.append(
                {
                    "amenity": key,
                    "label": label,
                    "current_value": getattr(pub, key),
                    "yes_votes": claim.yes_votes,
                    "no_votes": claim.no_votes,
                    "total_votes": claim.total_votes,
                    "my_vote": my_vote,
                }
            )
        return rows
