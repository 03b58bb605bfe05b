"""Trust classification for submitted prices.

Confidence comes only from verification events: a price is ``low`` until
someone confirms it within the recency window, ``medium`` once at least one
recent confirmation exists and ``high`` when recent confirmations reach the
threshold. Dissenting verifications are surfaced as a correction signal and
never rewrite the stored price. Up/down votes on the same price are a separate
mechanism and do not feed into this classification.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from pintwatch.db.time import as_utc

LEVEL_LOW = "low"
LEVEL_MEDIUM = "medium"
LEVEL_HIGH = "high"

FRESHNESS_FRESH = "fresh"
FRESHNESS_AGING = "aging"
FRESHNESS_STALE = "stale"


class VerificationLike(Protocol):
    is_accurate: bool
    proposed_price: float | None
    verified_at: datetime


@dataclass(frozen=True)
class PriceConfidence:
    """Classification of one price at one instant."""

    level: str
    recent_verifications: int
    dissent_count: int = 0
    proposed_price: float | None = None
    last_verified_at: datetime | None = None


def classify(
    verifications: Iterable[VerificationLike],
    now: datetime,
    *,
    high_threshold: int = 3,
    window_days: int = 30,
) -> PriceConfidence:
    """Classify a price from its verification events.

    Args:
        verifications: The current verification per user for the price.
        now: Reference instant supplied by the caller.
        high_threshold: Recent confirmations needed for ``high``.
        window_days: Recency window in days.

    Returns:
        The PriceConfidence, including the correction signal from recent
        dissent: how many users disagreed and the price most of them proposed.
    """
    now = as_utc(now)
    window_start = now - timedelta(days=window_days)

    confirmations = 0
    last_confirmed: datetime | None = None
    dissents: list[tuple[datetime, float | None]] = []

    for event in verifications:
        verified_at = as_utc(event.verified_at)
        if verified_at > now:
            continue
        if event.is_accurate and (last_confirmed is None or verified_at > last_confirmed):
            last_confirmed = verified_at
        if verified_at < window_start:
            continue
        if event.is_accurate:
            confirmations += 1
        else:
            dissents.append((verified_at, event.proposed_price))

    if confirmations >= high_threshold:
        level = LEVEL_HIGH
    elif confirmations >= 1:
        level = LEVEL_MEDIUM
    else:
        level = LEVEL_LOW

    return PriceConfidence(
        level=level,
        recent_verifications=confirmations,
        dissent_count=len(dissents),
        proposed_price=_most_proposed(dissents),
        last_verified_at=last_confirmed,
    )


def _most_proposed(dissents: list[tuple[datetime, float | None]]) -> float | None:
    proposals = [(at, price) for at, price in dissents if price is not None]
    if not proposals:
        return None
    counts = Counter(price for _, price in proposals)
    latest = {price: max(at for at, p in proposals if p == price) for price in counts}
    # Most proposed wins; ties go to the most recently proposed value.
    return max(counts, key=lambda price: (counts[price], latest[price]))


def freshness(
    created_at: datetime,
    now: datetime,
    *,
    fresh_days: int = 7,
    stale_days: int = 90,
) -> str:
    """Bucket a price by age: fresh, aging or stale."""
    age = as_utc(now) - as_utc(created_at)
    if age <= timedelta(days=fresh_days):
        return FRESHNESS_FRESH
    if age <= timedelta(days=stale_days):
        return FRESHNESS_AGING
    return FRESHNESS_STALE
