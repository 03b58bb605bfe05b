"""Tests for the amenity consensus decision."""

import pytest

from pintwatch.core.errors import ValidationError
from pintwatch.services.amenities import AMENITY_KEYS, AmenityClaim, reconcile, require_amenity


def test_below_quorum_gives_no_decision() -> None:
    decision = reconcile(AmenityClaim(yes_votes=2, no_votes=0), current_value=False)

    assert decision.new_value is None
    assert not decision.changed


def test_majority_at_quorum_decides() -> None:
    decision = reconcile(AmenityClaim(yes_votes=2, no_votes=1), current_value=False)

    assert decision.new_value is True
    assert decision.changed


def test_majority_no_decides_false() -> None:
    decision = reconcile(AmenityClaim(yes_votes=1, no_votes=2), current_value=True)

    assert decision.new_value is False
    assert decision.changed


def test_tie_gives_no_decision() -> None:
    decision = reconcile(AmenityClaim(yes_votes=2, no_votes=2), current_value=True)

    assert decision.new_value is None
    assert not decision.changed


def test_agreeing_with_current_value_is_not_a_change() -> None:
    decision = reconcile(AmenityClaim(yes_votes=3, no_votes=0), current_value=True)

    assert decision.new_value is True
    assert not decision.changed


def test_decision_is_idempotent() -> None:
    claim = AmenityClaim(yes_votes=4, no_votes=1)
    first = reconcile(claim, current_value=False)
    second = reconcile(claim, current_value=first.new_value)

    assert first.changed
    assert second.new_value == first.new_value
    assert not second.changed


def test_min_margin_requires_a_wider_lead() -> None:
    assert reconcile(AmenityClaim(3, 2), min_margin=2).new_value is None
    assert reconcile(AmenityClaim(4, 2), min_margin=2).new_value is True


def test_quorum_is_configurable() -> None:
    assert reconcile(AmenityClaim(3, 1), quorum=5).new_value is None
    assert reconcile(AmenityClaim(4, 1), quorum=5).new_value is True


def test_unknown_amenity_is_rejected() -> None:
    assert len(AMENITY_KEYS) == 8
    assert require_amenity("has_food") == "has_food"
    with pytest.raises(ValidationError):
        require_amenity("has_helipad")
