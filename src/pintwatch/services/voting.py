"""Single-choice vote accumulation with toggle/replace semantics.

A voter holds at most one vote per subject. Casting the choice already held
removes it, casting a different choice replaces it. Counters kept on other
rows are caches of the vote set; they are adjusted in SQL (``col = col + n``)
in the same transaction as the vote row, so concurrent casts never lose an
increment.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session

from pintwatch.core.errors import ValidationError
from pintwatch.db.upsert import insert_or_lock

logger = logging.getLogger(__name__)


class VoteApplied(str, Enum):
    """What a cast did to the voter's standing vote."""

    ADDED = "added"
    REPLACED = "replaced"
    REMOVED = "removed"


@dataclass(frozen=True)
class VoteResult:
    """Outcome of a single cast."""

    applied: VoteApplied
    previous: Hashable | None
    current: Hashable | None


@dataclass(frozen=True)
class Tally:
    """Per-choice counts for one subject."""

    counts: Mapping[Hashable, int] = field(default_factory=dict)

    def count(self, choice: Hashable) -> int:
        return self.counts.get(choice, 0)

    @property
    def total(self) -> int:
        return sum(self.counts.values())


def apply_vote(existing: Hashable | None, choice: Hashable) -> VoteResult:
    """Return the transition for casting ``choice`` over ``existing``."""
    if existing is None:
        return VoteResult(VoteApplied.ADDED, None, choice)
    if existing == choice:
        return VoteResult(VoteApplied.REMOVED, existing, None)
    return VoteResult(VoteApplied.REPLACED, existing, choice)


def count_choices(choices: Iterable[Hashable], options: Iterable[Hashable]) -> Tally:
    """Build a tally over ``options`` from raw vote choices."""
    counter = Counter(choices)
    return Tally({option: counter.get(option, 0) for option in options})


class VoteTally:
    """Vote set for one ORM model keyed by ``(subject..., voter)``.

    Args:
        model: Mapped class holding one row per vote.
        subject_columns: Column names that together identify the subject.
        voter_column: Column name of the voter id.
        choice_column: Column name holding the choice.
        options: The closed set of allowed choices.
    """

    def __init__(
        self,
        model: type[Any],
        *,
        subject_columns: tuple[str, ...],
        voter_column: str,
        choice_column: str,
        options: tuple[Hashable, ...],
    ) -> None:
        self.model = model
        self.subject_columns = subject_columns
        self.voter_column = voter_column
        self.choice_column = choice_column
        self.options = options

    def _subject_key(self, subject: Mapping[str, Any]) -> dict[str, Any]:
        missing = [name for name in self.subject_columns if name not in subject]
        if missing:
            raise ValueError(f"subject is missing key(s): {', '.join(missing)}")
        return {name: subject[name] for name in self.subject_columns}

    def _subject_filters(self, subject: Mapping[str, Any]) -> list[Any]:
        return [getattr(self.model, name) == value for name, value in self._subject_key(subject).items()]

    def get_vote(self, db: Session, subject: Mapping[str, Any], voter_id: str) -> Any | None:
        """Return the voter's vote row for the subject, if any."""
        return (
            db.query(self.model)
            .filter(
                *self._subject_filters(subject),
                getattr(self.model, self.voter_column) == voter_id,
            )
            .first()
        )

    def current_choice(
        self, db: Session, subject: Mapping[str, Any], voter_id: str
    ) -> Hashable | None:
        vote = self.get_vote(db, subject, voter_id)
        if vote is None:
            return None
        return getattr(vote, self.choice_column)

    def cast_vote(
        self,
        db: Session,
        subject: Mapping[str, Any],
        voter_id: str,
        choice: Hashable,
        *,
        counter_row: Any | None = None,
        counter_fields: Mapping[Hashable, str] | None = None,
    ) -> VoteResult:
        """Cast ``choice`` for ``voter_id`` and adjust any cached counters.

        The caller owns the transaction: nothing is committed here.

        Raises:
            ValidationError: If ``choice`` is not one of the allowed options.
        """
        if choice not in self.options:
            raise ValidationError(f"Unsupported vote choice: {choice!r}", field="choice")

        key = {**self._subject_key(subject), self.voter_column: voter_id}
        vote, created = insert_or_lock(db, self.model, key, {self.choice_column: choice})
        if created:
            result = VoteResult(VoteApplied.ADDED, None, choice)
        else:
            result = apply_vote(getattr(vote, self.choice_column), choice)
            if result.applied is VoteApplied.REMOVED:
                db.delete(vote)
            else:
                setattr(vote, self.choice_column, choice)
        db.flush()

        if counter_row is not None and counter_fields:
            if result.previous is not None:
                bump_counter(db, counter_row, counter_fields[result.previous], -1)
            if result.current is not None:
                bump_counter(db, counter_row, counter_fields[result.current], 1)

        logger.debug(
            "Vote %s on %s by %s: %r -> %r",
            result.applied.value,
            dict(subject),
            voter_id,
            result.previous,
            result.current,
        )
        return result

    def tally(self, db: Session, subject: Mapping[str, Any]) -> Tally:
        """Rebuild the tally for a subject from the raw vote rows."""
        rows = (
            db.query(getattr(self.model, self.choice_column))
            .filter(*self._subject_filters(subject))
            .all()
        )
        return count_choices((row[0] for row in rows), self.options)


def bump_counter(db: Session, row: Any, attr: str, delta: int) -> None:
    """Add ``delta`` to a counter column in SQL and reload the attribute.

    The increment is evaluated by the database, so concurrent transactions
    touching the same row never overwrite each other's deltas.
    """
    model = type(row)
    mapper = sa_inspect(model)
    identity = sa_inspect(row).identity
    column = getattr(model, attr)
    (
        db.query(model)
        .filter(*(pk == value for pk, value in zip(mapper.primary_key, identity)))
        .update({column: column + delta}, synchronize_session=False)
    )
    db.refresh(row, attribute_names=[attr])
