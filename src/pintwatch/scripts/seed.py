"""Seed the drink catalogue and bootstrap an admin profile."""
from __future__ import annotations

import argparse
import logging

from sqlalchemy.orm import Session

from pintwatch.db.session import SessionLocal, create_tables
from pintwatch.models import Drink, Profile

logger = logging.getLogger(__name__)

DEFAULT_DRINKS: tuple[tuple[str, str], ...] = (
    ("Guinness", "beer"),
    ("Heineken", "beer"),
    ("Coors Light", "beer"),
    ("Rockshore Lager", "beer"),
    ("Bulmers", "cider"),
    ("Orchard Thieves", "cider"),
    ("Rockshore Cider", "cider"),
)


def seed_drinks(db: Session) -> int:
    """Insert any missing catalogue drinks and return how many were added."""
    existing = {name for (name,) in db.query(Drink.name).all()}
    added = 0
    for name, category in DEFAULT_DRINKS:
        if name not in existing:
            db.add(Drink(name=name, category=category))
            added += 1
    db.flush()
    return added


def ensure_admin(db: Session, user_id: str) -> Profile:
    """Create or promote a profile to admin."""
    profile = db.get(Profile, user_id)
    if profile is None:
        profile = Profile(user_id=user_id)
        db.add(profile)
    profile.is_admin = True
    db.flush()
    return profile


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser(description="Seed reference data")
    parser.add_argument("--admin", default=None, help="User id to grant admin rights")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables from the models instead of running migrations",
    )
    args = parser.parse_args()

    if args.create_tables:
        create_tables()

    db = SessionLocal()
    try:
        added = seed_drinks(db)
        if args.admin:
            ensure_admin(db, args.admin)
        db.commit()
    finally:
        db.close()
    logger.info("Seeded %d drinks", added)


if __name__ == "__main__":
    main()
