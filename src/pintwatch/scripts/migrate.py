"""Apply Alembic migrations to the configured database."""
from __future__ import annotations

import argparse
from pathlib import Path

from alembic import command
from alembic.config import Config

from pintwatch.core.settings import settings

MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"


def build_config(url: str | None = None) -> Config:
    """Return an Alembic config pointed at the bundled migrations."""
    cfg = Config(str(MIGRATIONS_DIR / "alembic.ini"))
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    cfg.set_main_option("sqlalchemy.url", url or settings.database_url_sync)
    return cfg


def main() -> None:
    parser = argparse.ArgumentParser(description="Upgrade the database schema")
    parser.add_argument("--revision", default="head", help="Target revision (default: head)")
    parser.add_argument("--url", default=None, help="Override database URL")
    args = parser.parse_args()
    command.upgrade(build_config(args.url), args.revision)


if __name__ == "__main__":
    main()
