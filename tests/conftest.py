# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import time

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

from pintwatch.core.security import create_access_token
from pintwatch.db.session import Base
from pintwatch.db.session import get_db as app_get_session
from pintwatch.main import app as fastapi_app
from pintwatch.models import Drink, Profile, Pub

TEST_DB_URL = "sqlite://"

USER_ID = "user-regular"
OTHER_USER_ID = "user-other"
TRUSTED_USER_ID = "user-trusted"
ADMIN_USER_ID = "user-admin"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    session.begin_nested()

    @event.listens_for(session, "after_transaction_end")
    def restart_savepoint(sess: Session, trans) -> None:  # pragma: no cover - SQLAlchemy internals
        if trans.nested and not getattr(trans._parent, "nested", False):
            session.begin_nested()

    try:
        yield session
    finally:
        event.remove(session, "after_transaction_end", restart_savepoint)
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def profiles(db_session: Session) -> dict[str, Profile]:
    """Create a regular, a second regular, a trusted and an admin profile."""
    created = {
        USER_ID: Profile(user_id=USER_ID, display_name="Regular"),
        OTHER_USER_ID: Profile(user_id=OTHER_USER_ID, display_name="Other"),
        TRUSTED_USER_ID: Profile(user_id=TRUSTED_USER_ID, display_name="Local", is_trusted=True),
        ADMIN_USER_ID: Profile(user_id=ADMIN_USER_ID, display_name="Admin", is_admin=True),
    }
    db_session.add_all(created.values())
    db_session.flush()
    return created


@pytest.fixture()
def auth_headers() -> Callable[[str], dict[str, str]]:
    """Return a factory producing bearer headers for a user id."""

    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers


@pytest.fixture()
def pub(db_session: Session) -> Iterator[Pub]:
    """Create a pub open 12:00-23:30 Monday to Thursday and 12:00-02:00 Friday/Saturday."""
    pub = Pub(name="The Stag's Head", address="1 Dame Court, Dublin 2")
    for day in ("monday", "tuesday", "wednesday", "thursday"):
        setattr(pub, f"hours_{day}_open", time(12, 0))
        setattr(pub, f"hours_{day}_close", time(23, 30))
    for day in ("friday", "saturday"):
        setattr(pub, f"hours_{day}_open", time(12, 0))
        setattr(pub, f"hours_{day}_close", time(2, 0))
    db_session.add(pub)
    db_session.flush()
    db_session.refresh(pub)
    yield pub


@pytest.fixture()
def drinks(db_session: Session) -> dict[str, Drink]:
    """Create a small drink catalogue."""
    created = {
        "Guinness": Drink(name="Guinness", category="beer"),
        "Heineken": Drink(name="Heineken", category="beer"),
        "Bulmers": Drink(name="Bulmers", category="cider"),
    }
    db_session.add_all(created.values())
    db_session.flush()
    return created
