"""Shared API dependencies for authentication, sessions and the clock."""

from datetime import datetime
from typing import Annotated
from zoneinfo import ZoneInfo

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from pintwatch.core.errors import Unauthenticated
from pintwatch.core.security import decode_subject
from pintwatch.core.settings import settings
from pintwatch.db.session import get_db
from pintwatch.db.time import local_now, utcnow
from pintwatch.services.moderation import ModerationService

# Read-only endpoints accept anonymous callers, so the scheme never auto-rejects.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_optional_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str | None:
    """Return the caller's user id, or None for anonymous callers.

    Raises:
        HTTPException: If a token is presented but cannot be validated.
    """
    if credentials is None:
        return None
    subject = decode_subject(credentials.credentials)
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    return subject


OptionalUserDep = Annotated[str | None, Depends(get_optional_user_id)]


def get_current_user_id(user_id: OptionalUserDep) -> str:
    """Require an authenticated caller for mutating endpoints."""
    if user_id is None:
        raise Unauthenticated()
    return user_id


CurrentUserDep = Annotated[str, Depends(get_current_user_id)]


def get_utc_now(
    at: Annotated[datetime | None, Query(description="Reference instant; defaults to now")] = None,
) -> datetime:
    """Return the reference instant for time-dependent reads."""
    return at if at is not None else utcnow()


def get_local_now(
    at: Annotated[datetime | None, Query(description="Reference instant; defaults to now")] = None,
) -> datetime:
    """Return the pub-local wall-clock time used by the opening-hours resolver."""
    if at is None:
        return local_now(settings.local_timezone)
    if at.tzinfo is None:
        return at
    return at.astimezone(ZoneInfo(settings.local_timezone))


UtcNowDep = Annotated[datetime, Depends(get_utc_now)]
LocalNowDep = Annotated[datetime, Depends(get_local_now)]

moderation_service = ModerationService()


def get_moderation_service() -> ModerationService:
    """Return the shared moderation service."""
    return moderation_service


ModerationServiceDep = Annotated[ModerationService, Depends(get_moderation_service)]
