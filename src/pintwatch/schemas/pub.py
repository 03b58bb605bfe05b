"""Pub status Pydantic schemas."""

from pydantic import BaseModel


class OpeningStatusResponse(BaseModel):
    """Resolved opening status of a pub at one instant."""

    pub_id: int
    state: str
    is_open: bool
    detail: str | None
    minutes: int | None
    today_hours: str | None
