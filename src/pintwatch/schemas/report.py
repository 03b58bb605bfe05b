"""Report Pydantic schemas."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from pintwatch.models import EntityType


class ReportCreate(BaseModel):
    """Schema for filing a report; reporter identity is taken from the token if any."""

    entity_type: EntityType
    entity_id: str
    report_type: str
    details: str | None = None


class ReportTriage(BaseModel):
    status: Literal["resolved", "dismissed"]


class ReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    entity_type: str
    entity_id: str
    reporter_id: str | None
    report_type: str
    details: str | None
    status: str
    reviewed_by: str | None
    reviewed_at: datetime | None
    created_at: datetime
