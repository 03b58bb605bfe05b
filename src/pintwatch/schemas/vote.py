"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class PriceVoteCreate(BaseModel):
    """Schema for casting an up/down vote on a price."""

    vote_type: Literal["up", "down"] = Field(..., description="'up' or 'down'")


class AmenityVoteCreate(BaseModel):
    """Schema for casting a yes/no vote on an amenity."""

    amenity: str
    vote: bool = Field(..., description="True if the pub has the amenity")


class VoteResponse(BaseModel):
    """Outcome of a cast and the subject's rebuilt tally."""

    applied: Literal["added", "replaced", "removed"]
    current: str | bool | None
    counts: dict[str, int]
    total: int


class AmenityVoteResponse(VoteResponse):
    """Vote outcome plus the consensus decision it triggered."""

    consensus_value: bool | None
    changed: bool
    current_value: bool


class AmenitySummary(BaseModel):
    amenity: str
    label: str
    current_value: bool
    yes_votes: int
    no_votes: int
    total_votes: int
    my_vote: bool | None = None
