"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .content import (
    ModerationDecision,
    ModerationQueueResponse,
    PhotoCreate,
    PhotoResponse,
    ProfileFlagsUpdate,
    ProfileResponse,
    ReviewCreate,
    ReviewResponse,
)
from .price import (
    DealCreate,
    DealResponse,
    PriceCreate,
    PriceDetailResponse,
    PriceResponse,
    VerificationCreate,
    VerificationResponse,
)
from .pub import OpeningStatusResponse
from .report import ReportCreate, ReportResponse, ReportTriage
from .vote import AmenitySummary, AmenityVoteCreate, AmenityVoteResponse, PriceVoteCreate, VoteResponse

__all__ = [
    "ModerationDecision", "ModerationQueueResponse",
    "PhotoCreate", "PhotoResponse",
    "ProfileFlagsUpdate", "ProfileResponse",
    "ReviewCreate", "ReviewResponse",
    "DealCreate", "DealResponse",
    "PriceCreate", "PriceDetailResponse", "PriceResponse",
    "VerificationCreate", "VerificationResponse",
    "OpeningStatusResponse",
    "ReportCreate", "ReportResponse", "ReportTriage",
    "AmenitySummary", "AmenityVoteCreate", "AmenityVoteResponse", "PriceVoteCreate", "VoteResponse",
]
