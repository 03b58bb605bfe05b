"""SQLAlchemy models for the Pintwatch application."""

from .amenity import AmenityVote
from .content import PubPhoto, Review
from .price import PriceRecord, PriceVerification, PriceVote
from .pub import Drink, Pub
from .report import EntityType, Report, ReportStatus
from .user import Profile

__all__ = [
    "AmenityVote",
    "PubPhoto", "Review",
    "PriceRecord", "PriceVerification", "PriceVote",
    "Drink", "Pub",
    "EntityType", "Report", "ReportStatus",
    "Profile",
]
