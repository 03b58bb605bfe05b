"""Consensus and moderation engine for the Pintwatch application."""

from .amenities import AmenityService
from .deals import DealService
from .moderation import ModerationService
from .prices import PriceService
from .reports import ReportService

__all__ = [
    "AmenityService",
    "DealService",
    "ModerationService",
    "PriceService",
    "ReportService",
]
