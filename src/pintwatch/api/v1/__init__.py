"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    content_router,
    deals_router,
    prices_router,
    pubs_router,
    reports_router,
    system_router,
)

__all__ = [
    "admin_router",
    "content_router",
    "deals_router",
    "prices_router",
    "pubs_router",
    "reports_router",
    "system_router",
]
