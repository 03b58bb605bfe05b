"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .content import router as content_router
from .deals import router as deals_router
from .prices import router as prices_router
from .pubs import router as pubs_router
from .reports import router as reports_router
from .system import router as system_router

__all__ = [
    "admin_router",
    "content_router",
    "deals_router",
    "prices_router",
    "pubs_router",
    "reports_router",
    "system_router",
]
