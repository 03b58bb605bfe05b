"""Main entry point for the Pintwatch application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from pintwatch.api.v1 import (
    admin_router,
    content_router,
    deals_router,
    prices_router,
    pubs_router,
    reports_router,
    system_router,
)
from pintwatch.core.errors import (
    DependencyUnavailable,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    PintwatchError,
    Unauthenticated,
    ValidationError,
)
from pintwatch.core.settings import settings

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[PintwatchError], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    PermissionDenied: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    InvalidTransition: status.HTTP_409_CONFLICT,
    DependencyUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}

# Initialize FastAPI app
app = FastAPI(
    title="Pintwatch API",
    description="Community consensus and moderation engine for pub listings",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(pubs_router, prefix="/api/v1")
app.include_router(prices_router, prefix="/api/v1")
app.include_router(deals_router, prefix="/api/v1")
app.include_router(content_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.exception_handler(PintwatchError)
async def handle_engine_error(request: Request, exc: PintwatchError) -> JSONResponse:
    """Translate engine errors into HTTP responses."""
    status_code = next(
        (code for error_type, code in ERROR_STATUS.items() if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.detail)
    body: dict[str, object] = {"detail": exc.detail}
    if isinstance(exc, ValidationError) and exc.field:
        body["field"] = exc.field
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(status_code=status_code, content=body, headers=headers)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Pintwatch API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("pintwatch.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
