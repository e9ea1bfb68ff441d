"""FastAPI application factory.

API layer:
- Validates inputs, reads/writes DB through repo and domain modules
- Returns payloads for the frontend
- Forbidden: aggregation logic in route handlers
"""

from __future__ import annotations

import logging
import os
from typing import Generator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskmarket.db.repo import DbSession, StoreUnavailableError
from taskmarket.db.session import get_session

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


def get_db_session() -> Generator[DbSession, None, None]:
    """Dependency to get database session.

    Yields:
        Database session that is automatically closed after request.
    """
    session = get_session()
    try:
        yield session
    finally:
        session.close()


def _cors_origins() -> list[str]:
    raw = os.environ.get("TASKMARKET_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def create_app() -> FastAPI:
    """Create FastAPI application.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="Taskmarket API",
        description="Reviews and rating statistics for the task marketplace",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from taskmarket.api.routes import reviews, users

    app.include_router(reviews.router, prefix="/api")
    app.include_router(users.router, prefix="/api")

    @app.exception_handler(StoreUnavailableError)
    def store_unavailable_handler(request: Request, exc: StoreUnavailableError) -> JSONResponse:
        """Report store outages as 503, never as empty data."""
        logger.warning(f"{request.method} {request.url.path} failed: store unavailable")
        return JSONResponse(
            status_code=503,
            content={"detail": "Review data temporarily unavailable"},
        )

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


# Default app instance
app = create_app()
