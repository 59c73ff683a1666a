"""FastAPI application factory for the token vetting API."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.cors import CORSMiddleware

from src.api.middleware import SecurityHeadersMiddleware
from src.vetting.exceptions import VettingError

# Rate limiter (shared instance)
limiter = Limiter(key_func=get_remote_address)


def build_scanner():
    """Wire aggregator + classifier from settings."""
    from config.settings import settings
    from src.parsers.aggregator import TokenDataAggregator
    from src.vetting.scanner import TokenScanner
    from src.vetting.tier_classifier import TierClassifier
    from src.vetting.tiers import default_tier_config

    classifier = TierClassifier(default_tier_config(settings.tiers_config_path))
    return TokenScanner(
        TokenDataAggregator.from_settings(settings),
        classifier,
        batch_max_size=settings.batch_max_size,
        batch_concurrency=settings.batch_concurrency,
    )


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    owned = getattr(app.state, "scanner", None) is None
    if owned:
        app.state.scanner = build_scanner()
        tiers = app.state.scanner.classifier.config
        logger.info(f"[API] Scanner ready, tiers v{tiers.version} ({', '.join(tiers.names)})")
    try:
        yield
    finally:
        if owned:
            await app.state.scanner.close()
            app.state.scanner = None


async def _vetting_error_handler(request: Request, exc: VettingError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=exc.to_dict())


def create_app(scanner=None) -> FastAPI:
    """Build and configure the FastAPI application.

    Pass ``scanner`` to skip building provider clients (tests, embedding).
    """
    app = FastAPI(
        title="Token Vetting API",
        version="0.1.0",
        docs_url="/api/docs" if os.getenv("VETTING_DEBUG") else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if os.getenv("VETTING_DEBUG") else None,
        lifespan=_lifespan,
    )
    app.state.scanner = scanner

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(VettingError, _vetting_error_handler)

    # Security headers
    app.add_middleware(SecurityHeadersMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173"],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    from src.api.routers.health import router as health_router
    from src.api.routers.scan import router as scan_router

    app.include_router(health_router)
    app.include_router(scan_router)

    return app
