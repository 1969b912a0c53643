"""
FastAPI application for the schedule pricing service.

Wires settings, logging, the eSuite catalog client, rate limiting, error
handlers and both pricing routers.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config.logging import setup_logging
from ..config.settings import Settings, get_settings
from ..services.catalog_client import CatalogClient
from .errors import install_error_handlers
from .esuite_api import router as esuite_router
from .rate_limit import RateLimitMiddleware, SlidingWindowRateLimiter
from .schedule_price_api import router as schedule_price_router


def create_app(settings: Optional[Settings] = None, catalog_client: Optional[CatalogClient] = None) -> FastAPI:
    """Build the API; tests pass their own settings and catalog client."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    client = catalog_client or CatalogClient(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await app.state.catalog_client.aclose()

    app = FastAPI(
        title="Schedule Pricing API",
        description="Prices weekday-scheduled items over a billing period",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.catalog_client = client

    # Last added runs first: CORS must wrap the limiter so 429s carry its headers
    if settings.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            limiter=SlidingWindowRateLimiter(
                settings.rate_limit_requests, settings.rate_limit_window_seconds
            ),
        )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["retry-after"],
    )

    install_error_handlers(app)
    app.include_router(schedule_price_router)
    app.include_router(esuite_router)

    @app.get("/")
    async def root():
        return {
            "status": "online",
            "message": "Calculates a total price from a unit price and the number of issues "
                       "published between two dates",
        }

    return app
