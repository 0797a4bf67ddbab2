"""Refund Analytics FastAPI application.

Serves enriched orders and refund statistics over the storefront's order
listing. The result cache is built once at startup, handed to the collector,
and swept in the background for the lifetime of the process.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 3002 --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay; the domain holds value objects only.
from analytics.domain import analytics  # noqa: E402

analytics.init()

from analytics.api import analytics_router  # noqa: E402
from analytics.collection import build_collector, set_collector  # noqa: E402
from analytics.config import Settings  # noqa: E402
from analytics.utils.logging import clear_request_context  # noqa: E402

logger = structlog.get_logger(__name__)

settings = Settings.from_env()


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(_app: FastAPI):
    collector = build_collector(settings)
    set_collector(collector)
    collector.cache.start()
    logger.info(
        "analytics_started",
        order_source=settings.order_source,
        cache_ttl_seconds=settings.cache_ttl_seconds,
    )
    try:
        yield
    finally:
        await collector.cache.stop()
        await collector.source.aclose()
        logger.info("analytics_stopped")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Refund Analytics API",
    description="Order delivery and refund timing over the storefront order listing",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins),
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the analytics domain context for API requests."""
    clear_request_context()
    if request.url.path.startswith("/api"):
        with analytics.domain_context():
            return await call_next(request)
    return await call_next(request)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=500,
        content={"error": str(exc), "path": request.url.path, "method": request.method},
    )


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(analytics_router)
