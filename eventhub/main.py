"""
EventHub API - Main Application Entry Point

Event discovery and ticket booking:
- Signed bearer tokens, admin-only catalog management
- Oversell-proof booking through versioned conditional writes
- Redis caching of event listings with invalidation on every change
- Structured logging with request correlation, Prometheus metrics
"""

from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventhub.core.config import get_settings
from eventhub.core.logging import setup_logging, get_logger
from eventhub.core.metrics import metrics_endpoint
from eventhub.api.dependencies import get_store
from eventhub.api.errors import register_exception_handlers
from eventhub.api.router import api_router
from eventhub.api.middleware import RequestLoggingMiddleware
from eventhub.infrastructure.record_store import RecordStore
from eventhub.infrastructure.redis_client import get_redis, close_redis
from eventhub.infrastructure.store_factory import create_record_store
from eventhub.services.cache_service import get_cache_stats
from eventhub.services.seed_service import seed_store

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: build and seed the store before serving, release on shutdown."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        record_store=settings.RECORD_STORE,
    )

    store = create_record_store(settings)
    if settings.SEED_DATA:
        await seed_store(store, settings)
    app.state.store = store

    redis_client = await get_redis()
    if redis_client:
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Running without cache")

    yield

    await close_redis()
    await store.close()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Event discovery and ticket booking API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check(store: RecordStore = Depends(get_store)):
    """Health check endpoint for Docker and load balancers."""
    store_ok = await store.ping()
    return {
        "status": "healthy" if store_ok else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "store": {"backend": settings.RECORD_STORE, "reachable": store_ok},
        "cache": await get_cache_stats(),
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
