"""
CryptoDash Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cryptodash.core.config import settings
from cryptodash.api.v1 import router as api_v1_router
from cryptodash.services.cache.redis_client import init_redis, close_redis, get_redis
from cryptodash.services.market_data import create_market_data_source
from cryptodash.services.stream import PriceStreamPool

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Live data: {settings.enable_live_data}")

    redis_client = await init_redis()
    if redis_client:
        logger.info("Redis cache connected")
    else:
        logger.info("Redis unavailable - using in-memory cache")

    source = create_market_data_source()
    app.state.market_source = source
    logger.info(f"Market data source: {source.name}")

    # Without live data every feed goes straight to REST polling
    app.state.stream_pool = PriceStreamPool(
        source,
        max_retries=None if settings.enable_live_data else 0,
    )

    yield

    # Shutdown
    logger.info("Shutting down...")
    await app.state.stream_pool.close_all()
    await source.close()
    await close_redis()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    CryptoDash Trading Dashboard API

    ## Architecture
    - **Market Data**: Binance klines, tickers and symbol list (cached, rate limited)
    - **Indicator Engine**: ADX(14), RSI(14), EMA50/EMA200 (pure NumPy)
    - **Signals**: STRONG_BUY / STRONG_SELL / NEUTRAL with a 0-100 strength
    - **Live Prices**: shared WebSocket feeds with REST polling fallback (SSE)
    - **Alerts**: Telegram notifications for strong signals
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
cors_origins = [settings.frontend_url]
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    source = getattr(app.state, "market_source", None)
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "data_source": source.name if source else None,
        "redis": get_redis() is not None,
        "exchange_reachable": await source.health_check() if source else False,
    }


@app.get("/")
async def root():
    """Root endpoint, with the polling intervals the frontend should use."""
    return {
        "message": "CryptoDash Backend API",
        "docs": "/docs",
        "health": "/health",
        "polling": {
            "signals_seconds": settings.signal_poll_seconds,
            "scan_seconds": settings.scan_poll_seconds,
        },
    }
