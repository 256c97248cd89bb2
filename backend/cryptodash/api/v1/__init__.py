"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from cryptodash.api.v1.endpoints import market, signals, calculator, notifications, stream

router = APIRouter()

# Include all endpoint routers
router.include_router(market.router, prefix="/market", tags=["Market Data"])
router.include_router(signals.router, prefix="/signals", tags=["Signals"])
router.include_router(calculator.router, prefix="/calculator", tags=["Calculator"])
router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
router.include_router(stream.router, prefix="/stream", tags=["Real-Time Streaming"])
