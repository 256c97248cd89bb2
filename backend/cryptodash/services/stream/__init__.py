"""
Live price streaming.

Per-symbol ticker feeds over the exchange WebSocket, degrading to REST
polling when the socket keeps failing.
"""

from cryptodash.services.stream.state import FeedState, FeedStateMachine
from cryptodash.services.stream.manager import (
    PriceStreamPool,
    SymbolFeed,
    tick_from_stream,
    tick_from_rest,
)

__all__ = [
    "FeedState",
    "FeedStateMachine",
    "PriceStreamPool",
    "SymbolFeed",
    "tick_from_stream",
    "tick_from_rest",
]
