"""
Connection state machine for a single live price feed.

    CONNECTING --connect ok--> LIVE
    CONNECTING/LIVE --failure, retries left--> CONNECTING (after backoff)
    CONNECTING/LIVE --failure, ceiling reached--> DEGRADED_POLLING
    any --close--> CLOSED

DEGRADED_POLLING is terminal for the feed: prices keep flowing from REST
polls until the last subscriber leaves.
"""

from enum import Enum
from typing import Optional


class FeedState(str, Enum):
    CONNECTING = "connecting"
    LIVE = "live"
    DEGRADED_POLLING = "degraded_polling"
    CLOSED = "closed"


class FeedStateMachine:
    """Retry bookkeeping with exponential backoff: retry_interval * 2**retries."""

    def __init__(self, max_retries: int = 5, retry_interval: float = 2.0):
        self.max_retries = max_retries
        self.retry_interval = retry_interval
        self.state = FeedState.CONNECTING
        self.retries = 0

    @property
    def is_live(self) -> bool:
        return self.state == FeedState.LIVE

    def on_connected(self) -> None:
        if self.state in (FeedState.CLOSED, FeedState.DEGRADED_POLLING):
            return
        self.state = FeedState.LIVE
        self.retries = 0

    def on_failure(self) -> Optional[float]:
        """
        Record a failed or dropped connection.

        Returns the delay before the next attempt, or None once the feed has
        switched to polling.
        """
        if self.state in (FeedState.CLOSED, FeedState.DEGRADED_POLLING):
            return None

        if self.retries < self.max_retries:
            delay = self.retry_interval * (2 ** self.retries)
            self.retries += 1
            self.state = FeedState.CONNECTING
            return delay

        self.state = FeedState.DEGRADED_POLLING
        return None

    def close(self) -> None:
        self.state = FeedState.CLOSED
