"""
Signal Scanner

Scans many pairs with the indicator engine:
- Smart-trading table (confident strong buys across all pairs)
- Market-status strong-buy panel
- Watchlist tables
"""

from cryptodash.services.scanner.scanner import SignalScanner, rank_signals

__all__ = [
    "SignalScanner",
    "rank_signals",
]
