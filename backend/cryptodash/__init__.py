"""
CryptoDash backend: Binance market data, ADX/RSI/EMA signals and live price feeds.
"""

__version__ = "0.1.0"
