"""
Trade journal module.

Track every trade, learn from mistakes, improve your performance.
"""

from .models import Trade, TradeType, TradeStatus, ValidationError, build_trade
from .trade_store import TradeStore
from .analytics import TradeStatistics

__all__ = [
    "Trade",
    "TradeType",
    "TradeStatus",
    "ValidationError",
    "build_trade",
    "TradeStore",
    "TradeStatistics",
]
