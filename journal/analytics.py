"""
Trade analytics - analyze your performance.

Learn from your trades. Which pairs work? Which don't?
Every number is recomputed from the full trade list on each call.
"""
import pandas as pd
import numpy as np
from typing import Dict, Any, List, Optional
from datetime import datetime
import logging

from config import journal_config, JournalConfig
from .models import Trade, TradeStatus
from .trade_store import TradeStore

logger = logging.getLogger(__name__)


def dashboard_stats(trades: List[Trade]) -> Dict[str, Any]:
    """
    Count trades by outcome.

    Returns:
        Dict with total_trades, winning_trades, losing_trades,
        open_trades and win_rate (percent of all trades, one decimal)
    """
    total_trades = len(trades)
    winning_trades = sum(1 for t in trades if t.status == TradeStatus.WIN)
    losing_trades = sum(1 for t in trades if t.status == TradeStatus.LOSS)
    open_trades = sum(1 for t in trades if t.status == TradeStatus.OPEN)

    win_rate = round(winning_trades / total_trades * 100, 1) if total_trades > 0 else 0

    return {
        'total_trades': total_trades,
        'winning_trades': winning_trades,
        'losing_trades': losing_trades,
        'open_trades': open_trades,
        'win_rate': win_rate,
    }


def performance_by_pair(trades: List[Trade]) -> Dict[str, Dict[str, int]]:
    """
    Win/loss counts per currency pair.

    Only pairs that appear in at least one trade are present.
    """
    performance: Dict[str, Dict[str, int]] = {}

    for trade in trades:
        counts = performance.setdefault(trade.currency_pair, {'wins': 0, 'losses': 0, 'total': 0})
        if trade.status == TradeStatus.WIN:
            counts['wins'] += 1
        elif trade.status == TradeStatus.LOSS:
            counts['losses'] += 1
        counts['total'] += 1

    return performance


class TradeStatistics:
    """
    Dashboard aggregates over a trade store.

    Metrics tracked:
    - Trade counts by outcome
    - Win rate
    - Performance by currency pair
    - Recent trades
    """

    def __init__(self, store: TradeStore, config: Optional[JournalConfig] = None):
        """
        Initialize with the store to read from.

        Args:
            store: The journal's TradeStore
            config: Journal settings (uses default if not provided)
        """
        self.store = store
        self.config = config or journal_config

    def get_dashboard_stats(self) -> Dict[str, Any]:
        return dashboard_stats(self.store.get_trades())

    def get_performance_by_pair(self) -> Dict[str, Dict[str, int]]:
        return performance_by_pair(self.store.get_trades())

    def get_recent_trades(self, limit: Optional[int] = None) -> List[Trade]:
        """Most recent trades first."""
        limit = self.config.recent_trades_limit if limit is None else limit
        return self.store.get_trades()[:limit]

    def performance_table(self) -> pd.DataFrame:
        """Per-pair counts plus win rate, indexed by pair."""
        performance = self.get_performance_by_pair()

        if not performance:
            return pd.DataFrame(columns=['wins', 'losses', 'total', 'win_rate'])

        df = pd.DataFrame.from_dict(performance, orient='index')[['wins', 'losses', 'total']]
        df.index.name = 'pair'
        df['win_rate'] = np.where(df['total'] > 0, df['wins'] / df['total'] * 100, 0.0)

        return df.round({'win_rate': 1})

    def generate_report(self) -> str:
        """Generate a plain-text performance report."""
        stats = self.get_dashboard_stats()

        if stats['total_trades'] == 0:
            return "No trades logged yet."

        table = self.performance_table()
        pair_lines = "\n".join(
            f"{pair:<8} {int(row['wins']):>4}W {int(row['losses']):>4}L "
            f"{int(row['total']):>4} trades  {row['win_rate']:5.1f}%"
            for pair, row in table.iterrows()
        )

        report = f"""
TRADING JOURNAL REPORT
{'=' * 60}
Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}

OVERALL
{'=' * 60}
Total Trades: {stats['total_trades']}
Wins: {stats['winning_trades']}  |  Losses: {stats['losing_trades']}  |  Open: {stats['open_trades']}
Win Rate: {stats['win_rate']:.1f}%

BY CURRENCY PAIR
{'=' * 60}
{pair_lines}

{'=' * 60}
"""

        return report
