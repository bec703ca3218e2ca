#!/usr/bin/env python3
"""
FX Trade Journal - Demo

This script demonstrates the complete workflow:
1. Open a journal
2. Add a currency pair
3. Log trades
4. Close a trade
5. Filter trades
6. Print statistics

It uses an in-memory store, so nothing is written to your real journal.
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from core.kv_store import MemoryKeyValueStore
from journal.models import ValidationError
from journal.trade_store import TradeStore
from journal.analytics import TradeStatistics

import logging

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)

SAMPLE_TRADES = [
    {'currencyPair': 'EUR/USD', 'tradeType': 'BUY', 'entryPrice': 1.0850, 'lotSize': 1.0,
     'stopLoss': 1.0800, 'takeProfit': 1.0950, 'exitPrice': 1.0945, 'status': 'WIN',
     'reason': 'Breakout above the Asian range'},
    {'currencyPair': 'EUR/USD', 'tradeType': 'SELL', 'entryPrice': 1.0920, 'lotSize': 0.5,
     'stopLoss': 1.0960, 'exitPrice': 1.0960, 'status': 'LOSS',
     'reason': 'Faded the London open, stopped out'},
    {'currencyPair': 'GBP/USD', 'tradeType': 'BUY', 'entryPrice': 1.2630, 'lotSize': 0.8,
     'exitPrice': 1.2710, 'status': 'WIN'},
    {'currencyPair': 'USD/JPY', 'tradeType': 'SELL', 'entryPrice': 151.20, 'lotSize': 0.3,
     'stopLoss': 152.00, 'takeProfit': 149.50, 'status': 'OPEN'},
]


def main():
    print("""
╔══════════════════════════════════════════════════════════╗
║     FX TRADE JOURNAL - DEMO                              ║
╚══════════════════════════════════════════════════════════╝
    """)

    # Step 1: Initialize components
    print("[1/6] Opening journal...")
    store = TradeStore(MemoryKeyValueStore())
    statistics = TradeStatistics(store)
    print(f"  ✅ {len(store.get_currency_pairs())} currency pairs available")

    # Step 2: Add a pair
    print("\n[2/6] Adding EUR/GBP...")
    if store.add_currency_pair("eur/gbp"):
        print("  ✅ EUR/GBP added")
    if not store.add_currency_pair("EUR/GBP"):
        print("  ✅ Duplicate EUR/GBP rejected")

    # Step 3: Log trades
    print("\n[3/6] Logging trades...")
    for data in SAMPLE_TRADES:
        trade = store.save_trade(data)
        print(f"  ✅ {trade.trade_type.value} {trade.currency_pair} @ {trade.entry_price} ({trade.status.value})")

    try:
        store.save_trade({'currencyPair': 'EUR/USD', 'tradeType': 'BUY',
                          'entryPrice': 1.09, 'lotSize': 1.0, 'status': 'LOSS'})
    except ValidationError as e:
        print(f"  ❌ Rejected: {e}")

    # Step 4: Close the open trade
    print("\n[4/6] Closing the USD/JPY trade...")
    open_trade = store.get_trades({'status': 'OPEN'})[0]
    store.update_trade(open_trade.id, {'status': 'WIN', 'exitPrice': 149.60})
    print(f"  ✅ {open_trade.currency_pair} marked WIN")

    # Step 5: Filter
    print("\n[5/6] EUR/USD trades:")
    for trade in store.get_trades({'status': 'ALL', 'pair': 'EUR/USD', 'type': 'ALL'}):
        print(f"  • {trade.trade_type.value} {trade.entry_price} -> {trade.exit_price} ({trade.status.value})")

    # Step 6: Statistics
    print("\n[6/6] Statistics:")
    print(statistics.generate_report())

    print("To open the dashboard: python3 -m streamlit run ui/app.py")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\nDemo interrupted by user")
    except Exception as e:
        logger.error(f"Demo failed: {e}", exc_info=True)
        print(f"\n❌ Error: {e}")
