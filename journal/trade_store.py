"""
Trade store - the journal's single source of truth.

Owns the trade list and the currency pair list. Every change is written
through to the key-value backend before it becomes visible.
"""
import json
import uuid
import pandas as pd
from pathlib import Path
from typing import Dict, Any, List, Optional
import logging

from config import paths, storage_config, journal_config, StorageConfig, JournalConfig
from core.kv_store import KeyValueStore
from .models import (
    FIELD_NAMES,
    Trade,
    ValidationError,
    build_trade,
    is_valid_currency_pair,
    normalize_currency_pair,
    normalize_keys,
    utc_timestamp,
)

logger = logging.getLogger(__name__)

ALL = "ALL"

# Filter option -> Trade attribute
FILTER_FIELDS = {
    "status": "status",
    "pair": "currency_pair",
    "type": "trade_type",
}

IMMUTABLE_FIELDS = ("id", "timestamp")


class TradeStore:
    """
    Manage trades and currency pairs.

    Trades are kept most-recent-first. Both collections are stored as JSON
    arrays under fixed keys and rehydrated on construction.
    """

    def __init__(self, kv_store: KeyValueStore,
                 config: Optional[StorageConfig] = None,
                 journal: Optional[JournalConfig] = None):
        """
        Initialize the store.

        Args:
            kv_store: Persistence backend
            config: Storage keys (uses default if not provided)
            journal: Journal settings such as the default pairs
        """
        self.kv_store = kv_store
        self.config = config or storage_config
        self.journal = journal or journal_config

        self.trades: List[Trade] = []
        self.currency_pairs: List[str] = []
        self.reload()

        logger.info(
            f"TradeStore initialized with {len(self.trades)} trades "
            f"and {len(self.currency_pairs)} currency pairs"
        )

    def reload(self) -> None:
        """Re-read both collections from the backend."""
        self.trades = self._load_trades()
        pairs = self._load_currency_pairs()

        if pairs is None:
            pairs = list(self.journal.default_pairs)
            self._write(self.config.pairs_key, pairs)
            logger.info(f"Seeded {len(pairs)} default currency pairs")

        self.currency_pairs = pairs

    def _read_json(self, key: str) -> Optional[Any]:
        raw = self.kv_store.get(key)
        if raw is None:
            return None

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Error decoding {key}: {e}")
            return None

    def _load_trades(self) -> List[Trade]:
        records = self._read_json(self.config.trades_key)
        if not records:
            return []
        if not isinstance(records, list):
            logger.error(f"Expected a list under {self.config.trades_key}, got {type(records).__name__}")
            return []

        trades = []
        seen_ids = set()
        for record in records:
            try:
                trade = Trade.from_dict(record)
            except (ValidationError, AttributeError) as e:
                logger.error(f"Skipping unreadable trade record {record!r}: {e}")
                continue

            if trade.id in seen_ids:
                logger.error(f"Skipping trade with duplicate id: {trade.id}")
                continue

            seen_ids.add(trade.id)
            trades.append(trade)

        logger.info(f"Loaded {len(trades)} trades from {self.config.trades_key}")
        return trades

    def _load_currency_pairs(self) -> Optional[List[str]]:
        pairs = self._read_json(self.config.pairs_key)
        if pairs is None:
            return None
        if not isinstance(pairs, list):
            logger.error(f"Expected a list under {self.config.pairs_key}, got {type(pairs).__name__}")
            return None

        loaded = []
        for pair in pairs:
            if is_valid_currency_pair(pair) and pair not in loaded:
                loaded.append(pair)
        return loaded

    def _write(self, key: str, value: Any) -> None:
        self.kv_store.set(key, json.dumps(value))
        logger.debug(f"Persisted {key}")

    def _commit_trades(self, trades: List[Trade]) -> None:
        """Persist the full list, then make it current."""
        self._write(self.config.trades_key, [t.to_dict() for t in trades])
        self.trades = trades

    @staticmethod
    def _generate_id() -> str:
        return uuid.uuid4().hex

    def save_trade(self, data: Dict[str, Any]) -> Trade:
        """
        Log a new trade.

        Args:
            data: Trade fields (currency pair, type, prices, status, ...)

        Returns:
            The stored Trade with its id and timestamp

        Raises:
            ValidationError: if the data breaks a trade rule
        """
        trade_id = self._generate_id()
        while self.get_trade(trade_id) is not None:
            trade_id = self._generate_id()

        trade = build_trade(
            data,
            known_pairs=self.currency_pairs,
            trade_id=trade_id,
            timestamp=utc_timestamp(),
        )

        self._commit_trades([trade] + self.trades)

        logger.info(f"Saved trade {trade.id}: {trade.trade_type.value} {trade.currency_pair} ({trade.status.value})")
        return trade

    def update_trade(self, trade_id: str, updates: Dict[str, Any]) -> bool:
        """
        Merge updates over an existing trade.

        Returns:
            False if no trade has this id, True once the update is stored

        Raises:
            ValidationError: if the merged trade breaks a trade rule
        """
        for index, trade in enumerate(self.trades):
            if trade.id != trade_id:
                continue

            patch = normalize_keys(updates)
            for name in IMMUTABLE_FIELDS:
                if name in patch:
                    logger.warning(f"Ignoring attempt to change {name} of trade {trade_id}")
                    patch.pop(name)

            merged = {**trade.to_dict(), **patch}
            updated = build_trade(merged, trade_id=trade.id, timestamp=trade.timestamp)

            trades = list(self.trades)
            trades[index] = updated
            self._commit_trades(trades)

            logger.info(f"Updated trade: {trade_id}")
            return True

        logger.warning(f"Trade {trade_id} not found for update")
        return False

    def delete_trade(self, trade_id: str) -> bool:
        """Permanently remove a trade. Returns whether anything was removed."""
        remaining = [t for t in self.trades if t.id != trade_id]
        removed = len(remaining) != len(self.trades)

        self._commit_trades(remaining)

        if removed:
            logger.info(f"Deleted trade: {trade_id}")
        else:
            logger.warning(f"Trade {trade_id} not found for delete")
        return removed

    def get_trade(self, trade_id: str) -> Optional[Trade]:
        """Get a specific trade by ID."""
        for trade in self.trades:
            if trade.id == trade_id:
                return trade
        return None

    def get_trades(self, filters: Optional[Dict[str, Any]] = None) -> List[Trade]:
        """
        Get trades matching every filter, most recent first.

        Args:
            filters: Optional {'status', 'pair', 'type'} each 'ALL' or a value

        Returns:
            A new list; changing it does not change the store
        """
        filtered = list(self.trades)

        for option, value in (filters or {}).items():
            attr = FILTER_FIELDS.get(option)
            if attr is None:
                logger.debug(f"Ignoring unknown trade filter: {option}")
                continue
            if value is None:
                continue

            wanted = getattr(value, "value", value)
            if wanted == ALL:
                continue

            filtered = [t for t in filtered if getattr(t, attr) == wanted]

        logger.debug(f"Filter {filters} matched {len(filtered)} trades")
        return filtered

    def add_currency_pair(self, pair: str) -> bool:
        """
        Add a currency pair such as "EUR/USD".

        Returns:
            False if the pair is malformed or already known
        """
        pair = normalize_currency_pair(pair)

        if not is_valid_currency_pair(pair):
            logger.warning(f"Rejected malformed currency pair: {pair!r}")
            return False
        if pair in self.currency_pairs:
            logger.debug(f"Currency pair already exists: {pair}")
            return False

        pairs = self.currency_pairs + [pair]
        self._write(self.config.pairs_key, pairs)
        self.currency_pairs = pairs

        logger.info(f"Added currency pair: {pair}")
        return True

    def get_currency_pairs(self) -> List[str]:
        return list(self.currency_pairs)

    def get_all_trades(self) -> pd.DataFrame:
        """Get all trades as DataFrame."""
        return pd.DataFrame(
            [t.to_dict() for t in self.trades],
            columns=list(FIELD_NAMES),
        )

    def export_to_csv(self, output_path: Optional[Path] = None) -> Path:
        """Export trades to CSV for analysis in Excel/Sheets."""
        output_path = output_path or (paths.export_dir / "trades_export.csv")
        output_path.parent.mkdir(parents=True, exist_ok=True)

        df = self.get_all_trades()
        df.to_csv(output_path, index=False)

        logger.info(f"Exported {len(df)} trades to {output_path}")
        return output_path
