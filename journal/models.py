"""
Trade record and validation.

Every trade in the journal is built through build_trade(), so a Trade
instance always satisfies the journal's invariants.
"""
import math
import re
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterable, Optional

CURRENCY_PAIR_PATTERN = re.compile(r"^[A-Z]{3}/[A-Z]{3}$")

# Persisted (camelCase) name -> attribute name
FIELD_NAMES = {
    "id": "id",
    "timestamp": "timestamp",
    "currencyPair": "currency_pair",
    "tradeType": "trade_type",
    "entryPrice": "entry_price",
    "lotSize": "lot_size",
    "stopLoss": "stop_loss",
    "takeProfit": "take_profit",
    "exitPrice": "exit_price",
    "status": "status",
    "reason": "reason",
    "voiceNote": "voice_note",
}
ATTRIBUTE_NAMES = {attr: name for name, attr in FIELD_NAMES.items()}


class ValidationError(ValueError):
    """Raised when trade or currency pair data breaks a journal rule."""
    pass


class TradeType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class TradeStatus(str, Enum):
    OPEN = "OPEN"
    WIN = "WIN"
    LOSS = "LOSS"


@dataclass
class Trade:
    """One logged position."""
    id: str
    timestamp: str
    currency_pair: str
    trade_type: TradeType
    entry_price: float
    lot_size: float
    status: TradeStatus = TradeStatus.OPEN
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    exit_price: Optional[float] = None
    reason: str = ""
    voice_note: Optional[str] = None

    @property
    def is_closed(self) -> bool:
        return self.status != TradeStatus.OPEN

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the persisted field names."""
        record = {}
        for attr, value in asdict(self).items():
            if isinstance(value, Enum):
                value = value.value
            record[ATTRIBUTE_NAMES[attr]] = value
        return record

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Trade":
        """
        Rebuild a stored trade.

        Persisted records were validated when saved, so the currency pair is
        not checked against the current pair set here.
        """
        return build_trade(data)


def normalize_currency_pair(pair: Any) -> str:
    """Trim and upper-case user input ("eur/usd " -> "EUR/USD")."""
    if not isinstance(pair, str):
        return ""
    return pair.strip().upper()


def is_valid_currency_pair(pair: Any) -> bool:
    return isinstance(pair, str) and bool(CURRENCY_PAIR_PATTERN.fullmatch(pair))


def normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map camelCase or snake_case input keys onto Trade attribute names."""
    normalized = {}
    for key, value in data.items():
        if key in FIELD_NAMES:
            normalized[FIELD_NAMES[key]] = value
        elif key in ATTRIBUTE_NAMES:
            normalized[key] = value
    return normalized


def _coerce_enum(enum_cls, value: Any, label: str):
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().upper())
        except ValueError:
            pass
    allowed = ", ".join(member.value for member in enum_cls)
    raise ValidationError(f"{label} must be one of {allowed}, got {value!r}")


def _coerce_price(value: Any, label: str, required: bool = False) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f"{label} is required.")
        return None

    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a number, got {value!r}")

    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a number, got {value!r}")

    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{label} must be a finite number.")

    return number


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_trade(data: Dict[str, Any],
                known_pairs: Optional[Iterable[str]] = None,
                trade_id: Optional[str] = None,
                timestamp: Optional[str] = None) -> Trade:
    """
    Build a validated Trade.

    Args:
        data: Trade fields, camelCase or snake_case keys
        known_pairs: If given, the currency pair must be one of these
        trade_id: Overrides any id in data
        timestamp: Overrides any timestamp in data

    Returns:
        Trade

    Raises:
        ValidationError: on the first broken rule
    """
    fields = normalize_keys(data)

    trade_id = trade_id or fields.get("id")
    if not trade_id:
        raise ValidationError("Trade id is required.")

    pair = fields.get("currency_pair")
    if not is_valid_currency_pair(pair):
        raise ValidationError(
            f"Please enter a valid currency pair format (e.g., EUR/USD), got {pair!r}"
        )
    if known_pairs is not None and pair not in set(known_pairs):
        raise ValidationError(f"Unknown currency pair: {pair}")

    trade_type = _coerce_enum(TradeType, fields.get("trade_type"), "Trade type")
    status = _coerce_enum(TradeStatus, fields.get("status", TradeStatus.OPEN), "Status")

    entry_price = _coerce_price(fields.get("entry_price"), "Entry price", required=True)
    lot_size = _coerce_price(fields.get("lot_size"), "Lot size", required=True)
    if entry_price <= 0:
        raise ValidationError("Entry price must be greater than zero.")
    if lot_size <= 0:
        raise ValidationError("Lot size must be greater than zero.")

    exit_price = _coerce_price(fields.get("exit_price"), "Exit price")
    if status != TradeStatus.OPEN and exit_price is None:
        raise ValidationError("Exit price is required for closed trades.")

    reason = fields.get("reason") or ""
    voice_note = fields.get("voice_note") or None

    return Trade(
        id=str(trade_id),
        timestamp=timestamp or fields.get("timestamp") or utc_timestamp(),
        currency_pair=pair,
        trade_type=trade_type,
        entry_price=entry_price,
        lot_size=lot_size,
        status=status,
        stop_loss=_coerce_price(fields.get("stop_loss"), "Stop loss"),
        take_profit=_coerce_price(fields.get("take_profit"), "Take profit"),
        exit_price=exit_price,
        reason=str(reason),
        voice_note=str(voice_note) if voice_note else None,
    )
