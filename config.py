"""
Configuration settings for the FX Trade Journal.

Centralized config makes it easy to modify behavior without touching core logic.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple
import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_CURRENCY_PAIRS = (
    "EUR/USD",
    "GBP/USD",
    "USD/JPY",
    "AUD/USD",
    "USD/CAD",
    "USD/CHF",
    "NZD/USD",
)


@dataclass
class StorageConfig:
    """Key-value persistence configuration."""
    backend: str = os.getenv("FX_JOURNAL_BACKEND", "disk")  # disk, memory
    trades_key: str = "forexTrades"
    pairs_key: str = "currencyPairs"


@dataclass
class JournalConfig:
    """Journal behaviour."""
    default_pairs: Tuple[str, ...] = DEFAULT_CURRENCY_PAIRS
    recent_trades_limit: int = 5  # Trades shown on the dashboard


@dataclass
class RecordingConfig:
    """Voice note capture parameters."""
    sample_rate: int = 44100
    channels: int = 1
    sample_width: int = 2  # Bytes per sample (16-bit PCM)
    file_prefix: str = "voice_note"


@dataclass
class UIConfig:
    """User interface settings."""
    page_title: str = "FX Trade Journal"
    win_color: str = "#10b981"
    loss_color: str = "#ef4444"
    open_color: str = "#f59e0b"
    bar_color: str = "#3b82f6"


@dataclass
class Paths:
    """File system paths."""
    base_dir: Path = Path(__file__).parent
    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("FX_JOURNAL_HOME", Path(__file__).parent / "data"))
    )

    @property
    def storage_dir(self) -> Path:
        return self.data_dir / "store"

    @property
    def recordings_dir(self) -> Path:
        return self.data_dir / "recordings"

    @property
    def export_dir(self) -> Path:
        return self.data_dir / "exports"

    def ensure(self) -> None:
        """Create data directories if they don't exist."""
        for directory in (self.storage_dir, self.recordings_dir, self.export_dir):
            directory.mkdir(parents=True, exist_ok=True)


# Global config instances
storage_config = StorageConfig()
journal_config = JournalConfig()
recording_config = RecordingConfig()
ui_config = UIConfig()
paths = Paths()
