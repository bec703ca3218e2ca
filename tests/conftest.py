"""Pytest configuration and shared fixtures."""

import pytest
from typing import Any, Dict, List

from config import RecordingConfig
from core.kv_store import MemoryKeyValueStore
from journal.trade_store import TradeStore
from journal.analytics import TradeStatistics
from recording.capture import AudioCapture, CaptureDeniedError, CaptureStream
from recording.voice_notes import VoiceNoteArchive


class FakeStream(CaptureStream):
    """Capture stream that replays prepared PCM chunks."""

    def __init__(self, chunks: List[bytes]):
        self.chunks = chunks
        self.on_chunk = None
        self.started = False
        self.stopped = False

    def start(self, on_chunk) -> None:
        self.started = True
        self.on_chunk = on_chunk

    def stop(self) -> None:
        # Deliver everything on stop, like a recorder flushing its buffer
        for chunk in self.chunks:
            self.on_chunk(chunk)
        self.stopped = True


class FakeCapture(AudioCapture):
    """Microphone that either grants a FakeStream or refuses."""

    def __init__(self, chunks: List[bytes] = None, deny: bool = False):
        self.chunks = chunks if chunks is not None else [b"\x00\x01" * 100, b"\x02\x03" * 100]
        self.deny = deny
        self.streams: List[FakeStream] = []

    def request_capture(self) -> CaptureStream:
        if self.deny:
            raise CaptureDeniedError("Permission denied")
        stream = FakeStream(list(self.chunks))
        self.streams.append(stream)
        return stream


@pytest.fixture
def kv_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def store(kv_store) -> TradeStore:
    return TradeStore(kv_store)


@pytest.fixture
def statistics(store) -> TradeStatistics:
    return TradeStatistics(store)


@pytest.fixture
def open_trade_data() -> Dict[str, Any]:
    """The simplest valid trade."""
    return {
        "currencyPair": "EUR/USD",
        "tradeType": "BUY",
        "entryPrice": 1.10,
        "lotSize": 1.0,
        "status": "OPEN",
    }


@pytest.fixture
def make_trade_data():
    """Build trade data with overrides."""
    def _make(**overrides) -> Dict[str, Any]:
        data = {
            "currencyPair": "EUR/USD",
            "tradeType": "BUY",
            "entryPrice": 1.10,
            "lotSize": 1.0,
            "status": "OPEN",
        }
        data.update(overrides)
        if data["status"] != "OPEN" and "exitPrice" not in overrides:
            data["exitPrice"] = 1.12
        return data
    return _make


@pytest.fixture
def recording_config() -> RecordingConfig:
    return RecordingConfig(sample_rate=8000, channels=1, sample_width=2, file_prefix="test_note")


@pytest.fixture
def archive(tmp_path, recording_config) -> VoiceNoteArchive:
    return VoiceNoteArchive(directory=tmp_path / "recordings", config=recording_config)


@pytest.fixture
def fake_capture() -> FakeCapture:
    return FakeCapture()


@pytest.fixture
def denied_capture() -> FakeCapture:
    return FakeCapture(deny=True)
