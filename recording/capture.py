"""
Audio capture interfaces.

The platform supplies the microphone; the recorder only needs a way to ask
for it and a stream that hands over raw PCM chunks.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

ChunkHandler = Callable[[bytes], None]


class CaptureDeniedError(Exception):
    """Raised when the microphone is unavailable or permission is refused."""
    pass


@dataclass(frozen=True)
class AudioFormat:
    """PCM layout of the chunks a stream delivers."""
    sample_rate: int
    channels: int
    sample_width: int  # Bytes per sample


class CaptureStream(ABC):
    """A granted capture session on the microphone."""

    @property
    def audio_format(self) -> Optional[AudioFormat]:
        """Format of the delivered chunks; None means the configured default."""
        return None

    @abstractmethod
    def start(self, on_chunk: ChunkHandler) -> None:
        """Begin delivering audio chunks to on_chunk."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Flush any pending chunk and release the device."""
        pass


class AudioCapture(ABC):
    """Source of capture sessions."""

    @abstractmethod
    def request_capture(self) -> CaptureStream:
        """
        Ask for the microphone.

        Raises:
            CaptureDeniedError: if access is refused
        """
        pass
