"""
Voice note archive.

Finalised recordings are written as WAV files; the file URI is what a
trade's voice_note field keeps.
"""
import uuid
import wave
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional
from urllib.parse import urlparse
from urllib.request import url2pathname
import logging

from config import paths, recording_config, RecordingConfig
from .capture import AudioFormat

logger = logging.getLogger(__name__)


@dataclass
class VoiceNote:
    """A playable audio asset on disk."""
    path: Path
    size_bytes: int
    duration_seconds: Optional[float] = None

    @property
    def uri(self) -> str:
        return self.path.resolve().as_uri()


def voice_note_path(uri: str) -> Optional[Path]:
    """Local file behind a voice note URI, or None if it isn't a file URI."""
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        return None
    return Path(url2pathname(parsed.path))


class VoiceNoteArchive:
    """Write voice notes to the recordings directory."""

    def __init__(self, directory: Optional[Path] = None,
                 config: Optional[RecordingConfig] = None):
        self.directory = directory or paths.recordings_dir
        self.config = config or recording_config

    def _new_path(self) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return self.directory / f"{self.config.file_prefix}_{stamp}_{uuid.uuid4().hex[:8]}.wav"

    def save_frames(self, chunks: Iterable[bytes],
                    audio_format: Optional[AudioFormat] = None) -> VoiceNote:
        """
        Join raw PCM chunks into one WAV file.

        Args:
            chunks: PCM data
            audio_format: Layout of the chunks (uses the configured format if not provided)

        Returns:
            VoiceNote for the written file
        """
        audio_format = audio_format or AudioFormat(
            sample_rate=self.config.sample_rate,
            channels=self.config.channels,
            sample_width=self.config.sample_width,
        )
        frames = b"".join(chunks)
        path = self._new_path()

        with wave.open(str(path), "wb") as wav:
            wav.setnchannels(audio_format.channels)
            wav.setsampwidth(audio_format.sample_width)
            wav.setframerate(audio_format.sample_rate)
            wav.writeframes(frames)

        frame_size = audio_format.channels * audio_format.sample_width
        duration = len(frames) / frame_size / audio_format.sample_rate

        note = VoiceNote(path=path, size_bytes=path.stat().st_size, duration_seconds=duration)
        logger.info(f"Saved voice note {path.name} ({duration:.1f}s)")
        return note
