"""
Capture backed by a finished WAV clip.

The browser records through Streamlit's microphone widget and hands the
app a complete WAV file. This capture replays that clip's frames as a
stream, so the recorder treats it like a live microphone.
"""
import io
import wave
from typing import List, Optional
import logging

from .capture import AudioCapture, AudioFormat, CaptureDeniedError, CaptureStream, ChunkHandler

logger = logging.getLogger(__name__)


class ClipStream(CaptureStream):
    """Delivers a decoded clip in fixed-size chunks."""

    def __init__(self, frames: bytes, audio_format: AudioFormat, chunk_frames: int = 4096):
        self.frames = frames
        self._format = audio_format
        self.chunk_bytes = chunk_frames * audio_format.channels * audio_format.sample_width
        self.active = False

    @property
    def audio_format(self) -> AudioFormat:
        return self._format

    def chunks(self) -> List[bytes]:
        return [self.frames[i:i + self.chunk_bytes] for i in range(0, len(self.frames), self.chunk_bytes)]

    def start(self, on_chunk: ChunkHandler) -> None:
        self.active = True
        for chunk in self.chunks():
            on_chunk(chunk)

    def stop(self) -> None:
        self.active = False


class ClipCapture(AudioCapture):
    """
    Microphone access through a recorded clip.

    No clip means the user never granted the microphone (or never pressed
    record), which is reported as a denial.
    """

    def __init__(self, clip: Optional[bytes], chunk_frames: int = 4096):
        self.clip = clip
        self.chunk_frames = chunk_frames

    def request_capture(self) -> ClipStream:
        if not self.clip:
            raise CaptureDeniedError("No microphone recording available")

        try:
            with wave.open(io.BytesIO(self.clip), "rb") as wav:
                audio_format = AudioFormat(
                    sample_rate=wav.getframerate(),
                    channels=wav.getnchannels(),
                    sample_width=wav.getsampwidth(),
                )
                frames = wav.readframes(wav.getnframes())
        except (wave.Error, EOFError) as e:
            raise CaptureDeniedError(f"Unreadable recording: {e}") from e

        logger.debug(f"Decoded clip: {len(frames)} bytes at {audio_format.sample_rate} Hz")
        return ClipStream(frames, audio_format, self.chunk_frames)
