"""
Voice recorder - attach a spoken rationale to a trade.

Two phases:
1. begin() grabs the microphone and starts buffering chunks
2. await end(session) releases the microphone and writes one WAV file

Only one session can be active at a time.
"""
import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional
import logging

from .capture import AudioCapture, CaptureDeniedError, CaptureStream
from .voice_notes import VoiceNote, VoiceNoteArchive

logger = logging.getLogger(__name__)


class RecordingError(Exception):
    """Raised for out-of-order recorder calls."""
    pass


class RecorderState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"


@dataclass
class RecordingSession:
    """An active capture and the chunks buffered so far."""
    stream: CaptureStream
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    started_at: datetime = field(default_factory=datetime.now)
    chunks: List[bytes] = field(default_factory=list)

    def append(self, chunk: bytes) -> None:
        if chunk:
            self.chunks.append(chunk)


class VoiceRecorder:
    """Single-session microphone recorder."""

    def __init__(self, capture: AudioCapture, archive: Optional[VoiceNoteArchive] = None):
        self.capture = capture
        self.archive = archive or VoiceNoteArchive()
        self._session: Optional[RecordingSession] = None

    @property
    def state(self) -> RecorderState:
        return RecorderState.RECORDING if self._session else RecorderState.IDLE

    @property
    def is_recording(self) -> bool:
        return self._session is not None

    def begin(self) -> RecordingSession:
        """
        Start recording.

        Raises:
            RecordingError: if a session is already active
            CaptureDeniedError: if the microphone is refused
        """
        if self._session is not None:
            raise RecordingError("A recording is already in progress")

        stream = self.capture.request_capture()
        session = RecordingSession(stream=stream)
        try:
            stream.start(session.append)
        except Exception:
            stream.stop()
            raise

        self._session = session
        logger.info(f"Recording started: {session.id}")
        return session

    async def end(self, session: RecordingSession) -> VoiceNote:
        """
        Stop recording and write the voice note.

        Raises:
            RecordingError: if session is not the active one
        """
        if session is not self._session:
            raise RecordingError(f"Recording {session.id} is not active")

        try:
            session.stream.stop()
        finally:
            self._session = None

        note = await asyncio.to_thread(
            self.archive.save_frames, list(session.chunks), session.stream.audio_format
        )
        logger.info(f"Recording finished: {session.id} -> {note.path.name}")
        return note

    def start_recording(self) -> bool:
        """Start recording; False if the microphone was refused or busy."""
        try:
            self.begin()
            return True
        except CaptureDeniedError as e:
            logger.warning(f"Error starting recording: {e}")
            return False
        except RecordingError as e:
            logger.warning(str(e))
            return False

    async def stop_recording(self) -> Optional[VoiceNote]:
        """Stop the active recording; None if nothing was recording."""
        if self._session is None:
            return None
        return await self.end(self._session)
