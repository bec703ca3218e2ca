"""
Voice note recording.

Capture a spoken trade rationale and keep it as a playable file.
"""

from .capture import AudioCapture, AudioFormat, CaptureStream, CaptureDeniedError
from .clip_capture import ClipCapture, ClipStream
from .recorder import VoiceRecorder, RecordingSession, RecorderState, RecordingError
from .voice_notes import VoiceNote, VoiceNoteArchive

__all__ = [
    "AudioCapture",
    "CaptureStream",
    "CaptureDeniedError",
    "AudioFormat",
    "ClipCapture",
    "ClipStream",
    "VoiceRecorder",
    "RecordingSession",
    "RecorderState",
    "RecordingError",
    "VoiceNote",
    "VoiceNoteArchive",
]
