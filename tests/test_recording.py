"""Tests for voice note recording."""

import io
import wave

import pytest

from recording.capture import AudioFormat, CaptureDeniedError
from recording.clip_capture import ClipCapture
from recording.recorder import RecorderState, RecordingError, VoiceRecorder
from recording.voice_notes import voice_note_path


def make_wav(frames: bytes, sample_rate: int = 48000, channels: int = 1, sample_width: int = 2) -> bytes:
    """Encode PCM frames as an in-memory WAV file."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(sample_width)
        wav.setframerate(sample_rate)
        wav.writeframes(frames)
    return buffer.getvalue()


class TestVoiceNoteArchive:
    """Test writing audio assets."""

    def test_save_frames_writes_wav(self, archive, recording_config):
        frames = b"\x00\x01" * 8000

        note = archive.save_frames([frames[:8000], frames[8000:]])

        assert note.path.exists()
        assert note.path.suffix == ".wav"
        assert note.path.name.startswith("test_note_")
        assert note.duration_seconds == pytest.approx(1.0)

        with wave.open(str(note.path), "rb") as wav:
            assert wav.getnchannels() == recording_config.channels
            assert wav.getsampwidth() == recording_config.sample_width
            assert wav.getframerate() == recording_config.sample_rate
            assert wav.readframes(wav.getnframes()) == frames

    def test_save_frames_with_stream_format(self, archive):
        audio_format = AudioFormat(sample_rate=16000, channels=2, sample_width=2)

        note = archive.save_frames([b"\x00" * 64000], audio_format)

        assert note.duration_seconds == pytest.approx(1.0)
        with wave.open(str(note.path), "rb") as wav:
            assert wav.getframerate() == 16000
            assert wav.getnchannels() == 2

    def test_each_note_gets_its_own_file(self, archive):
        first = archive.save_frames([b"\x00\x00"])
        second = archive.save_frames([b"\x00\x00"])

        assert first.path != second.path

    def test_uri_round_trip(self, archive):
        note = archive.save_frames([b"\x00\x00"])

        assert note.uri.startswith("file://")
        assert voice_note_path(note.uri) == note.path.resolve()

    def test_non_file_uri(self):
        assert voice_note_path("blob:http://localhost/123") is None


class TestVoiceRecorder:
    """Test the recorder state machine."""

    def test_starts_idle(self, fake_capture, archive):
        recorder = VoiceRecorder(fake_capture, archive)

        assert recorder.state is RecorderState.IDLE
        assert not recorder.is_recording

    @pytest.mark.asyncio
    async def test_begin_and_end(self, fake_capture, archive):
        recorder = VoiceRecorder(fake_capture, archive)

        session = recorder.begin()
        assert recorder.state is RecorderState.RECORDING
        assert fake_capture.streams[0].started

        note = await recorder.end(session)

        assert recorder.state is RecorderState.IDLE
        assert fake_capture.streams[0].stopped
        assert note.path.exists()
        assert session.chunks == fake_capture.chunks

        with wave.open(str(note.path), "rb") as wav:
            assert wav.readframes(wav.getnframes()) == b"".join(fake_capture.chunks)

    def test_begin_denied(self, denied_capture, archive):
        recorder = VoiceRecorder(denied_capture, archive)

        with pytest.raises(CaptureDeniedError):
            recorder.begin()
        assert recorder.state is RecorderState.IDLE

    def test_overlapping_begin_rejected(self, fake_capture, archive):
        recorder = VoiceRecorder(fake_capture, archive)
        recorder.begin()

        with pytest.raises(RecordingError):
            recorder.begin()
        assert len(fake_capture.streams) == 1

    @pytest.mark.asyncio
    async def test_end_foreign_session_rejected(self, fake_capture, archive):
        recorder = VoiceRecorder(fake_capture, archive)
        session = recorder.begin()
        await recorder.end(session)

        with pytest.raises(RecordingError):
            await recorder.end(session)

    def test_start_recording_returns_true(self, fake_capture, archive):
        recorder = VoiceRecorder(fake_capture, archive)

        assert recorder.start_recording() is True
        assert recorder.is_recording

    def test_start_recording_denied_returns_false(self, denied_capture, archive):
        recorder = VoiceRecorder(denied_capture, archive)

        assert recorder.start_recording() is False
        assert recorder.state is RecorderState.IDLE

    @pytest.mark.asyncio
    async def test_stop_recording(self, fake_capture, archive):
        recorder = VoiceRecorder(fake_capture, archive)
        recorder.start_recording()

        note = await recorder.stop_recording()

        assert note is not None
        assert note.path.exists()
        assert not recorder.is_recording

    @pytest.mark.asyncio
    async def test_stop_without_recording_returns_none(self, fake_capture, archive):
        recorder = VoiceRecorder(fake_capture, archive)

        assert await recorder.stop_recording() is None

    @pytest.mark.asyncio
    async def test_can_record_again(self, fake_capture, archive):
        recorder = VoiceRecorder(fake_capture, archive)

        first = await recorder.end(recorder.begin())
        second = await recorder.end(recorder.begin())

        assert first.path != second.path
        assert len(fake_capture.streams) == 2

    @pytest.mark.asyncio
    async def test_voice_note_attached_to_trade(self, store, open_trade_data, fake_capture, archive):
        recorder = VoiceRecorder(fake_capture, archive)
        recorder.start_recording()
        note = await recorder.stop_recording()

        open_trade_data["voiceNote"] = note.uri
        trade = store.save_trade(open_trade_data)

        assert voice_note_path(trade.voice_note) == note.path.resolve()


class TestClipCapture:
    """Test recording through a browser-supplied WAV clip."""

    def test_chunks_cover_the_clip(self):
        frames = bytes(range(256)) * 100
        stream = ClipCapture(make_wav(frames), chunk_frames=1000).request_capture()

        received = []
        stream.start(received.append)
        stream.stop()

        assert b"".join(received) == frames
        assert len(received[0]) == 2000
        assert stream.audio_format == AudioFormat(sample_rate=48000, channels=1, sample_width=2)

    @pytest.mark.parametrize("clip", [None, b"", b"not a wav file"])
    def test_missing_or_unreadable_clip_is_denied(self, clip):
        with pytest.raises(CaptureDeniedError):
            ClipCapture(clip).request_capture()

    @pytest.mark.asyncio
    async def test_recorder_keeps_clip_audio(self, archive):
        frames = b"\x10\x20" * 24000
        recorder = VoiceRecorder(ClipCapture(make_wav(frames, sample_rate=24000)), archive)

        assert recorder.start_recording() is True
        note = await recorder.stop_recording()

        assert note.duration_seconds == pytest.approx(1.0)
        with wave.open(str(note.path), "rb") as wav:
            assert wav.getframerate() == 24000
            assert wav.readframes(wav.getnframes()) == frames

    def test_recorder_without_clip_stays_idle(self, archive):
        recorder = VoiceRecorder(ClipCapture(None), archive)

        assert recorder.start_recording() is False
        assert recorder.state is RecorderState.IDLE
