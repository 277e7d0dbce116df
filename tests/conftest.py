"""Pytest configuration and fixtures for DigiCount tests."""

import pytest
import tempfile
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional
from unittest.mock import Mock, patch

from digicount.audio.base import AbstractAudioSource
from digicount.models.events import AudioEvent
from digicount.models.transcription import TranscriptionUpdate
from digicount.services.permissions import AbstractPermissionProvider
from digicount.services.session_log_store import SessionLogStore
from digicount.services.supervisor import RecognitionCycleSupervisor
from digicount.storage.key_value_store import JsonKeyValueStore
from digicount.storage.log_storage import LogStorage
from digicount.transcription.base import AbstractRecognitionBackend, RecognitionTask


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests of a single component")
    config.addinivalue_line("markers", "integration: tests spanning several components")


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWallClock:
    """Wall clock that moves forward one second per reading."""

    def __init__(self, start: datetime = datetime(2024, 3, 14, 15, 9, 0)):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


class FakeRecognitionTask(RecognitionTask):
    """Recognition task whose updates are delivered by the test."""

    def __init__(self, on_update, on_error):
        self.on_update = on_update
        self.on_error = on_error
        self.audio: List[AudioEvent] = []
        self.ended = False
        self.cancelled = False

    def append_audio(self, event: AudioEvent) -> None:
        self.audio.append(event)

    def end_audio(self) -> None:
        self.ended = True

    def cancel(self) -> None:
        self.cancelled = True

    def deliver(self, texts, is_final: bool = False) -> None:
        """Send the full segment list seen so far in this cycle."""
        self.on_update(TranscriptionUpdate.from_texts(texts, is_final=is_final))

    def fail(self, error: Optional[Exception] = None) -> None:
        self.on_error(error or RuntimeError("recognizer hiccup"))


class FakeRecognitionBackend(AbstractRecognitionBackend):
    """Backend that hands out FakeRecognitionTasks."""

    def __init__(self, available: bool = True):
        super().__init__()
        self.available = available
        self.tasks: List[FakeRecognitionTask] = []

    def is_available(self) -> bool:
        return self.available

    def start_task(self, on_update, on_error) -> FakeRecognitionTask:
        task = FakeRecognitionTask(on_update, on_error)
        self.tasks.append(task)
        return task

    @property
    def current_task(self) -> FakeRecognitionTask:
        return self.tasks[-1]


class FakeAudioSource(AbstractAudioSource):
    """Audio source whose buffers are pushed by the test."""

    def __init__(self):
        self.tap = None
        self.is_running = False
        self.start_count = 0
        self.stop_count = 0

    def install_tap(self, callback) -> None:
        self.tap = callback

    def remove_tap(self) -> None:
        self.tap = None

    def start(self) -> None:
        self.is_running = True
        self.start_count += 1

    def stop(self) -> None:
        self.is_running = False
        self.stop_count += 1

    def push(self, data: bytes = b'\x00' * 2048) -> None:
        if self.tap is not None:
            self.tap(AudioEvent(chunk_id="chunk_test", audio_data=data, timestamp=0.0, sequence_number=0))


class FakePermissionProvider(AbstractPermissionProvider):
    """Answers immediately, or holds callbacks when ``deferred`` is set."""

    def __init__(self, speech: bool = True, microphone: bool = True, deferred: bool = False):
        self.speech = speech
        self.microphone = microphone
        self.deferred = deferred
        self.pending = []

    def request_speech_access(self, callback) -> None:
        if self.deferred:
            self.pending.append((callback, self.speech))
        else:
            callback(self.speech)

    def request_microphone_access(self, callback) -> None:
        if self.deferred:
            self.pending.append((callback, self.microphone))
        else:
            callback(self.microphone)

    def answer_all(self) -> None:
        while self.pending:
            callback, granted = self.pending.pop(0)
            callback(granted)


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_wall_clock():
    return FakeWallClock()


@pytest.fixture
def fake_backend():
    return FakeRecognitionBackend()


@pytest.fixture
def fake_audio():
    return FakeAudioSource()


@pytest.fixture
def fake_permissions():
    return FakePermissionProvider()


@pytest.fixture
def log_storage(temp_data_dir):
    return LogStorage(JsonKeyValueStore(str(Path(temp_data_dir) / "store.json")))


@pytest.fixture
def log_store(log_storage):
    store = SessionLogStore(log_storage)
    store.load()
    return store


@pytest.fixture
def supervisor(fake_audio, fake_backend, fake_permissions, log_store, fake_clock, fake_wall_clock):
    """Supervisor wired to fakes; any running session is stopped afterwards."""
    sup = RecognitionCycleSupervisor(
        audio_source=fake_audio,
        backend=fake_backend,
        permissions=fake_permissions,
        log_store=log_store,
        timer_interval=60.0,
        clock=fake_clock,
        wall_clock=fake_wall_clock,
    )
    yield sup
    sup.stop()
    sup.timer.stop()


@pytest.fixture
def mock_pyaudio():
    """Mock PyAudio for testing without actual audio hardware."""
    with patch('pyaudio.PyAudio') as mock_pyaudio_class:
        mock_pyaudio_instance = Mock()
        mock_stream = Mock()

        mock_stream.read.return_value = b'\x00' * 2048  # Silent audio
        mock_stream.stop_stream.return_value = None
        mock_stream.close.return_value = None

        mock_pyaudio_instance.open.return_value = mock_stream
        mock_pyaudio_instance.terminate.return_value = None
        mock_pyaudio_instance.get_device_count.return_value = 0

        mock_pyaudio_class.return_value = mock_pyaudio_instance

        yield {
            'class': mock_pyaudio_class,
            'instance': mock_pyaudio_instance,
            'stream': mock_stream
        }
