"""Unit tests for AudioCapture class."""

import pytest
from unittest.mock import Mock, patch
import numpy as np

from digicount.audio.capture import AudioCapture, has_input_device
from digicount.models.audio import AudioStats


@pytest.mark.unit
class TestAudioCapture:
    """Test cases for AudioCapture class."""

    def test_initialization(self):
        """Test AudioCapture initialization with default parameters."""
        capture = AudioCapture()

        assert capture.sample_rate == 16000
        assert capture.chunk_size == 1024
        assert capture.channels == 1
        assert capture.is_recording is False
        assert capture.total_chunks == 0
        assert capture.peak_level == 0.0
        assert capture.tap is None

    def test_initialization_custom_parameters(self):
        """Test AudioCapture initialization with custom parameters."""
        capture = AudioCapture(sample_rate=44100, chunk_size=2048, channels=2)

        assert capture.sample_rate == 44100
        assert capture.chunk_size == 2048
        assert capture.channels == 2

    def test_start(self, mock_pyaudio):
        """Test starting audio capture."""
        capture = AudioCapture()

        with patch.object(capture, '_record_continuously') as mock_record:
            capture.start()

            assert capture.is_recording is True
            assert capture.start_time is not None
            assert capture.recording_thread.daemon is True
            capture.recording_thread.join(timeout=1.0)
            mock_record.assert_called_once()

        capture.stop()
        assert capture.is_recording is False

    def test_start_when_already_recording(self, mock_pyaudio):
        """Test starting capture twice does not spawn a second thread."""
        capture = AudioCapture()
        capture.is_recording = True

        capture.start()

        assert capture.recording_thread is None

    def test_stop_when_not_recording(self):
        """Test stop when not recording."""
        capture = AudioCapture()
        capture.stop()
        assert capture.is_recording is False

    def test_install_and_remove_tap(self):
        """Test install and remove tap."""
        capture = AudioCapture()
        tap = Mock()

        capture.install_tap(tap)
        capture._deliver(b'\x00\x00' * 4)
        capture.remove_tap()
        capture._deliver(b'\x00\x00' * 4)

        tap.assert_called_once()

    def test_deliver_builds_audio_event(self):
        """Test deliver builds audio event."""
        capture = AudioCapture(sample_rate=16000)
        received = []
        capture.install_tap(received.append)
        capture.total_chunks = 7

        capture._deliver(b'\x00\x00' * 1600)

        event = received[0]
        assert event.chunk_id == "chunk_7"
        assert event.sequence_number == 7
        assert event.sample_rate == 16000
        assert event.audio_data == b'\x00\x00' * 1600

    def test_read_audio_chunk_tracks_peak(self):
        """Test read audio chunk tracks peak."""
        capture = AudioCapture()
        stream = Mock()
        stream.read.return_value = np.array([0, 16384, -8192], dtype=np.int16).tobytes()

        capture._read_audio_chunk(stream)

        assert capture.total_chunks == 1
        assert capture.peak_level == pytest.approx(0.5)

    def test_record_continuously_delivers_until_stopped(self, mock_pyaudio):
        """Test the capture loop forwards buffers and releases the stream."""
        capture = AudioCapture()
        received = []
        capture.install_tap(received.append)

        def read_once(*args, **kwargs):
            capture.stop_event.set()
            return b'\x00' * 2048
        mock_pyaudio['stream'].read.side_effect = read_once

        capture._record_continuously()

        assert len(received) == 1
        assert received[0].sequence_number == 1
        mock_pyaudio['stream'].stop_stream.assert_called_once()
        mock_pyaudio['stream'].close.assert_called_once()
        mock_pyaudio['instance'].terminate.assert_called_once()

    def test_record_continuously_handles_device_error(self, mock_pyaudio):
        """Test record continuously handles device error."""
        mock_pyaudio['instance'].open.side_effect = OSError("device busy")
        capture = AudioCapture()

        capture._record_continuously()

        mock_pyaudio['instance'].terminate.assert_called_once()

    def test_get_recording_stats(self):
        """Test get recording stats."""
        capture = AudioCapture()
        capture.total_chunks = 3

        stats = capture.get_recording_stats()

        assert isinstance(stats, AudioStats)
        assert stats.total_chunks == 3
        assert stats.duration_seconds == 0.0
        assert stats.is_recording is False

    def test_recording_stats_report_peak_level(self):
        """Test that the peak of the last buffer shows up in the stats."""
        capture = AudioCapture()
        stream = Mock()
        stream.read.return_value = np.array([0, -16384], dtype=np.int16).tobytes()

        capture._read_audio_chunk(stream)

        assert capture.get_recording_stats().peak_level == pytest.approx(0.5)


@pytest.mark.unit
class TestHasInputDevice:
    """Test cases for input device discovery."""

    def test_no_devices(self, mock_pyaudio):
        """Test no devices means no microphone."""
        assert has_input_device() is False
        mock_pyaudio['instance'].terminate.assert_called_once()

    def test_output_only_device(self, mock_pyaudio):
        """Test an output-only device is not a microphone."""
        mock_pyaudio['instance'].get_device_count.return_value = 1
        mock_pyaudio['instance'].get_device_info_by_index.return_value = {'maxInputChannels': 0}

        assert has_input_device() is False

    def test_input_device(self, mock_pyaudio):
        """Test an input device is found."""
        mock_pyaudio['instance'].get_device_count.return_value = 2
        mock_pyaudio['instance'].get_device_info_by_index.side_effect = [
            {'maxInputChannels': 0},
            {'maxInputChannels': 1},
        ]

        assert has_input_device() is True
