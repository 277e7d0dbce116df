"""Google Speech-to-Text streaming recognition backend."""

import queue
import logging
import threading
from typing import Iterator, List, Optional

from .base import AbstractRecognitionBackend, RecognitionTask, UpdateCallback, ErrorCallback
from .normalizer import AGGRESSIVE_WORDS
from ..errors import RecognizerUnavailableError
from ..models.events import AudioEvent
from ..models.transcription import TranscriptionSegment, TranscriptionUpdate

from google.cloud import speech
from google.api_core import exceptions as gax_exceptions
from google.auth import exceptions as auth_exceptions
from google.oauth2 import service_account

logger = logging.getLogger(__name__)


class GoogleRecognitionTask(RecognitionTask):
    """One ``streaming_recognize`` call fed from an audio queue.

    Words of final results become segments, so the segment list only ever
    grows within the cycle. The cycle ends when the stream closes, either
    after ``end_audio`` or when the service hits its stream duration limit.
    """

    def __init__(self,
                 client: speech.SpeechClient,
                 streaming_config: speech.StreamingRecognitionConfig,
                 on_update: UpdateCallback,
                 on_error: ErrorCallback,
                 cycle_number: int):
        self.client = client
        self.streaming_config = streaming_config
        self.on_update = on_update
        self.on_error = on_error
        self.cycle_number = cycle_number

        self.audio_queue: "queue.Queue[Optional[bytes]]" = queue.Queue()
        self.segments: List[TranscriptionSegment] = []
        self.cancelled = threading.Event()
        self.thread = threading.Thread(target=self._run, daemon=True)
        self.thread.name = f"GoogleRecognitionCycle_{cycle_number}"

    def start(self) -> None:
        self.thread.start()

    def append_audio(self, event: AudioEvent) -> None:
        if self.cancelled.is_set() or not event.audio_data:
            return
        self.audio_queue.put(event.audio_data)

    def end_audio(self) -> None:
        self.audio_queue.put(None)

    def cancel(self) -> None:
        if self.cancelled.is_set():
            return
        self.cancelled.set()
        self.audio_queue.put(None)
        logger.debug(f"Recognition cycle {self.cycle_number} cancelled")

    def _requests(self) -> Iterator[speech.StreamingRecognizeRequest]:
        while True:
            chunk = self.audio_queue.get()
            if chunk is None or self.cancelled.is_set():
                return
            yield speech.StreamingRecognizeRequest(audio_content=chunk)

    def _run(self) -> None:
        logger.info(f"Recognition cycle {self.cycle_number} started")
        try:
            responses = self.client.streaming_recognize(
                config=self.streaming_config,
                requests=self._requests(),
            )
            for response in responses:
                if self.cancelled.is_set():
                    return
                self._handle_response(response)
        except gax_exceptions.GoogleAPICallError as e:
            if not self.cancelled.is_set():
                logger.warning(f"Recognition cycle {self.cycle_number} failed: {e}")
                self.on_error(RuntimeError(f"Google Speech API error (cycle={self.cycle_number}): {e}"))
            return

        if not self.cancelled.is_set():
            logger.info(f"Recognition cycle {self.cycle_number} finished with {len(self.segments)} segments")
            self.on_update(TranscriptionUpdate(segments=tuple(self.segments), is_final=True))

    def _handle_response(self, response: speech.StreamingRecognizeResponse) -> None:
        grew = False
        for result in response.results:
            if not result.is_final or not result.alternatives:
                continue
            transcript = result.alternatives[0].transcript
            logger.debug(f"Final result: '{transcript}'")
            for word in transcript.split():
                self.segments.append(TranscriptionSegment(text=word, index=len(self.segments)))
                grew = True
        if grew:
            self.on_update(TranscriptionUpdate(segments=tuple(self.segments), is_final=False))


class GoogleStreamingBackend(AbstractRecognitionBackend):
    """Google Speech-to-Text streaming backend for continuous digit recognition."""

    def __init__(self,
                 credentials_path: Optional[str] = None,
                 sample_rate: int = 16000,
                 language: str = "en-US"):
        """Initialize Google streaming backend.

        Args:
            credentials_path: Path to Google Cloud service account JSON file
            sample_rate: Sample rate of the captured audio in Hz
            language: Language code (e.g., 'en-US')
        """
        super().__init__(language)
        self.credentials_path = credentials_path
        self.client: Optional[speech.SpeechClient] = None
        self.project_id = None
        self.cycles_started = 0
        self.service_name = "Google Speech-to-Text"
        self.streaming_config = speech.StreamingRecognitionConfig(
            config=speech.RecognitionConfig(
                encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
                sample_rate_hertz=sample_rate,
                language_code=self.language,
                # Bias recognition towards number words
                speech_contexts=[speech.SpeechContext(phrases=sorted(AGGRESSIVE_WORDS))],
            ),
            interim_results=False,
        )

    def initialize(self) -> bool:
        """Create the Speech client from service account credentials."""
        if not self.credentials_path:
            raise RecognizerUnavailableError("Google credentials path is not configured")

        logger.info(f"Loading Google credentials from: {self.credentials_path}")
        credentials = service_account.Credentials.from_service_account_file(self.credentials_path)
        self.client = speech.SpeechClient(credentials=credentials)
        self.project_id = credentials.project_id
        logger.info(f"Using Google Cloud project: {self.project_id}")
        return True

    def is_available(self) -> bool:
        if self.client is not None:
            return True
        try:
            return self.initialize()
        except (RecognizerUnavailableError, OSError, ValueError, auth_exceptions.GoogleAuthError) as e:
            logger.error(f"Google Speech backend unavailable: {e}")
            return False

    def start_task(self, on_update: UpdateCallback, on_error: ErrorCallback) -> GoogleRecognitionTask:
        if not self.is_available():
            raise RecognizerUnavailableError("Google Speech client is not initialized")

        self.cycles_started += 1
        task = GoogleRecognitionTask(
            client=self.client,
            streaming_config=self.streaming_config,
            on_update=on_update,
            on_error=on_error,
            cycle_number=self.cycles_started,
        )
        task.start()
        return task

    def cleanup(self) -> None:
        """Release the Speech client."""
        if self.client is not None:
            transport = getattr(self.client, "transport", None)
            if transport is not None:
                transport.close()
            self.client = None
