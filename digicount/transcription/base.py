"""Abstract base classes for speech recognition backends."""

from abc import ABC, abstractmethod
from typing import Callable
import logging

from ..models.events import AudioEvent
from ..models.transcription import TranscriptionUpdate

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[TranscriptionUpdate], None]
ErrorCallback = Callable[[Exception], None]


class RecognitionTask(ABC):
    """Handle for one recognition cycle.

    The task delivers updates through the callbacks given to
    ``AbstractRecognitionBackend.start_task``. After ``cancel`` returns no
    further callbacks are made.
    """

    @abstractmethod
    def append_audio(self, event: AudioEvent) -> None:
        """Feed one captured audio buffer to the cycle."""
        pass

    @abstractmethod
    def end_audio(self) -> None:
        """Signal that no more audio will be appended."""
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Abort the cycle and release its resources."""
        pass


class AbstractRecognitionBackend(ABC):
    """Abstract base class for streaming recognition backends."""

    def __init__(self, language: str = "en-US"):
        """Initialize backend with language preference."""
        self.language = language

    @abstractmethod
    def is_available(self) -> bool:
        """Whether a new recognition cycle can be started right now."""
        pass

    @abstractmethod
    def start_task(self, on_update: UpdateCallback, on_error: ErrorCallback) -> RecognitionTask:
        """Begin a recognition cycle.

        Args:
            on_update: Receives every transcription update of the cycle; the
                       last one has ``is_final`` set
            on_error: Receives a transient error that ended the cycle

        Returns:
            The task handle for the new cycle
        """
        pass

    def cleanup(self) -> None:
        """Clean up backend resources."""
        pass
