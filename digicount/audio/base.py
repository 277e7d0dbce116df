"""Abstract audio source used by the recognition supervisor."""

from abc import ABC, abstractmethod
from typing import Callable

from ..models.events import AudioEvent

AudioTap = Callable[[AudioEvent], None]


class AbstractAudioSource(ABC):
    """A continuous stream of audio buffers delivered to an installed tap."""

    @abstractmethod
    def install_tap(self, callback: AudioTap) -> None:
        """Route every captured buffer to ``callback``."""
        pass

    @abstractmethod
    def remove_tap(self) -> None:
        """Stop routing buffers."""
        pass

    @abstractmethod
    def start(self) -> None:
        """Start capturing audio."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop capturing audio."""
        pass
