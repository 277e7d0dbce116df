"""Speech and microphone authorization checks."""

import os
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

logger = logging.getLogger(__name__)

PermissionCallback = Callable[[bool], None]


class AbstractPermissionProvider(ABC):
    """Two independent authorization checks, each answered via callback.

    Implementations may answer synchronously or from another thread.
    """

    @abstractmethod
    def request_speech_access(self, callback: PermissionCallback) -> None:
        pass

    @abstractmethod
    def request_microphone_access(self, callback: PermissionCallback) -> None:
        pass


class LocalPermissionProvider(AbstractPermissionProvider):
    """Desktop checks: readable recognizer credentials and an input device."""

    def __init__(self, credentials_path: Optional[str]):
        self.credentials_path = credentials_path

    def request_speech_access(self, callback: PermissionCallback) -> None:
        granted = bool(self.credentials_path) and os.access(self.credentials_path, os.R_OK)
        if not granted:
            logger.warning(f"Speech recognition not authorized: credentials unreadable ({self.credentials_path})")
        callback(granted)

    def request_microphone_access(self, callback: PermissionCallback) -> None:
        from ..audio.capture import has_input_device
        try:
            granted = has_input_device()
        except OSError as e:
            logger.warning(f"Could not query audio devices: {e}")
            granted = False
        if not granted:
            logger.warning("Microphone not available")
        callback(granted)
