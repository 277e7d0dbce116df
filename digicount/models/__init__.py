"""Data models for the DigiCount application."""

from .transcription import DigitMappingPolicy, TranscriptionSegment, TranscriptionUpdate
from .audio import AudioStats
from .events import AudioEvent, SessionEvent
from .session import SessionLog
from .verification import VerificationResult
from .ui import CounterSnapshot, SupervisorState

__all__ = [
    "DigitMappingPolicy",
    "TranscriptionSegment",
    "TranscriptionUpdate",
    "AudioStats",
    "AudioEvent",
    "SessionEvent",
    "SessionLog",
    "VerificationResult",
    "CounterSnapshot",
    "SupervisorState",
]
