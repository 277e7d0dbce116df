"""Event models for the pub/sub counting pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


@dataclass
class AudioEvent:
    """Audio buffer event with metadata."""
    chunk_id: str
    audio_data: bytes
    timestamp: float  # Unix timestamp when the buffer was captured
    sequence_number: int
    sample_rate: int = 16000
    channels: int = 1


@dataclass
class SessionEvent:
    """Session lifecycle event."""
    event_type: str  # "started", "stopped", "aborted", "cycle_restarted"
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: Dict[str, Any] = field(default_factory=dict)
