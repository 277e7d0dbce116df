"""Session-related data models."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class SessionLog:
    """A completed counting session. Immutable once created."""
    start_time: datetime
    end_time: datetime
    total_digits: int
    transcript: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if self.total_digits < 0:
            raise ValueError(f"total_digits must be >= 0, got {self.total_digits}")

    @property
    def duration_seconds(self) -> float:
        return (self.end_time - self.start_time).total_seconds()

    @property
    def duration_string(self) -> str:
        elapsed = int(self.duration_seconds)
        return f"{elapsed // 60}m {elapsed % 60}s"

    @property
    def summary(self) -> str:
        started = self.start_time.strftime("%m/%d/%y, %H:%M")
        return f"{started} → {self.total_digits} digits in {self.duration_string}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible record."""
        return {
            "id": self.id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "total_digits": self.total_digits,
            "transcript": self.transcript,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionLog":
        """Rebuild a SessionLog from a record written by ``to_dict``.

        Raises:
            KeyError, TypeError, ValueError: if the record is malformed
        """
        return cls(
            id=str(data["id"]),
            start_time=datetime.fromisoformat(data["start_time"]),
            end_time=datetime.fromisoformat(data["end_time"]),
            total_digits=int(data["total_digits"]),
            transcript=str(data.get("transcript", "")),
        )
