"""Transcription-related data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class DigitMappingPolicy(Enum):
    """How tolerant the word→digit mapping is of homophones."""
    STRICT = "strict"
    AGGRESSIVE = "aggressive"


@dataclass(frozen=True)
class TranscriptionSegment:
    """A unit of recognized speech within one recognition cycle."""
    text: str
    index: int


@dataclass(frozen=True)
class TranscriptionUpdate:
    """One delivery from the recognizer.

    ``segments`` is the full list seen so far in the current cycle; every
    update within a cycle is a superset of the previous one.
    """
    segments: Tuple[TranscriptionSegment, ...] = field(default_factory=tuple)
    is_final: bool = False

    @classmethod
    def from_texts(cls, texts, is_final: bool = False) -> "TranscriptionUpdate":
        """Build an update from plain segment strings, indexed in order."""
        return cls(
            segments=tuple(TranscriptionSegment(text=t, index=i) for i, t in enumerate(texts)),
            is_final=is_final,
        )
