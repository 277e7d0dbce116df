"""UI-related data models."""

from dataclasses import dataclass
from enum import Enum

from .transcription import DigitMappingPolicy


class SupervisorState(Enum):
    """Recognition-cycle supervisor states."""
    IDLE = "idle"
    STARTING = "starting"
    LISTENING = "listening"
    CYCLE_ENDING = "cycle_ending"
    STOPPED = "stopped"


@dataclass(frozen=True)
class CounterSnapshot:
    """Consistent view of the counter state at one instant."""
    count: int = 0
    transcript: str = ""
    elapsed_text: str = "00:00"
    is_recording: bool = False
    policy: DigitMappingPolicy = DigitMappingPolicy.AGGRESSIVE
    state: SupervisorState = SupervisorState.IDLE
