"""Terminal presentation for DigiCount."""

from .counter_screen import CounterScreen

__all__ = [
    "CounterScreen",
]
