"""Accumulates recognized digits into a transcript with pause markers."""

import logging
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

PAUSE_MARKER = " – "
DEFAULT_PAUSE_THRESHOLD = 2.0


class PauseAwareTranscriptBuilder:
    """Builds the digit transcript and running count for a session.

    A pause marker goes in front of a batch when more than
    ``pause_threshold`` seconds passed since the previous batch. Pauses are
    detected per batch, never per individual digit.
    """

    def __init__(self, pause_threshold: float = DEFAULT_PAUSE_THRESHOLD):
        self.pause_threshold = pause_threshold
        self._transcript = ""
        self._count = 0
        self._last_digit_timestamp: Optional[float] = None

    @property
    def transcript(self) -> str:
        return self._transcript

    @property
    def count(self) -> int:
        return self._count

    @property
    def last_digit_timestamp(self) -> Optional[float]:
        return self._last_digit_timestamp

    def append_digits(self, new_digits: Sequence[str], now: float) -> str:
        """Append a batch of digits recognized at time ``now``.

        Args:
            new_digits: Ordered single-digit strings
            now: Timestamp of the batch, in seconds

        Returns:
            The text appended to the transcript (empty for an empty batch)
        """
        if not new_digits:
            return ""

        appended = ""
        last = self._last_digit_timestamp
        if last is not None and now - last > self.pause_threshold:
            logger.debug(f"Pause of {now - last:.2f}s detected")
            appended += PAUSE_MARKER
        appended += "".join(new_digits)

        self._transcript += appended
        self._count += len(new_digits)
        self._last_digit_timestamp = now
        return appended

    def reset(self) -> None:
        """Clear transcript, count and pause state."""
        self._transcript = ""
        self._count = 0
        self._last_digit_timestamp = None
