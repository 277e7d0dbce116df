"""Tracks which segments of a recognition cycle have already been counted."""

import logging
from typing import List, Sequence

from ..models.transcription import TranscriptionSegment

logger = logging.getLogger(__name__)


class SegmentReconciler:
    """Returns only the segments not yet seen in the current cycle.

    The recognizer redelivers the full segment list on every update of a
    cycle, so the reconciler keeps a cursor into that list. The cursor is
    reset whenever a new cycle starts.
    """

    def __init__(self):
        self.last_processed_count = 0

    def reconcile(self, segments: Sequence[TranscriptionSegment]) -> List[TranscriptionSegment]:
        """Return the unseen suffix of ``segments`` and advance the cursor.

        Args:
            segments: Every segment observed so far in the active cycle

        Returns:
            Segments past the cursor; empty if the list shrank
        """
        if self.last_processed_count > len(segments):
            logger.debug(
                f"Segment list shrank ({len(segments)} < {self.last_processed_count}), ignoring update"
            )
            return []

        new_segments = list(segments[self.last_processed_count:])
        self.last_processed_count = len(segments)
        return new_segments

    def reset(self) -> None:
        """Start counting from the beginning of a new cycle."""
        self.last_processed_count = 0
