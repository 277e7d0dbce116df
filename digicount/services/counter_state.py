"""Observable counter state published over pub/sub."""

import dataclasses
import logging
import threading

from pubsub import pub

from ..models.transcription import DigitMappingPolicy
from ..models.ui import CounterSnapshot
from ..topics import COUNTER_STATE

logger = logging.getLogger(__name__)


class CounterState:
    """Holds the externally visible counter fields.

    Every change replaces the whole snapshot under a lock and publishes it,
    so subscribers always see count, transcript, elapsed time and recording
    flag from the same instant.
    """

    def __init__(self,
                 policy: DigitMappingPolicy = DigitMappingPolicy.AGGRESSIVE,
                 topic: str = COUNTER_STATE):
        self.topic = topic
        self._lock = threading.RLock()
        self._snapshot = CounterSnapshot(policy=policy)

    @property
    def snapshot(self) -> CounterSnapshot:
        with self._lock:
            return self._snapshot

    def update(self, **changes) -> CounterSnapshot:
        """Apply field changes atomically and publish the new snapshot.

        Args:
            **changes: CounterSnapshot fields to replace

        Returns:
            The published snapshot
        """
        with self._lock:
            self._snapshot = dataclasses.replace(self._snapshot, **changes)
            snapshot = self._snapshot
            # Published under the lock so subscribers see changes in order
            pub.sendMessage(self.topic, snapshot=snapshot)
        logger.debug(f"Counter state updated: {sorted(changes)}")
        return snapshot
