"""Ordered, write-through collection of completed sessions."""

import logging
import threading
from typing import Iterator, List, Optional

from pubsub import pub

from ..models.session import SessionLog
from ..storage.log_storage import LogStorage
from ..topics import SESSIONS_CHANGED

logger = logging.getLogger(__name__)


class SessionLogStore:
    """Keeps session logs in insertion order, newest last.

    Every mutation rewrites the full list through the storage collaborator
    and publishes the new list on the ``sessions_changed`` topic.
    """

    def __init__(self, storage: LogStorage, topic: str = SESSIONS_CHANGED):
        """Initialize the store.

        Args:
            storage: Persistence collaborator for the log list
            topic: Pub/sub topic notified after each change
        """
        self.storage = storage
        self.topic = topic
        self._logs: List[SessionLog] = []
        self._lock = threading.RLock()

    def load(self) -> List[SessionLog]:
        """Replace the in-memory list with the persisted one."""
        with self._lock:
            self._logs = self.storage.load()
            logger.info(f"SessionLogStore loaded {len(self._logs)} sessions")
            self._notify()
            return list(self._logs)

    @property
    def logs(self) -> List[SessionLog]:
        with self._lock:
            return list(self._logs)

    def get(self, log_id: str) -> Optional[SessionLog]:
        with self._lock:
            for log in self._logs:
                if log.id == log_id:
                    return log
        return None

    def add(self, log: SessionLog) -> None:
        """Append a completed session."""
        with self._lock:
            self._persist(self._logs + [log])
            logger.info(f"Added session {log.id}: {log.summary}")

    def delete(self, log_id: str) -> bool:
        """Remove the session with ``log_id``.

        Returns:
            True if a session was removed, False if none had that id
        """
        with self._lock:
            remaining = [log for log in self._logs if log.id != log_id]
            if len(remaining) == len(self._logs):
                logger.debug(f"No session with id {log_id} to delete")
                return False
            self._persist(remaining)
            logger.info(f"Deleted session {log_id}")
            return True

    def clear(self) -> None:
        """Remove every session, in memory and in storage."""
        with self._lock:
            self.storage.clear()
            self._logs = []
            logger.info("Cleared all sessions")
            self._notify()

    def summaries(self) -> List[str]:
        """Human-readable one-line summaries in display order."""
        with self._lock:
            return [log.summary for log in self._logs]

    def __len__(self) -> int:
        with self._lock:
            return len(self._logs)

    def __iter__(self) -> Iterator[SessionLog]:
        return iter(self.logs)

    def __contains__(self, log_id: object) -> bool:
        return isinstance(log_id, str) and self.get(log_id) is not None

    def _persist(self, logs: List[SessionLog]) -> None:
        # Memory only changes once storage accepted the new list
        self.storage.save(logs)
        self._logs = logs
        self._notify()

    def _notify(self) -> None:
        pub.sendMessage(self.topic, logs=list(self._logs))
