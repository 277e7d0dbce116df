"""Session log persistence over a key-value store."""

import logging
from typing import List, Sequence

from ..models.session import SessionLog
from .key_value_store import JsonKeyValueStore

logger = logging.getLogger(__name__)

SAVED_LOGS_KEY = "SavedLogs"


class LogStorage:
    """Saves and loads the ordered list of session logs under a single key."""

    def __init__(self, store: JsonKeyValueStore, key: str = SAVED_LOGS_KEY):
        self.store = store
        self.key = key

    def save(self, logs: Sequence[SessionLog]) -> None:
        """Replace the persisted list with ``logs``."""
        self.store.set(self.key, [log.to_dict() for log in logs])
        logger.debug(f"Saved {len(logs)} session logs")

    def load(self) -> List[SessionLog]:
        """Load the persisted list.

        Returns:
            The saved logs in order, or an empty list when nothing is saved
            or the saved data is corrupt
        """
        raw = self.store.get(self.key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning(f"Saved logs under '{self.key}' are not a list, ignoring them")
            return []

        try:
            logs = [SessionLog.from_dict(record) for record in raw]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Corrupt session log data, ignoring it: {e}")
            return []

        logger.info(f"Loaded {len(logs)} session logs")
        return logs

    def clear(self) -> None:
        """Remove the persisted list entirely."""
        self.store.remove(self.key)
        logger.info("Cleared saved session logs")
