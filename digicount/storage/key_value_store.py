"""JSON file backed key-value store."""

import json
import os
import logging
import tempfile
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)


class JsonKeyValueStore:
    """Stores JSON-serializable values under string keys in a single file.

    The whole file is rewritten on every ``set`` or ``remove``; readers never
    see a half-written file because writes go through a temporary file that
    is renamed into place.
    """

    def __init__(self, path: str):
        """Initialize the store.

        Args:
            path: Path of the JSON file; its directory is created if missing
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"JsonKeyValueStore initialized at: {self.path}")

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default``."""
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``."""
        data = self._read_all()
        data[key] = value
        self._write_all(data)
        logger.debug(f"Stored key '{key}' in {self.path}")

    def remove(self, key: str) -> None:
        """Delete ``key``; no-op if it is absent."""
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
            logger.debug(f"Removed key '{key}' from {self.path}")

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Unreadable store file {self.path}, treating as empty: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Store file {self.path} does not hold a mapping, treating as empty")
            return {}
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except Exception as e:
            logger.error(f"Error writing store file {self.path}: {e}")
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
