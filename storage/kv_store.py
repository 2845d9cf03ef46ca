"""
Durable string key-value store persisted as a single JSON file.

Holds a handful of small values (the access token, the last repository).
Writes go through a temp file and os.replace, so a reader never sees a
partially written file.
"""

import json
import logging
import os
from pathlib import Path
from threading import Lock
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class JsonFileStore:
    """String-to-string map backed by a JSON object on disk."""

    def __init__(self, path: Path):
        """
        Args:
            path: JSON file location; parent directories are created on write
        """
        self._path = Path(path)
        self._mu = Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> Dict[str, str]:
        """Read the whole map. Missing or unreadable files read as empty."""
        if not self._path.exists():
            return {}

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable store file {self._path}: {e}")
            return {}

        if not isinstance(raw, dict):
            logger.warning(f"Ignoring store file {self._path}: expected a JSON object")
            return {}

        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _write(self, data: Dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = f"{self._path}.tmp.{os.getpid()}"
        Path(tmp).write_text(json.dumps(data, indent=2), encoding="utf-8")
        os.replace(tmp, self._path)

    def get(self, key: str) -> Optional[str]:
        with self._mu:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        with self._mu:
            data = self._read()
            data[key] = value
            self._write(data)
        logger.debug(f"Stored key '{key}' in {self._path}")

    def delete(self, key: str) -> None:
        """Remove key; no-op when absent."""
        with self._mu:
            data = self._read()
            if key not in data:
                return
            del data[key]
            self._write(data)
        logger.debug(f"Removed key '{key}' from {self._path}")
