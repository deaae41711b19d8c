"""
Edit-session snapshots.

A small file-backed store for in-progress logger state, so an accidental
navigation away does not lose the user's edits. Snapshots are a recovery
convenience: read and write failures are logged and otherwise ignored.
"""

import json
import logging
import os
import re
from typing import Any, Dict, Optional

from workout_prefill_api.config import settings

logger = logging.getLogger(__name__)

KEY_PATTERN = re.compile(r"[^A-Za-z0-9_.-]+")


class SnapshotStore:
    """JSON file per session key under a snapshot directory."""

    def __init__(self, directory: Optional[str] = None):
        self.directory = directory or settings.SNAPSHOT_DIR

    def _path(self, key: str) -> str:
        safe = KEY_PATTERN.sub("_", key or "").strip("._") or "default"
        return os.path.join(self.directory, f"{safe}.json")

    def save(self, key: str, data: Dict[str, Any]) -> bool:
        path = self._path(key)
        tmp = f"{path}.tmp"
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp, path)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Could not write snapshot {key!r}: {e}")
            return False

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read snapshot {key!r}: {e}")
            return None
        return data if isinstance(data, dict) else None

    def clear(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove snapshot {key!r}: {e}")
