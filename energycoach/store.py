# energycoach/store.py
"""
Keyed persistent store.

A small JSON file holds every key. Reads and writes never raise: a missing
or corrupt file reads as defaults, and a failed write returns False.
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class MemoryStore:
    """In-process store; nothing survives a restart."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(data or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> bool:
        self._data[key] = value
        return True


class JsonStore(MemoryStore):
    def __init__(self, path: Path):
        super().__init__()
        self._lock = threading.Lock()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                saved = json.load(f)
        except FileNotFoundError:
            return
        except (OSError, ValueError) as e:
            logger.warning("Could not read %s, using defaults: %s", self.path, e)
            return
        if isinstance(saved, dict):
            self._data = saved
        else:
            logger.warning("Ignoring %s: top level is not an object", self.path)

    def set(self, key: str, value: Any) -> bool:
        """Write through to disk via a temp file + atomic rename."""
        with self._lock:
            previous = self._data.get(key)
            self._data[key] = value
            tmp_file = self.path.with_suffix(".tmp")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with tmp_file.open("w", encoding="utf-8") as f:
                    json.dump(self._data, f, indent=2)
                os.replace(tmp_file, self.path)
                return True
            except (OSError, TypeError, ValueError) as e:
                logger.warning("Save of %r failed: %s", key, e)
                if previous is None:
                    self._data.pop(key, None)
                else:
                    self._data[key] = previous
                return False


def default_store_path(default_dir: Optional[Path] = None) -> Path:
    override = os.environ.get("ENERGYCOACH_STATE")
    if override:
        return Path(override)
    return (default_dir or Path.cwd()) / "state.json"
