"""
Key-value storage for settings, statistics and the last posture sample.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)


class SettingsStore:
    """In-memory key-value store (values are deep-copied in and out)."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, keys: Iterable[str]) -> Dict[str, Any]:
        """Return the subset of the requested keys that are present."""
        return {k: copy.deepcopy(self._data[k]) for k in keys if k in self._data}

    def get_value(self, key: str, default: Any = None) -> Any:
        return copy.deepcopy(self._data.get(key, default))

    def set(self, items: Dict[str, Any]) -> None:
        self._data.update(copy.deepcopy(items))
        self._flush()

    def _flush(self) -> None:
        pass


class JsonFileStore(SettingsStore):
    """SettingsStore persisted to a JSON file after every write."""

    def __init__(self, path: str):
        self.path = Path(path)
        initial = {}
        if self.path.exists():
            try:
                initial = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning("Could not read settings file %s: %s", self.path, e)
        super().__init__(initial)

    def _flush(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not write settings file %s: %s", self.path, e)
