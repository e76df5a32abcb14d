from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Any, Dict, Optional

from tripdesk.domain.ports import KeyValueStorePort, SettingsStoragePort

STATE_FILENAME = "tripdesk_state.json"
SETTINGS_FILENAME = "user_settings.json"

log = logging.getLogger(__name__)


def _write_json_atomic(path: str, payload: Any) -> None:
    """Write ``payload`` next to ``path`` and swap it in with ``os.replace``."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=".tmp-", suffix=".json", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, ensure_ascii=False, indent=2, sort_keys=True)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


class StorageLocal(KeyValueStorePort, SettingsStoragePort):
    """Local filesystem storage for view state, drafts and user settings (JSON)."""

    def __init__(self, root_dir: str = ".") -> None:
        self.root = root_dir

    @property
    def state_path(self) -> str:
        return os.path.join(self.root, STATE_FILENAME)

    @property
    def settings_path(self) -> str:
        return os.path.join(self.root, SETTINGS_FILENAME)

    # ---- Key/value state (one JSON document) ----
    def get(self, key: str) -> Optional[Any]:
        return self._read_state().get(key)

    def set(self, key: str, value: Any) -> None:
        state = self._read_state()
        if value is None:
            state.pop(key, None)
        else:
            state[key] = value
        _write_json_atomic(self.state_path, state)

    def _read_state(self) -> Dict[str, Any]:
        path = self.state_path
        if not os.path.exists(path):
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            log.warning("Ignoring unreadable state file %s", path)
            return {}
        return data if isinstance(data, dict) else {}

    # ---- User settings (JSON) ----
    def save_user_settings(self, payload: Dict[str, Any]) -> None:
        _write_json_atomic(self.settings_path, dict(payload))

    def load_user_settings(self) -> Optional[Dict[str, Any]]:
        path = self.settings_path
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object")
        return data


class MemoryStore(KeyValueStorePort):
    """Process-local key/value store; values are JSON round-tripped on write."""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        value = self._data.get(key)
        return None if value is None else json.loads(value)

    def set(self, key: str, value: Any) -> None:
        if value is None:
            self._data.pop(key, None)
            return
        self._data[key] = json.dumps(value)


__all__ = ["MemoryStore", "SETTINGS_FILENAME", "STATE_FILENAME", "StorageLocal"]
