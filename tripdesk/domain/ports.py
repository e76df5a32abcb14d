from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Protocol, Union

Record = Dict[str, Any]
Identity = Union[str, int]
EntityName = str


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str, *, meta: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = dict(meta or {})


# ---- Ports (Hexagonal boundaries) ----
class RecordSourcePort(Protocol):
    """Remote collection of one entity type (bookings, tours, ...)."""

    def fetch_all(self) -> List[Record]: ...  # full current collection
    def delete_one(self, identity: Identity) -> None: ...  # raises on failure, incl. 404


class KeyValueStorePort(Protocol):
    """Key-scoped persistence for view state and form drafts."""

    def get(self, key: str) -> Optional[Any]: ...
    def set(self, key: str, value: Any) -> None: ...  # None removes the key


class SettingsStoragePort(Protocol):
    """Persistence for user settings."""

    def save_user_settings(self, payload: Dict[str, Any]) -> None: ...
    def load_user_settings(self) -> Optional[Dict[str, Any]]: ...
