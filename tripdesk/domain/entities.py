"""Domain value objects shared across adapters, use-cases, and view models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .schema import SORT_ASC, EntitySchema, normalize_direction


class LoadState(str, Enum):
    """Collection fetch lifecycle: ``idle -> loading -> {idle, error}``."""

    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


@dataclass
class ListRow:
    """One record plus the UI-only flags that never leave the client."""

    record: Dict[str, Any]
    """Record payload exactly as returned by the remote source."""

    identity_field: str = "id"
    is_expanded: bool = False
    is_deleting: bool = False

    @classmethod
    def from_record(cls, record: Mapping[str, Any], identity_field: str) -> "ListRow":
        if not isinstance(record, Mapping):
            raise TypeError("ListRow records must be mappings.")
        return cls(record=dict(record), identity_field=identity_field)

    @property
    def identity(self) -> Any:
        return self.record.get(self.identity_field)

    def get(self, name: str, default: Any = None) -> Any:
        return self.record.get(name, default)


@dataclass(frozen=True)
class ViewState:
    """Search/sort/pagination configuration driving the displayed page."""

    search_term: str = ""
    sort_field: str = "id"
    sort_direction: str = SORT_ASC
    current_page: int = 1
    page_size: int = 10

    def __post_init__(self) -> None:
        if not isinstance(self.page_size, int) or self.page_size <= 0:
            raise ValueError("ViewState.page_size must be a positive integer.")
        if not isinstance(self.current_page, int) or self.current_page < 1:
            raise ValueError("ViewState.current_page must be >= 1.")
        object.__setattr__(self, "sort_direction", normalize_direction(self.sort_direction))

    @classmethod
    def for_schema(cls, schema: EntitySchema) -> "ViewState":
        return cls(
            sort_field=schema.default_sort_field,
            sort_direction=schema.default_sort_direction,
            page_size=schema.page_size,
        )

    def to_payload(self) -> Dict[str, Any]:
        """Persistable subset; the current page is not restored across sessions."""
        return {
            "search_term": self.search_term,
            "sort_field": self.sort_field,
            "sort_direction": self.sort_direction,
            "page_size": self.page_size,
        }


@dataclass(frozen=True)
class Notice:
    """Dismissible user-facing message produced at an operation boundary."""

    level: str
    message: str
    code: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.level in {"error", "negative"}


@dataclass
class DeleteOutcome:
    """Result of a delete attempt as seen by the UI."""

    identity: Any
    ok: bool
    notice: Optional[Notice] = None


__all__ = ["DeleteOutcome", "ListRow", "LoadState", "Notice", "ViewState"]
