"""Thin web-facing viewmodels for NiceGUI bindings.

These viewmodels hold browser form state and translate to/from the core
viewmodels without adding I/O or orchestration logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any, Dict, List, Mapping, Optional

from tripdesk.domain.schema import EntitySchema
from tripdesk.viewmodels.list_vm import ListViewModel
from tripdesk.viewmodels.settings_vm import DEFAULT_BASE_URL, SettingsVM
from tripdesk.viewmodels.status_format import cell_label


def _as_int(value: Any, default: int) -> int:
    """Convert mixed values to int with deterministic fallback."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(default)


@dataclass
class WebSettingsVM:
    """Browser-editable settings projection for NiceGUI forms."""

    api_base_url: str = DEFAULT_BASE_URL
    api_key: str = ""
    request_timeout_s: int = 10
    retries: int = 2
    page_size: int = 10
    endpoints: Dict[str, Dict[str, str]] = field(default_factory=dict)
    debug_logging: bool = False

    @classmethod
    def from_settings_vm(cls, settings_vm: SettingsVM) -> "WebSettingsVM":
        return cls.from_payload(settings_vm.to_dict())

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "WebSettingsVM":
        """Build browser form state from a ``SettingsVM.to_dict`` shaped mapping."""
        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping.")
        endpoints = payload.get("endpoints") or {}
        return cls(
            api_base_url=str(payload.get("api_base_url") or DEFAULT_BASE_URL),
            api_key=str(payload.get("api_key") or ""),
            request_timeout_s=_as_int(payload.get("request_timeout_s"), 10),
            retries=_as_int(payload.get("retries"), 2),
            page_size=_as_int(payload.get("page_size"), 10),
            endpoints={
                str(entity): {str(k): str(v) for k, v in dict(paths or {}).items()}
                for entity, paths in dict(endpoints).items()
            },
            debug_logging=bool(payload.get("debug_logging")),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "api_base_url": str(self.api_base_url or "").strip(),
            "api_key": str(self.api_key or ""),
            "request_timeout_s": _as_int(self.request_timeout_s, 10),
            "retries": _as_int(self.retries, 2),
            "page_size": _as_int(self.page_size, 10),
            "endpoints": {entity: dict(paths) for entity, paths in self.endpoints.items()},
            "debug_logging": bool(self.debug_logging),
        }


def parse_settings_json(text: str) -> Dict[str, Any]:
    """Parse imported settings JSON into a mapping payload."""
    raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError("Imported settings must be a JSON object.")
    return dict(raw)


def table_columns(schema: EntitySchema) -> List[Dict[str, Any]]:
    """Column definitions for ``ui.table``: serial number first, then export fields."""
    columns: List[Dict[str, Any]] = [{"name": "_serial", "label": "#", "field": "_serial"}]
    for name in schema.columns:
        columns.append(
            {
                "name": name,
                "label": name.replace("_", " ").title(),
                "field": name,
                "align": "left",
            }
        )
    return columns


def table_rows(vm: ListViewModel) -> List[Dict[str, Any]]:
    """Current page rendered as display strings plus row flags."""
    schema = vm.schema
    rows: List[Dict[str, Any]] = []
    for index, row in enumerate(vm.rows):
        display: Dict[str, Any] = {
            name: cell_label(row.get(name), schema.field_type(name)) for name in schema.columns
        }
        display["_serial"] = vm.serial_number(index)
        display["_key"] = str(row.identity)
        display["_deleting"] = row.is_deleting
        display["_expanded"] = row.is_expanded
        rows.append(display)
    return rows


def sort_options(schema: EntitySchema) -> Dict[str, str]:
    """Value -> label mapping for the sort field select."""
    return {name: name.replace("_", " ").title() for name in schema.sortable_fields}


def row_identity(vm: ListViewModel, key: Optional[str]) -> Optional[Any]:
    """Map a table row key back to the record identity (ids may be ints)."""
    if key is None:
        return None
    row = vm.find_row(key)
    return None if row is None else row.identity


__all__ = [
    "WebSettingsVM",
    "parse_settings_json",
    "row_identity",
    "sort_options",
    "table_columns",
    "table_rows",
]
