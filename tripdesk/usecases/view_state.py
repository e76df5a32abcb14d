"""Persist list search/sort/page-size choices per entity."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from ..domain.entities import ViewState
from ..domain.ports import KeyValueStorePort, UseCaseError
from ..domain.schema import EntitySchema

log = logging.getLogger(__name__)


def view_state_key(entity: str) -> str:
    return f"view_state.{entity}"


@dataclass
class SaveViewState:
    store: KeyValueStorePort

    def __call__(self, entity: str, state: ViewState) -> None:
        try:
            self.store.set(view_state_key(entity), state.to_payload())
        except Exception as exc:
            raise UseCaseError("SAVE_VIEW_STATE_FAILED", str(exc)) from exc


@dataclass
class LoadViewState:
    """Restore a saved ViewState, falling back to schema defaults field by field.

    Stored values that no longer fit the schema (unknown sort field, bad
    direction, non-positive page size) are dropped with a warning rather than
    failing the page load. The page always starts at 1.
    """

    store: KeyValueStorePort

    def __call__(self, schema: EntitySchema) -> ViewState:
        default = ViewState.for_schema(schema)
        try:
            payload = self.store.get(view_state_key(schema.name))
        except Exception as exc:
            raise UseCaseError("LOAD_VIEW_STATE_FAILED", str(exc)) from exc
        if payload is None:
            return default
        if not isinstance(payload, Mapping):
            log.warning("Ignoring malformed view state for %s: %r", schema.name, payload)
            return default
        return _merge(schema, default, payload)


def _merge(schema: EntitySchema, default: ViewState, payload: Mapping[str, Any]) -> ViewState:
    search_term = payload.get("search_term", default.search_term)
    if not isinstance(search_term, str):
        search_term = default.search_term

    sort_field = payload.get("sort_field", default.sort_field)
    if sort_field not in schema.sortable_fields:
        log.warning("Dropping unknown sort field %r for %s", sort_field, schema.name)
        sort_field = default.sort_field

    page_size = payload.get("page_size", default.page_size)
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size <= 0:
        page_size = default.page_size

    try:
        return ViewState(
            search_term=search_term,
            sort_field=sort_field,
            sort_direction=payload.get("sort_direction", default.sort_direction),
            page_size=page_size,
        )
    except ValueError as exc:
        log.warning("Dropping sort direction for %s: %s", schema.name, exc)
        return ViewState(
            search_term=search_term,
            sort_field=sort_field,
            sort_direction=default.sort_direction,
            page_size=page_size,
        )


__all__ = ["LoadViewState", "SaveViewState", "view_state_key"]
