"""Generic admin list view model: search, sort, paginate, delete, export.

Call context:
    ``tripdesk.web_ui.runtime.AdminRuntime`` builds one ``ListViewModel`` per
    entity schema. The NiceGUI page calls the ``set_*`` intents from widget
    callbacks and re-renders from ``rows``/``page_numbers`` whenever
    ``on_change`` fires.

Every interaction runs ``recompute`` synchronously: filter the full
collection, sort the survivors, clamp the current page, then slice the page.
Remote calls go through the injected ``load``/``delete`` callables, normally
``LoadRecords``/``DeleteRecord`` use cases. Their failures are turned into a
``Notice`` and never leave the view model in a half-updated state.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from tripdesk.domain.csv_export import export_csv as render_csv
from tripdesk.domain.csv_export import export_filename as build_export_filename
from tripdesk.domain.entities import DeleteOutcome, ListRow, LoadState, Notice, ViewState
from tripdesk.domain.list_query import (
    clamp_page,
    filter_records,
    find_index,
    page_window,
    paginate,
    sort_records,
    text_value,
    total_pages,
)
from tripdesk.domain.ports import Identity, Record, UseCaseError
from tripdesk.domain.schema import SORT_ASC, SORT_DESC, EntitySchema, normalize_direction

LoadFn = Callable[[], List[Record]]
DeleteFn = Callable[[Identity], None]
ChangeFn = Callable[["ListViewModel"], None]


def _row_record(row: ListRow) -> Record:
    return row.record


class ListViewModel:
    """State holder for one admin record list."""

    def __init__(
        self,
        schema: EntitySchema,
        *,
        load: Optional[LoadFn] = None,
        delete: Optional[DeleteFn] = None,
        on_change: Optional[ChangeFn] = None,
        view_state: Optional[ViewState] = None,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self.schema = schema
        self._load = load
        self._delete = delete
        self.on_change = on_change

        self._state = view_state or ViewState.for_schema(schema)
        self._check_sort_field(self._state.sort_field)
        self._rows: List[ListRow] = []
        self._filtered: List[ListRow] = []
        self._page_rows: List[ListRow] = []

        self._load_seq = 0
        self._load_state = LoadState.IDLE
        self.notice: Optional[Notice] = None

    # ------------------------------------------------------------------
    # Read-only projections
    # ------------------------------------------------------------------
    @property
    def entity(self) -> str:
        return self.schema.name

    @property
    def view_state(self) -> ViewState:
        return self._state

    @property
    def load_state(self) -> LoadState:
        return self._load_state

    @property
    def is_loading(self) -> bool:
        return self._load_state is LoadState.LOADING

    @property
    def loader(self) -> LoadFn:
        """Blocking ``load`` collaborator; async pages run it off the event loop."""
        if self._load is None:
            raise RuntimeError(f"{self.entity}: no load collaborator configured")
        return self._load

    @property
    def deleter(self) -> DeleteFn:
        if self._delete is None:
            raise RuntimeError(f"{self.entity}: no delete collaborator configured")
        return self._delete

    @property
    def rows(self) -> List[ListRow]:
        """Rows of the current page, in display order."""
        return list(self._page_rows)

    @property
    def filtered_rows(self) -> List[ListRow]:
        """Every row matching the search term, sorted, across all pages."""
        return list(self._filtered)

    @property
    def records(self) -> List[Record]:
        """Working collection in load order, without UI flags."""
        return [row.record for row in self._rows]

    @property
    def total_count(self) -> int:
        return len(self._filtered)

    @property
    def total_pages(self) -> int:
        return total_pages(len(self._filtered), self._state.page_size)

    @property
    def current_page(self) -> int:
        return self._state.current_page

    @property
    def is_empty(self) -> bool:
        return not self._filtered

    @property
    def start_index(self) -> int:
        """1-based position of the first row on the page; 0 when empty."""
        if not self._page_rows:
            return 0
        return (self._state.current_page - 1) * self._state.page_size + 1

    @property
    def end_index(self) -> int:
        if not self._page_rows:
            return 0
        return self.start_index + len(self._page_rows) - 1

    def serial_number(self, index: int) -> int:
        """Running number for the ``index``-th row of the current page."""
        return (self._state.current_page - 1) * self._state.page_size + index + 1

    def page_numbers(self, max_pages: int = 5) -> List[int]:
        return page_window(self._state.current_page, self.total_pages, max_pages)

    def find_row(self, identity: Identity) -> Optional[ListRow]:
        idx = find_index(self._rows, self.schema.identity_field, identity, record_of=_row_record)
        return None if idx is None else self._rows[idx]

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------
    def set_records(self, records: Iterable[Mapping[str, Any]]) -> None:
        """Replace the working collection; the view state is kept.

        Rows whose identity survives the reload keep their ``is_deleting`` and
        ``is_expanded`` flags, so a refresh never re-enables a running delete.
        """
        flagged = {
            text_value(row.identity): row
            for row in self._rows
            if row.identity is not None and (row.is_deleting or row.is_expanded)
        }
        rows: List[ListRow] = []
        for record in records:
            row = ListRow.from_record(record, self.schema.identity_field)
            previous = flagged.get(text_value(row.identity)) if row.identity is not None else None
            if previous is not None:
                row.is_deleting = previous.is_deleting
                row.is_expanded = previous.is_expanded
            rows.append(row)
        self._rows = rows
        self._log.debug("%s: %d records set", self.entity, len(self._rows))
        self.recompute()

    def recompute(self) -> None:
        """Filter, sort, clamp the page and slice it; then notify listeners."""
        state = self._state
        matched = filter_records(
            self._rows, state.search_term, self.schema.search_fields, record_of=_row_record
        )
        self._filtered = sort_records(
            matched,
            state.sort_field,
            state.sort_direction,
            self.schema,
            record_of=_row_record,
        )
        page = clamp_page(state.current_page, len(self._filtered), state.page_size)
        if page != state.current_page:
            self._state = replace(state, current_page=page)
        self._page_rows = paginate(self._filtered, page, self._state.page_size)
        self._emit()

    # ------------------------------------------------------------------
    # Search / sort / paging intents
    # ------------------------------------------------------------------
    def set_search_term(self, term: Optional[str]) -> None:
        self._state = replace(self._state, search_term=term or "", current_page=1)
        self.recompute()

    def clear_search(self) -> None:
        self.set_search_term("")

    def set_sort(self, field: str, direction: Optional[str] = None) -> None:
        """Sort by ``field``.

        Without ``direction`` the current direction flips when ``field`` is
        already the sort field; a new field starts at the schema default.
        The current page is kept (and re-clamped).
        """
        self._check_sort_field(field)
        if direction is not None:
            resolved = normalize_direction(direction)
        elif field == self._state.sort_field:
            resolved = _flip(self._state.sort_direction)
        else:
            resolved = self.schema.default_sort_direction
        self._state = replace(self._state, sort_field=field, sort_direction=resolved)
        self.recompute()

    def toggle_sort_direction(self) -> None:
        self.set_sort(self._state.sort_field, _flip(self._state.sort_direction))

    def set_page(self, page: int) -> None:
        """Jump to ``page``; out-of-range requests are ignored."""
        if isinstance(page, bool) or not isinstance(page, int):
            return
        if page < 1 or page > self.total_pages or page == self._state.current_page:
            return
        self._state = replace(self._state, current_page=page)
        self.recompute()

    def next_page(self) -> None:
        self.set_page(self._state.current_page + 1)

    def previous_page(self) -> None:
        self.set_page(self._state.current_page - 1)

    def set_page_size(self, size: int) -> None:
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise ValueError("page size must be a positive integer")
        self._state = replace(self._state, page_size=size, current_page=1)
        self.recompute()

    def apply_view_state(self, state: ViewState) -> None:
        """Adopt a restored view state (e.g. from ``LoadViewState``)."""
        self._check_sort_field(state.sort_field)
        self._state = state
        self.recompute()

    def toggle_expanded(self, identity: Identity) -> bool:
        """Flip the detail panel of one row; returns the new flag."""
        row = self.find_row(identity)
        if row is None:
            return False
        row.is_expanded = not row.is_expanded
        self._emit()
        return row.is_expanded

    # ------------------------------------------------------------------
    # Loading (last-initiated load wins)
    # ------------------------------------------------------------------
    def begin_load(self) -> int:
        """Enter ``loading`` and return the ticket the result must present."""
        self._load_seq += 1
        self._load_state = LoadState.LOADING
        self._emit()
        return self._load_seq

    def complete_load(self, ticket: int, records: Iterable[Mapping[str, Any]]) -> bool:
        if ticket != self._load_seq:
            self._log.debug("%s: dropping stale load #%s", self.entity, ticket)
            return False
        self._load_state = LoadState.IDLE
        self.set_records(records)
        return True

    def fail_load(self, ticket: int, error: BaseException) -> bool:
        """Record a failed fetch; the previous collection stays visible."""
        if ticket != self._load_seq:
            self._log.debug("%s: ignoring failure of stale load #%s", self.entity, ticket)
            return False
        self._load_state = LoadState.ERROR
        self.notice = _error_notice(error, f"Could not load {self.schema.label.lower()}.")
        self._log.warning("%s: load failed: %s", self.entity, error)
        self._emit()
        return True

    def refresh(self) -> bool:
        """Synchronous load through the injected ``load`` collaborator."""
        load = self.loader
        ticket = self.begin_load()
        try:
            records = load()
        except Exception as exc:
            self.fail_load(ticket, exc)
            return False
        return self.complete_load(ticket, records)

    # ------------------------------------------------------------------
    # Deleting (per-row flag; other rows stay usable)
    # ------------------------------------------------------------------
    def begin_delete(self, identity: Identity) -> ListRow:
        row = self.find_row(identity)
        if row is None:
            raise UseCaseError("ROW_NOT_FOUND", f"No {self.entity} record with id {identity}.")
        if row.is_deleting:
            raise UseCaseError(
                "DELETE_IN_FLIGHT", f"Delete of {self.entity} record {identity} is already running."
            )
        row.is_deleting = True
        self._emit()
        return row

    def complete_delete(self, identity: Identity) -> None:
        idx = find_index(self._rows, self.schema.identity_field, identity, record_of=_row_record)
        if idx is not None:
            del self._rows[idx]
        self.notice = Notice("positive", "Record deleted.")
        self._log.info("%s: record %s removed", self.entity, identity)
        self.recompute()

    def fail_delete(self, identity: Identity, error: BaseException) -> Notice:
        row = self.find_row(identity)
        if row is not None:
            row.is_deleting = False
        notice = _error_notice(error, "Failed to delete record.")
        self.notice = notice
        self._log.warning("%s: delete of %s failed: %s", self.entity, identity, error)
        self._emit()
        return notice

    def delete(self, identity: Identity) -> DeleteOutcome:
        """Delete one row through the ``delete`` collaborator.

        The row is removed only after the collaborator returns; on failure
        it stays in place with ``is_deleting`` cleared.

        Raises:
            UseCaseError: ``DELETE_IN_FLIGHT`` when the row is already being
                deleted, ``ROW_NOT_FOUND`` for an unknown identity.
        """
        remove = self.deleter
        self.begin_delete(identity)
        try:
            remove(identity)
        except Exception as exc:
            notice = self.fail_delete(identity, exc)
            return DeleteOutcome(identity=identity, ok=False, notice=notice)
        self.complete_delete(identity)
        return DeleteOutcome(identity=identity, ok=True, notice=self.notice)

    # ------------------------------------------------------------------
    # Export / notices
    # ------------------------------------------------------------------
    def export_csv(self, fields: Optional[Sequence[str]] = None) -> str:
        """CSV of the filtered collection (all pages) in display order."""
        columns = list(fields) if fields else list(self.schema.columns)
        return render_csv((row.record for row in self._filtered), columns, self.schema)

    def export_filename(self, today: Optional[date] = None) -> str:
        return build_export_filename(self.entity, today)

    def dismiss_notice(self) -> None:
        if self.notice is None:
            return
        self.notice = None
        self._emit()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _check_sort_field(self, field: str) -> None:
        if field not in self.schema.sortable_fields:
            raise ValueError(f"{self.entity}: cannot sort by unknown field '{field}'")

    def _emit(self) -> None:
        if self.on_change:
            self.on_change(self)


def _flip(direction: str) -> str:
    return SORT_ASC if direction == SORT_DESC else SORT_DESC


def _error_notice(error: BaseException, fallback: str) -> Notice:
    if isinstance(error, UseCaseError):
        return Notice("negative", error.message or fallback, code=error.code)
    return Notice("negative", str(error) or fallback)


__all__ = ["ListViewModel"]
