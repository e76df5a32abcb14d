from __future__ import annotations

import pytest

from tripdesk.adapters.storage_local import MemoryStore
from tripdesk.domain.entities import ViewState
from tripdesk.domain.ports import UseCaseError
from tripdesk.domain.schema import SORT_ASC, SORT_DESC, schema_for
from tripdesk.usecases.drafts import ClearDraft, LoadDraft, SaveDraft, draft_key
from tripdesk.usecases.view_state import LoadViewState, SaveViewState, view_state_key


class _FailingStore:
    def get(self, key):
        raise OSError("disk gone")

    def set(self, key, value):
        raise OSError("disk gone")


def test_view_state_round_trip_drops_current_page() -> None:
    store = MemoryStore()
    schema = schema_for("tours")
    field = schema.sortable_fields[-1]
    state = ViewState(
        search_term="goa", sort_field=field, sort_direction=SORT_DESC, current_page=3, page_size=25
    )

    SaveViewState(store)("tours", state)
    restored = LoadViewState(store)(schema)

    assert store.get(view_state_key("tours"))["search_term"] == "goa"
    assert restored == ViewState(
        search_term="goa", sort_field=field, sort_direction=SORT_DESC, page_size=25
    )


def test_missing_view_state_uses_schema_defaults() -> None:
    schema = schema_for("bookings")
    assert LoadViewState(MemoryStore())(schema) == ViewState.for_schema(schema)


def test_invalid_stored_fields_fall_back_individually() -> None:
    store = MemoryStore()
    schema = schema_for("contacts")
    store.set(
        view_state_key("contacts"),
        {"search_term": "ravi", "sort_field": "nope", "sort_direction": "sideways", "page_size": 0},
    )

    restored = LoadViewState(store)(schema)
    default = ViewState.for_schema(schema)

    assert restored.search_term == "ravi"
    assert restored.sort_field == default.sort_field
    assert restored.sort_direction == default.sort_direction
    assert restored.page_size == default.page_size


def test_malformed_view_state_payload_is_ignored() -> None:
    store = MemoryStore()
    store.set(view_state_key("users"), ["not", "a", "mapping"])
    schema = schema_for("users")
    assert LoadViewState(store)(schema) == ViewState.for_schema(schema)


def test_view_state_store_failures_raise_use_case_errors() -> None:
    with pytest.raises(UseCaseError) as excinfo:
        SaveViewState(_FailingStore())("tours", ViewState(sort_direction=SORT_ASC))
    assert excinfo.value.code == "SAVE_VIEW_STATE_FAILED"

    with pytest.raises(UseCaseError) as excinfo:
        LoadViewState(_FailingStore())(schema_for("tours"))
    assert excinfo.value.code == "LOAD_VIEW_STATE_FAILED"


def test_drafts_save_load_clear() -> None:
    store = MemoryStore()
    SaveDraft(store)("Enquiry", {"name": "Divya", "adults": 2})

    assert draft_key("Enquiry") == "draft.enquiry"
    assert LoadDraft(store)("enquiry") == {"name": "Divya", "adults": 2}

    ClearDraft(store)("enquiry")
    assert LoadDraft(store)("enquiry") is None


def test_draft_validation_and_failures() -> None:
    store = MemoryStore()
    with pytest.raises(UseCaseError) as excinfo:
        SaveDraft(store)("  ", {"a": 1})
    assert excinfo.value.code == "INVALID_DRAFT"

    with pytest.raises(UseCaseError) as excinfo:
        SaveDraft(store)("booking", ["a"])
    assert excinfo.value.code == "INVALID_DRAFT"

    with pytest.raises(UseCaseError) as excinfo:
        LoadDraft(_FailingStore())("booking")
    assert excinfo.value.code == "LOAD_DRAFT_FAILED"

    with pytest.raises(UseCaseError) as excinfo:
        ClearDraft(_FailingStore())("booking")
    assert excinfo.value.code == "CLEAR_DRAFT_FAILED"
