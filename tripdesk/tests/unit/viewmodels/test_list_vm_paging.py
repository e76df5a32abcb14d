from __future__ import annotations

from datetime import date
from typing import Any, List

import pytest

from tripdesk.domain.entities import ViewState
from tripdesk.domain.schema import EntitySchema, FieldType
from tripdesk.viewmodels.list_vm import ListViewModel


SCHEMA = EntitySchema(
    name="people",
    label="People",
    identity_field="id",
    search_fields=("name", "tags"),
    field_types={"id": FieldType.NUMBER, "tags": FieldType.LIST, "vip": FieldType.BOOLEAN},
    export_fields=("id", "name", "vip"),
)

RECORDS = [
    {"id": i, "name": f"Name {i:02d}", "tags": ["even"] if i % 2 == 0 else ["odd"], "vip": i == 1}
    for i in range(1, 26)
]


def _vm(**kwargs: Any) -> ListViewModel:
    vm = ListViewModel(SCHEMA, **kwargs)
    vm.set_records(RECORDS)
    return vm


def _ids(vm: ListViewModel) -> List[Any]:
    return [row.identity for row in vm.rows]


def test_set_page_ignores_out_of_range_requests() -> None:
    vm = _vm()
    assert vm.total_pages == 3

    vm.set_page(0)
    vm.set_page(4)
    assert vm.current_page == 1

    vm.set_page(3)
    assert _ids(vm) == [21, 22, 23, 24, 25]
    vm.set_page(3)
    vm.next_page()
    assert vm.current_page == 3

    vm.previous_page()
    assert vm.current_page == 2


def test_search_resets_page_but_sort_keeps_it() -> None:
    vm = _vm()
    vm.set_page(2)
    vm.set_sort("name", "desc")
    assert vm.current_page == 2
    assert _ids(vm)[0] == 15

    vm.set_search_term("odd")
    assert vm.current_page == 1
    assert vm.total_count == 13


def test_set_sort_toggles_same_field_and_resets_new_field() -> None:
    vm = _vm()
    assert vm.view_state.sort_direction == "asc"

    vm.set_sort("id")
    assert vm.view_state.sort_direction == "desc"
    assert _ids(vm)[0] == 25

    vm.set_sort("name")
    assert vm.view_state.sort_field == "name"
    assert vm.view_state.sort_direction == "asc"

    vm.toggle_sort_direction()
    assert vm.view_state.sort_direction == "desc"

    with pytest.raises(ValueError):
        vm.set_sort("unknown")


def test_page_size_changes_reset_to_first_page() -> None:
    vm = _vm()
    vm.set_page(3)
    vm.set_page_size(20)
    assert vm.current_page == 1
    assert vm.total_pages == 2
    with pytest.raises(ValueError):
        vm.set_page_size(0)


def test_set_records_keeps_view_state() -> None:
    vm = _vm()
    vm.set_search_term("Name 1")
    before = vm.view_state
    vm.set_records(RECORDS[:12])
    assert vm.view_state.search_term == before.search_term
    assert [row.identity for row in vm.filtered_rows] == [10, 11, 12]


def test_presentation_helpers() -> None:
    vm = _vm()
    vm.set_page(2)
    assert vm.start_index == 11
    assert vm.end_index == 20
    assert vm.serial_number(0) == 11
    assert vm.page_numbers() == [1, 2, 3]
    assert vm.is_empty is False

    vm.set_search_term("nobody")
    assert vm.is_empty is True
    assert vm.start_index == 0
    assert vm.end_index == 0
    assert vm.total_pages == 1


def test_toggle_expanded_is_per_row() -> None:
    vm = _vm()
    assert vm.toggle_expanded(3) is True
    assert vm.find_row(3).is_expanded is True
    assert vm.find_row(4).is_expanded is False
    assert vm.toggle_expanded(3) is False
    assert vm.toggle_expanded(999) is False


def test_export_uses_filtered_collection_not_page() -> None:
    vm = _vm()
    vm.set_search_term("even")
    text = vm.export_csv()
    lines = text.split("\n")

    assert lines[0] == "id,name,vip"
    assert len(lines) == 13
    assert lines[1] == '"2","Name 02","No"'

    only_ids = vm.export_csv(["id"])
    assert only_ids.split("\n")[:2] == ["id", '"2"']


def test_export_filename_uses_entity() -> None:
    vm = _vm()
    assert vm.export_filename(date(2024, 2, 29)) == "people_2024-02-29.csv"


def test_on_change_fires_on_interactions() -> None:
    calls: List[int] = []
    vm = _vm()
    vm.on_change = lambda changed: calls.append(changed.current_page)
    vm.set_page(2)
    vm.set_page(2)
    vm.set_search_term("x")
    assert calls == [2, 1]


def test_apply_view_state_is_validated_and_clamped() -> None:
    vm = _vm()
    vm.apply_view_state(ViewState(sort_field="name", sort_direction="desc", current_page=9, page_size=10))
    assert vm.current_page == 3
    with pytest.raises(ValueError):
        vm.apply_view_state(ViewState(sort_field="nope"))
