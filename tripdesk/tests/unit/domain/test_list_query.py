from __future__ import annotations

import pytest

from tripdesk.domain.list_query import (
    clamp_page,
    filter_records,
    find_index,
    matches,
    number_value,
    page_window,
    paginate,
    sort_records,
    text_value,
    total_pages,
)
from tripdesk.domain.schema import EntitySchema, FieldType


SCHEMA = EntitySchema(
    name="people",
    label="People",
    identity_field="id",
    search_fields=("name", "email", "tags"),
    field_types={
        "id": FieldType.NUMBER,
        "date": FieldType.DATE,
        "score": FieldType.NUMBER,
        "tags": FieldType.LIST,
    },
)

RECORDS = [
    {"id": 1, "name": "Amit", "email": "amit@example.com", "date": "2024-01-05", "score": "9", "tags": ["vip"]},
    {"id": 2, "name": "Bina", "email": "bina@example.com", "date": "2024-03-01", "score": "10", "tags": []},
    {"id": 3, "name": "chetan", "email": "c@example.com", "date": None, "score": None, "tags": ["Beach", "VIP"]},
    {"id": 4, "name": "Amita", "email": "a4@example.com", "date": "2024-01-05", "score": "x", "tags": None},
]


def test_blank_terms_match_everything() -> None:
    assert filter_records(RECORDS, "", SCHEMA.search_fields) == RECORDS
    assert filter_records(RECORDS, "   ", SCHEMA.search_fields) == RECORDS


def test_search_is_case_insensitive_substring_over_any_field() -> None:
    result = filter_records(RECORDS, "AMI", SCHEMA.search_fields)
    assert [r["id"] for r in result] == [1, 4]

    by_email = filter_records(RECORDS, "bina@", SCHEMA.search_fields)
    assert [r["id"] for r in by_email] == [2]


def test_search_matches_any_list_element() -> None:
    result = filter_records(RECORDS, "vip", SCHEMA.search_fields)
    assert [r["id"] for r in result] == [1, 3]


def test_filter_result_is_subset_whose_items_all_match() -> None:
    for term in ("a", "example", "zzz", "be"):
        result = filter_records(RECORDS, term, SCHEMA.search_fields)
        assert all(item in RECORDS for item in result)
        assert all(matches(item, term, SCHEMA.search_fields) for item in result)


def test_missing_fields_never_match() -> None:
    assert matches({"id": 9}, "9", ("name",)) is False


def test_sort_dates_descending_with_missing_as_epoch() -> None:
    result = sort_records(RECORDS, "date", "desc", SCHEMA)
    assert [r["id"] for r in result] == [2, 1, 4, 3]


def test_sort_is_stable_for_equal_keys_in_both_directions() -> None:
    asc = sort_records(RECORDS, "date", "asc", SCHEMA)
    assert [r["id"] for r in asc] == [3, 1, 4, 2]
    desc = sort_records(RECORDS, "date", "desc", SCHEMA)
    assert [r["id"] for r in desc].index(1) < [r["id"] for r in desc].index(4)


def test_sort_numbers_numerically_with_unparseable_as_zero() -> None:
    result = sort_records(RECORDS, "score", "asc", SCHEMA)
    assert [r["id"] for r in result] == [3, 4, 1, 2]


def test_sort_text_is_case_insensitive() -> None:
    result = sort_records(RECORDS, "name", "asc", SCHEMA)
    assert [r["name"] for r in result] == ["Amit", "Amita", "Bina", "chetan"]


def test_sort_rejects_unknown_direction() -> None:
    with pytest.raises(ValueError):
        sort_records(RECORDS, "name", "sideways", SCHEMA)


def test_total_pages_keeps_one_page_for_empty_lists() -> None:
    assert total_pages(0, 10) == 1
    assert total_pages(10, 10) == 1
    assert total_pages(11, 10) == 2
    with pytest.raises(ValueError):
        total_pages(5, 0)


def test_clamp_page_bounds() -> None:
    assert clamp_page(0, 25, 10) == 1
    assert clamp_page(7, 25, 10) == 3
    assert clamp_page(2, 0, 10) == 1


def test_pages_concatenate_back_to_the_collection() -> None:
    items = list(range(23))
    pages = total_pages(len(items), 5)
    chunks = [paginate(items, page, 5) for page in range(1, pages + 1)]
    assert all(len(chunk) <= 5 for chunk in chunks)
    assert [item for chunk in chunks for item in chunk] == items
    assert paginate(items, pages + 1, 5) == []


@pytest.mark.parametrize(
    "current,pages,expected",
    [
        (1, 10, [1, 2, 3, 4, 5]),
        (5, 10, [3, 4, 5, 6, 7]),
        (10, 10, [6, 7, 8, 9, 10]),
        (2, 3, [1, 2, 3]),
        (1, 1, [1]),
    ],
)
def test_page_window(current: int, pages: int, expected: list) -> None:
    assert page_window(current, pages) == expected


def test_find_index_compares_identities_as_text() -> None:
    assert find_index(RECORDS, "id", "3") == 2
    assert find_index(RECORDS, "id", 99) is None


def test_value_coercions() -> None:
    assert text_value(None) == ""
    assert text_value(True) == "true"
    assert text_value(["a", 1]) == "a, 1"
    assert number_value("1,200") == 1200.0
    assert number_value("n/a") == 0.0
    assert number_value(float("nan")) == 0.0
