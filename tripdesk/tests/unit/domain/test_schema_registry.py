from __future__ import annotations

import pytest

from tripdesk.domain.schema import (
    BOOKINGS,
    ENTITY_SCHEMAS,
    TOURS,
    EntitySchema,
    FieldType,
    normalize_direction,
    schema_for,
)


def test_all_admin_lists_are_registered() -> None:
    assert set(ENTITY_SCHEMAS) == {
        "bookings",
        "contacts",
        "enquiries",
        "trip_leads",
        "users",
        "locations",
        "tours",
    }
    for schema in ENTITY_SCHEMAS.values():
        assert schema.identity_field == "id"
        assert schema.search_fields
        assert schema.default_sort_field in schema.sortable_fields


def test_schema_for_is_case_insensitive_and_rejects_unknown() -> None:
    assert schema_for(" Bookings ") is BOOKINGS
    with pytest.raises(ValueError):
        schema_for("invoices")


def test_undeclared_fields_default_to_text() -> None:
    assert BOOKINGS.field_type("travel_date") is FieldType.DATE
    assert BOOKINGS.field_type("meal_plan") is FieldType.TEXT
    assert TOURS.field_type("is_active") is FieldType.BOOLEAN


def test_sortable_fields_start_with_default_sort() -> None:
    assert BOOKINGS.sortable_fields[0] == "travel_date"
    assert len(set(BOOKINGS.sortable_fields)) == len(BOOKINGS.sortable_fields)


def test_columns_fall_back_to_identity_and_search_fields() -> None:
    schema = EntitySchema(name="x", label="X", identity_field="id", search_fields=("name", "id"))
    assert schema.columns == ("id", "name")


def test_schema_validation() -> None:
    with pytest.raises(ValueError):
        EntitySchema(name="x", label="X", identity_field="id", search_fields=(), page_size=0)
    with pytest.raises(ValueError):
        EntitySchema(name="x", label="X", identity_field="", search_fields=())
    with pytest.raises(ValueError):
        EntitySchema(
            name="x", label="X", identity_field="id", search_fields=(), default_sort_direction="up-ish"
        )


def test_normalize_direction_tokens() -> None:
    assert normalize_direction("ASC") == "asc"
    assert normalize_direction("descending") == "desc"
    with pytest.raises(ValueError):
        normalize_direction(None)
