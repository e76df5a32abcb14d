from __future__ import annotations

from datetime import date, datetime

import pytest

from tripdesk.domain.csv_export import cell_text, export_csv, export_filename, format_cell
from tripdesk.domain.schema import BOOKINGS, FieldType


def test_export_has_header_plus_one_line_per_record() -> None:
    records = [
        {"id": 1, "name": "Amit", "email": "amit@example.com"},
        {"id": 2, "name": "Bina", "email": None},
    ]
    text = export_csv(records, ["id", "name", "email"])
    lines = text.split("\n")

    assert len(lines) == 3
    assert lines[0] == "id,name,email"
    assert lines[1] == '"1","Amit","amit@example.com"'
    assert lines[2] == '"2","Bina",""'
    for line in lines[1:]:
        tokens = line.split(",")
        assert len(tokens) == 3
        assert all(tok.startswith('"') and tok.endswith('"') for tok in tokens)


def test_export_of_no_records_is_header_only() -> None:
    assert export_csv([], ["id", "name"]) == "id,name"


def test_export_requires_fields() -> None:
    with pytest.raises(ValueError):
        export_csv([{"id": 1}], [])


def test_cell_formats() -> None:
    assert cell_text(None) == ""
    assert cell_text(True) == "Yes"
    assert cell_text(False) == "No"
    assert cell_text([4, 9]) == "[4,9]"
    assert cell_text({"day1": "Kochi"}) == '{"day1":"Kochi"}'
    assert cell_text(datetime(2024, 1, 5, 9, 30)) == "2024-01-05 09:30"
    assert cell_text(date(2024, 1, 5)) == "2024-01-05 00:00"
    assert cell_text("2024-03-01T10:15:00Z", FieldType.DATE) == "2024-03-01 10:15"
    assert cell_text("soon", FieldType.DATE) == "soon"
    assert cell_text(42) == "42"


def test_embedded_quotes_are_written_unescaped() -> None:
    assert format_cell('say "hi"') == '"say "hi""'


def test_schema_drives_date_formatting() -> None:
    text = export_csv(
        [{"id": 1, "travel_date": "2024-01-05", "child_ages": [7]}],
        ["id", "travel_date", "child_ages"],
        BOOKINGS,
    )
    assert text.split("\n")[1] == '"1","2024-01-05 00:00","[7]"'


def test_export_filename() -> None:
    assert export_filename("bookings", date(2024, 5, 17)) == "bookings_2024-05-17.csv"
    assert export_filename("Trip Leads", date(2024, 5, 17)) == "trip_leads_2024-05-17.csv"
