from __future__ import annotations

import pytest

from tripdesk.adapters.records_mock import RecordsMock
from tripdesk.domain.ports import UseCaseError
from tripdesk.usecases.delete_record import DeleteRecord
from tripdesk.usecases.load_records import LoadRecords


def test_load_records_returns_list() -> None:
    source = RecordsMock([{"id": 1}, {"id": 2}])
    assert LoadRecords(source, entity="tours")() == [{"id": 1}, {"id": 2}]


def test_load_records_maps_server_failure() -> None:
    with pytest.raises(UseCaseError) as excinfo:
        LoadRecords(RecordsMock(fail_fetch=True), entity="tours")()
    assert excinfo.value.code == "SERVER_ERROR"


def test_load_records_falls_back_to_fetch_failed() -> None:
    class _Broken:
        def fetch_all(self):
            raise RuntimeError("fetch[tours]: expected list response")

        def delete_one(self, identity):
            raise AssertionError("not used")

    with pytest.raises(UseCaseError) as excinfo:
        LoadRecords(_Broken(), entity="tours")()
    assert excinfo.value.code == "FETCH_FAILED"
    assert excinfo.value.message == "Could not load tours."


def test_delete_record_success_and_not_found() -> None:
    source = RecordsMock([{"id": 7}])
    DeleteRecord(source, entity="users")(7)
    assert source.deleted == [7]

    with pytest.raises(UseCaseError) as excinfo:
        DeleteRecord(source, entity="users")(7)
    assert excinfo.value.code == "NOT_FOUND"


@pytest.mark.parametrize("identity", [None, "", "   "])
def test_delete_record_rejects_blank_identity(identity) -> None:
    source = RecordsMock([{"id": 1}])
    with pytest.raises(UseCaseError) as excinfo:
        DeleteRecord(source)(identity)
    assert excinfo.value.code == "INVALID_IDENTITY"
    assert source.deleted == []
