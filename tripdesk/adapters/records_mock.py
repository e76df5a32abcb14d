from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set

from tripdesk.domain.list_query import text_value
from tripdesk.domain.ports import Identity, Record, RecordSourcePort

from .api_errors import ApiNotFoundError, ApiServerError


@dataclass
class RecordsMock(RecordSourcePort):
    """Offline substitute for ``RecordsRestAdapter`` backed by a list.

    ``fail_fetch`` and ``fail_delete_ids`` make the mock raise the same typed
    errors the REST adapter would, so error paths can be exercised without a
    server.
    """

    records: List[Record] = field(default_factory=list)
    identity_field: str = "id"
    fail_fetch: bool = False
    fail_delete_ids: Set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.records = [dict(r) for r in self.records]
        self.fail_delete_ids = {text_value(i) for i in self.fail_delete_ids}
        self.fetch_calls = 0
        self.deleted: List[Identity] = []

    # ---------- RecordSourcePort ----------

    def fetch_all(self) -> List[Record]:
        self.fetch_calls += 1
        if self.fail_fetch:
            raise ApiServerError("fetch: HTTP 500", status=500, context="mock.fetch")
        return copy.deepcopy(self.records)

    def delete_one(self, identity: Identity) -> None:
        key = text_value(identity)
        if key in self.fail_delete_ids:
            raise ApiServerError(
                f"delete[{key}]: HTTP 500", status=500, context="mock.delete"
            )
        index = self._index_of(key)
        if index is None:
            raise ApiNotFoundError(
                f"delete[{key}]: HTTP 404", status=404, context="mock.delete"
            )
        del self.records[index]
        self.deleted.append(identity)

    # ---------- Helpers ----------

    def _index_of(self, key: str) -> Optional[int]:
        for idx, record in enumerate(self.records):
            if text_value(record.get(self.identity_field)) == key:
                return idx
        return None


def demo_records(entity: str) -> List[Dict[str, Any]]:
    """Small, deterministic collections for ``--mock`` runs of the admin UI."""
    return copy.deepcopy(_DEMO.get(entity, []))


def _seq(rows: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [dict(row, id=idx) for idx, row in enumerate(rows, start=1)]


_DEMO: Dict[str, List[Dict[str, Any]]] = {
    "bookings": _seq(
        [
            {"tour_id": 3, "name": "Amit Shah", "email": "amit@example.com", "phone": "98450 11111",
             "days": 6, "adults": 2, "children": 1, "child_ages": [7], "hotel_rating": "4",
             "meal_plan": "MAP", "flight_option": "yes", "flight_number": "AI 202",
             "travel_date": "2024-01-05", "created_at": "2023-12-01T10:15:00Z"},
            {"tour_id": 5, "name": "Bina Rao", "email": "bina@example.com", "phone": "98450 22222",
             "days": 4, "adults": 2, "children": 0, "child_ages": [], "hotel_rating": "5",
             "meal_plan": "CP", "flight_option": "no", "flight_number": "",
             "travel_date": "2024-03-01", "created_at": "2024-01-20T08:00:00Z"},
            {"tour_id": 3, "name": "Chetan Iyer", "email": "chetan@example.com", "phone": "98450 33333",
             "days": 6, "adults": 1, "children": 2, "child_ages": [4, 9], "hotel_rating": "3",
             "meal_plan": "AP", "flight_option": "yes", "flight_number": "6E 511",
             "travel_date": "2024-02-14", "created_at": "2024-01-02T12:30:00Z"},
        ]
    ),
    "enquiries": _seq(
        [
            {"tourId": 3, "name": "Divya", "email": "divya@example.com", "phone": "90000 00001",
             "description": "Is the Kerala tour available in May?", "createdDate": "2024-02-01T09:00:00Z"},
            {"tourId": 7, "name": "Farhan", "email": "farhan@example.com", "phone": "90000 00002",
             "description": "Group discount for 12 people?", "createdDate": "2024-02-03T16:45:00Z"},
        ]
    ),
    "contacts": _seq(
        [
            {"contact_id": "C-1001", "first_name": "Gita", "email": "gita@example.com",
             "phone_number": "91111 10000", "subject": "Visa help", "message": "Need a letter.",
             "status": "open", "created_at": "2024-01-11T11:00:00Z"},
            {"contact_id": "C-1002", "first_name": "Hari", "email": "hari@example.com",
             "phone_number": "91111 20000", "subject": "Refund", "message": "Cancelled trip.",
             "status": "closed", "created_at": "2024-01-13T14:20:00Z"},
        ]
    ),
    "trip_leads": _seq(
        [
            {"full_name": "Isha Menon", "email": "isha@example.com", "phone_number": "92222 00001",
             "preferred_country": "Japan", "departure_date": "2024-04-10", "return_date": "2024-04-20",
             "number_of_adults": 2, "number_of_children": 0, "aged_persons": [],
             "need_flight": True, "created_at": "2024-02-10T10:00:00Z"},
            {"full_name": "Jay Kapoor", "email": "jay@example.com", "phone_number": "92222 00002",
             "preferred_country": "Italy", "departure_date": "2024-06-01", "return_date": "2024-06-12",
             "number_of_adults": 4, "number_of_children": 2, "aged_persons": [68],
             "need_flight": False, "created_at": "2024-02-12T18:30:00Z"},
        ]
    ),
    "users": _seq(
        [
            {"email": "admin@example.com", "role": "admin", "createdAt": "2023-06-01T00:00:00Z"},
            {"email": "ops@example.com", "role": "staff", "createdAt": "2023-09-15T00:00:00Z"},
        ]
    ),
    "locations": _seq(
        [
            {"name": "Munnar", "destination_id": 1, "destination_ids": [1],
             "destination_name": "Kerala", "description": "Tea gardens", "image_url": ""},
            {"name": "Kyoto", "destination_id": 2, "destination_ids": [2],
             "destination_name": "Japan", "description": "Temples", "image_url": ""},
        ]
    ),
    "tours": _seq(
        [
            {"title": "Kerala Backwaters", "category": "domestic", "duration_days": 6,
             "price_per_person": 42000, "max_group_size": 12, "description": "Houseboats",
             "destination_titles": ["Kerala"], "location_names": ["Munnar", "Alleppey"],
             "available_from": "2024-01-01", "available_to": "2024-12-31", "is_active": True,
             "created_at": "2023-11-01T00:00:00Z", "itinerary": {"day1": "Kochi"}},
            {"title": "Japan Highlights", "category": "international", "duration_days": 9,
             "price_per_person": 185000, "max_group_size": 10, "description": "Tokyo to Kyoto",
             "destination_titles": ["Japan"], "location_names": ["Kyoto"],
             "available_from": "2024-03-01", "available_to": "2024-11-30", "is_active": False,
             "created_at": "2023-12-05T00:00:00Z", "itinerary": {"day1": "Tokyo"}},
        ]
    ),
}


__all__ = ["RecordsMock", "demo_records"]
