from __future__ import annotations

"""Per-entity list schemas shared by adapters, use-cases, and view models.

Call context:
    ``ListViewModel`` reads a schema to decide which fields are searched, how
    each sortable field is compared, which field addresses a record for delete
    calls, and which columns are exported.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple


class FieldType(str, Enum):
    """Semantic type of a record field used for sort/filter/export dispatch."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    LIST = "list"
    OBJECT = "object"


SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_DIRECTIONS: Tuple[str, ...] = (SORT_ASC, SORT_DESC)


def normalize_direction(value: Optional[str]) -> str:
    """Return ``asc``/``desc`` for loose direction tokens."""
    key = (value or "").strip().lower()
    if key in {"asc", "ascending", "up"}:
        return SORT_ASC
    if key in {"desc", "descending", "down"}:
        return SORT_DESC
    raise ValueError(f"Unsupported sort direction: {value!r}")


@dataclass(frozen=True)
class EntitySchema:
    """Static description of one admin list (bookings, tours, ...)."""

    name: str
    label: str
    identity_field: str
    search_fields: Tuple[str, ...]
    field_types: Mapping[str, FieldType] = field(default_factory=dict)
    default_sort_field: str = "id"
    default_sort_direction: str = SORT_ASC
    export_fields: Tuple[str, ...] = ()
    page_size: int = 10

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("EntitySchema.name must be a non-empty string.")
        if not self.identity_field.strip():
            raise ValueError("EntitySchema.identity_field must be a non-empty string.")
        if self.page_size <= 0:
            raise ValueError("EntitySchema.page_size must be positive.")
        normalize_direction(self.default_sort_direction)

    def field_type(self, name: str) -> FieldType:
        """Return the declared type of ``name``; undeclared fields are text."""
        return self.field_types.get(name, FieldType.TEXT)

    @property
    def sortable_fields(self) -> Tuple[str, ...]:
        """Fields offered in sort selectors, default sort field first."""
        ordered = [self.default_sort_field]
        for name in (*self.field_types.keys(), *self.search_fields, *self.export_fields):
            if name not in ordered:
                ordered.append(name)
        return tuple(ordered)

    @property
    def columns(self) -> Tuple[str, ...]:
        """Export field list, falling back to identity + searchable fields."""
        if self.export_fields:
            return self.export_fields
        return (self.identity_field, *[f for f in self.search_fields if f != self.identity_field])


BOOKINGS = EntitySchema(
    name="bookings",
    label="Bookings",
    identity_field="id",
    search_fields=("name", "email"),
    field_types={
        "travel_date": FieldType.DATE,
        "created_at": FieldType.DATE,
        "id": FieldType.NUMBER,
        "tour_id": FieldType.NUMBER,
        "days": FieldType.NUMBER,
        "adults": FieldType.NUMBER,
        "children": FieldType.NUMBER,
        "child_ages": FieldType.LIST,
    },
    default_sort_field="travel_date",
    default_sort_direction=SORT_DESC,
    export_fields=(
        "id",
        "tour_id",
        "name",
        "email",
        "phone",
        "days",
        "adults",
        "children",
        "child_ages",
        "hotel_rating",
        "meal_plan",
        "flight_option",
        "flight_number",
        "travel_date",
        "created_at",
    ),
)

CONTACTS = EntitySchema(
    name="contacts",
    label="Contacts",
    identity_field="id",
    search_fields=("first_name", "email", "contact_id"),
    field_types={"created_at": FieldType.DATE},
    default_sort_field="created_at",
    default_sort_direction=SORT_DESC,
    export_fields=(
        "id",
        "contact_id",
        "first_name",
        "email",
        "phone_number",
        "subject",
        "message",
        "status",
        "created_at",
    ),
)

ENQUIRIES = EntitySchema(
    name="enquiries",
    label="Enquiries",
    identity_field="id",
    search_fields=("name", "email", "tourId"),
    field_types={"createdDate": FieldType.DATE, "id": FieldType.NUMBER},
    default_sort_field="createdDate",
    default_sort_direction=SORT_DESC,
    export_fields=("id", "tourId", "name", "email", "phone", "description", "createdDate"),
)

TRIP_LEADS = EntitySchema(
    name="trip_leads",
    label="Trip Leads",
    identity_field="id",
    search_fields=("full_name", "email", "preferred_country"),
    field_types={
        "id": FieldType.NUMBER,
        "departure_date": FieldType.DATE,
        "return_date": FieldType.DATE,
        "number_of_days": FieldType.NUMBER,
        "number_of_adults": FieldType.NUMBER,
        "number_of_children": FieldType.NUMBER,
        "number_of_male": FieldType.NUMBER,
        "number_of_female": FieldType.NUMBER,
        "number_of_other": FieldType.NUMBER,
        "aged_persons": FieldType.LIST,
        "need_flight": FieldType.BOOLEAN,
    },
    default_sort_field="departure_date",
    default_sort_direction=SORT_DESC,
    export_fields=(
        "id",
        "full_name",
        "email",
        "phone_number",
        "preferred_country",
        "preferred_city",
        "departure_date",
        "return_date",
        "number_of_days",
        "number_of_adults",
        "number_of_children",
        "number_of_male",
        "number_of_female",
        "number_of_other",
        "aged_persons",
        "hotel_rating",
        "meal_plan",
        "room_type",
        "need_flight",
        "departure_airport",
        "trip_type",
        "estimate_range",
    ),
)

USERS = EntitySchema(
    name="users",
    label="Users",
    identity_field="id",
    search_fields=("email",),
    field_types={"id": FieldType.NUMBER, "createdAt": FieldType.DATE},
    default_sort_field="email",
    default_sort_direction=SORT_ASC,
    export_fields=("id", "email", "role", "createdAt"),
)

LOCATIONS = EntitySchema(
    name="locations",
    label="Locations",
    identity_field="id",
    search_fields=("name", "description", "destination_name"),
    field_types={
        "id": FieldType.NUMBER,
        "destination_id": FieldType.NUMBER,
        "destination_ids": FieldType.LIST,
    },
    default_sort_field="name",
    default_sort_direction=SORT_ASC,
    export_fields=("id", "name", "destination_id", "description", "image_url"),
)

TOURS = EntitySchema(
    name="tours",
    label="Tours",
    identity_field="id",
    search_fields=("title", "category", "description", "destination_titles", "location_names"),
    field_types={
        "id": FieldType.NUMBER,
        "duration_days": FieldType.NUMBER,
        "price_per_person": FieldType.NUMBER,
        "max_group_size": FieldType.NUMBER,
        "destination_titles": FieldType.LIST,
        "location_names": FieldType.LIST,
        "available_from": FieldType.DATE,
        "available_to": FieldType.DATE,
        "created_at": FieldType.DATE,
        "is_active": FieldType.BOOLEAN,
        "itinerary": FieldType.OBJECT,
    },
    default_sort_field="title",
    default_sort_direction=SORT_ASC,
    export_fields=(
        "id",
        "title",
        "category",
        "duration_days",
        "price_per_person",
        "destination_titles",
        "available_from",
        "available_to",
        "is_active",
    ),
)

ENTITY_SCHEMAS: Dict[str, EntitySchema] = {
    schema.name: schema
    for schema in (BOOKINGS, CONTACTS, ENQUIRIES, TRIP_LEADS, USERS, LOCATIONS, TOURS)
}


def schema_for(name: str) -> EntitySchema:
    """Look up a shipped schema by entity name."""
    key = str(name or "").strip().lower()
    try:
        return ENTITY_SCHEMAS[key]
    except KeyError as exc:
        raise ValueError(f"Unknown entity '{name}'") from exc


__all__ = [
    "BOOKINGS",
    "CONTACTS",
    "ENQUIRIES",
    "ENTITY_SCHEMAS",
    "EntitySchema",
    "FieldType",
    "LOCATIONS",
    "SORT_ASC",
    "SORT_DESC",
    "SORT_DIRECTIONS",
    "TOURS",
    "TRIP_LEADS",
    "USERS",
    "normalize_direction",
    "schema_for",
]
