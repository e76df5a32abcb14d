"""Domain package exports for schemas, value objects, and list steps."""

from .csv_export import export_csv, export_filename
from .entities import DeleteOutcome, ListRow, LoadState, Notice, ViewState
from .list_query import filter_records, paginate, sort_records, total_pages
from .schema import ENTITY_SCHEMAS, EntitySchema, FieldType, schema_for

__all__ = [
    "DeleteOutcome",
    "ENTITY_SCHEMAS",
    "EntitySchema",
    "FieldType",
    "ListRow",
    "LoadState",
    "Notice",
    "ViewState",
    "export_csv",
    "export_filename",
    "filter_records",
    "paginate",
    "schema_for",
    "sort_records",
    "total_pages",
]
