from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from ..domain.ports import Record, RecordSourcePort
from .error_mapping import map_api_error

log = logging.getLogger(__name__)


@dataclass
class LoadRecords:
    """Fetch the full collection for one entity."""

    source: RecordSourcePort
    entity: str = "records"

    def __call__(self) -> List[Record]:
        try:
            records = self.source.fetch_all()
        except Exception as exc:
            log.warning("Loading %s failed: %s", self.entity, exc)
            raise map_api_error(
                exc,
                default_code="FETCH_FAILED",
                default_message=f"Could not load {self.entity}.",
            ) from exc
        return list(records or [])
