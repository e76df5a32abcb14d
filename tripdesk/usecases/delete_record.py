from __future__ import annotations

import logging
from dataclasses import dataclass

from ..domain.ports import Identity, RecordSourcePort, UseCaseError
from .error_mapping import map_api_error

log = logging.getLogger(__name__)


@dataclass
class DeleteRecord:
    source: RecordSourcePort
    entity: str = "records"

    def __call__(self, identity: Identity) -> None:
        if identity is None or str(identity).strip() == "":
            raise UseCaseError("INVALID_IDENTITY", "Cannot delete a record without an id.")
        try:
            self.source.delete_one(identity)
        except Exception as exc:
            log.warning("Deleting %s %s failed: %s", self.entity, identity, exc)
            raise map_api_error(
                exc,
                default_code="DELETE_FAILED",
                default_message=f"Could not delete {self.entity} record {identity}.",
            ) from exc
        log.info("Deleted %s record %s", self.entity, identity)
