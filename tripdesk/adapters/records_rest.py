# tripdesk/adapters/records_rest.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

import requests

from tripdesk.domain.ports import Identity, Record, RecordSourcePort

from .api_errors import raise_for_status
from .http_client import HttpConfig, RetryingSession


@dataclass(frozen=True)
class Endpoints:
    """List and delete paths for one entity; ``{id}`` marks the identity slot."""

    list_path: str
    delete_path: str

    def __post_init__(self) -> None:
        if not self.list_path.startswith("/"):
            raise ValueError(f"list_path must start with '/': {self.list_path!r}")
        if "{id}" not in self.delete_path:
            raise ValueError(f"delete_path must contain '{{id}}': {self.delete_path!r}")

    def delete_for(self, identity: Identity) -> str:
        return self.delete_path.replace("{id}", quote(str(identity), safe=""))


DEFAULT_ENDPOINTS: Dict[str, Endpoints] = {
    "bookings": Endpoints("/Contact/GetAllBookings", "/Contact/deleteBooking/{id}"),
    "enquiries": Endpoints("/Contact/GetAllEnquiries", "/Contact/deleteEnquiry/{id}"),
    "contacts": Endpoints("/Contact/GetAllContactDetails", "/Contact/deleteContact/{id}"),
    "trip_leads": Endpoints("/trip-leads", "/trip-leads/{id}"),
    "users": Endpoints("/users", "/users/{id}"),
    "locations": Endpoints("/Location", "/Location/{id}"),
    "tours": Endpoints("/Tours", "/Tours/{id}"),
}

# Envelope keys some API versions wrap collections in.
_ENVELOPE_KEYS = ("items", "data", "results")


def endpoints_for(
    entity: str, overrides: Optional[Mapping[str, Mapping[str, str]]] = None
) -> Endpoints:
    """Resolve the endpoints for ``entity``, applying ``{"list": ..., "delete": ...}`` overrides."""
    try:
        base = DEFAULT_ENDPOINTS[entity]
    except KeyError as exc:
        raise ValueError(f"No endpoints configured for entity '{entity}'") from exc
    custom = dict((overrides or {}).get(entity) or {})
    if not custom:
        return base
    return Endpoints(
        list_path=str(custom.get("list") or base.list_path),
        delete_path=str(custom.get("delete") or base.delete_path),
    )


class RecordsRestAdapter(RecordSourcePort):
    """REST adapter for one admin collection of the travel API.

    Endpoints (per entity, see ``DEFAULT_ENDPOINTS``):
      - GET    {base}{list_path}               -> [ {...}, ... ]
      - DELETE {base}{delete_path with id}     -> 2xx on success, 404 if gone
    """

    def __init__(
        self,
        base_url: str,
        endpoints: Endpoints,
        *,
        api_key: Optional[str] = None,
        request_timeout_s: int = 10,
        retries: int = 2,
        entity: str = "records",
    ) -> None:
        if not str(base_url or "").strip():
            raise ValueError("RecordsRestAdapter requires a base URL")
        self._log = logging.getLogger(__name__)
        self.base_url = str(base_url).strip()
        self.endpoints = endpoints
        self.entity = entity
        self.cfg = HttpConfig(request_timeout_s=request_timeout_s, retries=retries)
        self.session = RetryingSession(api_key, self.cfg)

    # ---------- RecordSourcePort ----------

    def fetch_all(self) -> List[Record]:
        url = self._make_url(self.endpoints.list_path)
        ctx = f"fetch[{self.entity}]"
        resp = self.session.get(url)
        raise_for_status(resp, ctx)
        data = self._json_any(resp, ctx)
        items = self._unwrap_collection(data, ctx)
        records = [dict(entry) for entry in items if isinstance(entry, dict)]
        dropped = len(items) - len(records)
        if dropped:
            self._log.warning("%s: dropped %d non-object entries", ctx, dropped)
        self._log.debug("%s: %d records from %s", ctx, len(records), url)
        return records

    def delete_one(self, identity: Identity) -> None:
        if identity is None or str(identity).strip() == "":
            raise ValueError("delete_one requires an identity")
        url = self._make_url(self.endpoints.delete_for(identity))
        ctx = f"delete[{self.entity}:{identity}]"
        resp = self.session.delete(url)
        raise_for_status(resp, ctx)
        self._log.info("%s: deleted", ctx)

    # ---------- Helpers ----------

    def _make_url(self, path: str) -> str:
        base = self.base_url
        if base.endswith("/"):
            base = base[:-1]
        return f"{base}{path}"

    @staticmethod
    def _json_any(resp: requests.Response, ctx: str) -> Any:
        try:
            return resp.json()
        except Exception:
            snippet = getattr(resp, "text", "")[:400]
            raise RuntimeError(f"{ctx}: invalid JSON response: {snippet}")

    @staticmethod
    def _unwrap_collection(data: Any, ctx: str) -> List[Any]:
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            for key in _ENVELOPE_KEYS:
                value = data.get(key)
                if isinstance(value, list):
                    return value
        raise RuntimeError(f"{ctx}: expected list response")


__all__ = ["DEFAULT_ENDPOINTS", "Endpoints", "RecordsRestAdapter", "endpoints_for"]
