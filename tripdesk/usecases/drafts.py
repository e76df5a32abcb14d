"""Form drafts kept between page visits (enquiry, booking, filters, ...).

Drafts are plain JSON objects stored under ``draft.<name>``; the admin UI
restores them when a form is reopened and clears them after a successful
submit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..domain.ports import KeyValueStorePort, UseCaseError


def draft_key(name: str) -> str:
    key = str(name or "").strip().lower()
    if not key:
        raise UseCaseError("INVALID_DRAFT", "Draft name must be a non-empty string.")
    return f"draft.{key}"


@dataclass
class SaveDraft:
    store: KeyValueStorePort

    def __call__(self, name: str, payload: Mapping[str, Any]) -> None:
        if not isinstance(payload, Mapping):
            raise UseCaseError("INVALID_DRAFT", "Draft payload must be an object.")
        key = draft_key(name)
        try:
            self.store.set(key, dict(payload))
        except Exception as exc:
            raise UseCaseError("SAVE_DRAFT_FAILED", str(exc)) from exc


@dataclass
class LoadDraft:
    store: KeyValueStorePort

    def __call__(self, name: str) -> Optional[Dict[str, Any]]:
        key = draft_key(name)
        try:
            value = self.store.get(key)
        except Exception as exc:
            raise UseCaseError("LOAD_DRAFT_FAILED", str(exc)) from exc
        return dict(value) if isinstance(value, Mapping) else None


@dataclass
class ClearDraft:
    store: KeyValueStorePort

    def __call__(self, name: str) -> None:
        key = draft_key(name)
        try:
            self.store.set(key, None)
        except Exception as exc:
            raise UseCaseError("CLEAR_DRAFT_FAILED", str(exc)) from exc


__all__ = ["ClearDraft", "LoadDraft", "SaveDraft", "draft_key"]
