"""NiceGUI runtime orchestration for the TripDesk admin.

This module composes settings, storage, adapters, use cases and one
``ListViewModel`` per entity for the web pages. It holds no widget code.
"""

from __future__ import annotations

from dataclasses import replace
import logging
import os
from typing import Any, Dict, List, Mapping, Optional

from tripdesk.adapters.records_mock import RecordsMock, demo_records
from tripdesk.adapters.records_rest import RecordsRestAdapter, endpoints_for
from tripdesk.adapters.storage_local import StorageLocal
from tripdesk.domain.entities import ViewState
from tripdesk.domain.ports import KeyValueStorePort, RecordSourcePort, UseCaseError
from tripdesk.domain.schema import ENTITY_SCHEMAS, EntitySchema, schema_for
from tripdesk.usecases.delete_record import DeleteRecord
from tripdesk.usecases.drafts import ClearDraft, LoadDraft, SaveDraft
from tripdesk.usecases.load_records import LoadRecords
from tripdesk.usecases.view_state import LoadViewState, SaveViewState
from tripdesk.utils.logging import apply_gui_preferences
from tripdesk.viewmodels.list_vm import ListViewModel
from tripdesk.viewmodels.settings_vm import SettingsVM


LOGGER = logging.getLogger(__name__)

STORAGE_ROOT_ENV_VAR = "TRIPDESK_STORAGE_ROOT"


class AdminRuntime:
    """Orchestration state used by NiceGUI views."""

    def __init__(
        self,
        *,
        storage_root: Optional[str] = None,
        use_mock: bool = False,
        sources: Optional[Mapping[str, RecordSourcePort]] = None,
        store: Optional[KeyValueStorePort] = None,
    ) -> None:
        self.use_mock = use_mock
        self.storage = StorageLocal(
            root_dir=storage_root or os.environ.get(STORAGE_ROOT_ENV_VAR) or "."
        )
        self.store: KeyValueStorePort = store or self.storage
        self.settings_vm = SettingsVM(on_save=self._persist_settings)

        self._source_overrides: Dict[str, RecordSourcePort] = dict(sources or {})
        self._sources: Dict[str, RecordSourcePort] = {}
        self._lists: Dict[str, ListViewModel] = {}

        self.uc_save_view_state = SaveViewState(self.store)
        self.uc_load_view_state = LoadViewState(self.store)
        self.uc_save_draft = SaveDraft(self.store)
        self.uc_load_draft = LoadDraft(self.store)
        self.uc_clear_draft = ClearDraft(self.store)

        self._load_settings_defaults()
        apply_gui_preferences(self.settings_vm.debug_logging)

    # ------------------------------------------------------------------
    # Basic projections
    # ------------------------------------------------------------------
    @staticmethod
    def entities() -> List[EntitySchema]:
        return list(ENTITY_SCHEMAS.values())

    def settings_payload(self) -> Dict[str, Any]:
        return self.settings_vm.to_dict()

    def source_for(self, entity: str) -> RecordSourcePort:
        schema = schema_for(entity)
        source = self._sources.get(schema.name)
        if source is None:
            source = self._build_source(schema)
            self._sources[schema.name] = source
        return source

    def list_vm(self, entity: str) -> ListViewModel:
        """Return the cached view model for ``entity``, building it on first use."""
        schema = schema_for(entity)
        vm = self._lists.get(schema.name)
        if vm is not None:
            return vm
        source = self.source_for(schema.name)
        vm = ListViewModel(
            schema,
            load=LoadRecords(source, entity=schema.name),
            delete=DeleteRecord(source, entity=schema.name),
            view_state=self._restore_view_state(schema),
        )
        self._lists[schema.name] = vm
        return vm

    # ------------------------------------------------------------------
    # Persistence workflows
    # ------------------------------------------------------------------
    def persist_view_state(self, vm: ListViewModel) -> None:
        """Save the search/sort/page-size of the page's own view model."""
        try:
            self.uc_save_view_state(vm.entity, vm.view_state)
        except UseCaseError as exc:
            LOGGER.warning("Could not persist view state for %s: %s", vm.entity, exc)

    def save_draft(self, name: str, payload: Mapping[str, Any]) -> None:
        self.uc_save_draft(name, payload)

    def load_draft(self, name: str) -> Optional[Dict[str, Any]]:
        return self.uc_load_draft(name)

    def clear_draft(self, name: str) -> None:
        self.uc_clear_draft(name)

    # ------------------------------------------------------------------
    # Settings workflows
    # ------------------------------------------------------------------
    def apply_settings_payload(self, payload: Mapping[str, Any]) -> None:
        """Apply settings and drop adapters/view models built from the old ones."""
        self.settings_vm.apply_dict(payload)
        apply_gui_preferences(self.settings_vm.debug_logging)
        self._sources.clear()
        self._lists.clear()

    def save_settings(self) -> None:
        self.settings_vm.cmd_save()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _build_source(self, schema: EntitySchema) -> RecordSourcePort:
        override = self._source_overrides.get(schema.name)
        if override is not None:
            return override
        if self.use_mock:
            return RecordsMock(demo_records(schema.name), identity_field=schema.identity_field)
        settings = self.settings_vm
        return RecordsRestAdapter(
            settings.api_base_url,
            endpoints_for(schema.name, settings.endpoints),
            api_key=settings.api_key or None,
            request_timeout_s=settings.request_timeout_s,
            retries=settings.retries,
            entity=schema.name,
        )

    def _restore_view_state(self, schema: EntitySchema) -> Optional[ViewState]:
        sized = replace(schema, page_size=self.settings_vm.page_size)
        try:
            return self.uc_load_view_state(sized)
        except UseCaseError as exc:
            LOGGER.warning("Could not restore view state for %s: %s", schema.name, exc)
            return None

    def _persist_settings(self, payload: Dict[str, Any]) -> None:
        self.storage.save_user_settings(payload)

    def _load_settings_defaults(self) -> None:
        try:
            payload = self.storage.load_user_settings()
        except Exception as exc:
            LOGGER.warning("Could not load local settings defaults: %s", exc)
            return
        if not payload:
            return
        try:
            self.settings_vm.apply_dict(payload)
        except ValueError as exc:
            LOGGER.warning("Could not apply local settings defaults: %s", exc)


__all__ = ["AdminRuntime", "STORAGE_ROOT_ENV_VAR"]
