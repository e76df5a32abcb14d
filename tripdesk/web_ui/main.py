"""NiceGUI entrypoint for the TripDesk admin lists."""

from __future__ import annotations

import argparse
import json
import os
from typing import Any, Callable, Optional

from nicegui import run, ui

from tripdesk.domain.entities import Notice
from tripdesk.domain.ports import UseCaseError
from tripdesk.utils.logging import configure_root
from tripdesk.viewmodels.list_vm import ListViewModel
from tripdesk.viewmodels.status_format import load_state_label, range_label
from tripdesk.web_ui.runtime import AdminRuntime
from tripdesk.web_ui.viewmodels import (
    WebSettingsVM,
    parse_settings_json,
    row_identity,
    sort_options,
    table_columns,
    table_rows,
)

PAGE_SIZE_OPTIONS = [5, 10, 20, 50]


def _install_theme() -> None:
    """Install global CSS tokens for the admin pages."""
    ui.add_head_html(
        """
<style>
:root {
  --td-bg: #f4f6fa;
  --td-card: #ffffff;
  --td-border: #d5dce8;
  --td-accent: #1f6f8b;
}
body { background: var(--td-bg); }
.td-page { max-width: 1400px; margin: 0 auto; padding: 14px; }
.td-card { background: var(--td-card); border: 1px solid var(--td-border); border-radius: 10px; }
.td-muted { color: #5b6677; font-size: 12px; }
</style>
        """
    )


def _notify_error(exc: Exception) -> None:
    """Render exceptions as concise NiceGUI toasts."""
    message = exc.message if isinstance(exc, UseCaseError) else str(exc)
    ui.notify(message or "Unexpected error.", color="negative", close_button="OK")


def _notify_notice(notice: Optional[Notice]) -> None:
    if notice is None:
        return
    ui.notify(notice.message, color=notice.level, close_button="OK" if notice.is_error else False)


def _nav(runtime: AdminRuntime, active: Optional[str]) -> None:
    with ui.row().classes("w-full items-center q-gutter-sm td-card p-3 q-mb-sm"):
        ui.label("TripDesk Admin").classes("text-h6")
        for schema in runtime.entities():
            link = ui.link(schema.label, f"/admin/{schema.name}")
            if schema.name == active:
                link.classes("text-weight-bold")
        ui.link("Settings", "/settings")


def _build_ui(runtime: AdminRuntime) -> None:
    """Register the NiceGUI pages for the runtime."""

    @ui.page("/")
    def index() -> None:
        ui.navigate.to(f"/admin/{runtime.entities()[0].name}")

    @ui.page("/admin/{entity}")
    async def list_page(entity: str) -> None:
        try:
            vm: ListViewModel = runtime.list_vm(entity)
        except ValueError as exc:
            with ui.column().classes("td-page w-full"):
                _nav(runtime, None)
                ui.label(str(exc)).classes("text-negative")
            return

        @ui.refreshable
        def render_toolbar() -> None:
            with ui.row().classes("w-full items-end q-gutter-sm"):
                ui.input(
                    "Search",
                    value=vm.view_state.search_term,
                    on_change=lambda e: on_search(e.value),
                ).props("dense outlined clearable debounce=250").classes("w-64")
                ui.select(
                    options=sort_options(vm.schema),
                    value=vm.view_state.sort_field,
                    label="Sort by",
                    on_change=lambda e: on_sort(e.value),
                ).props("dense outlined").classes("w-48")
                arrow = "arrow_upward" if vm.view_state.sort_direction == "asc" else "arrow_downward"
                ui.button(icon=arrow, on_click=on_toggle_direction).props("flat dense")
                ui.select(
                    options=PAGE_SIZE_OPTIONS,
                    value=vm.view_state.page_size,
                    label="Per page",
                    on_change=lambda e: on_page_size(e.value),
                ).props("dense outlined").classes("w-28")
                ui.button("Refresh", icon="refresh", on_click=load).props("outline").set_enabled(
                    not vm.is_loading
                )
                ui.button("Export CSV", icon="download", on_click=export_csv).props("outline")
                ui.label(load_state_label(vm.load_state)).classes("td-muted")

        @ui.refreshable
        def render_table() -> None:
            if vm.is_empty:
                ui.label("No records found.").classes("td-muted q-pa-md")
                return
            table = ui.table(
                columns=table_columns(vm.schema)
                + [{"name": "_actions", "label": "", "field": "_key"}],
                rows=table_rows(vm),
                row_key="_key",
            ).classes("w-full")
            table.add_slot(
                "body-cell-_actions",
                """
<q-td :props="props">
  <q-btn flat dense icon="expand_more" @click="$parent.$emit('expand', props.row._key)" />
  <q-btn flat dense color="negative" icon="delete" :loading="props.row._deleting"
         :disable="props.row._deleting" @click="$parent.$emit('remove', props.row._key)" />
</q-td>
                """,
            )
            table.on("expand", lambda e: on_expand(e.args))
            table.on("remove", lambda e: confirm_delete(e.args))
            for row in vm.rows:
                if row.is_expanded:
                    with ui.card().classes("td-card w-full q-pa-sm"):
                        ui.label(f"{vm.schema.label} #{row.identity}").classes("text-subtitle2")
                        ui.code(json.dumps(row.record, ensure_ascii=False, indent=2, default=str)).classes("w-full")

        @ui.refreshable
        def render_pager() -> None:
            with ui.row().classes("w-full items-center justify-between"):
                ui.label(range_label(vm.start_index, vm.end_index, vm.total_count)).classes("td-muted")
                with ui.row().classes("q-gutter-xs"):
                    ui.button(icon="chevron_left", on_click=lambda: _invoke(vm.previous_page)).props(
                        "flat dense"
                    ).set_enabled(vm.current_page > 1)
                    for number in vm.page_numbers():
                        ui.button(
                            str(number),
                            on_click=lambda _, n=number: _invoke(lambda: vm.set_page(n)),
                            color="primary" if number == vm.current_page else "grey-4",
                        ).props("dense")
                    ui.button(icon="chevron_right", on_click=lambda: _invoke(vm.next_page)).props(
                        "flat dense"
                    ).set_enabled(vm.current_page < vm.total_pages)

        def refresh_views() -> None:
            render_toolbar.refresh()
            render_table.refresh()
            render_pager.refresh()

        def _invoke(action: Callable[[], Any], persist: bool = False) -> None:
            try:
                action()
            except Exception as exc:
                _notify_error(exc)
                return
            if persist:
                runtime.persist_view_state(vm)
            render_table.refresh()
            render_pager.refresh()

        def on_search(value: Any) -> None:
            _invoke(lambda: vm.set_search_term(str(value or "")), persist=True)

        def on_sort(value: Any) -> None:
            _invoke(lambda: vm.set_sort(str(value)), persist=True)
            render_toolbar.refresh()

        def on_toggle_direction() -> None:
            _invoke(vm.toggle_sort_direction, persist=True)
            render_toolbar.refresh()

        def on_page_size(value: Any) -> None:
            _invoke(lambda: vm.set_page_size(int(value)), persist=True)

        def on_expand(key: Any) -> None:
            identity = row_identity(vm, key)
            if identity is not None:
                _invoke(lambda: vm.toggle_expanded(identity))

        async def load() -> None:
            ticket = vm.begin_load()
            render_toolbar.refresh()
            try:
                records = await run.io_bound(vm.loader)
            except Exception as exc:
                if vm.fail_load(ticket, exc):
                    _notify_notice(vm.notice)
                    vm.dismiss_notice()
            else:
                vm.complete_load(ticket, records)
            refresh_views()

        def confirm_delete(key: Any) -> None:
            identity = row_identity(vm, key)
            if identity is None:
                return
            with ui.dialog() as dialog, ui.card():
                ui.label(f"Delete {vm.schema.label.lower()} record {identity}?")
                with ui.row():
                    ui.button("Cancel", on_click=dialog.close).props("flat")

                    async def _confirmed() -> None:
                        dialog.close()
                        await delete(identity)

                    ui.button("Delete", color="negative", on_click=_confirmed)
            dialog.open()

        async def delete(identity: Any) -> None:
            try:
                vm.begin_delete(identity)
            except UseCaseError as exc:
                _notify_error(exc)
                return
            render_table.refresh()
            try:
                await run.io_bound(vm.deleter, identity)
            except Exception as exc:
                vm.fail_delete(identity, exc)
            else:
                vm.complete_delete(identity)
            _notify_notice(vm.notice)
            vm.dismiss_notice()
            render_table.refresh()
            render_pager.refresh()

        def export_csv() -> None:
            try:
                text = vm.export_csv()
            except Exception as exc:
                _notify_error(exc)
                return
            ui.download(text.encode("utf-8"), filename=vm.export_filename())

        _install_theme()
        with ui.column().classes("td-page w-full"):
            _nav(runtime, vm.entity)
            with ui.column().classes("td-card w-full p-3 q-gutter-sm"):
                ui.label(vm.schema.label).classes("text-h5")
                render_toolbar()
                render_table()
                render_pager()
        await load()

    @ui.page("/settings")
    def settings_page() -> None:
        settings_vm = WebSettingsVM.from_settings_vm(runtime.settings_vm)

        def save_settings() -> None:
            try:
                runtime.apply_settings_payload(settings_vm.to_payload())
                runtime.save_settings()
                ui.notify("Settings saved.", color="positive")
            except Exception as exc:
                _notify_error(exc)

        def export_settings_json() -> None:
            ui.download(
                json.dumps(settings_vm.to_payload(), ensure_ascii=False, indent=2).encode("utf-8"),
                filename="tripdesk_settings.json",
            )

        def on_import_settings(event) -> None:
            try:
                text = event.content.read().decode("utf-8-sig")
                runtime.apply_settings_payload(parse_settings_json(text))
                ui.notify("Imported settings JSON.", color="positive")
            except Exception as exc:
                _notify_error(exc)
                return
            ui.navigate.reload()

        _install_theme()
        with ui.column().classes("td-page w-full"):
            _nav(runtime, None)
            with ui.column().classes("td-card w-full p-3 q-gutter-sm"):
                ui.label("Settings").classes("text-h5")
                ui.input("API base URL", value=settings_vm.api_base_url).bind_value(
                    settings_vm, "api_base_url"
                ).props("dense outlined").classes("w-96")
                ui.input("API key", value=settings_vm.api_key, password=True).bind_value(
                    settings_vm, "api_key"
                ).props("dense outlined").classes("w-96")
                with ui.row().classes("q-gutter-sm"):
                    ui.number("Request timeout (s)", value=settings_vm.request_timeout_s, min=1).bind_value(
                        settings_vm, "request_timeout_s"
                    ).props("dense outlined")
                    ui.number("Retries", value=settings_vm.retries, min=0).bind_value(
                        settings_vm, "retries"
                    ).props("dense outlined")
                    ui.number("Page size", value=settings_vm.page_size, min=1).bind_value(
                        settings_vm, "page_size"
                    ).props("dense outlined")
                ui.checkbox("Debug logging", value=settings_vm.debug_logging).bind_value(
                    settings_vm, "debug_logging"
                )
                with ui.row().classes("q-gutter-sm"):
                    ui.button("Save", on_click=save_settings, color="primary")
                    ui.button("Export JSON", on_click=export_settings_json).props("outline")
                ui.upload(on_upload=on_import_settings, auto_upload=True, label="Import settings JSON")


def _parse_args() -> argparse.Namespace:
    """Parse CLI args for web runtime startup."""
    parser = argparse.ArgumentParser(description="Run the TripDesk admin web UI.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument("--mock", action="store_true", help="Serve built-in demo records.")
    parser.add_argument("--smoke-test", action="store_true")
    return parser.parse_args()


def main() -> None:
    """CLI entrypoint for the NiceGUI runtime."""
    args = _parse_args()
    configure_root()
    runtime = AdminRuntime(use_mock=args.mock)
    if args.smoke_test:
        payload = runtime.settings_payload()
        print("web-smoke-ok", payload.get("api_base_url"), sorted(s.name for s in runtime.entities()))
        return
    _build_ui(runtime)
    ui.run(
        host=args.host,
        port=args.port,
        title="TripDesk Admin",
        reload=args.reload,
        show=False,
        storage_secret=os.environ.get("TRIPDESK_WEB_STORAGE_SECRET", "tripdesk-admin-secret"),
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
