"""DataTable widget driven by a :class:`TableEngine`."""
from __future__ import annotations

from typing import Any, Sequence

from textual.binding import Binding
from textual.message import Message
from textual.widgets import DataTable

from table_engine.core.engine import TableEngine, TableView
from table_engine.core.render import RenderedRow
from table_engine.core.selection import SelectionSet
from table_engine.core.status import TableStatus
from table_engine.reports.tables import SKELETON_CELL, format_cell

from .toasts import show_toast


class EngineTable(DataTable):
    """DataTable that renders engine snapshots and feeds page events back."""

    BINDINGS = [
        Binding("n", "next_page", "Next page"),
        Binding("p", "previous_page", "Previous page"),
        Binding("s", "cycle_page_size", "Page size"),
        Binding("space", "toggle_select", "Select"),
        Binding("a", "select_all", "Select all"),
        Binding("r", "retry", "Retry"),
    ]

    class Rendered(Message):
        """Posted after every redraw so siblings can follow the snapshot."""

        def __init__(self, view: TableView) -> None:
            super().__init__()
            self.view = view

    def __init__(
        self,
        engine: TableEngine[Any],
        *,
        selection_store: SelectionSet | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(zebra_stripes=True, **kwargs)
        self.engine = engine
        self.selection_store = selection_store
        self.current_view: TableView | None = None
        self._last_error_kind = None
        self._duplicate_keys_reported = False

    # ------------------------------------------------------------------
    def on_mount(self) -> None:
        self.cursor_type = "row"
        self._sync_selection()
        self.engine.mount()
        self.reload()
        self._follow_fetch()

    def on_unmount(self) -> None:
        self.engine.unmount()

    # ------------------------------------------------------------------
    def reload(self) -> TableView:
        view = self.engine.snapshot()
        self.current_view = view
        self.clear(columns=True)
        for index, header in enumerate(view.headers):
            width = header.width if isinstance(header.width, int) else None
            self.add_column(format_cell(header.content), key=f"col-{index}", width=width)

        status = view.status
        if status.status is TableStatus.POPULATED:
            self._warn_duplicate_keys(view.rows)
            for row in view.rows:
                self.add_row(*(format_cell(cell.content) for cell in row.cells), key=f"row-{row.index}")
        elif status.status is TableStatus.LOADING:
            for index, skeleton in enumerate(view.skeleton):
                self.add_row(*(SKELETON_CELL for _ in skeleton), key=f"skeleton-{index}")
        elif view.colspan:
            cells = [""] * view.colspan
            cells[0] = status.title or ""
            if view.colspan > 1:
                cells[1] = status.description or ""
            self.add_row(*cells, key=f"status-{status.status.value}")

        if status.status is TableStatus.ERROR and status.error_kind != self._last_error_kind:
            show_toast(self.app, status.description or "Failed to load", severity="error")
        self._last_error_kind = status.error_kind
        self.post_message(self.Rendered(view))
        return view

    def _follow_fetch(self) -> None:
        if self.engine.is_managed_fetch:
            self.run_worker(self._settle_and_reload(), exclusive=True, group="engine-fetch")

    async def _settle_and_reload(self) -> None:
        await self.engine.settle()
        self._sync_selection()
        self.reload()

    def _warn_duplicate_keys(self, rows: Sequence[RenderedRow]) -> None:
        keys = [row.key for row in rows]
        if len(set(keys)) == len(keys) or self._duplicate_keys_reported:
            return
        self._duplicate_keys_reported = True
        show_toast(
            self.app,
            "Several rows share the same key; selecting one selects them all",
            severity="warning",
        )

    def _sync_selection(self) -> None:
        if self.selection_store is None:
            return
        visible = [
            self.engine.get_row_key(item, index)
            for index, item in enumerate(self.engine.display_rows)
        ]
        self.engine.update(selection_config=self.selection_store.to_config(visible))

    # ------------------------------------------------------------------
    def get_selected_row(self) -> RenderedRow | None:
        if self.current_view is None or self.current_view.status.status is not TableStatus.POPULATED:
            return None
        index = self.cursor_row
        if index is None or not 0 <= index < len(self.current_view.rows):
            return None
        return self.current_view.rows[index]

    def page_info(self) -> str:
        if self.current_view is None or self.current_view.footer is None:
            return ""
        footer = self.current_view.footer
        start = (footer.page - 1) * footer.page_size + 1
        end = start + footer.showing_count - 1
        return f"{start}-{end} of {footer.total}"

    def _after_page_event(self) -> None:
        self._sync_selection()
        self.reload()
        self._follow_fetch()

    # ------------------------------------------------------------------
    def action_next_page(self) -> None:
        footer = self.current_view.footer if self.current_view else None
        if footer is None or not footer.has_next:
            return
        self.engine.change_page(footer.page + 1)
        self._after_page_event()

    def action_previous_page(self) -> None:
        footer = self.current_view.footer if self.current_view else None
        if footer is None or not footer.has_previous:
            return
        self.engine.change_page(footer.page - 1)
        self._after_page_event()

    def action_cycle_page_size(self) -> None:
        footer = self.current_view.footer if self.current_view else None
        if footer is None or not footer.page_size_options:
            return
        options = list(footer.page_size_options)
        position = options.index(footer.page_size) + 1 if footer.page_size in options else 0
        self.engine.change_page_size(options[position % len(options)])
        self._after_page_event()

    def action_toggle_select(self) -> None:
        row = self.get_selected_row()
        if row is None or self.engine.selection_config is None:
            return
        self.engine.toggle_select(row.key)
        self._sync_selection()
        cursor = self.cursor_row
        self.reload()
        self.move_cursor(row=cursor)

    def action_select_all(self) -> None:
        if self.engine.selection_config is None:
            return
        self.engine.select_all()
        self._sync_selection()
        self.reload()

    async def refresh_data(self) -> None:
        """Refetch the current page (managed fetch) or redraw supplied rows."""

        await self.engine.refresh()
        self._sync_selection()
        self.reload()

    async def action_retry(self) -> None:
        if self.current_view is None or self.current_view.status.status is not TableStatus.ERROR:
            return
        self._last_error_kind = None
        await self.engine.retry()
        self._sync_selection()
        self.reload()


__all__ = ["EngineTable"]
