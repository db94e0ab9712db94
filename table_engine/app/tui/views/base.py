"""Record view: title, engine table, status line and pagination footer."""
from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Static

from table_engine.core.engine import TableEngine
from table_engine.core.selection import SelectionSet

from ..widgets.pagination import PaginationBar
from ..widgets.tables import EngineTable


class RecordView(Vertical):
    """Helper view that displays one engine-driven table."""

    def __init__(
        self,
        *,
        title: str,
        engine: TableEngine[Any],
        selection_store: SelectionSet | None = None,
    ) -> None:
        super().__init__(id=f"view-{title.lower().replace(' ', '-')}")
        self._title = title
        self._table = EngineTable(engine, selection_store=selection_store)
        self._status = Static("", classes="table-status")
        self._footer = PaginationBar("", classes="table-footer")

    @property
    def table(self) -> EngineTable:
        return self._table

    @property
    def status_label(self) -> Static:
        return self._status

    @property
    def footer(self) -> PaginationBar:
        return self._footer

    def compose(self) -> ComposeResult:
        yield Static(self._title, classes="view-title")
        yield self._status
        yield self._table
        yield self._footer

    def on_mount(self) -> None:
        self._table.focus()

    def on_engine_table_rendered(self, event: EngineTable.Rendered) -> None:
        view = event.view
        self._footer.show_footer(view.footer)
        self._status.update(self.status_text(view))

    def status_text(self, view) -> str:
        selected = ""
        selection = self._table.engine.selection_config
        if selection is not None and selection.selected_ids:
            selected = f"  |  {len(selection.selected_ids)} selected"
        return f"{view.status.status.value}{selected}  |  {self._table.page_info()}"

    async def handle_refresh(self) -> None:
        await self._table.refresh_data()


__all__ = ["RecordView"]
