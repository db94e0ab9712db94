"""Textual application that browses one engine-driven table."""
from __future__ import annotations

import logging
from typing import Any

from textual.app import App, ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Footer, Header, Static

from table_engine.core.engine import TableEngine
from table_engine.core.selection import SelectionSet

from .views import RecordView

_UI_LOGGER = logging.getLogger("ui")


class HelpModal(ModalScreen[None]):
    """Simple overlay listing key bindings."""

    BINDINGS = [("escape", "dismiss", "Close")]

    def compose(self) -> ComposeResult:
        text = (
            "[b]Record Browser - Key Bindings[/b]\n"
            "F1 Help  |  Q Quit  |  F5 Refresh\n"
            "N Next page  |  P Previous page  |  S Page size\n"
            "Space Select row  |  A Select all  |  R Retry"
        )
        yield Container(Static(text, id="help-text"), id="help-container")


class RecordBrowserApp(App[None]):
    CSS = ""
    BINDINGS = [
        ("f1", "help", "Help"),
        ("q", "quit", "Quit"),
        ("f5", "refresh", "Refresh"),
    ]

    def __init__(
        self,
        engine: TableEngine[Any],
        *,
        title: str = "Records",
        selection_store: SelectionSet | None = None,
    ) -> None:
        super().__init__()
        self.engine = engine
        self.record_view = RecordView(title=title, engine=engine, selection_store=selection_store)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield self.record_view
        yield Footer()

    def on_mount(self) -> None:
        _UI_LOGGER.info("Record browser started in %s mode", self.engine.mode.value)

    async def action_refresh(self) -> None:
        await self.record_view.handle_refresh()

    def action_help(self) -> None:
        self.push_screen(HelpModal())

    def action_quit(self) -> None:
        self.exit()


__all__ = ["HelpModal", "RecordBrowserApp"]
