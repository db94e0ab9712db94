"""Footer widget showing page buttons and totals."""
from __future__ import annotations

from textual.widgets import Static

from table_engine.core.footer import FooterModel
from table_engine.reports.tables import footer_text


class PaginationBar(Static):
    DEFAULT_CSS = """
    PaginationBar {
        height: 1;
        padding: 0 1;
    }
    """

    def show_footer(self, footer: FooterModel | None) -> None:
        if footer is None:
            self.update("")
            self.display = False
            return
        self.display = True
        self.update(footer_text(footer))


__all__ = ["PaginationBar"]
