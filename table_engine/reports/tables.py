from __future__ import annotations

from decimal import Decimal
from typing import Any

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from table_engine.core.columns import Align
from table_engine.core.engine import TableView
from table_engine.core.footer import FooterModel
from table_engine.core.status import TableStatus

SKELETON_CELL = "░░░░░░"


def format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float | Decimal):
        return f"{value:,.2f}"
    return str(value)


def _justify(align: Align) -> str:
    return {Align.CENTER: "center", Align.RIGHT: "right"}.get(align, "left")


def view_table(view: TableView, *, title: str | None = None) -> Table:
    table = Table(title=title)
    for header in view.headers:
        width = header.width if isinstance(header.width, int) else None
        table.add_column(format_cell(header.content), justify=_justify(header.align), width=width)

    status = view.status
    if status.status is TableStatus.POPULATED:
        for row in view.rows:
            table.add_row(
                *(format_cell(cell.content) for cell in row.cells),
                style="bold" if row.selected else None,
            )
    elif status.status is TableStatus.LOADING:
        for skeleton in view.skeleton:
            table.add_row(*(SKELETON_CELL for _ in skeleton), style="dim")
    return table


def status_panel(view: TableView) -> Panel | None:
    status = view.status
    if status.status is TableStatus.ERROR:
        body = Text(status.description or "")
        if status.retry is not None:
            body.append(f"\n\n[{status.action_label}]", style="bold red")
        return Panel(body, title=status.title, border_style="red")
    if status.status is TableStatus.EMPTY:
        return Panel(Text(status.description or "", style="italic"), title=status.title)
    return None


def footer_text(footer: FooterModel) -> Text:
    text = Text(f"Showing {footer.showing_count} of {footer.total}  ")
    text.append("‹ ", style="dim" if not footer.has_previous else "")
    for item in footer.items:
        if item == footer.page:
            text.append(f"[{item}]", style="bold reverse")
        else:
            text.append(f" {item} ")
    text.append(" ›", style="dim" if not footer.has_next else "")
    if footer.show_page_size_changer:
        sizes = " ".join(
            f"[{size}]" if size == footer.page_size else str(size)
            for size in footer.page_size_options
        )
        text.append(f"   per page: {sizes}")
    return text


def render_view(view: TableView, *, title: str | None = None) -> Group:
    parts: list[Any] = [view_table(view, title=title)]
    panel = status_panel(view)
    if panel is not None:
        parts.append(panel)
    if view.footer is not None:
        parts.append(footer_text(view.footer))
    return Group(*parts)


__all__ = ["format_cell", "footer_text", "render_view", "status_panel", "view_table"]
