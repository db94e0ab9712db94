"""Map rows and columns into cell content."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from .columns import Align, Column
from .selection import RowId, RowKeyFn, SelectionManager

DEFAULT_LOADER_ROWS = 6


@dataclass(frozen=True, slots=True)
class RenderedCell:
    content: Any
    align: Align = Align.LEFT
    width: int | str | None = None


@dataclass(frozen=True, slots=True)
class RenderedRow:
    key: RowId
    index: int
    item: Any
    cells: tuple[RenderedCell, ...]
    selected: bool = False


def render_headers(columns: Sequence[Column[Any]]) -> list[RenderedCell]:
    return [RenderedCell(col.header, col.align, col.width) for col in columns]


def render_rows(
    rows: Sequence[Any],
    columns: Sequence[Column[Any]],
    get_row_key: RowKeyFn,
    selection: SelectionManager | None = None,
) -> list[RenderedRow]:
    """Render visible ``rows``; ``columns`` already includes any selection column."""

    rendered: list[RenderedRow] = []
    for index, item in enumerate(rows):
        key = get_row_key(item, index)
        cells = tuple(
            RenderedCell(col.cell(item, index), col.align, col.width) for col in columns
        )
        rendered.append(
            RenderedRow(
                key=key,
                index=index,
                item=item,
                cells=cells,
                selected=selection.is_selected(key) if selection else False,
            )
        )
    return rendered


def skeleton_rows(columns: Sequence[Column[Any]], count: int = DEFAULT_LOADER_ROWS) -> list[tuple[RenderedCell, ...]]:
    """Placeholder rows shown while the first page is loading."""

    return [
        tuple(RenderedCell(None, col.align, col.width) for col in columns)
        for _ in range(max(count, 0))
    ]


__all__ = [
    "DEFAULT_LOADER_ROWS",
    "RenderedCell",
    "RenderedRow",
    "render_headers",
    "render_rows",
    "skeleton_rows",
]
