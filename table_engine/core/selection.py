"""Row selection: relaying caller callbacks and the synthetic selection column."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Iterable, Sequence

from .columns import Align, Column

RowId = Hashable
RowKeyFn = Callable[[Any, int], RowId]

SELECTED_MARK = "[x]"
UNSELECTED_MARK = "[ ]"


@dataclass
class SelectionConfig:
    """Caller-owned selection: the engine only renders and relays."""

    selected_ids: Sequence[RowId] = field(default_factory=list)
    on_select_all: Callable[[], None] = lambda: None
    on_toggle_select: Callable[[RowId], None] = lambda _id: None
    all_selected: bool = False

    def __post_init__(self) -> None:
        ids = list(self.selected_ids)
        if len(set(ids)) != len(ids):
            raise ValueError("selected_ids must not contain duplicates")
        self.selected_ids = ids


@dataclass(frozen=True, slots=True)
class SelectionIndicator:
    """Content of a selection cell or of the select-all header."""

    row_id: RowId | None
    selected: bool

    def __str__(self) -> str:
        return SELECTED_MARK if self.selected else UNSELECTED_MARK


class SelectionManager:
    def __init__(self, config: SelectionConfig, get_row_key: RowKeyFn) -> None:
        self.config = config
        self._get_row_key = get_row_key
        self._members = frozenset(config.selected_ids)

    def is_selected(self, row_id: RowId) -> bool:
        return row_id in self._members

    def toggle(self, row_id: RowId) -> None:
        self.config.on_toggle_select(row_id)

    def select_all(self) -> None:
        """Relay the select-all header click; the caller decides select vs clear."""

        self.config.on_select_all()

    def header(self) -> SelectionIndicator:
        return SelectionIndicator(row_id=None, selected=self.config.all_selected)

    def column(self) -> Column[Any]:
        def render(item: Any, index: int) -> SelectionIndicator:
            row_id = self._get_row_key(item, index)
            return SelectionIndicator(row_id=row_id, selected=self.is_selected(row_id))

        return Column(header=self.header(), render=render, align=Align.CENTER, width=5)


class SelectionSet:
    """Ordered, duplicate-free selection store for callers that keep selection locally."""

    def __init__(self, ids: Iterable[RowId] = ()) -> None:
        self._ids: dict[RowId, None] = dict.fromkeys(ids)

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def ids(self) -> list[RowId]:
        return list(self._ids)

    def toggle(self, row_id: RowId) -> None:
        if row_id in self._ids:
            del self._ids[row_id]
        else:
            self._ids[row_id] = None

    def select_all(self, ids: Iterable[RowId]) -> None:
        for row_id in ids:
            self._ids.setdefault(row_id, None)

    def clear_all(self) -> None:
        self._ids.clear()

    def all_selected(self, ids: Iterable[RowId]) -> bool:
        visible = list(ids)
        return bool(visible) and all(row_id in self._ids for row_id in visible)

    def to_config(self, visible_ids: Sequence[RowId]) -> SelectionConfig:
        """Build a :class:`SelectionConfig` whose callbacks mutate this set."""

        visible = list(visible_ids)

        def on_select_all() -> None:
            if self.all_selected(visible):
                self.clear_all()
            else:
                self.select_all(visible)

        return SelectionConfig(
            selected_ids=self.ids,
            on_select_all=on_select_all,
            on_toggle_select=self.toggle,
            all_selected=self.all_selected(visible),
        )


__all__ = [
    "RowId",
    "RowKeyFn",
    "SelectionConfig",
    "SelectionIndicator",
    "SelectionManager",
    "SelectionSet",
]
