"""Column descriptors for the tabular engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Mapping, TypeVar

T = TypeVar("T")

CellRenderer = Callable[[Any, int], Any]
Accessor = Callable[[Any], Any]


class Align(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


def field_accessor(key: str) -> Accessor:
    """Return a reader for ``key`` that works on mappings and plain objects."""

    def read(row: Any) -> Any:
        if isinstance(row, Mapping):
            return row.get(key)
        return getattr(row, key, None)

    return read


@dataclass
class Column(Generic[T]):
    """Declarative metadata for one table column.

    A column either supplies ``render`` (called with ``(row, index)``) or names
    a ``key`` that is read from every row.
    """

    header: Any
    key: str | None = None
    render: CellRenderer | None = None
    align: Align = Align.LEFT
    width: int | str | None = None
    accessor: Accessor | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.render is None and not self.key:
            raise ValueError(f"Column {self.header!r} needs either a key or a render callback")
        self.align = Align(self.align)
        if self.key:
            self.accessor = field_accessor(self.key)

    def cell(self, row: T, index: int) -> Any:
        if self.render is not None:
            return self.render(row, index)
        return self.accessor(row)


__all__ = ["Align", "Column", "CellRenderer", "field_accessor"]
