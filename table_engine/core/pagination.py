"""Pagination mode resolution and page window derivation."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
DEFAULT_PAGE_SIZE_OPTIONS = (10, 20, 50, 100)


class PaginationMode(str, Enum):
    OFF = "off"
    CLIENT_SLICE = "client"
    SERVER_DELEGATED = "server"


@dataclass
class PaginationConfig:
    enabled: bool = True
    page_size: int | None = None
    current_page: int | None = None
    total_items: int | None = None
    on_page_change: Callable[[int], None] | None = None
    on_page_size_change: Callable[[int], None] | None = None
    mode: PaginationMode | None = None
    show_page_size_changer: bool = False
    page_size_options: Sequence[int] = DEFAULT_PAGE_SIZE_OPTIONS

    def __post_init__(self) -> None:
        if self.mode is not None:
            self.mode = PaginationMode(self.mode)
            if self.mode is PaginationMode.OFF:
                raise ValueError("mode must be 'client' or 'server'")
        for name in ("page_size", "current_page"):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, int) or value < 1):
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        if self.total_items is not None and self.total_items < 0:
            raise ValueError(f"total_items must be >= 0, got {self.total_items!r}")
        self.page_size_options = tuple(self.page_size_options)


@dataclass(frozen=True, slots=True)
class PageWindow:
    page: int
    page_size: int
    total: int

    @property
    def start(self) -> int:
        return (self.page - 1) * self.page_size


def resolve_mode(is_managed_fetch: bool, config: PaginationConfig | None) -> PaginationMode:
    """Decide where page boundaries are enforced.

    Evaluated from scratch on every call; first match wins:

    1. a managed fetch always paginates at the source;
    2. no config, or a disabled one, means no pagination;
    3. an explicit ``mode`` is honoured literally;
    4. an ``on_page_change`` callback means the caller refetches itself;
    5. otherwise rows are sliced in memory.
    """

    if is_managed_fetch:
        return PaginationMode.SERVER_DELEGATED
    if config is None or not config.enabled:
        return PaginationMode.OFF
    if config.mode is not None:
        return config.mode
    if config.on_page_change is not None:
        return PaginationMode.SERVER_DELEGATED
    return PaginationMode.CLIENT_SLICE


def resolve_window(
    mode: PaginationMode,
    *,
    is_managed_fetch: bool,
    config: PaginationConfig | None,
    internal_page: int,
    internal_page_size: int,
    internal_total: int,
    row_count: int,
) -> PageWindow:
    """Derive the effective ``(page, page_size, total)`` for ``mode``."""

    if mode is PaginationMode.SERVER_DELEGATED:
        if is_managed_fetch or config is None:
            return PageWindow(internal_page, internal_page_size, internal_total)
        return PageWindow(
            config.current_page or 1,
            config.page_size or DEFAULT_PAGE_SIZE,
            config.total_items or 0,
        )
    return PageWindow(internal_page, internal_page_size, row_count)


def slice_rows(rows: Sequence[T], window: PageWindow) -> list[T]:
    start = window.start
    return list(rows[start : start + window.page_size])


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_PAGE_SIZE_OPTIONS",
    "PageWindow",
    "PaginationConfig",
    "PaginationMode",
    "resolve_mode",
    "resolve_window",
    "slice_rows",
]
