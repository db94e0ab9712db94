"""Presentation model for the pagination footer."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Union

from .pagination import DEFAULT_PAGE_SIZE_OPTIONS, PageWindow

COLLAPSE_THRESHOLD = 7
CONTEXT_PAGES = 2


class _Ellipsis:
    __slots__ = ()

    def __repr__(self) -> str:
        return "ELLIPSIS"

    def __str__(self) -> str:
        return "..."


ELLIPSIS = _Ellipsis()

PageItem = Union[int, _Ellipsis]


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if page_size > 0 else 0


def page_items(current: int, pages: int) -> list[PageItem]:
    """Return the page buttons to show, collapsing distant pages into ``ELLIPSIS``.

    Up to ``COLLAPSE_THRESHOLD`` pages are always listed in full. Beyond that,
    the first and last pages stay visible along with ``CONTEXT_PAGES`` pages on
    either side of ``current``; the gap markers sit on page 2 and on the page
    before last.
    """

    items: list[PageItem] = []
    for number in range(1, pages + 1):
        if (
            pages > COLLAPSE_THRESHOLD
            and number not in (1, pages)
            and abs(number - current) > CONTEXT_PAGES
        ):
            if number in (2, pages - 1):
                items.append(ELLIPSIS)
            continue
        items.append(number)
    return items


@dataclass(frozen=True, slots=True)
class FooterModel:
    page: int
    page_size: int
    total: int
    total_pages: int
    items: tuple[PageItem, ...]
    showing_count: int
    show_page_size_changer: bool = False
    page_size_options: tuple[int, ...] = DEFAULT_PAGE_SIZE_OPTIONS

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def build_footer(
    window: PageWindow,
    *,
    show_page_size_changer: bool = False,
    page_size_options: Sequence[int] = DEFAULT_PAGE_SIZE_OPTIONS,
) -> FooterModel | None:
    """Return the footer for ``window`` or ``None`` when there is nothing to page."""

    pages = total_pages(window.total, window.page_size)
    if pages <= 0:
        return None
    showing = min(window.page_size, window.total - (window.page - 1) * window.page_size)
    return FooterModel(
        page=window.page,
        page_size=window.page_size,
        total=window.total,
        total_pages=pages,
        items=tuple(page_items(window.page, pages)),
        showing_count=max(showing, 0),
        show_page_size_changer=show_page_size_changer,
        page_size_options=tuple(page_size_options),
    )


__all__ = ["ELLIPSIS", "FooterModel", "PageItem", "build_footer", "page_items", "total_pages"]
