from __future__ import annotations

from table_engine.core.footer import ELLIPSIS, build_footer, page_items, total_pages
from table_engine.core.pagination import PageWindow


def test_ellipsis_collapses_distant_pages():
    assert page_items(5, 10) == [1, ELLIPSIS, 3, 4, 5, 6, 7, ELLIPSIS, 10]


def test_no_collapse_up_to_seven_pages():
    assert page_items(1, 7) == [1, 2, 3, 4, 5, 6, 7]


def test_collapse_at_the_edges():
    assert page_items(1, 10) == [1, 2, 3, ELLIPSIS, 10]
    assert page_items(10, 10) == [1, ELLIPSIS, 8, 9, 10]


def test_total_pages_rounds_up():
    assert total_pages(37, 10) == 4
    assert total_pages(40, 10) == 4
    assert total_pages(0, 10) == 0


def test_footer_hidden_without_rows():
    assert build_footer(PageWindow(1, 10, 0)) is None


def test_footer_for_partial_last_page():
    footer = build_footer(PageWindow(4, 10, 37), show_page_size_changer=True)
    assert footer is not None
    assert footer.total_pages == 4
    assert footer.items == (1, 2, 3, 4)
    assert footer.showing_count == 7
    assert footer.has_previous
    assert not footer.has_next
    assert footer.page_size_options == (10, 20, 50, 100)
    assert str(ELLIPSIS) == "..."
