from __future__ import annotations

import asyncio

import pytest

from table_engine.core.engine import TableEngine
from table_engine.core.errors import ErrorKind, NetworkError
from table_engine.core.fetch import FetchConfig, FetchResult
from table_engine.core.footer import ELLIPSIS
from table_engine.core.pagination import PaginationConfig, PaginationMode
from table_engine.core.selection import SelectionConfig
from table_engine.core.status import TableStatus


def _managed_engine(columns, get_row_key, fetcher, **kwargs):
    return TableEngine(
        columns=columns,
        get_row_key=get_row_key,
        fetch_config=FetchConfig(fetch=fetcher, **kwargs.pop("fetch_kwargs", {})),
        pagination_config=kwargs.pop("pagination_config", PaginationConfig()),
        **kwargs,
    )


def test_scenario_a_managed_fetch_first_page(columns, get_row_key, fetcher_cls, records):
    fetcher = fetcher_cls(records[:5], total=37)
    seen = []
    engine = _managed_engine(
        columns, get_row_key, fetcher, on_data_change=lambda data, total: seen.append(total)
    )

    async def scenario():
        engine.mount()
        assert engine.snapshot().status.status is TableStatus.LOADING
        await engine.settle()
        return engine.snapshot()

    view = asyncio.run(scenario())
    assert fetcher.calls == [{"page": 1, "pageSize": 10}]
    assert view.mode is PaginationMode.SERVER_DELEGATED
    assert view.status.status is TableStatus.POPULATED
    assert len(view.rows) == 5
    assert view.footer is not None
    assert view.footer.items == (1, 2, 3, 4)
    assert view.footer.total == 37
    assert seen == [37]
    assert view.first_load_complete is True


def test_scenario_b_error_replaces_rows_and_retry_repeats_request(columns, get_row_key, fetcher):
    engine = _managed_engine(columns, get_row_key, fetcher)

    async def scenario():
        engine.mount()
        await engine.settle()
        engine.change_page(2)
        await engine.settle()
        fetcher.fail_with = NetworkError("connection refused")
        engine.update(fetch_config=FetchConfig(fetch=fetcher, refresh_key=1))
        await engine.settle()
        failed = engine.snapshot()
        fetcher.fail_with = None
        await failed.status.retry()
        return failed, engine.snapshot()

    failed, recovered = asyncio.run(scenario())
    assert failed.status.status is TableStatus.ERROR
    assert failed.status.error_kind is ErrorKind.NETWORK
    assert failed.status.retry is not None
    assert failed.rows == ()
    assert len(engine.state.data) == 10
    assert fetcher.calls[-1] == fetcher.calls[-2] == {"page": 2, "pageSize": 10}
    assert recovered.status.status is TableStatus.POPULATED


def test_scenario_c_select_all_relays_once(columns, get_row_key, records):
    select_all_calls = []
    toggles = []
    selection = SelectionConfig(
        selected_ids=[1, 2, 3],
        on_select_all=lambda: select_all_calls.append(True),
        on_toggle_select=toggles.append,
        all_selected=False,
    )
    engine = TableEngine(
        columns=columns,
        get_row_key=get_row_key,
        data=records[:10],
        selection_config=selection,
    )
    view = engine.snapshot()
    assert str(view.headers[0].content) == "[ ]"
    assert [row.selected for row in view.rows][:4] == [True, True, True, False]
    assert view.colspan == len(columns) + 1

    engine.select_all()
    assert select_all_calls == [True]
    assert toggles == []

    engine.toggle_select(7)
    assert toggles == [7]


def test_client_slice_pages_in_memory(columns, get_row_key, records):
    engine = TableEngine(
        columns=columns,
        get_row_key=get_row_key,
        data=records,
        pagination_config=PaginationConfig(page_size=10),
    )
    assert engine.mode is PaginationMode.CLIENT_SLICE
    engine.change_page(3)
    view = engine.snapshot()
    assert [row.key for row in view.rows] == [21, 22, 23, 24, 25]
    assert view.footer.showing_count == 5
    assert view.footer.total == 25
    assert engine.snapshot().rows == view.rows


def test_page_size_change_resets_page_client_slice(columns, get_row_key, records):
    engine = TableEngine(
        columns=columns,
        get_row_key=get_row_key,
        data=records,
        pagination_config=PaginationConfig(page_size=5),
    )
    engine.change_page(4)
    engine.change_page_size(20)
    assert engine.window().page == 1
    assert engine.window().page_size == 20


def test_page_size_change_resets_page_managed(columns, get_row_key, fetcher):
    engine = _managed_engine(columns, get_row_key, fetcher)

    async def scenario():
        engine.mount()
        engine.change_page(3)
        engine.change_page_size(20)
        await engine.settle()

    asyncio.run(scenario())
    assert engine.window().page == 1
    assert fetcher.calls[-1] == {"page": 1, "pageSize": 20}
    assert engine.state.data[0]["id"] == 1


def test_server_mode_with_external_data_delegates_to_callbacks(columns, get_row_key, records):
    pages, sizes = [], []
    engine = TableEngine(
        columns=columns,
        get_row_key=get_row_key,
        data=records[:10],
        pagination_config=PaginationConfig(
            current_page=2,
            page_size=10,
            total_items=95,
            on_page_change=pages.append,
            on_page_size_change=sizes.append,
        ),
    )
    assert engine.mode is PaginationMode.SERVER_DELEGATED
    engine.change_page(3)
    engine.change_page_size(50)
    assert pages == [3]
    assert sizes == [50]
    view = engine.snapshot()
    assert len(view.rows) == 10
    assert view.footer.page == 2
    assert view.footer.total_pages == 10
    assert engine.state.page == 2


def test_explicit_client_mode_ignores_page_callback(columns, get_row_key, records):
    pages = []
    engine = TableEngine(
        columns=columns,
        get_row_key=get_row_key,
        data=records,
        pagination_config=PaginationConfig(mode="client", on_page_change=pages.append),
    )
    engine.change_page(2)
    assert pages == []
    assert engine.display_rows[0]["id"] == 11


def test_pagination_off_shows_everything(columns, get_row_key, records):
    engine = TableEngine(columns=columns, get_row_key=get_row_key, data=records)
    view = engine.snapshot()
    assert view.mode is PaginationMode.OFF
    assert len(view.rows) == 25
    assert view.footer is None


def test_status_precedence_with_external_flags(columns, get_row_key):
    engine = TableEngine(columns=columns, get_row_key=get_row_key, data=[], has_error=True)
    assert engine.snapshot().status.status is TableStatus.ERROR
    engine.update(loading=True)
    view = engine.snapshot()
    assert view.status.status is TableStatus.LOADING
    assert len(view.skeleton) == 6
    assert all(len(row) == len(columns) for row in view.skeleton)
    engine.update(loading=False, has_error=False)
    assert engine.snapshot().status.status is TableStatus.EMPTY


def test_external_error_kind_and_retry_win(columns, get_row_key, records):
    retried = []
    engine = TableEngine(
        columns=columns,
        get_row_key=get_row_key,
        data=records,
        has_error=True,
        error_kind="api",
        on_retry=lambda: retried.append(True),
    )
    status = engine.snapshot().status
    assert status.error_kind is ErrorKind.API
    asyncio.run(engine.retry())
    assert retried == [True]


def test_refresh_key_change_refetches_and_equal_params_do_not(columns, get_row_key, fetcher):
    engine = _managed_engine(
        columns, get_row_key, fetcher, fetch_kwargs={"extra_params": {"q": "a"}, "refresh_key": 0}
    )

    async def scenario():
        engine.mount()
        await engine.settle()
        engine.update(fetch_config=FetchConfig(fetch=fetcher, extra_params={"q": "a"}, refresh_key=0))
        await engine.settle()
        engine.update(fetch_config=FetchConfig(fetch=fetcher, extra_params={"q": "a"}, refresh_key=1))
        await engine.settle()
        engine.update(fetch_config=FetchConfig(fetch=fetcher, extra_params={"q": "b"}, refresh_key=1))
        await engine.settle()

    asyncio.run(scenario())
    assert [call.get("q") for call in fetcher.calls] == ["a", "a", "b"]


def test_manual_fetch_lifecycle(columns, get_row_key, fetcher):
    engine = _managed_engine(columns, get_row_key, fetcher, fetch_kwargs={"auto_fetch": False})

    async def scenario():
        engine.mount()
        engine.change_page(2)
        await engine.settle()
        assert fetcher.calls == []
        await engine.refresh()

    asyncio.run(scenario())
    assert fetcher.calls == [{"page": 2, "pageSize": 10}]


def test_caller_page_props_sync_into_state(columns, get_row_key, records):
    engine = TableEngine(
        columns=columns,
        get_row_key=get_row_key,
        data=records,
        pagination_config=PaginationConfig(current_page=2, page_size=5),
    )
    assert engine.window().page == 2
    engine.change_page(4)
    engine.update(pagination_config=PaginationConfig(current_page=2, page_size=5))
    assert engine.window().page == 4
    engine.update(pagination_config=PaginationConfig(current_page=1, page_size=5))
    assert engine.window().page == 1


def test_unmount_ignores_late_results(columns, get_row_key, fetcher):
    engine = _managed_engine(columns, get_row_key, fetcher)

    async def scenario():
        engine.mount()
        engine.unmount()
        await engine.settle()

    asyncio.run(scenario())
    assert engine.state.data == []


def test_row_click_relays_item_and_index(columns, get_row_key, records):
    clicks = []
    engine = TableEngine(
        columns=columns,
        get_row_key=get_row_key,
        data=records,
        pagination_config=PaginationConfig(page_size=10),
        on_row_click=lambda item, index: clicks.append((item["id"], index)),
    )
    engine.change_page(2)
    engine.click_row(0)
    assert clicks == [(11, 0)]


def test_invalid_page_and_unknown_props(columns, get_row_key):
    engine = TableEngine(columns=columns, get_row_key=get_row_key)
    with pytest.raises(ValueError):
        engine.change_page(0)
    with pytest.raises(TypeError):
        engine.update(colour="red")


def test_engines_do_not_share_state(columns, get_row_key, records):
    first = TableEngine(
        columns=columns, get_row_key=get_row_key, data=records, pagination_config=PaginationConfig()
    )
    second = TableEngine(
        columns=columns, get_row_key=get_row_key, data=records, pagination_config=PaginationConfig()
    )
    first.change_page(3)
    assert second.window().page == 1


def test_footer_collapses_for_many_pages(columns, get_row_key, records):
    engine = TableEngine(
        columns=columns,
        get_row_key=get_row_key,
        data=records,
        pagination_config=PaginationConfig(mode="server", current_page=5, total_items=100),
    )
    assert engine.snapshot().footer.items == (1, ELLIPSIS, 3, 4, 5, 6, 7, ELLIPSIS, 10)


def test_page_change_discards_response_already_resolved(columns, get_row_key):
    seen = []
    pending = []

    async def fetch(params):
        future = asyncio.get_running_loop().create_future()
        pending.append((params, future))
        return await future

    engine = TableEngine(
        columns=columns,
        get_row_key=get_row_key,
        fetch_config=FetchConfig(fetch=fetch),
        pagination_config=PaginationConfig(),
        on_data_change=lambda data, total: seen.append(data[0]["id"]),
    )

    async def scenario():
        engine.mount()
        await asyncio.sleep(0)
        pending[0][1].set_result(FetchResult([{"id": "page-1"}], 20))
        engine.change_page(2)
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        pending[1][1].set_result(FetchResult([{"id": "page-2"}], 20))
        await engine.settle()

    asyncio.run(scenario())
    assert [params["page"] for params, _ in pending] == [1, 2]
    assert engine.state.data == [{"id": "page-2"}]
    assert seen == ["page-2"]
