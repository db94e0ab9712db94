"""The tabular engine: wires resolution, fetching, selection, status and rendering."""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Sequence, TypeVar

from .columns import Column
from .errors import ErrorKind
from .fetch import DataObserver, FetchConfig, FetchOrchestrator
from .footer import FooterModel, build_footer
from .pagination import (
    DEFAULT_PAGE_SIZE,
    PageWindow,
    PaginationConfig,
    PaginationMode,
    resolve_mode,
    resolve_window,
    slice_rows,
)
from .render import (
    DEFAULT_LOADER_ROWS,
    RenderedCell,
    RenderedRow,
    render_headers,
    render_rows,
    skeleton_rows,
)
from .selection import RowId, RowKeyFn, SelectionConfig, SelectionManager
from .state import EngineState
from .status import PanelConfig, StatusView, TableStatus, resolve_status

T = TypeVar("T")

LOGGER = logging.getLogger(__name__)

_PROPS = frozenset(
    {
        "columns",
        "get_row_key",
        "data",
        "fetch_config",
        "loading",
        "has_error",
        "error_kind",
        "on_retry",
        "on_data_change",
        "selection_config",
        "pagination_config",
        "empty_config",
        "error_config",
        "on_row_click",
        "loader_rows",
    }
)


@dataclass(frozen=True, slots=True)
class TableView:
    """Everything a frontend needs to draw one frame of the table."""

    mode: PaginationMode
    window: PageWindow
    status: StatusView
    headers: tuple[RenderedCell, ...]
    rows: tuple[RenderedRow, ...]
    skeleton: tuple[tuple[RenderedCell, ...], ...]
    colspan: int
    footer: FooterModel | None
    selection_enabled: bool = False
    first_load_complete: bool = False


class TableEngine(Generic[T]):
    """Turn records, supplied or fetched, into a paginated, selectable view.

    Props are plain attributes and may be changed together through
    :meth:`update`, which re-evaluates the fetch trigger. Managed fetches are
    scheduled on the running asyncio loop, so :meth:`mount`, :meth:`update`
    and the page handlers must be called from inside it when a fetch config
    with ``auto_fetch`` is in use.
    """

    def __init__(
        self,
        *,
        columns: Sequence[Column[T]],
        get_row_key: RowKeyFn,
        data: Sequence[T] = (),
        fetch_config: FetchConfig | None = None,
        loading: bool = False,
        has_error: bool = False,
        error_kind: ErrorKind = ErrorKind.GENERIC,
        on_retry: Callable[[], Any] | None = None,
        on_data_change: DataObserver | None = None,
        selection_config: SelectionConfig | None = None,
        pagination_config: PaginationConfig | None = None,
        empty_config: PanelConfig | None = None,
        error_config: PanelConfig | None = None,
        on_row_click: Callable[[T, int], None] | None = None,
        loader_rows: int = DEFAULT_LOADER_ROWS,
    ) -> None:
        self.columns = list(columns)
        self.get_row_key = get_row_key
        self.data = data
        self.fetch_config = fetch_config
        self.loading = loading
        self.has_error = has_error
        self.error_kind = ErrorKind(error_kind)
        self.on_retry = on_retry
        self.on_data_change = on_data_change
        self.selection_config = selection_config
        self.pagination_config = pagination_config
        self.empty_config = empty_config
        self.error_config = error_config
        self.on_row_click = on_row_click
        self.loader_rows = loader_rows

        self.state = EngineState(
            page=(pagination_config and pagination_config.current_page) or 1,
            page_size=(pagination_config and pagination_config.page_size) or DEFAULT_PAGE_SIZE,
        )
        self._synced_page = pagination_config.current_page if pagination_config else None
        self._synced_page_size = pagination_config.page_size if pagination_config else None
        self._fetcher = FetchOrchestrator(self.state, fetch_config, on_data_change=on_data_change)
        self._mounted = False
        self._last_trigger: tuple[Any, ...] | None = None

    # ------------------------------------------------------------------
    # lifecycle
    def mount(self) -> None:
        self._mounted = True
        self._maybe_fetch()

    def unmount(self) -> None:
        """Detach the engine; late fetch results are ignored from now on."""

        self._mounted = False
        self._fetcher.close()

    def update(self, **props: Any) -> None:
        """Apply changed props and re-run the fetch trigger."""

        unknown = set(props) - _PROPS
        if unknown:
            raise TypeError(f"Unknown table props: {', '.join(sorted(unknown))}")
        for name, value in props.items():
            if name == "columns":
                value = list(value)
            elif name == "error_kind":
                value = ErrorKind(value)
            setattr(self, name, value)
        self._sync_pagination_props()
        self._fetcher.configure(self.fetch_config, self.on_data_change)
        self._maybe_fetch()

    async def refresh(self) -> None:
        """Run the fetch now, regardless of ``auto_fetch``."""

        await self._fetcher.run()

    async def settle(self) -> None:
        """Wait for every scheduled fetch to finish."""

        await self._fetcher.wait_idle()

    def _sync_pagination_props(self) -> None:
        config = self.pagination_config
        current_page = config.current_page if config else None
        page_size = config.page_size if config else None
        if current_page is not None and current_page != self._synced_page:
            self.state.page = current_page
        if page_size is not None and page_size != self._synced_page_size:
            self.state.page_size = page_size
        self._synced_page = current_page
        self._synced_page_size = page_size

    def _maybe_fetch(self) -> None:
        config = self.fetch_config
        if not self._mounted or config is None or config.fetch is None:
            return
        if config.auto_fetch is False:
            return
        trigger = (
            self.state.page,
            self.state.page_size,
            dict(config.extra_params or {}),
            config.refresh_key,
        )
        if trigger == self._last_trigger:
            return
        self._last_trigger = trigger
        LOGGER.debug("Scheduling fetch for page %d (size %d)", self.state.page, self.state.page_size)
        self._fetcher.schedule()

    # ------------------------------------------------------------------
    # derived values
    @property
    def is_managed_fetch(self) -> bool:
        return self.fetch_config is not None and self.fetch_config.fetch is not None

    @property
    def mode(self) -> PaginationMode:
        return resolve_mode(self.is_managed_fetch, self.pagination_config)

    @property
    def current_data(self) -> list[T]:
        return list(self.state.data) if self.is_managed_fetch else list(self.data)

    def window(self, mode: PaginationMode | None = None) -> PageWindow:
        mode = mode or self.mode
        return resolve_window(
            mode,
            is_managed_fetch=self.is_managed_fetch,
            config=self.pagination_config,
            internal_page=self.state.page,
            internal_page_size=self.state.page_size,
            internal_total=self.state.total,
            row_count=len(self.current_data),
        )

    @property
    def display_rows(self) -> list[T]:
        mode = self.mode
        rows = self.current_data
        if mode is PaginationMode.CLIENT_SLICE:
            return slice_rows(rows, self.window(mode))
        return rows

    @property
    def selection(self) -> SelectionManager | None:
        if self.selection_config is None:
            return None
        return SelectionManager(self.selection_config, self.get_row_key)

    def final_columns(self, selection: SelectionManager | None = None) -> list[Column[Any]]:
        if selection is None:
            return list(self.columns)
        return [selection.column(), *self.columns]

    def status(self, row_count: int | None = None) -> StatusView:
        if row_count is None:
            row_count = len(self.display_rows)
        return resolve_status(
            external_loading=bool(self.loading),
            internal_loading=self.state.loading,
            external_error=bool(self.has_error),
            external_error_kind=self.error_kind,
            internal_error=self.state.error,
            row_count=row_count,
            on_retry=self.on_retry,
            fallback_retry=self._fetcher.run if self.is_managed_fetch else None,
            empty_config=self.empty_config,
            error_config=self.error_config,
        )

    # ------------------------------------------------------------------
    # events
    def change_page(self, page: int) -> None:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if self.is_managed_fetch or self.mode is not PaginationMode.SERVER_DELEGATED:
            self.state.page = page
            self._maybe_fetch()
            return
        config = self.pagination_config
        if config is not None and config.on_page_change is not None:
            config.on_page_change(page)

    def change_page_size(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"page size must be >= 1, got {size}")
        if self.is_managed_fetch or self.mode is not PaginationMode.SERVER_DELEGATED:
            self.state.page_size = size
            self.state.page = 1
            self._maybe_fetch()
            return
        config = self.pagination_config
        if config is not None and config.on_page_size_change is not None:
            config.on_page_size_change(size)

    async def retry(self) -> None:
        """Invoke the caller's retry, or re-issue the last request."""

        handler = self.on_retry or self._fetcher.run
        result = handler()
        if inspect.isawaitable(result):
            await result

    def toggle_select(self, row_id: RowId) -> None:
        selection = self.selection
        if selection is not None:
            selection.toggle(row_id)

    def select_all(self) -> None:
        selection = self.selection
        if selection is not None:
            selection.select_all()

    def click_row(self, index: int) -> None:
        rows = self.display_rows
        if self.on_row_click is not None and 0 <= index < len(rows):
            self.on_row_click(rows[index], index)

    # ------------------------------------------------------------------
    def snapshot(self) -> TableView:
        """Resolve mode, status and rows into a single :class:`TableView`."""

        mode = self.mode
        window = self.window(mode)
        rows = self.display_rows
        selection = self.selection
        columns = self.final_columns(selection)
        status = self.status(len(rows))
        rendered: list[RenderedRow] = []
        skeleton: list[tuple[RenderedCell, ...]] = []
        if status.status is TableStatus.POPULATED:
            rendered = render_rows(rows, columns, self.get_row_key, selection)
        elif status.status is TableStatus.LOADING:
            skeleton = skeleton_rows(columns, self.loader_rows)
        footer = None
        config = self.pagination_config
        if config is not None and config.enabled:
            footer = build_footer(
                window,
                show_page_size_changer=config.show_page_size_changer,
                page_size_options=config.page_size_options,
            )
        return TableView(
            mode=mode,
            window=window,
            status=status,
            headers=tuple(render_headers(columns)),
            rows=tuple(rendered),
            skeleton=tuple(skeleton),
            colspan=len(columns),
            footer=footer,
            selection_enabled=selection is not None,
            first_load_complete=self.state.first_load_complete,
        )


__all__ = ["TableEngine", "TableView"]
