"""Asynchronous retrieval cycle for managed-fetch tables."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, Mapping, TypeVar

from .errors import NO_ERROR, ErrorState, classify_error
from .state import EngineState

T = TypeVar("T")

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class FetchResult(Generic[T]):
    data: list[T]
    total: int


Fetcher = Callable[[dict[str, Any]], Awaitable[Any]]
DataObserver = Callable[[list[Any], int], None]


@dataclass
class FetchConfig:
    """How the engine retrieves records itself.

    ``refresh_key`` is opaque: only a change in its value matters, which
    forces a refetch even when nothing else changed.
    """

    fetch: Fetcher | None = None
    extra_params: Mapping[str, Any] = field(default_factory=dict)
    auto_fetch: bool = True
    refresh_key: Any = None


def coerce_result(raw: Any) -> FetchResult[Any]:
    """Accept ``FetchResult``, ``{"data", "total"}`` mappings and ``(rows, total)`` pairs."""

    if isinstance(raw, FetchResult):
        return raw
    if isinstance(raw, Mapping):
        return FetchResult(data=list(raw.get("data") or []), total=int(raw.get("total") or 0))
    if isinstance(raw, tuple) and len(raw) == 2:
        rows, total = raw
        return FetchResult(data=list(rows), total=int(total))
    raise TypeError(f"Fetcher returned unsupported result: {type(raw).__name__}")


class FetchOrchestrator:
    """Runs the caller's fetcher and publishes results into :class:`EngineState`.

    Every request is stamped with a generation number when it is issued, by
    :meth:`schedule` or :meth:`run`. Only the response of the most recently
    issued request is applied; older responses are dropped when they resolve,
    whatever order they resolve in. A queued request that is superseded before
    it starts never calls the fetcher.
    """

    def __init__(
        self,
        state: EngineState,
        config: FetchConfig | None = None,
        *,
        on_data_change: DataObserver | None = None,
    ) -> None:
        self._state = state
        self._config = config
        self._on_data_change = on_data_change
        self._generation = 0
        self._closed = False
        self._tasks: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    @property
    def is_managed(self) -> bool:
        return self._config is not None and self._config.fetch is not None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    def configure(
        self, config: FetchConfig | None, on_data_change: DataObserver | None = None
    ) -> None:
        self._config = config
        self._on_data_change = on_data_change

    def params(self) -> dict[str, Any]:
        params: dict[str, Any] = {
            "page": self._state.page,
            "pageSize": self._state.page_size,
        }
        if self._config is not None:
            params.update(self._config.extra_params or {})
        return params

    # ------------------------------------------------------------------
    def _issue(self) -> tuple[int, dict[str, Any]] | None:
        """Stamp a new request and capture its params, or ``None`` when idle."""

        if not self.is_managed or self._closed:
            return None
        self._generation += 1
        self._state.loading = True
        return self._generation, self.params()

    async def run(self) -> None:
        """Fetch the current page now. Failures are classified and stored, never raised."""

        request = self._issue()
        if request is not None:
            await self._execute(*request)

    async def _execute(self, generation: int, params: dict[str, Any]) -> None:
        config = self._config
        if config is None or config.fetch is None or not self._is_current(generation):
            return
        state = self._state
        state.error = NO_ERROR
        LOGGER.debug("Fetch #%d started with %s", generation, params)
        try:
            result = coerce_result(await config.fetch(params))
        except Exception as exc:
            if not self._is_current(generation):
                LOGGER.debug("Discarding failure of stale fetch #%d: %s", generation, exc)
                return
            kind = classify_error(exc)
            LOGGER.warning("Fetch #%d failed (%s): %s", generation, kind.value, exc, exc_info=exc)
            state.error = ErrorState(present=True, kind=kind)
        else:
            if not self._is_current(generation):
                LOGGER.debug("Discarding stale response of fetch #%d", generation)
                return
            state.data = list(result.data)
            state.total = result.total
            LOGGER.debug("Fetch #%d returned %d of %d rows", generation, len(state.data), state.total)
            if self._on_data_change is not None:
                self._on_data_change(state.data, state.total)
        finally:
            if self._is_current(generation):
                state.loading = False
                if not state.first_load_complete:
                    state.first_load_complete = True

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    # ------------------------------------------------------------------
    def schedule(self) -> asyncio.Task[None] | None:
        """Issue a request now and resolve it in a task on the running loop.

        The request is stamped here, so any response of an earlier request
        that resolves after this call is discarded.
        """

        request = self._issue()
        if request is None:
            return None
        task = asyncio.get_running_loop().create_task(self._execute(*request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait until every scheduled run has finished."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self) -> None:
        """Stop applying results; in-flight fetches resolve into no-ops."""

        self._closed = True


__all__ = ["DataObserver", "FetchConfig", "FetchOrchestrator", "FetchResult", "Fetcher", "coerce_result"]
