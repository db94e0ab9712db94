"""Arbitration between loading, error, empty and populated views."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from .errors import ERROR_CONTENT, ErrorKind, ErrorState

DEFAULT_EMPTY_TITLE = "No data"
DEFAULT_EMPTY_DESCRIPTION = "There are no records to show yet."
DEFAULT_RETRY_LABEL = "Retry"


class TableStatus(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    POPULATED = "populated"


@dataclass(frozen=True, slots=True)
class PanelConfig:
    """Caller overrides for the empty or error panel."""

    icon: Any = None
    title: str | None = None
    description: str | None = None
    action_label: str | None = None


@dataclass(frozen=True, slots=True)
class StatusView:
    status: TableStatus
    error_kind: ErrorKind | None = None
    title: str | None = None
    description: str | None = None
    icon: Any = None
    action_label: str | None = None
    retry: Callable[[], Any] | None = None


def resolve_status(
    *,
    external_loading: bool,
    internal_loading: bool,
    external_error: bool,
    external_error_kind: ErrorKind,
    internal_error: ErrorState,
    row_count: int,
    on_retry: Callable[[], Any] | None = None,
    fallback_retry: Callable[[], Any] | None = None,
    empty_config: PanelConfig | None = None,
    error_config: PanelConfig | None = None,
) -> StatusView:
    """Pick the authoritative view state; loading masks error masks empty."""

    if external_loading or internal_loading:
        return StatusView(TableStatus.LOADING)

    if external_error or internal_error.present:
        kind = external_error_kind if external_error else internal_error.kind
        content = ERROR_CONTENT[kind]
        title, description = content.title, content.description
        if error_config and error_config.title and error_config.description:
            title, description = error_config.title, error_config.description
        return StatusView(
            TableStatus.ERROR,
            error_kind=kind,
            title=title,
            description=description,
            icon=error_config.icon if error_config else None,
            action_label=(error_config and error_config.action_label) or DEFAULT_RETRY_LABEL,
            retry=on_retry or fallback_retry,
        )

    if row_count == 0:
        empty = empty_config or PanelConfig()
        return StatusView(
            TableStatus.EMPTY,
            title=empty.title or DEFAULT_EMPTY_TITLE,
            description=empty.description or DEFAULT_EMPTY_DESCRIPTION,
            icon=empty.icon,
        )

    return StatusView(TableStatus.POPULATED)


__all__ = ["PanelConfig", "StatusView", "TableStatus", "resolve_status"]
