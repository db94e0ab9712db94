"""Core engine exports."""
from .columns import Align, Column, field_accessor
from .engine import TableEngine, TableView
from .errors import ApiError, ErrorKind, ErrorState, FetchError, NetworkError, classify_error
from .fetch import FetchConfig, FetchOrchestrator, FetchResult
from .footer import ELLIPSIS, FooterModel, build_footer, page_items
from .pagination import PageWindow, PaginationConfig, PaginationMode, resolve_mode
from .render import RenderedCell, RenderedRow
from .selection import SelectionConfig, SelectionIndicator, SelectionManager, SelectionSet
from .state import EngineState
from .status import PanelConfig, StatusView, TableStatus, resolve_status

__all__ = [
    "Align",
    "ApiError",
    "Column",
    "ELLIPSIS",
    "EngineState",
    "ErrorKind",
    "ErrorState",
    "FetchConfig",
    "FetchError",
    "FetchOrchestrator",
    "FetchResult",
    "FooterModel",
    "NetworkError",
    "PageWindow",
    "PaginationConfig",
    "PaginationMode",
    "PanelConfig",
    "RenderedCell",
    "RenderedRow",
    "SelectionConfig",
    "SelectionIndicator",
    "SelectionManager",
    "SelectionSet",
    "StatusView",
    "TableEngine",
    "TableStatus",
    "TableView",
    "build_footer",
    "classify_error",
    "field_accessor",
    "page_items",
    "resolve_mode",
    "resolve_status",
]
