"""Per-engine mutable state."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import NO_ERROR, ErrorState
from .pagination import DEFAULT_PAGE_SIZE


@dataclass
class EngineState:
    """State owned by exactly one engine instance; discarded on unmount."""

    data: list[Any] = field(default_factory=list)
    total: int = 0
    loading: bool = False
    error: ErrorState = NO_ERROR
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    first_load_complete: bool = False


__all__ = ["EngineState"]
