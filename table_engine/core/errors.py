"""Error taxonomy used by the fetch orchestrator and status panels."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import httpx


class ErrorKind(str, Enum):
    NETWORK = "network"
    API = "api"
    GENERIC = "generic"


class FetchError(RuntimeError):
    """Base class for failures raised by record sources."""


class NetworkError(FetchError):
    """The request never reached the server or no response came back."""


class ApiError(FetchError):
    """A response arrived but signalled failure."""

    def __init__(self, message: str, *, code: int | str | None = None, status: int | None = None):
        super().__init__(message)
        self.code = code
        self.status = status


@dataclass(frozen=True, slots=True)
class ErrorState:
    present: bool = False
    kind: ErrorKind = ErrorKind.GENERIC


NO_ERROR = ErrorState()


@dataclass(frozen=True, slots=True)
class ErrorContent:
    title: str
    description: str


ERROR_CONTENT: dict[ErrorKind, ErrorContent] = {
    ErrorKind.NETWORK: ErrorContent(
        title="Network error",
        description="The server could not be reached. Check your connection and try again.",
    ),
    ErrorKind.API: ErrorContent(
        title="Request failed",
        description="The server answered but reported an error while loading this list.",
    ),
    ErrorKind.GENERIC: ErrorContent(
        title="Failed to load",
        description="Something went wrong while loading the data.",
    ),
}


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception raised by a fetcher onto an :class:`ErrorKind`."""

    if isinstance(exc, NetworkError):
        return ErrorKind.NETWORK
    if isinstance(exc, ApiError):
        return ErrorKind.API
    if isinstance(exc, httpx.HTTPStatusError):
        return ErrorKind.API
    if isinstance(exc, httpx.TransportError):
        return ErrorKind.NETWORK
    if isinstance(exc, (ConnectionError, TimeoutError)):
        return ErrorKind.NETWORK
    return ErrorKind.GENERIC


__all__ = [
    "ApiError",
    "ERROR_CONTENT",
    "ErrorContent",
    "ErrorKind",
    "ErrorState",
    "FetchError",
    "NO_ERROR",
    "NetworkError",
    "classify_error",
]
