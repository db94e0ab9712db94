"""HTTP record source unwrapping ``{code, data: {list, total}, message}`` envelopes."""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

import httpx

from ..core.errors import ApiError, NetworkError
from ..core.fetch import FetchResult

LOGGER = logging.getLogger(__name__)


class HttpRecordSource:
    """Fetch one page per call from a paginated JSON endpoint."""

    def __init__(
        self,
        url: str,
        *,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
        timeout: float = 10.0,
        success_codes: Sequence[int] = (0, 200),
        list_field: str = "list",
        total_field: str = "total",
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.url = url
        self._client_factory = client_factory or (lambda: httpx.AsyncClient(timeout=timeout))
        self._success_codes = set(success_codes)
        self._list_field = list_field
        self._total_field = total_field
        self._headers = dict(headers or {})

    async def __call__(self, params: Mapping[str, Any]) -> FetchResult[Any]:
        query = {key: value for key, value in params.items() if value is not None}
        try:
            async with self._client_factory() as client:
                response = await client.get(self.url, params=query, headers=self._headers)
        except httpx.TransportError as exc:
            raise NetworkError(f"{self.url}: {exc}") from exc

        if response.is_error:
            message = _message_from(response) or response.reason_phrase
            raise ApiError(
                f"{self.url} returned HTTP {response.status_code}: {message}",
                status=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiError(f"{self.url} returned invalid JSON", status=response.status_code) from exc
        return self._parse_payload(payload)

    def _parse_payload(self, payload: Any) -> FetchResult[Any]:
        if isinstance(payload, list):
            return FetchResult(data=payload, total=len(payload))
        if not isinstance(payload, Mapping):
            raise ApiError("Unexpected response body")
        body: Any = payload
        if "code" in payload:
            code = payload.get("code")
            if code not in self._success_codes:
                message = payload.get("message") or "Request failed"
                LOGGER.info("Business error %s from %s: %s", code, self.url, message)
                raise ApiError(str(message), code=code)
            body = payload.get("data")
        if isinstance(body, list):
            return FetchResult(data=body, total=len(body))
        if not isinstance(body, Mapping):
            raise ApiError("Response did not contain a page of records")
        rows = body.get(self._list_field)
        if rows is None:
            rows = body.get("data") or []
        total = body.get(self._total_field, len(rows))
        return FetchResult(data=list(rows), total=int(total))


def _message_from(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, Mapping):
        message = body.get("message")
        return str(message) if message else None
    return None


__all__ = ["HttpRecordSource"]
