from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest

from table_engine.core.columns import Column
from table_engine.core.fetch import FetchResult
from table_engine.data.repo import Database


def make_records(count: int) -> list[dict[str, Any]]:
    return [{"id": index + 1, "name": f"user-{index + 1}", "score": index * 1.5} for index in range(count)]


def row_key(item: dict[str, Any], index: int) -> Any:
    return item["id"]


class RecordingFetcher:
    """Async fetcher serving pages of ``records`` and remembering every request."""

    def __init__(self, records: list[dict[str, Any]], *, total: int | None = None) -> None:
        self.records = records
        self.total = len(records) if total is None else total
        self.calls: list[dict[str, Any]] = []
        self.fail_with: BaseException | None = None

    async def __call__(self, params: dict[str, Any]) -> FetchResult[dict[str, Any]]:
        self.calls.append(dict(params))
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        start = (params["page"] - 1) * params["pageSize"]
        return FetchResult(self.records[start : start + params["pageSize"]], self.total)


@pytest.fixture
def records() -> list[dict[str, Any]]:
    return make_records(25)


@pytest.fixture
def columns() -> list[Column[Any]]:
    return [
        Column(header="ID", key="id"),
        Column(header="Name", key="name"),
        Column(header="Score", render=lambda item, index: f"{item['score']:.1f}"),
    ]


@pytest.fixture
def db(tmp_path: Path) -> Database:
    database = Database.from_path(tmp_path / "records.db")
    database.create_all()
    return database


@pytest.fixture
def fetcher(records: list[dict[str, Any]]) -> RecordingFetcher:
    return RecordingFetcher(records)


@pytest.fixture
def fetcher_cls() -> type[RecordingFetcher]:
    return RecordingFetcher


@pytest.fixture
def get_row_key():
    return row_key
