"""SQL-backed record source for managed-fetch tables."""
from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from sqlalchemy import create_engine, func, inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..core.errors import ApiError, NetworkError
from ..core.fetch import FetchResult
from . import models

LOGGER = logging.getLogger(__name__)

RESERVED_PARAMS = frozenset({"page", "pageSize"})


class Database:
    def __init__(self, engine: Engine):
        self.engine = engine
        self.Session = sessionmaker(self.engine, expire_on_commit=False)

    @classmethod
    def from_path(cls, path: Path) -> "Database":
        engine = create_engine(
            f"sqlite+pysqlite:///{path}",
            connect_args={"check_same_thread": False},
        )
        return cls(engine)

    def create_all(self):
        models.Base.metadata.create_all(self.engine)

    @contextmanager
    def session_scope(self):
        session = self.Session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def row_to_record(row: Any) -> dict[str, Any]:
    mapper = inspect(type(row))
    return {attr.key: getattr(row, attr.key) for attr in mapper.column_attrs}


class SqlRecordSource:
    """Serve pages of a mapped model as ``{page, pageSize, **filters}`` fetches.

    Extra params naming a real column become equality filters; blank values and
    unknown names are ignored.
    """

    def __init__(
        self,
        db: Database,
        model: type,
        *,
        order_by: Iterable[Any] | None = None,
        to_record: Callable[[Any], Any] = row_to_record,
    ) -> None:
        self.db = db
        self.model = model
        self._order_by = list(order_by) if order_by is not None else list(inspect(model).primary_key)
        self._to_record = to_record
        self._columns = {attr.key for attr in inspect(model).column_attrs}

    async def __call__(self, params: Mapping[str, Any]) -> FetchResult[Any]:
        return await asyncio.to_thread(self.fetch_page, dict(params))

    def fetch_page(self, params: Mapping[str, Any]) -> FetchResult[Any]:
        page = max(int(params.get("page", 1)), 1)
        size = max(int(params.get("pageSize", 10)), 1)
        filters = {
            name: value
            for name, value in params.items()
            if name not in RESERVED_PARAMS and name in self._columns and value not in (None, "")
        }
        stmt = select(self.model)
        count_stmt = select(func.count()).select_from(self.model)
        for name, value in filters.items():
            condition = getattr(self.model, name) == value
            stmt = stmt.where(condition)
            count_stmt = count_stmt.where(condition)
        stmt = stmt.order_by(*self._order_by).limit(size).offset((page - 1) * size)
        try:
            with self.db.session_scope() as session:
                total = session.scalar(count_stmt) or 0
                rows = [self._to_record(row) for row in session.scalars(stmt)]
        except OperationalError as exc:
            LOGGER.warning("Database unavailable while reading %s: %s", self.model.__name__, exc)
            raise NetworkError(str(exc)) from exc
        except SQLAlchemyError as exc:
            raise ApiError(str(exc)) from exc
        LOGGER.debug(
            "Loaded %d of %d %s rows for page %d", len(rows), total, self.model.__name__, page
        )
        return FetchResult(data=rows, total=int(total))


__all__ = ["Database", "SqlRecordSource", "row_to_record"]
