"""Command-line interface for the table engine."""
from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import typer
from rich import print
from rich.console import Console

from ..config import EngineSettings, ensure_config, load_config
from ..core.columns import Column
from ..core.engine import TableEngine
from ..core.fetch import FetchConfig
from ..core.pagination import PaginationConfig
from ..core.status import TableStatus
from ..data import Database, HttpRecordSource, SqlRecordSource
from ..data.demo import seed_audit_logs
from ..data.models import AuditLog
from ..logging_utils import configure_logging
from ..reports.tables import render_view

console = Console()

app = typer.Typer(help="Table Engine - paginated record browser")


def _settings(ctx: typer.Context) -> EngineSettings:
    return ctx.obj["settings"]


def _parse_params(values: Sequence[str] | None) -> dict[str, str]:
    params: dict[str, str] = {}
    for raw in values or ():
        name, sep, value = raw.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"Expected NAME=VALUE, got {raw!r}")
        params[name.strip()] = value.strip()
    return params


def _load_json_records(path: Path) -> list[Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(f"Cannot read records from {path}: {exc}") from exc
    if isinstance(payload, dict):
        payload = payload.get("data", payload.get("list", []))
    if not isinstance(payload, list):
        raise typer.BadParameter(f"{path} does not contain a list of records")
    return payload


def _columns_for(keys: Sequence[str]) -> list[Column[Any]]:
    return [Column(header=key.replace("_", " ").title(), key=key) for key in keys]


def _keys_from(records: Sequence[Any]) -> list[str]:
    if not records or not isinstance(records[0], dict):
        return []
    return list(records[0].keys())


def _build_engine(
    settings: EngineSettings,
    *,
    json_path: Optional[Path],
    db_path: Optional[Path],
    url: Optional[str],
    columns: Optional[str],
    key_field: str,
    page: int,
    page_size: Optional[int],
    params: dict[str, str],
    auto_fetch: bool,
) -> TableEngine[Any]:
    sources = [value for value in (json_path, db_path, url) if value]
    if len(sources) != 1:
        raise typer.BadParameter("Pass exactly one of --json, --db or --url")

    def row_key(item: Any, index: int) -> Any:
        if isinstance(item, dict):
            return item.get(key_field, index)
        return getattr(item, key_field, index)

    pagination = PaginationConfig(
        enabled=True,
        page_size=page_size or settings.table.page_size,
        current_page=page,
        show_page_size_changer=settings.table.show_page_size_changer,
        page_size_options=settings.table.page_size_options,
    )
    keys = [key.strip() for key in columns.split(",") if key.strip()] if columns else []

    if json_path is not None:
        records = _load_json_records(json_path)
        return TableEngine(
            columns=_columns_for(keys or _keys_from(records)),
            get_row_key=row_key,
            data=records,
            pagination_config=pagination,
            loader_rows=settings.table.loader_rows,
        )

    if db_path is not None:
        fetcher = SqlRecordSource(Database.from_path(db_path), AuditLog)
    else:
        fetcher = HttpRecordSource(
            url if url.startswith("http") else f"{settings.http.base_url.rstrip('/')}/{url.lstrip('/')}",
            timeout=settings.http.timeout_seconds,
            success_codes=settings.http.success_codes,
            list_field=settings.http.list_field,
            total_field=settings.http.total_field,
        )
    return TableEngine(
        columns=_columns_for(keys),
        get_row_key=row_key,
        fetch_config=FetchConfig(fetch=fetcher, extra_params=params, auto_fetch=auto_fetch),
        pagination_config=pagination,
        loader_rows=settings.table.loader_rows,
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help="Path to config.toml"),
) -> Optional[int]:
    """Application entrypoint that loads configuration and logging."""

    settings = load_config(config)
    configure_logging(
        settings.config_dir / "logs",
        level=settings.logging.level,
        fetch_trace=settings.logging.fetch_trace,
    )
    ctx.obj = {"settings": settings, "config_path": config}
    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        return 0
    return None


@app.command()
def version() -> None:
    """Print the CLI version."""

    from .. import __version__

    print(f"table-engine {__version__}")


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(Path("config.toml"), help="Where to write the config"),
) -> None:
    """Write a default configuration file if none exists."""

    target = ensure_config(path)
    print(f"[green]Configuration ready at {target}")


@app.command("seed-demo")
def seed_demo(
    db: Path = typer.Argument(..., help="SQLite database to seed"),
    count: int = typer.Option(37, min=0, help="Number of audit log rows"),
) -> None:
    """Seed a SQLite database with demo audit logs."""

    written = seed_audit_logs(Database.from_path(db), count)
    print(f"[green]Seeded {written} audit logs into {db}")


@app.command()
def show(
    ctx: typer.Context,
    json_path: Optional[Path] = typer.Option(None, "--json", help="JSON file with records"),
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite database with audit logs"),
    url: Optional[str] = typer.Option(None, "--url", help="Paginated HTTP endpoint"),
    columns: Optional[str] = typer.Option(None, help="Comma separated field names"),
    key: str = typer.Option("id", help="Field used as the row key"),
    page: int = typer.Option(1, min=1, help="Page to show"),
    page_size: Optional[int] = typer.Option(None, min=1, help="Rows per page"),
    param: Optional[list[str]] = typer.Option(None, help="Extra fetch parameter NAME=VALUE"),
    title: Optional[str] = typer.Option(None, help="Table title"),
) -> None:
    """Print one page of records."""

    engine = _build_engine(
        _settings(ctx),
        json_path=json_path,
        db_path=db,
        url=url,
        columns=columns,
        key_field=key,
        page=page,
        page_size=page_size,
        params=_parse_params(param),
        auto_fetch=False,
    )
    if engine.is_managed_fetch:
        asyncio.run(engine.refresh())
        if not engine.columns:
            engine.update(columns=_columns_for(_keys_from(engine.state.data)))
    view = engine.snapshot()
    console.print(render_view(view, title=title))
    if view.status.status is TableStatus.ERROR:
        raise typer.Exit(code=1)


@app.command()
def browse(
    ctx: typer.Context,
    json_path: Optional[Path] = typer.Option(None, "--json", help="JSON file with records"),
    db: Optional[Path] = typer.Option(None, "--db", help="SQLite database with audit logs"),
    url: Optional[str] = typer.Option(None, "--url", help="Paginated HTTP endpoint"),
    columns: Optional[str] = typer.Option(None, help="Comma separated field names"),
    key: str = typer.Option("id", help="Field used as the row key"),
    page_size: Optional[int] = typer.Option(None, min=1, help="Rows per page"),
    param: Optional[list[str]] = typer.Option(None, help="Extra fetch parameter NAME=VALUE"),
    select: bool = typer.Option(False, "--select", help="Enable row selection"),
    title: str = typer.Option("Records", help="Window title"),
) -> None:
    """Launch the Textual record browser."""

    from ..core.selection import SelectionSet
    from .tui.app import RecordBrowserApp

    settings = _settings(ctx)
    if db is None and json_path is None and url is not None and not columns:
        raise typer.BadParameter("--columns is required with --url in the browser")
    engine = _build_engine(
        settings,
        json_path=json_path,
        db_path=db,
        url=url,
        columns=columns or ("id,username,module,operation,status,created_at" if db else None),
        key_field=key,
        page=1,
        page_size=page_size,
        params=_parse_params(param),
        auto_fetch=True,
    )
    store = SelectionSet() if select else None
    RecordBrowserApp(engine, title=title, selection_store=store).run()


if __name__ == "__main__":
    sys.exit(app())
