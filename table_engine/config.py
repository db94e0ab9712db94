from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import tomllib

DEFAULT_CONFIG_DIR = Path(os.environ.get("TABLE_ENGINE_HOME", Path.home() / ".table_engine"))
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.toml"
DEFAULT_DB_PATH = DEFAULT_CONFIG_DIR / "records.db"

DEFAULT_CONFIG_CONTENT = """[table]
page_size = 10
page_size_options = [10, 20, 50, 100]
loader_rows = 6
show_page_size_changer = true
[http]
base_url = \"http://localhost:8080/api\"
timeout_seconds = 10.0
success_codes = [0, 200]
list_field = \"list\"
total_field = \"total\"
[storage]
db_path = \"records.db\"
[logging]
level = \"INFO\"
fetch_trace = false
"""


@dataclass
class TableSettings:
    page_size: int = 10
    page_size_options: list[int] = field(default_factory=lambda: [10, 20, 50, 100])
    loader_rows: int = 6
    show_page_size_changer: bool = True


@dataclass
class HttpSourceConfig:
    base_url: str = "http://localhost:8080/api"
    timeout_seconds: float = 10.0
    success_codes: list[int] = field(default_factory=lambda: [0, 200])
    list_field: str = "list"
    total_field: str = "total"


@dataclass
class StorageConfig:
    db_path: Path = DEFAULT_DB_PATH


@dataclass
class LoggingConfig:
    level: str = "INFO"
    fetch_trace: bool = False


@dataclass
class EngineSettings:
    table: TableSettings = field(default_factory=TableSettings)
    http: HttpSourceConfig = field(default_factory=HttpSourceConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def config_dir(self) -> Path:
        return self.storage.db_path.parent


def _load_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("rb") as fh:
        return tomllib.load(fh)


def ensure_config(path: Optional[Path] = None) -> Path:
    """Ensure a configuration file exists at *path* and return it."""

    target = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not target.exists():
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(DEFAULT_CONFIG_CONTENT, encoding="utf-8")
    return target


def load_config(path: Optional[Path] = None) -> EngineSettings:
    cfg_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    data = _load_toml(cfg_path)

    cfg = EngineSettings()

    table = data.get("table", {})
    cfg.table = TableSettings(
        page_size=int(table.get("page_size", cfg.table.page_size)),
        page_size_options=[int(v) for v in table.get("page_size_options", cfg.table.page_size_options)],
        loader_rows=int(table.get("loader_rows", cfg.table.loader_rows)),
        show_page_size_changer=bool(
            table.get("show_page_size_changer", cfg.table.show_page_size_changer)
        ),
    )
    if cfg.table.page_size < 1:
        raise ValueError(f"table.page_size must be positive, got {cfg.table.page_size}")

    http = data.get("http", {})
    cfg.http = HttpSourceConfig(
        base_url=str(http.get("base_url", cfg.http.base_url)),
        timeout_seconds=float(http.get("timeout_seconds", cfg.http.timeout_seconds)),
        success_codes=[int(v) for v in http.get("success_codes", cfg.http.success_codes)],
        list_field=str(http.get("list_field", cfg.http.list_field)),
        total_field=str(http.get("total_field", cfg.http.total_field)),
    )

    storage = data.get("storage", {})
    if "db_path" in storage:
        db_path = Path(storage["db_path"]).expanduser()
        if not db_path.is_absolute():
            db_path = cfg_path.parent / db_path
        cfg.storage = StorageConfig(db_path=db_path)

    log_section = data.get("logging", {})
    cfg.logging = LoggingConfig(
        level=str(log_section.get("level", cfg.logging.level)).upper(),
        fetch_trace=bool(log_section.get("fetch_trace", cfg.logging.fetch_trace)),
    )

    return cfg


def ensure_app_dirs(cfg: EngineSettings) -> None:
    cfg.storage.db_path.parent.mkdir(parents=True, exist_ok=True)


__all__ = [
    "DEFAULT_CONFIG_CONTENT",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_DB_PATH",
    "EngineSettings",
    "HttpSourceConfig",
    "LoggingConfig",
    "StorageConfig",
    "TableSettings",
    "ensure_app_dirs",
    "ensure_config",
    "load_config",
]
