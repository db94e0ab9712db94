"""Log files for the record browser and the engine.

Three files live under one log directory:

* ``ui.txt`` for the ``ui`` logger (toasts, app lifecycle);
* ``engine-<timestamp>.txt`` for everything under ``table_engine`` at the
  configured level;
* ``fetch-trace.txt`` (optional) with every fetch issued, returned or
  discarded as stale, at debug level regardless of the engine level.

Calling :func:`configure_logging` again replaces the handlers it installed
earlier, so a second call can point the logs at another directory.
"""
from __future__ import annotations

import atexit
import datetime as dt
import logging
import os
from dataclasses import dataclass
from pathlib import Path

LOG_DIR = Path(os.environ.get("TABLE_ENGINE_HOME", Path.home() / ".table_engine")) / "logs"

ENGINE_LOGGER_NAME = "table_engine"
FETCH_LOGGER_NAME = "table_engine.core.fetch"
UI_LOGGER_NAME = "ui"

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_HANDLER_PREFIX = "table-engine:"

_UI_LOGGER = logging.getLogger(UI_LOGGER_NAME)


@dataclass(frozen=True, slots=True)
class LogPaths:
    ui: Path
    engine: Path
    fetch_trace: Path | None = None


_ACTIVE: LogPaths | None = None
_SHUTDOWN_REGISTERED = False


def _file_handler(path: Path, level: int, tag: str) -> logging.FileHandler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler.set_name(_HANDLER_PREFIX + tag)
    return handler


def _owned(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if (h.get_name() or "").startswith(_HANDLER_PREFIX)]


def shutdown_logging() -> None:
    """Detach and close every handler installed by :func:`configure_logging`."""

    global _ACTIVE

    for name in (UI_LOGGER_NAME, ENGINE_LOGGER_NAME, FETCH_LOGGER_NAME):
        logger = logging.getLogger(name)
        for handler in _owned(logger):
            logger.removeHandler(handler)
            handler.close()
    logging.getLogger(FETCH_LOGGER_NAME).setLevel(logging.NOTSET)
    _ACTIVE = None


def configure_logging(
    log_dir: Path | None = None,
    *,
    level: int | str = logging.INFO,
    fetch_trace: bool = False,
) -> LogPaths:
    """Install the UI, engine and optional fetch-trace file handlers."""

    global _ACTIVE, _SHUTDOWN_REGISTERED

    target_dir = Path(log_dir) if log_dir is not None else LOG_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    engine_level = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(engine_level, int):
        raise ValueError(f"Unknown log level: {level!r}")

    shutdown_logging()

    ui_path = target_dir / "ui.txt"
    _UI_LOGGER.addHandler(_file_handler(ui_path, logging.DEBUG, "ui"))
    if os.environ.get("TEXTUAL_LOG", "").lower() == "debug":
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(_FORMAT))
        stream_handler.set_name(_HANDLER_PREFIX + "ui-stream")
        _UI_LOGGER.addHandler(stream_handler)
    _UI_LOGGER.setLevel(logging.DEBUG)
    _UI_LOGGER.propagate = False

    timestamp = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%d-%H%M%S")
    engine_path = target_dir / f"engine-{timestamp}.txt"
    engine_logger = logging.getLogger(ENGINE_LOGGER_NAME)
    engine_logger.addHandler(_file_handler(engine_path, engine_level, "engine"))
    engine_logger.setLevel(engine_level)
    engine_logger.propagate = False

    trace_path = None
    fetch_logger = logging.getLogger(FETCH_LOGGER_NAME)
    if fetch_trace:
        trace_path = target_dir / "fetch-trace.txt"
        fetch_logger.addHandler(_file_handler(trace_path, logging.DEBUG, "fetch-trace"))
        fetch_logger.setLevel(logging.DEBUG)

    _ACTIVE = LogPaths(ui=ui_path, engine=engine_path, fetch_trace=trace_path)
    _UI_LOGGER.info(
        "Engine log at %s (level %s)%s",
        engine_path,
        logging.getLevelName(engine_level),
        f", fetch trace at {trace_path}" if trace_path else "",
    )

    if not _SHUTDOWN_REGISTERED:
        atexit.register(shutdown_logging)
        _SHUTDOWN_REGISTERED = True
    return _ACTIVE


def active_log_paths() -> LogPaths | None:
    """Return the files written by the current configuration, if any."""

    return _ACTIVE


__all__ = [
    "LOG_DIR",
    "LogPaths",
    "active_log_paths",
    "configure_logging",
    "shutdown_logging",
]
