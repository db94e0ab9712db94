"""Toast helpers for the Textual application."""
from __future__ import annotations

import logging

from textual.app import App

_UI_LOGGER = logging.getLogger("ui")


def show_toast(app: App, message: str, *, severity: str = "information") -> None:
    """Display a non-blocking toast notification and mirror it to the UI log."""

    _UI_LOGGER.info("toast[%s] %s", severity, message)
    app.notify(message, severity=severity)


__all__ = ["show_toast"]
