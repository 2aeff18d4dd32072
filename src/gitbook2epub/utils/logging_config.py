"""Logging setup shared by the command line and the server."""

from __future__ import annotations

import logging
import sys

from gitbook2epub.config import GITBOOK2EPUB_GUI_MODE, GITBOOK2EPUB_LOG_LEVEL

# Attributes present on every LogRecord; anything else came from ``extra``.
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class ExtraFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = {key: value for key, value in vars(record).items() if key not in _RESERVED_ATTRS}
        if extras:
            message += " | " + " ".join(f"{key}={value}" for key, value in extras.items())
        return message


class GuiFormatter(ExtraFormatter):
    """Plain lines for progress streaming: warnings and errors get a prefix."""

    _PREFIXES = {logging.WARNING: "Warning: ", logging.ERROR: "Error: ", logging.CRITICAL: "Error: "}

    def format(self, record: logging.LogRecord) -> str:
        return self._PREFIXES.get(record.levelno, "") + super().format(record)


def configure_logging(level: str = GITBOOK2EPUB_LOG_LEVEL, *, gui_mode: bool = GITBOOK2EPUB_GUI_MODE) -> None:
    """Configure the root logger once per run."""
    handler = logging.StreamHandler(sys.stdout)
    if gui_mode:
        handler.setFormatter(GuiFormatter("%(message)s"))
    else:
        handler.setFormatter(ExtraFormatter("%(asctime)s | %(levelname)-7s | %(name)s | %(message)s", "%H:%M:%S"))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
