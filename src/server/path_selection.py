"""Validate paths picked by an interactive client."""

from __future__ import annotations

from pathlib import Path

from server.models import FileKind
from server.server_config import DEFAULT_OUTPUT_SUFFIX, FILE_KIND_EXTENSIONS, SUPPORTED_OUTPUT_SUFFIXES


def _normalize(path: str) -> Path:
    return Path(path).expanduser().resolve()


def choose_directory(path: str) -> Path | None:
    """Return the directory, or None if it does not exist."""
    candidate = _normalize(path)
    return candidate if candidate.is_dir() else None


def choose_file(path: str, kind: FileKind) -> Path | None:
    """Return the file if it exists and has an extension allowed for ``kind``."""
    candidate = _normalize(path)
    if not candidate.is_file():
        return None
    if candidate.suffix.lower() not in FILE_KIND_EXTENSIONS[kind.value]:
        return None
    return candidate


def choose_save_target(path: str) -> Path | None:
    """Normalize an output target; None if its directory does not exist."""
    candidate = _normalize(path)
    if candidate.suffix.lower() not in SUPPORTED_OUTPUT_SUFFIXES:
        candidate = candidate.with_name(candidate.name + DEFAULT_OUTPUT_SUFFIX)
    if not candidate.parent.is_dir():
        return None
    return candidate
