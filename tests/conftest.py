"""Test setup for gitbook2epub."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows running integration tests selectively:
        pytest -m integration       # run only integration tests (need pandoc)
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (run the real pandoc binary)",
    )


BookFactory = Callable[..., Path]


@pytest.fixture
def make_book(tmp_path: Path) -> BookFactory:
    """Create a GitBook directory from a manifest and a mapping of file contents."""

    def _make(summary: str | None, files: dict[str, str] | None = None, name: str = "book") -> Path:
        book_dir = tmp_path / name
        book_dir.mkdir()
        if summary is not None:
            (book_dir / "SUMMARY.md").write_text(summary, encoding="utf-8")
        for relative, content in (files or {}).items():
            path = book_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return book_dir

    return _make


EXAMPLE_SUMMARY = "* [Intro](README.md)\n* [Ch1](ch1/README.md)\n  * [S1](ch1/s1.md)\n"


@pytest.fixture
def example_book(make_book: BookFactory) -> Path:
    """Three-file book: README, one chapter, one section."""
    return make_book(
        EXAMPLE_SUMMARY,
        {
            "README.md": "# Introduction\n\nWelcome.\n",
            "ch1/README.md": "# Chapter One\n\nOpening.\n\n## Background\n",
            "ch1/s1.md": "# Section One\n\nBody text.\n",
        },
    )
