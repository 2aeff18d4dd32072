"""Local configuration for gitbook2epub."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_PANDOC_PATH = "pandoc"
DEFAULT_INDEX_PAGES = "README.md"
DEFAULT_MANIFEST_NAME = "SUMMARY.md"
DEFAULT_METADATA_NAME = "metadata.yaml"
DEFAULT_DOCUMENT_EXTENSION = ".md"
DEFAULT_LANG = "zh-CN"
DEFAULT_AUTHOR = "Unknown"
DEFAULT_PREFACE_TITLE = "Preface"
DEFAULT_BOOKS_DIR = "gitbooks"
DEFAULT_OUTPUT_DIR = "output"
DEFAULT_OUTPUT_SUFFIX = ".epub"
MIN_TOC_DEPTH = 2

# Bundled stylesheet used when neither the command line nor the metadata names one.
DEFAULT_STYLESHEET_PATH = Path(__file__).resolve().parent / "default-style.css"

GITBOOK2EPUB_PANDOC_PATH = os.getenv("GITBOOK2EPUB_PANDOC_PATH", DEFAULT_PANDOC_PATH)
GITBOOK2EPUB_INDEX_PAGES = tuple(
    name.strip() for name in os.getenv("GITBOOK2EPUB_INDEX_PAGES", DEFAULT_INDEX_PAGES).split(",") if name.strip()
)
GITBOOK2EPUB_MANIFEST_NAME = os.getenv("GITBOOK2EPUB_MANIFEST_NAME", DEFAULT_MANIFEST_NAME)
GITBOOK2EPUB_METADATA_NAME = os.getenv("GITBOOK2EPUB_METADATA_NAME", DEFAULT_METADATA_NAME)
GITBOOK2EPUB_DEFAULT_LANG = os.getenv("GITBOOK2EPUB_DEFAULT_LANG", DEFAULT_LANG)
GITBOOK2EPUB_BOOKS_DIR = Path(os.getenv("GITBOOK2EPUB_BOOKS_DIR", DEFAULT_BOOKS_DIR)).expanduser()
GITBOOK2EPUB_OUTPUT_DIR = Path(os.getenv("GITBOOK2EPUB_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)).expanduser()
GITBOOK2EPUB_GUI_MODE = os.getenv("GITBOOK2EPUB_GUI_MODE", "false").lower() == "true"
GITBOOK2EPUB_LOG_LEVEL = os.getenv("GITBOOK2EPUB_LOG_LEVEL", "INFO")
