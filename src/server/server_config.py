"""Configuration for the server."""

from __future__ import annotations

import os

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

# Output formats the save-target check accepts; anything else gets the default suffix.
SUPPORTED_OUTPUT_SUFFIXES = (".epub", ".pdf")
DEFAULT_OUTPUT_SUFFIX = ".epub"

FILE_KIND_EXTENSIONS = {
    "metadata": (".yaml", ".yml"),
    "style": (".css",),
}

# Child process used for each conversion.
CONVERTER_MODULE = os.getenv("GITBOOK2EPUB_CONVERTER_MODULE", "gitbook2epub")
