"""Load book metadata from YAML, falling back to synthesized defaults."""

from __future__ import annotations

import datetime
import logging
from pathlib import Path
from typing import Any

import yaml

from gitbook2epub.config import (
    DEFAULT_AUTHOR,
    GITBOOK2EPUB_DEFAULT_LANG,
    GITBOOK2EPUB_METADATA_NAME,
)
from gitbook2epub.exceptions import MetadataError
from gitbook2epub.materializer import FragmentWorkspace
from gitbook2epub.schemas import BookMetadata, MetadataSource

logger = logging.getLogger(__name__)

TEMP_METADATA_NAME = "metadata.yaml"


def default_metadata(book_dir: Path) -> dict[str, Any]:
    """Defaults used when no metadata file is available."""
    return {
        "title": Path(book_dir).resolve().name,
        "author": DEFAULT_AUTHOR,
        "date": datetime.date.today().year,
        "lang": GITBOOK2EPUB_DEFAULT_LANG,
        "cover-image": None,
        "css": None,
    }


def read_metadata_file(path: Path) -> dict[str, Any]:
    """Parse a YAML metadata file into a mapping.

    Raises:
        MetadataError: If the file is not valid YAML or not a mapping.
    """
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise MetadataError(f"Cannot parse {path}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise MetadataError(f"{path} must contain a mapping, got {type(loaded).__name__}")
    return loaded


def dump_metadata(metadata: BookMetadata) -> str:
    """Serialize metadata for ``--metadata-file``, dropping empty values."""
    data = {key: value for key, value in metadata.model_dump(by_alias=True).items() if value is not None}
    return yaml.safe_dump(data, allow_unicode=True, sort_keys=False)


def load_metadata(
    book_dir: Path,
    custom_path: Path | None = None,
    *,
    workspace: FragmentWorkspace | None = None,
) -> MetadataSource:
    """Resolve the metadata for a book.

    Args:
        book_dir: Book directory; ``metadata.yaml`` inside it is the default source.
        custom_path: Metadata file given on the command line.
        workspace: Where synthesized metadata files are written. Without one,
            defaults are returned with no file path.

    Returns:
        The metadata source. Parse failures are logged and recovered with defaults.
    """
    metadata_path = Path(custom_path) if custom_path else Path(book_dir) / GITBOOK2EPUB_METADATA_NAME
    defaults = default_metadata(book_dir)

    if not metadata_path.is_file():
        logger.warning("Metadata file %s not found, using default metadata", metadata_path)
        return _synthesize(defaults, workspace)

    try:
        loaded = read_metadata_file(metadata_path)
    except MetadataError as exc:
        logger.error("Failed to parse metadata file %s: %s", metadata_path, exc)
        return _synthesize(defaults, workspace)

    data = BookMetadata.model_validate({**defaults, **{str(key): value for key, value in loaded.items()}})
    logger.info("Loaded metadata from %s", metadata_path)
    return MetadataSource(path=metadata_path.resolve(), data=data)


def _synthesize(defaults: dict[str, Any], workspace: FragmentWorkspace | None) -> MetadataSource:
    data = BookMetadata.model_validate(defaults)
    if workspace is None:
        return MetadataSource(data=data)
    try:
        path = workspace.write_text(TEMP_METADATA_NAME, dump_metadata(data))
    except OSError as exc:
        logger.error("Cannot create temporary metadata file: %s", exc)
        return MetadataSource(data=data)
    return MetadataSource(path=path, data=data, is_temp=True)
