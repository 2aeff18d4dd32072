"""Book metadata model."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BookMetadata(BaseModel):
    """Key/value metadata forwarded to pandoc.

    Values are kept as YAML produced them (pandoc accepts numbers, lists and
    mappings), and unknown keys are kept so they reach the metadata file
    unchanged.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: Any
    author: Any = "Unknown"
    date: Any = None
    lang: Any = None
    cover_image: Any = Field(default=None, alias="cover-image")
    css: Any = None

    @property
    def cover_image_file(self) -> str | None:
        """``cover-image`` when it names a file."""
        return _file_name(self.cover_image)

    @property
    def css_file(self) -> str | None:
        """``css`` when it names a single file."""
        return _file_name(self.css)


def _file_name(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class MetadataSource(BaseModel):
    """Where the metadata came from.

    Attributes:
        path: File handed to pandoc via ``--metadata-file``, or None.
        data: The effective metadata.
        is_temp: True when ``path`` was synthesized inside the workspace.
    """

    path: Path | None = None
    data: BookMetadata
    is_temp: bool = False
