"""Pydantic models for the interactive API."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class FileKind(str, Enum):
    """Kinds of files a client can pick."""

    METADATA = "metadata"
    STYLE = "style"


class ChoosePathRequest(BaseModel):
    """Candidate path for a directory or save-target selection."""

    path: str = Field(..., description="Path entered or picked by the user")

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Validate that ``path`` is not empty."""
        if not v.strip():
            err = "path cannot be empty"
            raise ValueError(err)
        return v.strip()


class ChooseFileRequest(ChoosePathRequest):
    """Candidate path for a typed file selection."""

    kind: FileKind = Field(..., description="metadata (.yaml/.yml) or style (.css)")


class PathResponse(BaseModel):
    """Accepted path, or null when the selection is rejected."""

    path: str | None = Field(default=None, description="Normalized absolute path")


class ConvertRequest(BaseModel):
    """Request model for the /api/convert endpoint.

    Attributes
    ----------
    book_dir : str
        GitBook directory to convert.
    output_path : str | None
        Target file; defaults to output/<book name>.epub.
    metadata_path : str | None
        Metadata YAML file.
    style_path : str | None
        CSS file.

    """

    book_dir: str = Field(..., description="GitBook directory")
    output_path: str | None = Field(default=None, description="Output file")
    metadata_path: str | None = Field(default=None, description="Metadata YAML file")
    style_path: str | None = Field(default=None, description="CSS file")

    @field_validator("book_dir")
    @classmethod
    def validate_book_dir(cls, v: str) -> str:
        """Validate that ``book_dir`` is not empty."""
        if not v.strip():
            err = "book_dir cannot be empty"
            raise ValueError(err)
        return v.strip()


class ConvertResponse(BaseModel):
    """Outcome of a conversion run."""

    success: bool = Field(..., description="True when the converter exited with 0")
    message: str = Field(..., description="Human-readable outcome")
    exit_code: int | None = Field(default=None, description="Converter exit code")
