"""Conversion plan and result models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class RenderPlan(BaseModel):
    """Everything pandoc needs for one run."""

    output_path: Path
    fragment_paths: list[Path]
    toc_depth: int = Field(..., ge=1)
    metadata_path: Path | None = None
    cover_image: Path | None = None
    stylesheet: Path | None = None
    working_dir: Path | None = None


class ConversionResult(BaseModel):
    """Final conversion output."""

    output_path: Path
    fragment_count: int
    max_level: int
    toc_depth: int
    stylesheet: Path | None = None
    cover_image: Path | None = None
    combined_markdown_path: Path | None = None
    warnings: list[str] = Field(default_factory=list)
