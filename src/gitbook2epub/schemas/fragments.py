"""Materialized fragment models."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class Fragment(BaseModel):
    """Normalized content of exactly one chapter-tree node."""

    name: str
    title: str
    level: int = Field(..., ge=1, le=3)
    source: Path | None = None
    synthesized: bool = False
    body: str


class MaterializedBook(BaseModel):
    """Fragments in reading order plus the deepest manifest level."""

    fragments: list[Fragment] = Field(default_factory=list)
    max_level: int = Field(default=1, ge=1)
