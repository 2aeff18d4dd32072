"""Chapter tree models built from a SUMMARY.md manifest."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, Field


class Item(BaseModel):
    """A single content page.

    Attributes:
        title: Link title from the manifest.
        path: Resolved source path of the page.
        synthesized: True when the source does not exist; a heading stub is
            rendered in its place.
        is_sub_item: True when the item sits under a chapter or sub-chapter.
        is_primary_index: True for the book-level README registered first.
        indent_level: Indentation level of the manifest line.
    """

    title: str
    path: Path | None = None
    synthesized: bool = False
    is_sub_item: bool = False
    is_primary_index: bool = False
    indent_level: int = Field(default=1, ge=1)


class SubChapter(BaseModel):
    """A grouping node opened by a nested index page.

    ``indent`` is the raw leading whitespace of its manifest line; deeper
    lines belong to it.
    """

    title: str
    path: Path | None = None
    synthesized: bool = False
    indent: int = Field(default=2, ge=0)
    indent_level: int = Field(default=2, ge=1)
    files: list[Item] = Field(default_factory=list)
    is_sub_chapter: Literal[True] = True


class Chapter(BaseModel):
    """A top-level chapter opened by a level-1 index page."""

    title: str
    path: Path | None = None
    synthesized: bool = False
    files: list[Union[SubChapter, Item]] = Field(default_factory=list)


class ChapterTree(BaseModel):
    """Ordered chapter hierarchy of one book."""

    front_matter: list[Item] = Field(default_factory=list)
    chapters: list[Chapter] = Field(default_factory=list)
    max_level: int = Field(default=1, ge=1)

    def entry_count(self) -> int:
        """Count every node that will become a fragment."""
        total = len(self.front_matter)
        for chapter in self.chapters:
            total += 1
            for node in chapter.files:
                total += 1
                if isinstance(node, SubChapter):
                    total += len(node.files)
        return total
