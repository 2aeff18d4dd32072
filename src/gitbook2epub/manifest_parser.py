"""Build a chapter tree from a GitBook SUMMARY.md manifest."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Iterable
from urllib.parse import unquote

from gitbook2epub.config import (
    DEFAULT_DOCUMENT_EXTENSION,
    DEFAULT_PREFACE_TITLE,
    GITBOOK2EPUB_INDEX_PAGES,
)
from gitbook2epub.exceptions import EmptyManifestError, ParseError
from gitbook2epub.schemas import Chapter, ChapterTree, Item, SubChapter

logger = logging.getLogger(__name__)

_LINK_LINE_RE = re.compile(r"^(?P<indent>\s*)[*+-]\s+\[(?P<title>.*?)\]\((?P<target>[^)]*)\)")
_LIST_MARKER_RE = re.compile(r"^\s*[*+-]\s")
_EXTERNAL_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


class ParserState(str, Enum):
    """Which container new manifest entries attach to."""

    NO_CHAPTER = "no_chapter"
    CHAPTER_OPEN = "chapter_open"
    SUBCHAPTER_OPEN = "subchapter_open"


class Mutation(str, Enum):
    """Tree operation produced by one manifest entry."""

    ADD_FRONT_MATTER = "add_front_matter"
    OPEN_CHAPTER = "open_chapter"
    OPEN_SUBCHAPTER = "open_subchapter"
    ADD_SUBCHAPTER_ITEM = "add_subchapter_item"
    ADD_CHAPTER_ITEM = "add_chapter_item"
    SKIP_DUPLICATE = "skip_duplicate"


@dataclass(frozen=True)
class ManifestEntry:
    """A manifest line that links to a document."""

    title: str
    target: str
    indent: int
    is_index_page: bool

    @property
    def top_level(self) -> bool:
        return self.indent == 0

    @property
    def indent_level(self) -> int:
        return self.indent // 2 + 1


def leading_whitespace(line: str) -> int:
    return len(line) - len(line.lstrip())


def indent_level(line: str) -> int:
    """Two leading whitespace characters make one level; zero indentation is level 1."""
    return leading_whitespace(line) // 2 + 1


def is_index_page(target: str, index_pages: Iterable[str] = GITBOOK2EPUB_INDEX_PAGES) -> bool:
    """True when ``target`` is an index page inside a subdirectory.

    ``README.md`` alone is the book's primary index, not a container page.
    """
    path = PurePosixPath(target)
    names = {name.casefold() for name in index_pages}
    return len(path.parts) > 1 and path.name.casefold() in names


def classify_line(
    line: str,
    *,
    index_pages: Iterable[str] = GITBOOK2EPUB_INDEX_PAGES,
    extension: str = DEFAULT_DOCUMENT_EXTENSION,
) -> ManifestEntry | None:
    """Parse one manifest line, returning None for anything that is not a document link."""
    if not line.strip() or not _LIST_MARKER_RE.match(line):
        return None
    match = _LINK_LINE_RE.match(line)
    if not match:
        return None

    target = match.group("target").strip()
    if target.startswith("<") and target.endswith(">"):
        target = target[1:-1]
    target = unquote(target.split("#", 1)[0])
    if not target or _EXTERNAL_RE.match(target):
        return None
    if not target.lower().endswith(extension.lower()):
        return None

    return ManifestEntry(
        title=match.group("title").strip(),
        target=target,
        indent=leading_whitespace(line),
        is_index_page=is_index_page(target, index_pages),
    )


def next_mutation(state: ParserState, entry: ManifestEntry, subchapter_indent: int | None = None) -> Mutation:
    """Transition function of the tree builder.

    Args:
        state: Current builder state.
        entry: The classified manifest line.
        subchapter_indent: Leading whitespace of the open sub-chapter line, if any.

    Returns:
        The mutation to apply. Duplicates are detected by the builder, not here.
    """
    if entry.top_level:
        return Mutation.OPEN_CHAPTER if entry.is_index_page else Mutation.ADD_FRONT_MATTER
    if state is ParserState.NO_CHAPTER:
        # Nested entries without a chapter flatten into the front matter.
        return Mutation.ADD_FRONT_MATTER
    if entry.is_index_page:
        return Mutation.OPEN_SUBCHAPTER
    if (
        state is ParserState.SUBCHAPTER_OPEN
        and subchapter_indent is not None
        and entry.indent > subchapter_indent
    ):
        return Mutation.ADD_SUBCHAPTER_ITEM
    return Mutation.ADD_CHAPTER_ITEM


class TreeBuilder:
    """Explicit state machine that turns manifest entries into a ChapterTree."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)
        self.state = ParserState.NO_CHAPTER
        self.tree = ChapterTree()
        self._chapter: Chapter | None = None
        self._subchapter: SubChapter | None = None
        self._registered: set[Path] = set()

    def resolve(self, target: str) -> Path:
        return (self.base_dir / target).resolve()

    def register_primary_index(self, path: Path, title: str) -> None:
        """Register the book-level index page as the first front-matter item."""
        resolved = path.resolve()
        self.tree.front_matter.insert(0, Item(title=title, path=resolved, is_primary_index=True))
        self._registered.add(resolved)

    def feed(self, entry: ManifestEntry) -> Mutation:
        """Apply one manifest entry and return the mutation performed."""
        path = self.resolve(entry.target)
        if path in self._registered:
            logger.debug("Skipping duplicate manifest entry %s", entry.target)
            return Mutation.SKIP_DUPLICATE

        subchapter_indent = self._subchapter.indent if self._subchapter else None
        mutation = next_mutation(self.state, entry, subchapter_indent)
        synthesized = not path.is_file()
        if synthesized:
            logger.warning("Source file not found, a heading stub will be used: %s", entry.target)
        self._registered.add(path)

        if mutation is Mutation.ADD_FRONT_MATTER:
            self.tree.front_matter.append(Item(title=entry.title, path=path, synthesized=synthesized))
            return mutation

        if mutation is Mutation.OPEN_CHAPTER:
            self._chapter = Chapter(title=entry.title, path=path, synthesized=synthesized)
            self._subchapter = None
            self.tree.chapters.append(self._chapter)
            self.state = ParserState.CHAPTER_OPEN
            return mutation

        chapter = self._chapter
        if chapter is None:
            raise ParseError(f"Nested entry {entry.target} has no open chapter")
        self.tree.max_level = max(self.tree.max_level, entry.indent_level)

        if mutation is Mutation.OPEN_SUBCHAPTER:
            self._subchapter = SubChapter(
                title=entry.title,
                path=path,
                synthesized=synthesized,
                indent=entry.indent,
                indent_level=entry.indent_level,
            )
            chapter.files.append(self._subchapter)
            self.state = ParserState.SUBCHAPTER_OPEN
            return mutation

        item = Item(
            title=entry.title,
            path=path,
            synthesized=synthesized,
            is_sub_item=True,
            indent_level=entry.indent_level,
        )
        if mutation is Mutation.ADD_SUBCHAPTER_ITEM and self._subchapter is not None:
            self._subchapter.files.append(item)
        else:
            chapter.files.append(item)
            self._subchapter = None
            self.state = ParserState.CHAPTER_OPEN
        return mutation


def find_primary_index(base_dir: Path, index_pages: Iterable[str] = GITBOOK2EPUB_INDEX_PAGES) -> Path | None:
    """Return the first index page that exists directly in ``base_dir``."""
    for name in index_pages:
        candidate = Path(base_dir) / name
        if candidate.is_file():
            return candidate
    return None


def primary_index_title(manifest_text: str, filename: str) -> str:
    """Title of the zero-indentation manifest line linking ``filename``."""
    pattern = re.compile(rf"^[*+-]\s+\[(.*?)\]\(\s*<?(?:\./)?{re.escape(filename)}>?\s*\)", re.IGNORECASE)
    for line in manifest_text.splitlines():
        match = pattern.match(line)
        if match:
            return match.group(1).strip()
    return DEFAULT_PREFACE_TITLE


def parse_manifest(
    manifest_text: str,
    base_dir: Path,
    *,
    index_pages: Iterable[str] = GITBOOK2EPUB_INDEX_PAGES,
    extension: str = DEFAULT_DOCUMENT_EXTENSION,
) -> ChapterTree:
    """Parse SUMMARY.md text into a chapter tree.

    Args:
        manifest_text: Raw manifest contents.
        base_dir: Book directory that link targets are relative to.
        index_pages: File names treated as per-directory index pages.
        extension: Document extension that link targets must end with.

    Returns:
        The chapter tree. Missing sources are kept and flagged as synthesized.

    Raises:
        EmptyManifestError: If the manifest contains no document links.
    """
    index_pages = tuple(index_pages)
    builder = TreeBuilder(base_dir)

    primary = find_primary_index(base_dir, index_pages)
    if primary is not None:
        builder.register_primary_index(primary, primary_index_title(manifest_text, primary.name))

    entries = [
        entry
        for entry in (
            classify_line(line, index_pages=index_pages, extension=extension)
            for line in manifest_text.splitlines()
        )
        if entry is not None
    ]
    if not entries:
        raise EmptyManifestError("No chapter links found in the manifest")

    for entry in entries:
        builder.feed(entry)

    tree = builder.tree
    logger.info(
        "Parsed manifest: %d entries, %d front matter item(s), %d chapter(s), max level %d",
        tree.entry_count(),
        len(tree.front_matter),
        len(tree.chapters),
        tree.max_level,
    )
    return tree


def parse_manifest_file(
    manifest_path: Path,
    base_dir: Path | None = None,
    **kwargs,
) -> ChapterTree:
    """Read and parse a manifest file; ``base_dir`` defaults to its directory."""
    manifest_path = Path(manifest_path)
    text = manifest_path.read_text(encoding="utf-8", errors="replace")
    return parse_manifest(text, base_dir or manifest_path.parent, **kwargs)
