"""Turn a chapter tree into normalized fragments and temporary fragment files."""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from types import TracebackType

from gitbook2epub.headings import heading_stub, normalize_headings
from gitbook2epub.schemas import ChapterTree, Fragment, MaterializedBook, SubChapter

logger = logging.getLogger(__name__)

FRONT_MATTER_LEVEL = 1
CHAPTER_LEVEL = 1
SECTION_LEVEL = 2
SUBSECTION_LEVEL = 3


def read_source(path: Path | None) -> str | None:
    """Read a fragment source, returning None when it is missing or unreadable."""
    if path is None or not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.error("Cannot read %s: %s", path, exc)
        return None


def make_fragment(name: str, title: str, path: Path | None, level: int) -> Fragment:
    """Normalize one source, or synthesize a heading stub when it has no content to read."""
    text = read_source(path)
    if text is None:
        return Fragment(
            name=name,
            title=title,
            level=level,
            source=path,
            synthesized=True,
            body=heading_stub(title, level),
        )
    return Fragment(
        name=name,
        title=title,
        level=level,
        source=path,
        body=normalize_headings(text, level),
    )


def _basename(path: Path | None) -> str:
    return path.name if path is not None else "stub.md"


def materialize(tree: ChapterTree) -> MaterializedBook:
    """Produce fragments in reading order.

    Front matter and chapters are level 1, chapter items and sub-chapters
    level 2, sub-chapter items level 3. Every node yields exactly one fragment.
    """
    fragments: list[Fragment] = []

    for index, item in enumerate(tree.front_matter):
        fragments.append(
            make_fragment(
                f"frontmatter-{index:02d}-{_basename(item.path)}",
                item.title,
                item.path,
                FRONT_MATTER_LEVEL,
            )
        )
        logger.info("Front matter: %s", item.title)

    for chapter_number, chapter in enumerate(tree.chapters, start=1):
        fragments.append(make_fragment(f"chapter-{chapter_number}.md", chapter.title, chapter.path, CHAPTER_LEVEL))

        for file_number, node in enumerate(chapter.files, start=1):
            if isinstance(node, SubChapter):
                fragments.append(
                    make_fragment(
                        f"subchapter-{chapter_number}-{file_number}.md",
                        node.title,
                        node.path,
                        SECTION_LEVEL,
                    )
                )
                for item_number, item in enumerate(node.files, start=1):
                    fragments.append(
                        make_fragment(
                            f"subitem-{chapter_number}-{file_number}-{item_number}-{_basename(item.path)}",
                            item.title,
                            item.path,
                            SUBSECTION_LEVEL,
                        )
                    )
            else:
                fragments.append(
                    make_fragment(
                        f"item-{chapter_number}-{file_number}-{_basename(node.path)}",
                        node.title,
                        node.path,
                        SECTION_LEVEL,
                    )
                )

    return MaterializedBook(fragments=fragments, max_level=tree.max_level)


class FragmentWorkspace:
    """Temporary directory that owns the files written for one conversion.

    Use as a context manager; ``cleanup`` is idempotent and also safe to call
    after the directory was removed externally.

        with FragmentWorkspace() as workspace:
            paths = workspace.write_fragments(book.fragments)
    """

    def __init__(self, prefix: str = "gitbook2epub-") -> None:
        self._prefix = prefix
        self._dir: Path | None = None
        self.files: list[Path] = []

    @property
    def directory(self) -> Path:
        if self._dir is None:
            self._dir = Path(tempfile.mkdtemp(prefix=self._prefix))
        return self._dir

    def write_text(self, name: str, content: str) -> Path:
        """Write ``content`` to a new file in the workspace and register it."""
        path = self.directory / name
        path.write_text(content, encoding="utf-8")
        self.files.append(path)
        return path

    def write_fragments(self, fragments: list[Fragment], bodies: list[str] | None = None) -> list[Path]:
        """Write fragments in order, optionally with replacement bodies.

        File names are prefixed with their position so that distinct nodes
        sharing a source basename never collide.
        """
        if bodies is None:
            bodies = [fragment.body for fragment in fragments]
        if len(bodies) != len(fragments):
            raise ValueError("bodies and fragments must have the same length")
        return [
            self.write_text(f"{position:04d}-{fragment.name}", body)
            for position, (fragment, body) in enumerate(zip(fragments, bodies))
        ]

    def cleanup(self) -> None:
        """Delete every registered file and the workspace directory."""
        if self.files:
            logger.info("Cleaning up temporary files...")
        for path in self.files:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Cannot delete temporary file %s: %s", path, exc)
        self.files.clear()
        if self._dir is not None:
            shutil.rmtree(self._dir, ignore_errors=True)
            self._dir = None

    def __enter__(self) -> FragmentWorkspace:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()
