"""Join fragments into one document and hand them to the renderer."""

from __future__ import annotations

import logging
from pathlib import Path

from gitbook2epub.config import DEFAULT_STYLESHEET_PATH, MIN_TOC_DEPTH
from gitbook2epub.materializer import FragmentWorkspace
from gitbook2epub.renderer import render
from gitbook2epub.schemas import BookMetadata, MaterializedBook, RenderPlan

logger = logging.getLogger(__name__)

PAGE_BREAK = '<div style="page-break-after: always;"></div>'


def join_with_page_breaks(bodies: list[str]) -> list[str]:
    """Append a page-break marker to every body except the last."""
    separated: list[str] = []
    last = len(bodies) - 1
    for index, body in enumerate(bodies):
        text = body.rstrip("\n") + "\n\n"
        if index < last:
            text += PAGE_BREAK + "\n\n"
        separated.append(text)
    return separated


def assemble_document(bodies: list[str]) -> str:
    """Concatenate fragment bodies into one Markdown document."""
    return "".join(join_with_page_breaks(bodies))


def toc_depth(max_level: int) -> int:
    """Table-of-contents depth for the deepest manifest level."""
    return max(max_level, MIN_TOC_DEPTH)


def _resolve_existing(value: str | Path, base_dir: Path) -> Path | None:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    path = path.resolve()
    return path if path.is_file() else None


def resolve_stylesheet(
    custom_style: Path | None,
    metadata: BookMetadata,
    base_dir: Path,
    default_style: Path | None = DEFAULT_STYLESHEET_PATH,
) -> Path | None:
    """Pick the stylesheet: command line first, then metadata ``css``, then the built-in one."""
    if custom_style:
        path = _resolve_existing(custom_style, Path.cwd())
        if path is not None:
            logger.info("Using stylesheet from command line: %s", path)
            return path
        logger.warning("Stylesheet %s does not exist", custom_style)

    css = metadata.css_file
    if css:
        path = _resolve_existing(css, base_dir)
        if path is not None:
            logger.info("Using stylesheet from metadata: %s", path)
            return path
        logger.warning("Stylesheet named in metadata does not exist: %s", base_dir / css)

    if default_style is not None and default_style.is_file():
        logger.info("Using default stylesheet")
        return default_style
    return None


def resolve_cover_image(metadata: BookMetadata, base_dir: Path) -> Path | None:
    """Resolve ``cover-image`` relative to the book directory."""
    cover_image = metadata.cover_image_file
    if not cover_image:
        return None
    path = _resolve_existing(cover_image, base_dir)
    if path is None:
        logger.warning("Cover image does not exist: %s", base_dir / cover_image)
        return None
    logger.info("Using cover image: %s", path)
    return path


def assemble_book(
    book: MaterializedBook,
    workspace: FragmentWorkspace,
    *,
    output_path: Path,
    base_dir: Path,
    metadata: BookMetadata,
    metadata_path: Path | None = None,
    custom_style: Path | None = None,
) -> RenderPlan:
    """Write page-separated fragments into the workspace and render them.

    Returns:
        The render plan that was executed.

    Raises:
        RenderError: If pandoc fails.
    """
    bodies = join_with_page_breaks([fragment.body for fragment in book.fragments])
    fragment_paths = workspace.write_fragments(book.fragments, bodies)

    plan = RenderPlan(
        output_path=Path(output_path).resolve(),
        fragment_paths=fragment_paths,
        toc_depth=toc_depth(book.max_level),
        metadata_path=metadata_path,
        cover_image=resolve_cover_image(metadata, base_dir),
        stylesheet=resolve_stylesheet(custom_style, metadata, base_dir),
        working_dir=Path(base_dir).resolve(),
    )
    logger.info("Converting %d file(s) with toc depth %d", len(fragment_paths), plan.toc_depth)
    render(plan)
    return plan
