"""Conversion pipeline for GitBook directory -> EPUB."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from gitbook2epub.assembler import assemble_book, assemble_document
from gitbook2epub.config import (
    DEFAULT_DOCUMENT_EXTENSION,
    DEFAULT_OUTPUT_SUFFIX,
    GITBOOK2EPUB_BOOKS_DIR,
    GITBOOK2EPUB_INDEX_PAGES,
    GITBOOK2EPUB_MANIFEST_NAME,
    GITBOOK2EPUB_OUTPUT_DIR,
)
from gitbook2epub.exceptions import (
    BookDirectoryNotFoundError,
    EmptyManifestError,
    ManifestNotFoundError,
    OutputNotWritableError,
)
from gitbook2epub.manifest_parser import parse_manifest_file
from gitbook2epub.materializer import FragmentWorkspace, materialize
from gitbook2epub.metadata import load_metadata
from gitbook2epub.renderer import check_renderer
from gitbook2epub.schemas import ConversionResult, Fragment

logger = logging.getLogger(__name__)


@dataclass
class ConversionOptions:
    """Options for a conversion run.

    Attributes:
        metadata_path: Metadata YAML overriding ``<book>/metadata.yaml``.
        style_path: Stylesheet taking priority over metadata and the default.
        index_pages: File names that mark chapter and sub-chapter index pages.
        extension: Document extension of manifest link targets.
        combined_markdown_path: If set, the assembled single Markdown
            document is also written here.
    """

    metadata_path: Path | None = None
    style_path: Path | None = None
    index_pages: tuple[str, ...] = field(default_factory=lambda: GITBOOK2EPUB_INDEX_PAGES)
    extension: str = DEFAULT_DOCUMENT_EXTENSION
    combined_markdown_path: Path | None = None


def resolve_book_dir(name: str | Path | None) -> Path:
    """Absolute paths are used as is; relative names live under the books directory."""
    path = Path(name or ".").expanduser()
    if path.is_absolute():
        return path
    return (GITBOOK2EPUB_BOOKS_DIR / path).resolve()


def resolve_output_path(book_dir: Path, output: str | Path | None = None) -> Path:
    """Default output is ``<output dir>/<book name>.epub``."""
    if output:
        path = Path(output).expanduser()
        if path.is_absolute():
            return path
        return (GITBOOK2EPUB_OUTPUT_DIR / path).resolve()
    return (GITBOOK2EPUB_OUTPUT_DIR / f"{book_dir.name}{DEFAULT_OUTPUT_SUFFIX}").resolve()


def describe_fragments(fragments: list[Fragment]) -> list[str]:
    """One display line per fragment; stubs are labelled."""
    lines = []
    for fragment in fragments:
        if fragment.synthesized:
            lines.append(f"[stub] {'#' * fragment.level} {fragment.title}")
        else:
            lines.append(f"{fragment.source} ({'#' * fragment.level} {fragment.title})")
    return lines


def convert_book(
    book_dir: Path,
    output_path: Path,
    options: ConversionOptions | None = None,
) -> ConversionResult:
    """Convert a GitBook directory into an EPUB (or any pandoc output format).

    Args:
        book_dir: Directory containing SUMMARY.md.
        output_path: Target file; its suffix selects the pandoc output format.
        options: Conversion options. Uses defaults if None.

    Returns:
        Summary of the conversion.

    Raises:
        BookDirectoryNotFoundError: If ``book_dir`` is not a directory.
        RendererNotAvailableError: If pandoc is missing.
        ManifestNotFoundError: If SUMMARY.md is missing.
        EmptyManifestError: If the manifest yields no content.
        OutputNotWritableError: If an output location cannot be created.
        RenderError: If pandoc fails.
    """
    opts = options or ConversionOptions()
    book_dir = Path(book_dir).resolve()
    output_path = Path(output_path).resolve()

    logger.info("Converting GitBook to EPUB")
    logger.info("Source directory: %s", book_dir)
    logger.info("Output file: %s", output_path)

    if not book_dir.is_dir():
        raise BookDirectoryNotFoundError(f"Directory {book_dir} does not exist")

    pandoc_version = check_renderer()
    logger.debug("Found %s", pandoc_version)

    manifest_path = book_dir / GITBOOK2EPUB_MANIFEST_NAME
    if not manifest_path.is_file():
        raise ManifestNotFoundError(f"{GITBOOK2EPUB_MANIFEST_NAME} not found in {book_dir}, cannot parse the book structure")

    with FragmentWorkspace() as workspace:
        metadata = load_metadata(book_dir, opts.metadata_path, workspace=workspace)

        logger.info("Parsing %s...", manifest_path.name)
        tree = parse_manifest_file(
            manifest_path,
            book_dir,
            index_pages=opts.index_pages,
            extension=opts.extension,
        )
        book = materialize(tree)
        if not book.fragments:
            raise EmptyManifestError("No usable content files found; check the SUMMARY.md format")

        logger.info("Including the following files:")
        for line in describe_fragments(book.fragments):
            logger.info("- %s", line)

        warnings = [
            f"Missing source replaced by heading stub: {fragment.source}"
            for fragment in book.fragments
            if fragment.synthesized and fragment.source is not None
        ]

        combined_path = None
        if opts.combined_markdown_path:
            combined_path = Path(opts.combined_markdown_path).resolve()
            try:
                combined_path.parent.mkdir(parents=True, exist_ok=True)
                combined_path.write_text(
                    assemble_document([fragment.body for fragment in book.fragments]),
                    encoding="utf-8",
                )
            except OSError as exc:
                raise OutputNotWritableError(f"Cannot write combined Markdown to {combined_path}: {exc}") from exc
            logger.info("Combined Markdown written to %s", combined_path)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputNotWritableError(f"Cannot create output directory {output_path.parent}: {exc}") from exc
        plan = assemble_book(
            book,
            workspace,
            output_path=output_path,
            base_dir=book_dir,
            metadata=metadata.data,
            metadata_path=metadata.path,
            custom_style=opts.style_path,
        )

    logger.info("Document generated: %s", output_path)
    return ConversionResult(
        output_path=output_path,
        fragment_count=len(book.fragments),
        max_level=book.max_level,
        toc_depth=plan.toc_depth,
        stylesheet=plan.stylesheet,
        cover_image=plan.cover_image,
        combined_markdown_path=combined_path,
        warnings=warnings,
    )
