"""Command line entry point.

    gitbook2epub my-book                      # gitbooks/my-book -> output/my-book.epub
    gitbook2epub /abs/book /abs/out.epub -m meta.yaml -s style.css
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from gitbook2epub.config import GITBOOK2EPUB_INDEX_PAGES, GITBOOK2EPUB_LOG_LEVEL
from gitbook2epub.conversion import ConversionOptions, convert_book, resolve_book_dir, resolve_output_path
from gitbook2epub.exceptions import Gitbook2epubError
from gitbook2epub.utils.logging_config import configure_logging

logger = logging.getLogger("gitbook2epub")

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitbook2epub",
        description="Convert a GitBook directory (SUMMARY.md + Markdown files) to EPUB with pandoc.",
    )
    parser.add_argument("book", nargs="?", default=".", help="GitBook directory; relative names resolve under gitbooks/")
    parser.add_argument("output", nargs="?", help="Output file; relative names resolve under output/")
    parser.add_argument("-m", "--metadata", type=Path, help="Metadata YAML file (default: <book>/metadata.yaml)")
    parser.add_argument("-s", "--style", type=Path, help="CSS file, overrides the metadata css entry")
    parser.add_argument(
        "--index-page",
        action="append",
        dest="index_pages",
        metavar="NAME",
        help=f"File name of chapter index pages, repeatable (default: {', '.join(GITBOOK2EPUB_INDEX_PAGES)})",
    )
    parser.add_argument("--combined-markdown", type=Path, metavar="PATH", help="Also write the assembled Markdown here")
    parser.add_argument("--log-level", default=GITBOOK2EPUB_LOG_LEVEL)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.log_level)

    book_dir = resolve_book_dir(args.book)
    output_path = resolve_output_path(book_dir, args.output)
    options = ConversionOptions(
        metadata_path=args.metadata,
        style_path=args.style,
        combined_markdown_path=args.combined_markdown,
    )
    if args.index_pages:
        options.index_pages = tuple(args.index_pages)

    try:
        result = convert_book(book_dir, output_path, options)
    except Gitbook2epubError as exc:
        logger.error("%s", exc)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.info("Interrupted, temporary files cleaned up")
        return EXIT_FAILURE

    for warning in result.warnings:
        logger.warning("%s", warning)
    logger.info(
        "Done: %d fragment(s), toc depth %d",
        result.fragment_count,
        result.toc_depth,
    )
    return EXIT_SUCCESS


def run() -> None:
    """Console script wrapper."""
    sys.exit(main())


if __name__ == "__main__":
    run()
