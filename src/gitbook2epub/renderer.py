"""Invoke pandoc to render the materialized fragments."""

from __future__ import annotations

import logging
import subprocess

from gitbook2epub.config import GITBOOK2EPUB_PANDOC_PATH
from gitbook2epub.exceptions import RenderError, RendererNotAvailableError
from gitbook2epub.schemas import RenderPlan

logger = logging.getLogger(__name__)

PANDOC_INSTALL_URL = "https://pandoc.org/installing.html"


def check_renderer(pandoc: str = GITBOOK2EPUB_PANDOC_PATH) -> str:
    """Return the first line of ``pandoc --version``.

    Raises:
        RendererNotAvailableError: If pandoc cannot be executed.
    """
    try:
        result = subprocess.run(
            [pandoc, "--version"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise RendererNotAvailableError(
            f"pandoc command not found. Install pandoc and try again: {PANDOC_INSTALL_URL}"
        ) from exc

    if result.returncode != 0:
        raise RendererNotAvailableError(f"pandoc --version failed: {result.stderr.strip()}")

    lines = result.stdout.splitlines()
    return lines[0] if lines else pandoc


def build_pandoc_args(plan: RenderPlan, pandoc: str = GITBOOK2EPUB_PANDOC_PATH) -> list[str]:
    """Build the pandoc command line for a render plan.

    The cover image flag is EPUB-only and is dropped for other output formats.
    """
    args = [
        pandoc,
        "-o",
        str(plan.output_path),
        "--toc",
        f"--toc-depth={plan.toc_depth}",
    ]
    if plan.metadata_path:
        args.extend(["--metadata-file", str(plan.metadata_path)])
    if plan.cover_image and plan.output_path.suffix.lower() == ".epub":
        args.extend(["--epub-cover-image", str(plan.cover_image)])
    if plan.stylesheet:
        args.extend(["--css", str(plan.stylesheet)])
    args.extend(str(path) for path in plan.fragment_paths)
    return args


def render(plan: RenderPlan, pandoc: str = GITBOOK2EPUB_PANDOC_PATH) -> None:
    """Run pandoc once; failures are reported, never retried.

    Pandoc runs inside the book directory so relative image links in the
    fragments resolve against the original sources.

    Raises:
        RenderError: If pandoc cannot be started or exits non-zero.
    """
    args = build_pandoc_args(plan, pandoc)
    logger.info("Running pandoc", extra={"output": str(plan.output_path), "files": len(plan.fragment_paths)})
    logger.debug("pandoc command: %s", " ".join(args))

    try:
        result = subprocess.run(
            args,
            cwd=plan.working_dir,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise RenderError(f"Cannot run pandoc: {exc}") from exc

    if result.returncode != 0:
        raise RenderError(f"Pandoc conversion failed: {result.stderr.strip()}")

    if result.stderr.strip():
        logger.warning("pandoc: %s", result.stderr.strip())
