"""Check that the system can run conversions.

    gitbook2epub-check
"""

from __future__ import annotations

import logging
import platform
import sys

from gitbook2epub.exceptions import RendererNotAvailableError
from gitbook2epub.renderer import PANDOC_INSTALL_URL, check_renderer
from gitbook2epub.utils.logging_config import configure_logging

logger = logging.getLogger("gitbook2epub.dependencies")

MIN_PYTHON = (3, 10)

_INSTALL_GUIDES = {
    "Windows": [
        f"Download the installer from {PANDOC_INSTALL_URL}",
        "choco install pandoc (requires Chocolatey)",
        "winget install JohnMacFarlane.Pandoc",
    ],
    "Darwin": [
        "brew install pandoc",
        f"Download the installer from {PANDOC_INSTALL_URL}",
    ],
    "Linux": [
        "Ubuntu/Debian: sudo apt-get install pandoc",
        "CentOS/RHEL: sudo yum install pandoc",
        "Arch Linux: sudo pacman -S pandoc",
        f"Other distributions: {PANDOC_INSTALL_URL}",
    ],
}


def check_python(version_info: tuple[int, ...] = tuple(sys.version_info[:3])) -> bool:
    version = ".".join(str(part) for part in version_info)
    if tuple(version_info[:2]) >= MIN_PYTHON:
        logger.info("Python %s: OK", version)
        return True
    logger.error("Python %s: version %d.%d or newer is required", version, *MIN_PYTHON)
    return False


def check_pandoc() -> bool:
    try:
        version = check_renderer()
    except RendererNotAvailableError:
        logger.error("pandoc: not installed")
        return False
    logger.info("%s: OK", version)
    return True


def install_guide(system: str | None = None) -> list[str]:
    """pandoc install instructions for the given (or current) platform."""
    system = system or platform.system()
    return _INSTALL_GUIDES.get(system, _INSTALL_GUIDES["Linux"])


def main() -> int:
    configure_logging()
    logger.info("Checking system dependencies...")

    python_ok = check_python()
    pandoc_ok = check_pandoc()

    if python_ok and pandoc_ok:
        logger.info("All dependencies are installed.")
        logger.info("Usage: gitbook2epub [BOOK] [OUTPUT] or python -m server for the interactive service")
        return 0

    logger.error("Missing dependencies, install them and try again.")
    if not pandoc_ok:
        logger.info("pandoc install guide:")
        for line in install_guide():
            logger.info("  %s", line)
    return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
