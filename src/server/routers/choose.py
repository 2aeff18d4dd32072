"""Path selection endpoints replacing the desktop file dialogs."""

from pathlib import Path

from fastapi import APIRouter

from server.models import ChooseFileRequest, ChoosePathRequest, PathResponse
from server.path_selection import choose_directory, choose_file, choose_save_target

router = APIRouter()


def _response(path: Path | None) -> PathResponse:
    return PathResponse(path=str(path) if path is not None else None)


@router.post("/api/choose/directory")
async def api_choose_directory(choose_request: ChoosePathRequest) -> PathResponse:
    """Accept a GitBook directory.

    **Returns**

    - **PathResponse**: the absolute directory path, or ``null`` if it is not a directory
    """
    return _response(choose_directory(choose_request.path))


@router.post("/api/choose/file")
async def api_choose_file(choose_request: ChooseFileRequest) -> PathResponse:
    """Accept a metadata (``.yaml``/``.yml``) or style (``.css``) file."""
    return _response(choose_file(choose_request.path, choose_request.kind))


@router.post("/api/choose/save-target")
async def api_choose_save_target(choose_request: ChoosePathRequest) -> PathResponse:
    """Normalize an output path; ``.epub`` is appended when no supported suffix is given."""
    return _response(choose_save_target(choose_request.path))
