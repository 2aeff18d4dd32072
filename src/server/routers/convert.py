"""Conversion and progress endpoints."""

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import StreamingResponse

from server.conversion_runner import ConversionBusyError, progress_channel, run_conversion
from server.models import ConvertRequest, ConvertResponse

router = APIRouter()


@router.post("/api/convert")
async def api_convert(convert_request: ConvertRequest) -> ConvertResponse:
    """Convert a GitBook directory and wait for the outcome.

    **This endpoint runs the converter as a child process;** its output is
    pushed to ``/api/progress`` while it runs.

    **Raises**

    - **HTTPException**: **409** - another conversion is already running
    """
    try:
        return await run_conversion(convert_request)
    except ConversionBusyError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.get("/api/progress")
async def api_progress() -> StreamingResponse:
    """Stream progress lines of the current (or next) conversion until it completes."""
    queue = progress_channel.subscribe()
    return StreamingResponse(progress_channel.stream(queue), media_type="text/plain")
