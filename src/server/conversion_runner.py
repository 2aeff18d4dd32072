"""Run the converter in a child process and stream its progress."""

from __future__ import annotations

import asyncio
import os
import sys
from typing import AsyncIterator

from gitbook2epub.utils.logging_config import get_logger
from server.models import ConvertRequest, ConvertResponse
from server.server_config import CONVERTER_MODULE

logger = get_logger(__name__)


class ConversionBusyError(RuntimeError):
    """A conversion is already running."""


class ProgressChannel:
    """Fan-out of converter output lines to every connected listener.

    Each listener receives the lines of the conversion that is running (or
    the next one to start) and a final ``None`` when it completes.
    """

    def __init__(self) -> None:
        self._listeners: set[asyncio.Queue[str | None]] = set()
        self.lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self.lock.locked()

    def subscribe(self) -> asyncio.Queue[str | None]:
        queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._listeners.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[str | None]) -> None:
        self._listeners.discard(queue)

    def publish(self, line: str) -> None:
        for queue in list(self._listeners):
            queue.put_nowait(line)

    def close(self) -> None:
        """Signal completion to current listeners and detach them."""
        for queue in list(self._listeners):
            queue.put_nowait(None)
        self._listeners.clear()

    async def stream(self, queue: asyncio.Queue[str | None] | None = None) -> AsyncIterator[str]:
        """Yield newline-terminated lines until the conversion completes."""
        queue = queue or self.subscribe()
        try:
            while True:
                line = await queue.get()
                if line is None:
                    break
                yield line + "\n"
        finally:
            self.unsubscribe(queue)


progress_channel = ProgressChannel()


def build_converter_command(request: ConvertRequest) -> list[str]:
    """Command line of the converter child process."""
    args = [sys.executable, "-m", CONVERTER_MODULE, request.book_dir]
    if request.output_path:
        args.append(request.output_path)
    if request.metadata_path:
        args.extend(["--metadata", request.metadata_path])
    if request.style_path:
        args.extend(["--style", request.style_path])
    return args


async def run_conversion(
    request: ConvertRequest,
    channel: ProgressChannel = progress_channel,
) -> ConvertResponse:
    """Run one conversion, pushing its output lines to ``channel``.

    Raises:
        ConversionBusyError: If another conversion is in flight.
    """
    if channel.busy:
        raise ConversionBusyError("A conversion is already running")

    async with channel.lock:
        args = build_converter_command(request)
        logger.info("Starting conversion", extra={"book_dir": request.book_dir, "output": request.output_path})
        env = {**os.environ, "GITBOOK2EPUB_GUI_MODE": "true"}
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                env=env,
            )
        except OSError as exc:
            logger.error("Cannot start converter", extra={"error": str(exc)})
            channel.publish(f"Error: {exc}")
            channel.close()
            return ConvertResponse(success=False, message=f"Execution error: {exc}")

        try:
            if process.stdout is not None:
                async for raw in process.stdout:
                    channel.publish(raw.decode("utf-8", errors="replace").rstrip("\r\n"))
            exit_code = await process.wait()
        finally:
            if process.returncode is None:
                logger.warning("Stopping converter", extra={"book_dir": request.book_dir})
                process.kill()
                await process.wait()
            channel.close()

    if exit_code == 0:
        logger.info("Conversion completed successfully", extra={"book_dir": request.book_dir})
        return ConvertResponse(success=True, message="Conversion succeeded", exit_code=exit_code)

    logger.error("Conversion failed", extra={"book_dir": request.book_dir, "exit_code": exit_code})
    return ConvertResponse(
        success=False,
        message=f"Conversion failed with exit code {exit_code}",
        exit_code=exit_code,
    )
