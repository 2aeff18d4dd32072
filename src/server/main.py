"""FastAPI application."""

from fastapi import FastAPI

from gitbook2epub.utils.logging_config import configure_logging
from server.routers import choose_router, convert_router

configure_logging()

app = FastAPI(
    title="gitbook2epub",
    description="Convert GitBook directories to EPUB.",
)
app.include_router(choose_router)
app.include_router(convert_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
