"""API routers."""

from server.routers.choose import router as choose_router
from server.routers.convert import router as convert_router

__all__ = ["choose_router", "convert_router"]
