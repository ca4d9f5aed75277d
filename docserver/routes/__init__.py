"""API routes package."""

from docserver.routes.folder_routes import router as folder_router
from docserver.routes.file_routes import router as file_router

__all__ = ["folder_router", "file_router"]
