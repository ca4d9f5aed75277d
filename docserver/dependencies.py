"""FastAPI dependency providers wiring services to the app's store handles."""

from fastapi import Request

from docserver.services.file_service import FileService
from docserver.services.folder_service import FolderService


def get_folder_service(request: Request) -> FolderService:
    """Build a FolderService on the application's database and blob store."""
    state = request.app.state
    return FolderService(state.db, state.blob_store)


def get_file_service(request: Request) -> FileService:
    """Build a FileService on the application's database and blob store."""
    state = request.app.state
    return FileService(state.db, state.blob_store, state.max_upload_bytes)
