"""Service layer for business logic."""

from docserver.services.folder_service import FolderService
from docserver.services.file_service import FilePreview, FileService

__all__ = [
    "FolderService",
    "FilePreview",
    "FileService",
]
