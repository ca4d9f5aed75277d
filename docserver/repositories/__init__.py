"""Repository layer for data access."""

from docserver.repositories.folder_repository import Folder, FolderRepository
from docserver.repositories.file_repository import File, FileRepository

__all__ = [
    "Folder",
    "FolderRepository",
    "File",
    "FileRepository",
]
