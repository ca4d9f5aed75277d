"""Pydantic schemas for API requests and responses."""

from docserver.schemas.folders import (
    CreateFolderRequest,
    FolderResponse,
    FolderNodeResponse,
    ListFoldersResponse,
    DeleteFolderResponse
)
from docserver.schemas.files import (
    FileMetadataResponse,
    ListFilesResponse,
    SearchFilesResponse,
    DeleteFileResponse
)
from docserver.schemas.common import ErrorResponse

__all__ = [
    "CreateFolderRequest",
    "FolderResponse",
    "FolderNodeResponse",
    "ListFoldersResponse",
    "DeleteFolderResponse",
    "FileMetadataResponse",
    "ListFilesResponse",
    "SearchFilesResponse",
    "DeleteFileResponse",
    "ErrorResponse"
]
