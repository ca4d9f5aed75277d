"""Pydantic schemas for file operation endpoints."""

from typing import List, Optional
from pydantic import BaseModel

from docserver.repositories.file_repository import File


class FileMetadataResponse(BaseModel):
    """Response model for file metadata."""
    id: int
    display_name: str
    stored_name: str
    size_bytes: int
    content_type: Optional[str] = None
    folder_id: Optional[int] = None
    folder_name: Optional[str] = None
    namespace: str
    created_at: str

    @classmethod
    def from_file(cls, file: File) -> "FileMetadataResponse":
        return cls(
            id=file.id,
            display_name=file.display_name,
            stored_name=file.stored_name,
            size_bytes=file.size_bytes,
            content_type=file.content_type,
            folder_id=file.folder_id,
            folder_name=file.folder_name,
            namespace=file.namespace,
            created_at=file.created_at.isoformat(),
        )


class ListFilesResponse(BaseModel):
    """Response model for file listing."""
    files: List[FileMetadataResponse]


class SearchFilesResponse(BaseModel):
    """Response model for file search."""
    query: str
    files: List[FileMetadataResponse]


class DeleteFileResponse(BaseModel):
    """Response model for file deletion."""
    file_id: int
    deleted: bool
