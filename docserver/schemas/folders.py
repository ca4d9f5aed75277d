"""Pydantic schemas for folder endpoints."""

from typing import List, Optional, Union
from pydantic import BaseModel

from docserver.folder_tree import FolderNode
from docserver.repositories.folder_repository import Folder


class CreateFolderRequest(BaseModel):
    """
    Request model for folder creation.

    Fields are optional here so a missing value is reported by the
    service as a validation error rather than a schema error.
    parent_id also accepts "null" or "" for the namespace root.
    """
    name: Optional[str] = None
    parent_id: Optional[Union[int, str]] = None
    namespace: Optional[str] = None


class FolderResponse(BaseModel):
    """Response model for a single folder."""
    id: int
    name: str
    parent_id: Optional[int] = None
    namespace: str
    created_at: str

    @classmethod
    def from_folder(cls, folder: Folder) -> "FolderResponse":
        return cls(
            id=folder.id,
            name=folder.name,
            parent_id=folder.parent_id,
            namespace=folder.namespace,
            created_at=folder.created_at.isoformat(),
        )


class FolderNodeResponse(FolderResponse):
    """Response model for a folder and its nested children."""
    children: List["FolderNodeResponse"] = []

    @classmethod
    def from_node(cls, node: FolderNode) -> "FolderNodeResponse":
        return cls(
            id=node.id,
            name=node.name,
            parent_id=node.parent_id,
            namespace=node.namespace,
            created_at=node.created_at.isoformat(),
            children=[cls.from_node(child) for child in node.children],
        )


FolderNodeResponse.model_rebuild()


class ListFoldersResponse(BaseModel):
    """Response model for the folder tree of one namespace."""
    namespace: str
    folders: List[FolderNodeResponse]


class DeleteFolderResponse(BaseModel):
    """Response model for cascading folder deletion."""
    folder_id: int
    deleted_folder_count: int
    deleted_file_count: int
