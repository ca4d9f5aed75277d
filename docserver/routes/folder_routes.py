"""Folder API routes."""

from fastapi import APIRouter, Depends, status

from docserver.dependencies import get_folder_service
from docserver.schemas.common import ErrorResponse
from docserver.schemas.folders import (
    CreateFolderRequest,
    DeleteFolderResponse,
    FolderNodeResponse,
    FolderResponse,
    ListFoldersResponse,
)
from docserver.services.folder_service import FolderService
from docserver.utils import parse_optional_id

router = APIRouter(
    prefix="/api/folders",
    tags=["Folders"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.get("/{namespace}", response_model=ListFoldersResponse)
async def list_folders(
    namespace: str,
    folder_service: FolderService = Depends(get_folder_service)
):
    """
    Folder tree of one namespace.

    Parameters:
        - namespace: "mine" or "shared"

    Returns:
        - folders: Root folders, each with nested children ordered by name

    Raises:
        - 400: Unknown namespace
    """
    forest = folder_service.list_folders(namespace)
    return ListFoldersResponse(
        namespace=namespace,
        folders=[FolderNodeResponse.from_node(node) for node in forest],
    )


@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
async def create_folder(
    request: CreateFolderRequest,
    folder_service: FolderService = Depends(get_folder_service)
):
    """
    Create a folder.

    Parameters:
        - name: Folder name (required, non-blank)
        - parent_id: Parent folder id, or null for the namespace root
        - namespace: "mine" or "shared"

    Raises:
        - 400: Missing name, bad parent_id or unknown namespace
        - 404: Parent folder not found in the namespace
    """
    folder = folder_service.create_folder(
        name=request.name,
        parent_id=parse_optional_id(request.parent_id, "parent_id"),
        namespace=request.namespace,
    )
    return FolderResponse.from_folder(folder)


@router.delete("/{folder_id}", response_model=DeleteFolderResponse)
async def delete_folder(
    folder_id: int,
    folder_service: FolderService = Depends(get_folder_service)
):
    """
    Delete a folder with every folder and file beneath it.

    Deleting an unknown folder succeeds with zero counts.

    Raises:
        - 500: Database failure; nothing was deleted
    """
    result = await folder_service.delete_folder(folder_id)
    return DeleteFolderResponse(
        folder_id=folder_id,
        deleted_folder_count=result.deleted_folder_count,
        deleted_file_count=result.deleted_file_count,
    )
