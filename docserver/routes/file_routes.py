"""File operation API routes."""

from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import HTMLResponse, StreamingResponse

from docserver.dependencies import get_file_service
from docserver.exceptions import ValidationError
from docserver.schemas.common import ErrorResponse
from docserver.schemas.files import (
    DeleteFileResponse,
    FileMetadataResponse,
    ListFilesResponse,
    SearchFilesResponse,
)
from docserver.services.file_service import FileService
from docserver.types import FolderFilter
from docserver.utils import parse_optional_id

router = APIRouter(
    prefix="/api",
    tags=["Files"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


def _content_disposition(disposition: str, filename: str) -> str:
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "'")
    return f"{disposition}; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.get("/files/{namespace}", response_model=ListFilesResponse)
async def list_files(
    namespace: str,
    folder_id: Optional[str] = Query(None, description="Folder id, or 'root' for files outside any folder"),
    file_service: FileService = Depends(get_file_service)
):
    """
    List files of a namespace.

    Parameters:
        - namespace: "mine" or "shared"
        - folder_id: omitted → every file; "root" → files without a folder;
          integer → files of that folder

    Raises:
        - 400: Unknown namespace or malformed folder_id
    """
    try:
        folder_filter = FolderFilter.from_query(folder_id)
    except ValueError:
        raise ValidationError(f"Invalid folder_id: {folder_id!r}")

    files = file_service.list_files(namespace, folder_filter)
    return ListFilesResponse(files=[FileMetadataResponse.from_file(file) for file in files])


@router.get("/files/item/{file_id}", response_model=FileMetadataResponse)
async def get_file(
    file_id: int,
    file_service: FileService = Depends(get_file_service)
):
    """
    Metadata of one file.

    Raises:
        - 404: File not found
    """
    return FileMetadataResponse.from_file(file_service.get_file(file_id))


@router.post("/upload", response_model=FileMetadataResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    namespace: Optional[str] = Form(None),
    folder_id: Optional[str] = Form(None),
    file_service: FileService = Depends(get_file_service)
):
    """
    Upload a file into a folder or the namespace root.

    Parameters:
        - file: File to upload (multipart/form-data)
        - namespace: "mine" or "shared"
        - folder_id: Target folder id; omitted, "" or "null" for the root

    Raises:
        - 400: Missing file, bad folder_id or unknown namespace
        - 404: Folder not found in the namespace
        - 413: File too large
        - 500: Storage or database failure
    """
    if file is None or not file.filename:
        raise ValidationError("A file is required")

    try:
        stored = await file_service.upload_file(
            display_name=file.filename,
            file_data=file.file,
            content_type=file.content_type,
            folder_id=parse_optional_id(folder_id, "folder_id"),
            namespace=namespace,
        )
    finally:
        await file.close()

    return FileMetadataResponse.from_file(stored)


@router.get("/download/{file_id}")
async def download_file(
    file_id: int,
    file_service: FileService = Depends(get_file_service)
):
    """
    Download a file as an attachment.

    Raises:
        - 404: File not found, or its data is missing from storage
    """
    file, stream_generator = await file_service.download_file(file_id)

    return StreamingResponse(
        stream_generator,
        media_type=file.content_type or "application/octet-stream",
        headers={"Content-Disposition": _content_disposition("attachment", file.display_name)}
    )


@router.get("/preview/{file_id}")
async def preview_file(
    file_id: int,
    file_service: FileService = Depends(get_file_service)
):
    """
    Preview a file in the browser.

    PDF, image and text files are streamed inline; Office documents and
    other types get an HTML page describing the file.

    Raises:
        - 404: File not found, or an inline file's data is missing
    """
    preview = await file_service.preview_file(file_id)

    if preview.stream is not None:
        return StreamingResponse(
            preview.stream,
            media_type=preview.file.content_type or "application/octet-stream",
            headers={"Content-Disposition": _content_disposition("inline", preview.file.display_name)}
        )
    return HTMLResponse(content=preview.html)


@router.delete("/files/{file_id}", response_model=DeleteFileResponse)
async def delete_file(
    file_id: int,
    file_service: FileService = Depends(get_file_service)
):
    """
    Delete a file and its stored data.

    Deleting an unknown file succeeds with deleted=false.
    """
    deleted = await file_service.delete_file(file_id)
    return DeleteFileResponse(file_id=file_id, deleted=deleted)


@router.get("/search", response_model=SearchFilesResponse)
async def search_files(
    query: Optional[str] = Query(None, description="Substring to look for in file names"),
    namespace: Optional[str] = Query(None),
    file_service: FileService = Depends(get_file_service)
):
    """
    Search file names within a namespace.

    Returns at most 50 files, newest first.

    Raises:
        - 400: Missing query or unknown namespace
    """
    files = file_service.search_files(namespace, query)
    return SearchFilesResponse(
        query=query,
        files=[FileMetadataResponse.from_file(file) for file in files],
    )
