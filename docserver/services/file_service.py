"""File service for business logic."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import AsyncIterator, BinaryIO, List, Optional

from common.constants import SEARCH_RESULT_LIMIT
from docserver.blob_storage import BlobStore
from docserver.database import Database, backend_errors
from docserver.exceptions import FileRecordNotFoundError, FolderNotFoundError, ValidationError
from docserver.preview import (
    PREVIEW_INLINE,
    PREVIEW_OFFICE,
    classify_preview,
    render_office_placeholder,
    render_unavailable,
)
from docserver.repositories.file_repository import File, FileRepository
from docserver.repositories.folder_repository import FolderRepository
from docserver.types import FolderFilter
from docserver.utils import generate_stored_name, validate_namespace

logger = logging.getLogger(__name__)


@dataclass
class FilePreview:
    """Either an inline byte stream or a rendered HTML page for one file."""
    file: File
    stream: Optional[AsyncIterator[bytes]] = None
    html: Optional[str] = None


class FileService:
    def __init__(self, db: Database, blob_store: BlobStore, max_upload_bytes: int):
        self.db = db
        self.blob_store = blob_store
        self.max_upload_bytes = max_upload_bytes
        self.file_repo = FileRepository(db)
        self.folder_repo = FolderRepository(db)

    def list_files(self, namespace: Optional[str], folder_filter: FolderFilter) -> List[File]:
        validate_namespace(namespace)
        with backend_errors("listing files"):
            files = self.file_repo.list_by_namespace(namespace, folder_filter)
        logger.debug(f"Listed {len(files)} file(s) [namespace={namespace}] [filter={folder_filter.kind}]")
        return files

    def create_file(
        self,
        display_name: Optional[str],
        blob_path: str,
        size_bytes: int,
        content_type: Optional[str],
        folder_id: Optional[int],
        namespace: Optional[str],
        stored_name: Optional[str] = None,
    ) -> File:
        """
        Record a blob that is already on disk.

        Raises:
            ValidationError: If display_name is blank, size negative or namespace unknown
            FolderNotFoundError: If folder_id does not name a folder in the same namespace
        """
        display_name = (display_name or "").strip()
        if not display_name:
            raise ValidationError("File name is required")
        if size_bytes < 0:
            raise ValidationError("File size cannot be negative")
        validate_namespace(namespace)

        if stored_name is None:
            stored_name = blob_path.replace("\\", "/").rsplit("/", 1)[-1]

        with backend_errors("creating file record"):
            with self.db.transaction() as conn:
                if folder_id is not None:
                    folder = self.folder_repo.get_in_namespace(folder_id, namespace, conn=conn)
                    if folder is None:
                        raise FolderNotFoundError(
                            f"Folder {folder_id} not found in namespace {namespace}"
                        )

                file = self.file_repo.create_file(
                    display_name=display_name,
                    stored_name=stored_name,
                    stored_path=blob_path,
                    size_bytes=size_bytes,
                    content_type=content_type,
                    folder_id=folder_id,
                    namespace=namespace,
                    created_at=datetime.now(timezone.utc),
                    conn=conn,
                )

        logger.info(f"Created file {file.id} '{display_name}' [folder_id={folder_id}] [namespace={namespace}]")
        return file

    async def upload_file(
        self,
        display_name: Optional[str],
        file_data: BinaryIO,
        content_type: Optional[str],
        folder_id: Optional[int],
        namespace: Optional[str],
    ) -> File:
        """
        Store an uploaded payload and record it.

        The blob is written first; if the record cannot be created the blob
        is removed again before the error propagates.

        Raises:
            ValidationError: If display_name is blank or namespace unknown
            PayloadTooLargeError: If the payload exceeds max_upload_bytes
            StorageIOError: If the blob cannot be written
            FolderNotFoundError: If folder_id does not resolve
        """
        display_name = (display_name or "").strip()
        if not display_name:
            raise ValidationError("A file is required")
        validate_namespace(namespace)

        stored_name = generate_stored_name(display_name)
        blob_path, size_bytes = await asyncio.to_thread(
            self.blob_store.write, stored_name, file_data, self.max_upload_bytes
        )

        try:
            return self.create_file(
                display_name=display_name,
                blob_path=blob_path,
                size_bytes=size_bytes,
                content_type=content_type,
                folder_id=folder_id,
                namespace=namespace,
                stored_name=stored_name,
            )
        except Exception as e:
            logger.error(f"Upload of '{display_name}' failed after the blob was written: {e}")
            await asyncio.to_thread(self.blob_store.discard, blob_path)
            raise

    def get_file(self, file_id: int) -> File:
        with backend_errors(f"fetching file {file_id}"):
            file = self.file_repo.get_by_id(file_id)
        if file is None:
            raise FileRecordNotFoundError(f"File {file_id} not found")
        return file

    async def download_file(self, file_id: int) -> tuple[File, AsyncIterator[bytes]]:
        """
        Look up a file and open its blob for streaming.

        Raises:
            FileRecordNotFoundError: If the record or its blob is missing
        """
        file = self.get_file(file_id)

        exists = await asyncio.to_thread(self.blob_store.exists, file.stored_path)
        if not exists:
            logger.warning(f"File {file_id} has no blob on disk [path={file.stored_path}]")
            raise FileRecordNotFoundError(f"File {file_id} is missing from storage")

        return file, self._stream_blob(file)

    async def _stream_blob(self, file: File) -> AsyncIterator[bytes]:
        pieces = self.blob_store.read_streaming(file.stored_path)
        bytes_streamed = 0

        try:
            while True:
                piece = await asyncio.to_thread(next, pieces, None)
                if piece is None:
                    break
                bytes_streamed += len(piece)
                yield piece
        finally:
            pieces.close()

        logger.info(f"Streamed file {file.id}: {bytes_streamed} bytes")

    async def preview_file(self, file_id: int) -> FilePreview:
        """
        Inline stream for PDF, image and text files; HTML page for everything else.

        Office documents get a placeholder naming the file; their contents
        are never read.
        """
        file = self.get_file(file_id)
        kind = classify_preview(file)

        if kind == PREVIEW_INLINE:
            file, stream = await self.download_file(file_id)
            return FilePreview(file=file, stream=stream)
        if kind == PREVIEW_OFFICE:
            return FilePreview(file=file, html=render_office_placeholder(file))
        return FilePreview(file=file, html=render_unavailable(file))

    async def delete_file(self, file_id: int) -> bool:
        """
        Remove a file's blob (best-effort) and then its record.

        Returns:
            True if a record was deleted, False if file_id was unknown
        """
        with backend_errors(f"deleting file {file_id}"):
            file = self.file_repo.get_by_id(file_id)
            if file is None:
                logger.info(f"File {file_id} does not exist, nothing to delete")
                return False

            await asyncio.to_thread(self.blob_store.discard, file.stored_path)
            deleted = self.file_repo.delete_file(file_id)

        logger.info(f"File {file_id} '{file.display_name}' deleted")
        return deleted > 0

    def search_files(self, namespace: Optional[str], term: Optional[str], limit: int = SEARCH_RESULT_LIMIT) -> List[File]:
        """
        Files in a namespace whose display or stored name contains term, ignoring case.

        Newest first, at most SEARCH_RESULT_LIMIT results.

        Raises:
            ValidationError: If term is blank or namespace unknown
        """
        validate_namespace(namespace)
        term = (term or "").strip()
        if not term:
            raise ValidationError("Search term is required")

        limit = max(1, min(limit, SEARCH_RESULT_LIMIT))

        with backend_errors("searching files"):
            files = self.file_repo.search(namespace, term, limit)

        logger.info(f"Search for '{term}' returned {len(files)} file(s) [namespace={namespace}]")
        return files
