"""Folder service for business logic."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

from docserver.blob_storage import BlobStore
from docserver.database import Database, backend_errors
from docserver.exceptions import FolderNotFoundError, ValidationError
from docserver.folder_tree import FolderNode, build_folder_tree
from docserver.repositories.file_repository import FileRepository
from docserver.repositories.folder_repository import Folder, FolderRepository
from docserver.types import DeleteFolderResult
from docserver.utils import validate_namespace

logger = logging.getLogger(__name__)


DEFAULT_FOLDERS = (
    ("Project Documents", "mine"),
    ("Meeting Notes", "mine"),
    ("Downloaded Mail", "mine"),
    ("Scanned Documents", "mine"),
    ("Received Faxes", "mine"),
    ("Development Team", "shared"),
    ("Operations Team", "shared"),
)


class FolderService:
    def __init__(self, db: Database, blob_store: BlobStore):
        self.db = db
        self.blob_store = blob_store
        self.folder_repo = FolderRepository(db)
        self.file_repo = FileRepository(db)

    def create_folder(self, name: Optional[str], parent_id: Optional[int], namespace: Optional[str]) -> Folder:
        """
        Create a folder at the namespace root or under an existing folder.

        Raises:
            ValidationError: If name is blank or namespace unknown
            FolderNotFoundError: If parent_id does not name a folder in the same namespace
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Folder name is required")
        validate_namespace(namespace)

        with backend_errors("creating folder"):
            with self.db.transaction() as conn:
                if parent_id is not None:
                    parent = self.folder_repo.get_in_namespace(parent_id, namespace, conn=conn)
                    if parent is None:
                        raise FolderNotFoundError(
                            f"Parent folder {parent_id} not found in namespace {namespace}"
                        )

                folder = self.folder_repo.create_folder(
                    name=name,
                    parent_id=parent_id,
                    namespace=namespace,
                    created_at=datetime.now(timezone.utc),
                    conn=conn,
                )

        logger.info(f"Created folder {folder.id} '{name}' [parent_id={parent_id}] [namespace={namespace}]")
        return folder

    def list_folders(self, namespace: Optional[str]) -> List[FolderNode]:
        validate_namespace(namespace)
        with backend_errors("listing folders"):
            folders = self.folder_repo.list_by_namespace(namespace)
        return build_folder_tree(folders)

    async def delete_folder(self, folder_id: int) -> DeleteFolderResult:
        """
        Delete a folder, every folder below it and every file inside any of them.

        Rows go in one transaction: files, then descendant folders deepest
        first, then the folder itself. Blobs are removed best-effort before
        their rows. An unknown folder_id deletes nothing.

        The transaction runs start to finish on a worker thread, so other
        requests keep being served and queue on the SQLite write lock.

        Args:
            folder_id: Folder to delete

        Returns:
            DeleteFolderResult with the folder and file row counts removed

        Raises:
            BackendError: If any database step fails; no row is removed then
        """
        return await asyncio.to_thread(self._delete_subtree, folder_id)

    def _delete_subtree(self, folder_id: int) -> DeleteFolderResult:
        with backend_errors(f"deleting folder {folder_id}"):
            with self.db.transaction() as conn:
                closure = self.folder_repo.descendant_closure(folder_id, conn=conn)
                if not closure:
                    logger.info(f"Folder {folder_id} does not exist, nothing to delete")
                    return DeleteFolderResult(deleted_folder_count=0, deleted_file_count=0)

                files = self.file_repo.list_by_folders(closure, conn=conn)
                logger.info(
                    f"Deleting folder {folder_id}: {len(closure)} folder(s), {len(files)} file(s)"
                )

                for file in files:
                    self.blob_store.discard(file.stored_path)

                deleted_files = self.file_repo.delete_files([file.id for file in files], conn=conn)

                descendants = [fid for fid in closure if fid != folder_id]
                deleted_folders = self.folder_repo.delete_folders(descendants, conn=conn)
                deleted_folders += self.folder_repo.delete_folders([folder_id], conn=conn)

        logger.info(
            f"Folder {folder_id} deleted [folders={deleted_folders}] [files={deleted_files}]"
        )
        return DeleteFolderResult(
            deleted_folder_count=deleted_folders,
            deleted_file_count=deleted_files,
        )

    def seed_defaults(self) -> int:
        """
        Create the default root folders when the folder table is empty.

        Returns:
            Number of folders created
        """
        with backend_errors("seeding default folders"):
            if self.folder_repo.count_all() > 0:
                return 0

            with self.db.transaction() as conn:
                for name, namespace in DEFAULT_FOLDERS:
                    self.folder_repo.create_folder(
                        name=name,
                        parent_id=None,
                        namespace=namespace,
                        created_at=datetime.now(timezone.utc),
                        conn=conn,
                    )

        logger.info(f"Seeded {len(DEFAULT_FOLDERS)} default folders")
        return len(DEFAULT_FOLDERS)
