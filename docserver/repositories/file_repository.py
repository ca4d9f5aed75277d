"""File repository for database operations."""

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from common.logging_config import get_logger
from docserver.database import Database
from docserver.types import FolderFilter

logger = get_logger(__name__)

# Stay well below SQLite's bound-parameter limit
_IN_CLAUSE_BATCH = 500

_FILE_COLUMNS = (
    "f.id, f.display_name, f.stored_name, f.stored_path, f.size_bytes, "
    "f.content_type, f.folder_id, f.namespace, f.created_at"
)


@dataclass
class File:
    id: int
    display_name: str
    stored_name: str
    stored_path: str
    size_bytes: int
    content_type: Optional[str]
    folder_id: Optional[int]
    namespace: str
    created_at: datetime
    folder_name: Optional[str] = None


def _row_to_file(row: sqlite3.Row) -> File:
    return File(
        id=row["id"],
        display_name=row["display_name"],
        stored_name=row["stored_name"],
        stored_path=row["stored_path"],
        size_bytes=row["size_bytes"],
        content_type=row["content_type"],
        folder_id=row["folder_id"],
        namespace=row["namespace"],
        created_at=datetime.fromisoformat(row["created_at"]),
        folder_name=row["folder_name"] if "folder_name" in row.keys() else None,
    )


def _batched(values: List[int]) -> Iterable[List[int]]:
    for start in range(0, len(values), _IN_CLAUSE_BATCH):
        yield values[start:start + _IN_CLAUSE_BATCH]


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class FileRepository:
    def __init__(self, db: Database):
        self.db = db

    def create_file(
        self,
        display_name: str,
        stored_name: str,
        stored_path: str,
        size_bytes: int,
        content_type: Optional[str],
        folder_id: Optional[int],
        namespace: str,
        created_at: datetime,
        conn=None
    ) -> File:
        with self.db.reuse(conn) as conn:
            cursor = conn.execute(
                """
                INSERT INTO files (display_name, stored_name, stored_path, size_bytes,
                                   content_type, folder_id, namespace, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    display_name,
                    stored_name,
                    stored_path,
                    size_bytes,
                    content_type,
                    folder_id,
                    namespace,
                    created_at.isoformat(timespec="microseconds"),
                )
            )
            file_id = cursor.lastrowid

        logger.debug(f"File row inserted [file_id={file_id}] [folder_id={folder_id}]")
        return File(
            id=file_id,
            display_name=display_name,
            stored_name=stored_name,
            stored_path=stored_path,
            size_bytes=size_bytes,
            content_type=content_type,
            folder_id=folder_id,
            namespace=namespace,
            created_at=created_at,
        )

    def get_by_id(self, file_id: int, conn=None) -> Optional[File]:
        with self.db.reuse(conn) as conn:
            row = conn.execute(
                f"SELECT {_FILE_COLUMNS} FROM files f WHERE f.id = ?",
                (file_id,)
            ).fetchone()

        if row is None:
            return None
        return _row_to_file(row)

    def list_by_namespace(self, namespace: str, folder_filter: FolderFilter) -> List[File]:
        query = f"SELECT {_FILE_COLUMNS} FROM files f WHERE f.namespace = ?"
        params: list = [namespace]

        if folder_filter.kind == "folder":
            query += " AND f.folder_id = ?"
            params.append(folder_filter.folder_id)
        elif folder_filter.kind == "root":
            query += " AND f.folder_id IS NULL"

        query += " ORDER BY f.display_name ASC, f.id ASC"

        with self.db.connection() as conn:
            rows = conn.execute(query, params).fetchall()

        return [_row_to_file(row) for row in rows]

    def list_by_folders(self, folder_ids: List[int], conn=None) -> List[File]:
        """
        Files whose folder_id is any of folder_ids.
        """
        files: List[File] = []
        with self.db.reuse(conn) as conn:
            for batch in _batched(folder_ids):
                placeholders = ",".join("?" for _ in batch)
                rows = conn.execute(
                    f"SELECT {_FILE_COLUMNS} FROM files f WHERE f.folder_id IN ({placeholders})",
                    batch
                ).fetchall()
                files.extend(_row_to_file(row) for row in rows)
        return files

    def delete_files(self, file_ids: List[int], conn=None) -> int:
        if not file_ids:
            return 0

        with self.db.reuse(conn) as conn:
            cursor = conn.executemany(
                "DELETE FROM files WHERE id = ?",
                [(file_id,) for file_id in file_ids]
            )
            return cursor.rowcount

    def delete_file(self, file_id: int, conn=None) -> int:
        with self.db.reuse(conn) as conn:
            cursor = conn.execute("DELETE FROM files WHERE id = ?", (file_id,))
            return cursor.rowcount

    def search(self, namespace: str, term: str, limit: int) -> List[File]:
        """
        Case-insensitive substring search over display and stored names.

        Newest first; each result carries the name of its folder.
        """
        pattern = f"%{_escape_like(term.casefold())}%"

        with self.db.connection() as conn:
            rows = conn.execute(
                f"""
                SELECT {_FILE_COLUMNS}, fo.name AS folder_name
                FROM files f
                LEFT JOIN folders fo ON f.folder_id = fo.id
                WHERE f.namespace = ?
                AND (casefold(f.display_name) LIKE ? ESCAPE '\\'
                     OR casefold(f.stored_name) LIKE ? ESCAPE '\\')
                ORDER BY f.created_at DESC, f.id DESC
                LIMIT ?
                """,
                (namespace, pattern, pattern, limit)
            ).fetchall()

        return [_row_to_file(row) for row in rows]
