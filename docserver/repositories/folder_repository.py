"""Folder repository for database operations."""

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from common.logging_config import get_logger
from docserver.database import Database

logger = get_logger(__name__)


@dataclass
class Folder:
    id: int
    name: str
    parent_id: Optional[int]
    namespace: str
    created_at: datetime


def _row_to_folder(row: sqlite3.Row) -> Folder:
    return Folder(
        id=row["id"],
        name=row["name"],
        parent_id=row["parent_id"],
        namespace=row["namespace"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


class FolderRepository:
    def __init__(self, db: Database):
        self.db = db

    def create_folder(
        self,
        name: str,
        parent_id: Optional[int],
        namespace: str,
        created_at: datetime,
        conn=None
    ) -> Folder:
        with self.db.reuse(conn) as conn:
            cursor = conn.execute(
                "INSERT INTO folders (name, parent_id, namespace, created_at) VALUES (?, ?, ?, ?)",
                (name, parent_id, namespace, created_at.isoformat(timespec="microseconds"))
            )
            folder_id = cursor.lastrowid

        logger.debug(f"Folder row inserted [folder_id={folder_id}] [namespace={namespace}]")
        return Folder(
            id=folder_id,
            name=name,
            parent_id=parent_id,
            namespace=namespace,
            created_at=created_at,
        )

    def get_by_id(self, folder_id: int, conn=None) -> Optional[Folder]:
        with self.db.reuse(conn) as conn:
            row = conn.execute(
                "SELECT id, name, parent_id, namespace, created_at FROM folders WHERE id = ?",
                (folder_id,)
            ).fetchone()

        if row is None:
            return None
        return _row_to_folder(row)

    def get_in_namespace(self, folder_id: int, namespace: str, conn=None) -> Optional[Folder]:
        """
        Fetch a folder only if it lives in the given namespace.
        """
        folder = self.get_by_id(folder_id, conn=conn)
        if folder is None or folder.namespace != namespace:
            return None
        return folder

    def list_by_namespace(self, namespace: str) -> List[Folder]:
        with self.db.connection() as conn:
            rows = conn.execute(
                """
                SELECT id, name, parent_id, namespace, created_at
                FROM folders
                WHERE namespace = ?
                ORDER BY parent_id ASC, name ASC, id ASC
                """,
                (namespace,)
            ).fetchall()

        return [_row_to_folder(row) for row in rows]

    def count_all(self) -> int:
        with self.db.connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM folders").fetchone()[0]

    def descendant_closure(self, folder_id: int, conn=None) -> List[int]:
        """
        Ids of a folder and every folder below it, deepest first.

        Returns an empty list when folder_id does not exist.
        """
        with self.db.reuse(conn) as conn:
            rows = conn.execute(
                """
                WITH RECURSIVE folder_tree(id, depth) AS (
                    SELECT id, 0 FROM folders WHERE id = ?
                    UNION ALL
                    SELECT f.id, ft.depth + 1
                    FROM folders f
                    INNER JOIN folder_tree ft ON f.parent_id = ft.id
                )
                SELECT id, depth FROM folder_tree
                ORDER BY depth DESC, id ASC
                """,
                (folder_id,)
            ).fetchall()

        return [row["id"] for row in rows]

    def delete_folders(self, folder_ids: List[int], conn=None) -> int:
        """
        Delete folders one statement each, in the order given.

        Callers pass children before parents so no statement leaves a
        dangling parent_id behind.
        """
        if not folder_ids:
            return 0

        with self.db.reuse(conn) as conn:
            cursor = conn.executemany(
                "DELETE FROM folders WHERE id = ?",
                [(folder_id,) for folder_id in folder_ids]
            )
            return cursor.rowcount
