"""Database schema and connection management for SQLite."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from common.logging_config import get_logger
from docserver.exceptions import BackendError

logger = get_logger(__name__)


SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS folders (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        parent_id INTEGER,
        namespace TEXT NOT NULL CHECK(namespace IN ('mine', 'shared')),
        created_at TEXT NOT NULL,
        FOREIGN KEY(parent_id) REFERENCES folders(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS files (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        display_name TEXT NOT NULL,
        stored_name TEXT NOT NULL,
        stored_path TEXT NOT NULL,
        size_bytes INTEGER NOT NULL,
        content_type TEXT,
        folder_id INTEGER,
        namespace TEXT NOT NULL CHECK(namespace IN ('mine', 'shared')),
        created_at TEXT NOT NULL,
        FOREIGN KEY(folder_id) REFERENCES folders(id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_folders_namespace_parent ON folders(namespace, parent_id)",
    "CREATE INDEX IF NOT EXISTS idx_files_namespace_folder ON files(namespace, folder_id)",
    "CREATE INDEX IF NOT EXISTS idx_files_namespace_created ON files(namespace, created_at)",
)


class Database:
    """
    Handle on one SQLite database file.

    Passed explicitly to repositories and services; every call to
    connection() opens a fresh connection, so a handle can be shared across
    requests.
    """

    def __init__(self, path: str):
        self.path = str(path)

    def init_schema(self) -> None:
        """
        Create the database file and tables if they don't exist.
        """
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        with self.connection() as conn:
            for statement in SCHEMA_STATEMENTS:
                conn.execute(statement)

        logger.info(f"Database schema ready [path={self.path}]")

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for database connections.

        Connections run in autocommit mode; use transaction() to group
        statements.
        """
        conn = sqlite3.connect(self.path, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        conn.create_function("casefold", 1, _casefold, deterministic=True)
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def reuse(self, conn: Optional[sqlite3.Connection] = None) -> Generator[sqlite3.Connection, None, None]:
        """
        Yield conn when the caller already holds one, otherwise a new connection.
        """
        if conn is not None:
            yield conn
        else:
            with self.connection() as new_conn:
                yield new_conn

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager yielding a connection inside BEGIN IMMEDIATE.

        Commits on normal exit, rolls back and re-raises on any exception.
        """
        with self.connection() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.rollback()
                raise
            else:
                conn.commit()

    def ping(self) -> None:
        with self.connection() as conn:
            conn.execute("SELECT 1").fetchone()


@contextmanager
def backend_errors(action: str) -> Generator[None, None, None]:
    """
    Re-raise sqlite3 errors raised inside the block as BackendError.

    Args:
        action: What was being done, for the log line and error message
    """
    try:
        yield
    except sqlite3.Error as e:
        logger.error(f"Database error while {action}: {e}", exc_info=True)
        raise BackendError(f"Database error while {action}") from e


def _casefold(value: Optional[str]) -> Optional[str]:
    # SQLite lower() only folds ASCII
    return value.casefold() if isinstance(value, str) else value

