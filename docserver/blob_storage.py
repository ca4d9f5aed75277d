"""Manages uploaded file payloads on disk: write, stream, delete."""

from contextlib import suppress
from pathlib import Path
from typing import BinaryIO, Iterator, Union

from common.constants import STREAM_PIECE_SIZE
from common.logging_config import get_logger
from docserver.exceptions import PayloadTooLargeError, StorageIOError

logger = get_logger(__name__)


class BlobStore:
    """
    Directory of blobs, one file per upload.

    Blobs are addressed by the path returned from write(); records keep that
    path verbatim.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def ensure_directory(self) -> None:
        """Ensure the uploads directory exists."""
        self.root.mkdir(parents=True, exist_ok=True)

    def get_blob_path(self, stored_name: str) -> Path:
        """
        Get file path for a stored name.

        Raises:
            StorageIOError: If stored_name is malformed or would escape the uploads directory
        """
        if "\x00" in stored_name:
            raise StorageIOError(f"Invalid stored name: {stored_name!r}")
        path = self.root / stored_name
        if path.resolve().parent != self.root.resolve():
            raise StorageIOError(f"Invalid stored name: {stored_name!r}")
        return path

    def write(self, stored_name: str, data: BinaryIO, max_bytes: int) -> tuple[str, int]:
        """
        Copy a stream to disk in pieces.

        Args:
            stored_name: Unique on-disk name
            data: Readable binary stream
            max_bytes: Upper bound on accepted payload size

        Returns:
            Tuple of (path written, bytes written)

        Raises:
            PayloadTooLargeError: If the stream is longer than max_bytes
            StorageIOError: If the write fails
        """
        self.ensure_directory()
        filepath = self.get_blob_path(stored_name)
        written = 0

        try:
            with open(filepath, "wb") as out:
                while True:
                    piece = data.read(STREAM_PIECE_SIZE)
                    if not piece:
                        break
                    written += len(piece)
                    if written > max_bytes:
                        raise PayloadTooLargeError(
                            f"Upload exceeds the {max_bytes} byte limit"
                        )
                    out.write(piece)
        except PayloadTooLargeError:
            self._remove_partial(filepath)
            raise
        except OSError as e:
            self._remove_partial(filepath)
            raise StorageIOError(f"Failed to write blob {stored_name}: {e}") from e

        logger.debug(f"Blob written [path={filepath}] [size={written}]")
        return str(filepath), written

    def _remove_partial(self, filepath: Path) -> None:
        with suppress(OSError):
            filepath.unlink(missing_ok=True)

    def exists(self, path: str) -> bool:
        return bool(path) and Path(path).is_file()

    def read_streaming(self, path: str, piece_size: int = STREAM_PIECE_SIZE) -> Iterator[bytes]:
        """
        Stream blob data in pieces.

        Raises:
            StorageIOError: If the blob cannot be opened or read
        """
        try:
            with open(path, "rb") as f:
                while True:
                    piece = f.read(piece_size)
                    if not piece:
                        break
                    yield piece
        except OSError as e:
            raise StorageIOError(f"Failed to read blob {path}: {e}") from e

    def delete(self, path: str) -> bool:
        """
        Delete blob file from disk.

        Returns:
            True if file was deleted, False if it didn't exist

        Raises:
            StorageIOError: If the file exists but cannot be removed
        """
        if not path:
            return False
        filepath = Path(path)
        try:
            filepath.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageIOError(f"Failed to delete blob {path}: {e}") from e

    def discard(self, path: str) -> bool:
        """
        Best-effort delete: failures are logged, never raised.

        Returns:
            True if a blob was removed
        """
        try:
            removed = self.delete(path)
        except StorageIOError as e:
            logger.error(f"Could not remove blob, leaving it on disk: {e}")
            return False

        if removed:
            logger.info(f"Blob deleted [path={path}]")
        else:
            logger.warning(f"Blob already absent from disk [path={path}]")
        return removed
