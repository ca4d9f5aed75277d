"""Utility functions for CLI operations."""

import re
import sys
from typing import Optional
from urllib.parse import unquote

from common.formatting import format_file_size
from cli.constants import GREEN, RESET


class ProgressFileWrapper:
    """File-like wrapper that displays upload progress to stdout."""

    def __init__(self, file_path: str, file_size: int, filename: str):
        """
        Initialize the progress file wrapper.

        Args:
            file_path: Path to the file to read
            file_size: Total size of the file in bytes
            filename: Display name for the file
        """
        self.file_path = file_path
        self.file_size = file_size
        self.filename = filename
        self._file = open(file_path, 'rb')
        self._uploaded = 0
        self._finished = False

    def read(self, size: int = -1) -> bytes:
        """
        Read bytes from the file and update progress display.

        Args:
            size: Number of bytes to read (-1 or 0 for default chunk size)

        Returns:
            Bytes read from the file
        """
        chunk = self._file.read(size if size > 0 else 8192)
        if chunk:
            self._uploaded += len(chunk)
            self._display_progress()
        elif not self._finished:
            self._finish_progress()
        return chunk

    def fileno(self) -> int:
        """Expose the descriptor so HTTP clients can size the upload."""
        return self._file.fileno()

    def _display_progress(self) -> None:
        progress = (self._uploaded / self.file_size) * 100 if self.file_size else 100.0
        uploaded_str = format_file_size(self._uploaded)
        total_str = format_file_size(self.file_size)
        sys.stdout.write(
            f"\rUploading {self.filename}: {uploaded_str} / {total_str} ({GREEN}{progress:.1f}%{RESET})"
        )
        sys.stdout.flush()

    def _finish_progress(self) -> None:
        """Finalize progress display with newline."""
        self._finished = True
        sys.stdout.write('\n')
        sys.stdout.flush()

    def close(self) -> None:
        """Close the underlying file."""
        if self._file:
            self._file.close()

    def __enter__(self) -> 'ProgressFileWrapper':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def render_folder_tree(folders: list[dict]) -> str:
    """
    Draw a folder forest as an indented tree.

    Args:
        folders: Root folder dicts as returned by the server, each with 'children'

    Returns:
        One line per folder, e.g. "├── Reports [3]"
    """
    lines: list[str] = []

    def walk(nodes: list[dict], prefix: str) -> None:
        for index, node in enumerate(nodes):
            last = index == len(nodes) - 1
            lines.append(f"{prefix}{'└── ' if last else '├── '}{node['name']} [{node['id']}]")
            walk(node.get('children', []), prefix + ('    ' if last else '│   '))

    walk(folders, "")
    return '\n'.join(lines)


_FILENAME_STAR = re.compile(r"filename\*=UTF-8''([^;]+)", re.IGNORECASE)
_FILENAME = re.compile(r'filename="([^"]*)"', re.IGNORECASE)


def filename_from_disposition(header: Optional[str]) -> Optional[str]:
    """
    Extract the file name from a Content-Disposition header.

    Prefers the RFC 5987 filename* form over the plain ASCII one.
    """
    if not header:
        return None
    match = _FILENAME_STAR.search(header)
    if match:
        return unquote(match.group(1).strip())
    match = _FILENAME.search(header)
    if match:
        return match.group(1)
    return None
