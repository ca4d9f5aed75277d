"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal, Optional


@dataclass(frozen=True)
class NamespaceCommand:
    """Switch the active namespace."""

    namespace: str
    command: Literal["ns"] = "ns"


@dataclass(frozen=True)
class TreeCommand:
    """Show the folder tree of the active namespace."""

    command: Literal["tree"] = "tree"


@dataclass(frozen=True)
class ListCommand:
    """List files: all (None), root ("root") or one folder (id as string)."""

    folder: Optional[str] = None
    command: Literal["ls"] = "ls"


@dataclass(frozen=True)
class MakeFolderCommand:
    """Create a folder."""

    name: str
    parent_id: Optional[int] = None
    command: Literal["mkdir"] = "mkdir"


@dataclass(frozen=True)
class RemoveFolderCommand:
    """Delete a folder and its contents."""

    folder_id: int
    command: Literal["rmdir"] = "rmdir"


@dataclass(frozen=True)
class UploadCommand:
    """Upload a local file."""

    path: str
    folder_id: Optional[int] = None
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class DownloadCommand:
    """Download file by id."""

    file_id: int
    output_path: Optional[str] = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class RemoveFileCommand:
    """Delete a file."""

    file_id: int
    command: Literal["rm"] = "rm"


@dataclass(frozen=True)
class SearchCommand:
    """Search file names."""

    term: str
    command: Literal["search"] = "search"


CommandRequest = (
    NamespaceCommand
    | TreeCommand
    | ListCommand
    | MakeFolderCommand
    | RemoveFolderCommand
    | UploadCommand
    | DownloadCommand
    | RemoveFileCommand
    | SearchCommand
)
