"""Document-server data type definitions."""

from dataclasses import dataclass
from typing import Literal, Optional

from common.constants import ROOT_FOLDER_SENTINEL


@dataclass(frozen=True)
class FolderFilter:
    """
    Which files of a namespace a listing should return.

    all: every file; root: files without a folder; folder: one folder's files.
    """
    kind: Literal["all", "root", "folder"]
    folder_id: Optional[int] = None

    @classmethod
    def all(cls) -> "FolderFilter":
        return cls("all")

    @classmethod
    def root(cls) -> "FolderFilter":
        return cls("root")

    @classmethod
    def folder(cls, folder_id: int) -> "FolderFilter":
        return cls("folder", folder_id)

    @classmethod
    def from_query(cls, value: Optional[str]) -> "FolderFilter":
        """
        Parse the folder_id query parameter.

        Missing → all, "root"/"null"/"" → root, integer → that folder.

        Raises:
            ValueError: If value is anything else
        """
        if value is None:
            return cls.all()
        text = value.strip()
        if text in ("", "null", ROOT_FOLDER_SENTINEL):
            return cls.root()
        return cls.folder(int(text))


@dataclass(frozen=True)
class DeleteFolderResult:
    """
    Counts of rows removed by a cascading folder delete.
    """
    deleted_folder_count: int
    deleted_file_count: int
