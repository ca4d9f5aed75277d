"""Command parser for CLI input."""

import shlex

from common.constants import NAMESPACES, ROOT_FOLDER_SENTINEL
from cli.models import (
    CommandRequest,
    DownloadCommand,
    ListCommand,
    MakeFolderCommand,
    NamespaceCommand,
    RemoveFileCommand,
    RemoveFolderCommand,
    SearchCommand,
    TreeCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        One of the command dataclasses in cli.models

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name, args = tokens[0], tokens[1:]
    parser = _PARSERS.get(command_name)
    if parser is None:
        raise ParseError(f"Unknown command: {command_name}")
    return parser(args)


def _parse_id(value: str, what: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise ParseError(f"{what} must be a number, got '{value}'")
    if parsed < 1:
        raise ParseError(f"{what} must be positive, got {parsed}")
    return parsed


def _parse_ns(args: list[str]) -> NamespaceCommand:
    """Parse 'ns <mine|shared>' command."""
    if len(args) != 1 or args[0] not in NAMESPACES:
        raise ParseError(f"ns requires exactly one of: {', '.join(NAMESPACES)}")
    return NamespaceCommand(namespace=args[0])


def _parse_tree(args: list[str]) -> TreeCommand:
    if args:
        raise ParseError("tree takes no arguments")
    return TreeCommand()


def _parse_ls(args: list[str]) -> ListCommand:
    """Parse 'ls [root|<folder_id>]' command."""
    if len(args) > 1:
        raise ParseError("ls takes at most one argument: root or <folder_id>")
    if not args:
        return ListCommand()
    if args[0] == ROOT_FOLDER_SENTINEL:
        return ListCommand(folder=ROOT_FOLDER_SENTINEL)
    return ListCommand(folder=str(_parse_id(args[0], "folder_id")))


def _parse_mkdir(args: list[str]) -> MakeFolderCommand:
    """Parse 'mkdir <name> [parent_id]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("mkdir requires <name> and an optional [parent_id]")
    name = args[0].strip()
    if not name:
        raise ParseError("Folder name cannot be empty")
    parent_id = _parse_id(args[1], "parent_id") if len(args) == 2 else None
    return MakeFolderCommand(name=name, parent_id=parent_id)


def _parse_rmdir(args: list[str]) -> RemoveFolderCommand:
    if len(args) != 1:
        raise ParseError("rmdir requires exactly 1 argument: <folder_id>")
    return RemoveFolderCommand(folder_id=_parse_id(args[0], "folder_id"))


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <path> [folder_id]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("upload requires <path> and an optional [folder_id]")
    folder_id = _parse_id(args[1], "folder_id") if len(args) == 2 else None
    return UploadCommand(path=args[0], folder_id=folder_id)


def _parse_download(args: list[str]) -> DownloadCommand:
    """Parse 'download <file_id> [output_path]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("download requires <file_id> and an optional [output_path]")
    output_path = args[1] if len(args) == 2 else None
    return DownloadCommand(file_id=_parse_id(args[0], "file_id"), output_path=output_path)


def _parse_rm(args: list[str]) -> RemoveFileCommand:
    if len(args) != 1:
        raise ParseError("rm requires exactly 1 argument: <file_id>")
    return RemoveFileCommand(file_id=_parse_id(args[0], "file_id"))


def _parse_search(args: list[str]) -> SearchCommand:
    """Parse 'search <term>' command; extra words join into one term."""
    term = " ".join(args).strip()
    if not term:
        raise ParseError("search requires a term")
    return SearchCommand(term=term)


_PARSERS = {
    "ns": _parse_ns,
    "tree": _parse_tree,
    "ls": _parse_ls,
    "mkdir": _parse_mkdir,
    "rmdir": _parse_rmdir,
    "upload": _parse_upload,
    "download": _parse_download,
    "rm": _parse_rm,
    "search": _parse_search,
}
