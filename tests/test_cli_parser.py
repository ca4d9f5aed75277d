"""Tests for CLI command parsing."""

import pytest

from cli.models import (
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
from cli.parser import ParseError, parse_command


@pytest.mark.parametrize("line, expected", [
    ("ns shared", NamespaceCommand(namespace="shared")),
    ("tree", TreeCommand()),
    ("ls", ListCommand()),
    ("ls root", ListCommand(folder="root")),
    ("ls 7", ListCommand(folder="7")),
    ('mkdir "Meeting Notes"', MakeFolderCommand(name="Meeting Notes")),
    ("mkdir 2024 3", MakeFolderCommand(name="2024", parent_id=3)),
    ("rmdir 3", RemoveFolderCommand(folder_id=3)),
    ("upload ./report.pdf", UploadCommand(path="./report.pdf")),
    ("upload 'my file.txt' 4", UploadCommand(path="my file.txt", folder_id=4)),
    ("download 12", DownloadCommand(file_id=12)),
    ("download 12 out/", DownloadCommand(file_id=12, output_path="out/")),
    ("rm 9", RemoveFileCommand(file_id=9)),
    ("search annual report", SearchCommand(term="annual report")),
])
def test_valid_commands(line, expected):
    assert parse_command(line) == expected


@pytest.mark.parametrize("line", [
    "",
    "   ",
    "frobnicate",
    "ns public",
    "ns",
    "tree extra",
    "ls abc",
    "ls 0",
    "mkdir",
    'mkdir "  "',
    "mkdir Docs parent",
    "rmdir",
    "rmdir -1",
    "upload",
    "download",
    "download x",
    "rm 1 2",
    "search",
    'upload "unterminated',
])
def test_invalid_commands(line):
    with pytest.raises(ParseError):
        parse_command(line)
