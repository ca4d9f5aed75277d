"""Tests for AskDocCompleter."""

from pathlib import Path
from unittest.mock import patch

import pytest
from prompt_toolkit.document import Document

from cli.completer import AskDocCompleter
from cli.constants import COMMANDS


@pytest.fixture
def completer():
    """Create an AskDocCompleter instance."""
    return AskDocCompleter()


@pytest.fixture
def workdir(tmp_path):
    """
    Create a working directory with a few local files.

    Returns:
        Path to the directory
    """
    (tmp_path / "report.pdf").write_text("content")
    (tmp_path / "readme.txt").write_text("content")
    (tmp_path / ".hidden").write_text("content")
    (tmp_path / "scans").mkdir()
    (tmp_path / "scans" / "page1.png").write_text("content")
    return tmp_path


def get_completions_list(completer, text):
    """Helper to get list of completion texts from completer."""
    doc = Document(text, len(text))
    return [c.text for c in completer.get_completions(doc, None)]


class TestCommandCompletion:
    """Tests for command name completion."""

    def test_empty_input_shows_all_commands(self, completer):
        completions = get_completions_list(completer, "")
        for cmd in COMMANDS:
            assert cmd in completions

    def test_partial_command_filters(self, completer):
        completions = get_completions_list(completer, "r")
        assert sorted(completions) == ["rm", "rmdir"]

    def test_command_completion_case_insensitive(self, completer):
        assert "search" in get_completions_list(completer, "SE")


class TestArgumentCompletion:
    def test_namespace_choices(self, completer):
        assert get_completions_list(completer, "ns ") == ["mine", "shared"]
        assert get_completions_list(completer, "ns sh") == ["shared"]

    def test_upload_lists_cwd_entries(self, completer, workdir):
        with patch.object(Path, "cwd", return_value=workdir):
            completions = get_completions_list(completer, "upload ")

        assert completions == ["readme.txt", "report.pdf", "scans/"]

    def test_upload_partial_name(self, completer, workdir):
        with patch.object(Path, "cwd", return_value=workdir):
            completions = get_completions_list(completer, "upload rep")

        assert completions == ["report.pdf"]

    def test_upload_descends_into_directory(self, completer, workdir):
        with patch.object(Path, "cwd", return_value=workdir):
            completions = get_completions_list(completer, "upload scans/")

        assert completions == ["scans/page1.png"]

    def test_hidden_files_only_when_asked(self, completer, workdir):
        with patch.object(Path, "cwd", return_value=workdir):
            completions = get_completions_list(completer, "upload .")

        assert completions == [".hidden"]

    def test_no_completion_for_second_upload_argument(self, completer, workdir):
        with patch.object(Path, "cwd", return_value=workdir):
            assert get_completions_list(completer, "upload report.pdf ") == []

    def test_other_commands_have_no_argument_completion(self, completer, workdir):
        with patch.object(Path, "cwd", return_value=workdir):
            assert get_completions_list(completer, "rm ") == []
