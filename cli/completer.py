"""Custom completer for the AskDoc CLI with local path autocompletion."""

import os
from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from common.constants import NAMESPACES
from cli.constants import COMMANDS


class AskDocCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Namespace completion for the 'ns' command
    - Local path completion for the first argument of 'upload'
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        current_word = "" if is_typing_new_token else tokens[-1]
        arg_index = len(tokens) - 1 if is_typing_new_token else len(tokens) - 2

        if arg_index != 0:
            return

        if command == "ns":
            yield from self._complete_from(NAMESPACES, current_word)
        elif command == "upload":
            yield from self._complete_local_paths(current_word)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        yield from self._complete_from(COMMANDS, partial.lower())

    def _complete_from(self, choices: Iterable[str], partial: str) -> Iterable[Completion]:
        for choice in choices:
            if choice.startswith(partial):
                yield Completion(choice, start_position=-len(partial))

    def _complete_local_paths(self, partial: str) -> Iterable[Completion]:
        """
        Complete paths relative to the current directory.

        Directories are suggested with a trailing separator so completion
        can continue into them.
        """
        directory, _, prefix = partial.rpartition(os.sep)
        base = Path(directory).expanduser() if directory else Path.cwd()
        if directory and not partial.startswith(os.sep) and not directory.startswith("~"):
            base = Path.cwd() / directory

        if not base.is_dir():
            return

        try:
            entries = sorted(base.iterdir(), key=lambda item: item.name)
        except OSError:
            return

        for item in entries:
            if item.name.startswith(".") and not prefix.startswith("."):
                continue
            if not item.name.startswith(prefix):
                continue
            suffix = os.sep if item.is_dir() else ""
            candidate = f"{directory}{os.sep}{item.name}{suffix}" if directory else f"{item.name}{suffix}"
            yield Completion(candidate, start_position=-len(partial))
