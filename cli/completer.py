"""Custom completer for Seaweed CLI with local file autocompletion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS


class SeaweedCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local file path completion for the 'upload' command's first argument
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on cursor position and context.

        For the first token, completes command names.
        For the 'upload' file argument, completes paths relative to the
        working directory.
        """
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        if tokens[0].lower() != "upload":
            return

        argument_index = len(tokens) if is_typing_new_token else len(tokens) - 1
        if argument_index != 1:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        yield from self._complete_local_paths(current_word)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_local_paths(self, partial: str) -> Iterable[Completion]:
        """
        Complete files and directories under the working directory.

        Directories are offered with a trailing '/' so completion can
        continue into them.
        """
        head, _, prefix = partial.rpartition("/")
        directory = Path.cwd() / head if head else Path.cwd()
        if not directory.is_dir():
            return

        for item in sorted(directory.iterdir()):
            if not item.name.startswith(prefix) or item.name.startswith("."):
                continue
            candidate = f"{head}/{item.name}" if head else item.name
            if item.is_dir():
                candidate += "/"
            yield Completion(candidate, start_position=-len(partial))
