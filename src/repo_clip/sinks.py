from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

import pyperclip

from repo_clip.exceptions import ClipboardUnavailableError

if TYPE_CHECKING:
    from repo_clip.settings import Settings


class OutputSink(Protocol):
    """Consumer of the final payload."""

    def write(self, text: str) -> None: ...

    def describe(self) -> str: ...


class ClipboardSink:
    def write(self, text: str) -> None:
        """Copy `text` to the system clipboard.

        Raises:
            ClipboardUnavailableError: if pyperclip finds no copy mechanism.
        """
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise ClipboardUnavailableError(reason=str(e)) from e

    def describe(self) -> str:
        return "clipboard"


class FileSink:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def write(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding="utf-8")

    def describe(self) -> str:
        return str(self.path)


class StdoutSink:
    def write(self, text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    def describe(self) -> str:
        return "stdout"


def select_sink(settings: Settings) -> OutputSink:
    """Pick the sink for a run: stdout, then an output file, then the clipboard."""
    if settings.stdout:
        return StdoutSink()
    if settings.output is not None:
        return FileSink(settings.output)
    return ClipboardSink()
