from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RepoClipError(Exception):
    """Base exception for errors in the repo_clip module."""


@dataclass(frozen=True)
class FileProcessingError(RepoClipError):
    """Raised when a single file cannot be stat'ed, opened or read."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


@dataclass(frozen=True)
class TokenizerInitError(RepoClipError):
    """Raised when the tokenizer cannot be built. Nothing can run without it."""

    model: str
    reason: str

    def __str__(self) -> str:
        return f"Error initializing tokenizer for {self.model!r}: {self.reason}"


@dataclass(frozen=True)
class GitignoreParseError(RepoClipError):
    """Raised when an existing `.gitignore` cannot be read."""

    path: Path
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


@dataclass(frozen=True)
class ClipboardUnavailableError(RepoClipError):
    """Raised when no clipboard mechanism is usable on this platform."""

    reason: str
    message: str = "Clipboard copy not supported on this platform."
