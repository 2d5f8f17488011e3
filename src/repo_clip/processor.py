from __future__ import annotations

import io
from typing import TYPE_CHECKING

from repo_clip.classifier import classify
from repo_clip.config import MAX_FILE_SIZE, ProcessedFile, SkipReason
from repo_clip.exceptions import FileProcessingError
from repo_clip.logging import logger

if TYPE_CHECKING:
    from pathlib import Path

    from repo_clip.tokenizer import Tokenizer

_SKIP_MESSAGES = {
    SkipReason.TOO_LARGE: "Skipping large file",
    SkipReason.BINARY: "Skipping binary file",
}


def relpath(path: Path, root: Path) -> str:
    """Send the relative path of path from root.

    Args:
        path (Path): the path to "relativise"
        root (Path): the root to relativise from

    Returns:
        str: the relative path from root to path, with POSIX separators.
            If path is not under root, returns the original path as a string.
    """
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def format_file(rel_path: str, lines: list[str]) -> str:
    """Render a file as its payload section.

    The section is a `File: <rel_path>` header, one line per source line and a
    trailing blank line. This exact text is both measured and merged.
    """
    out = io.StringIO()
    out.write(f"File: {rel_path}\n")
    for line in lines:
        out.write(line + "\n")
    out.write("\n")
    return out.getvalue()


def read_lines(path: Path) -> list[str]:
    """Read a file line by line without keeping the line terminators.

    Lines are split on `\\n` only; a single `\\r` before it is dropped too.
    Undecodable bytes are ignored.

    Args:
        path (Path): the file to read

    Returns:
        list[str]: the lines of the file
    """
    lines: list[str] = []
    with path.open("rb") as f:
        for raw in f:
            line = raw.decode("utf-8", errors="ignore")
            lines.append(line.removesuffix("\n").removesuffix("\r"))
    return lines


def process_file(
    path: Path,
    root: Path,
    tokenizer: Tokenizer,
    *,
    max_file_size: int = MAX_FILE_SIZE,
) -> ProcessedFile | None:
    """Read, format and measure one file.

    Skipped files (too large, binary) are logged and give `None`: they
    contribute nothing but are not failures.

    Args:
        path (Path): absolute path of the file
        root (Path): scan root, used for the displayed path
        tokenizer (Tokenizer): measures the formatted section
        max_file_size (int, optional): size ceiling in bytes. Defaults to 1 MiB.

    Raises:
        FileProcessingError: if the file cannot be stat'ed, opened or read.

    Returns:
        ProcessedFile | None: the formatted section and its token cost, or None if skipped
    """
    rel = relpath(path, root)
    try:
        verdict = classify(path, max_file_size=max_file_size)
    except OSError as e:
        raise FileProcessingError(path=rel, reason=f"cannot classify: {e}") from e
    if verdict.skip and verdict.reason is not None:
        logger.info(_SKIP_MESSAGES[verdict.reason], path=rel, reason=str(verdict.reason))
        return None

    try:
        lines = read_lines(path)
    except OSError as e:
        raise FileProcessingError(path=rel, reason=f"cannot read: {e}") from e

    text = format_file(rel, lines)
    return ProcessedFile(rel_path=rel, text=text, token_count=tokenizer(text))
