from __future__ import annotations

from typing import TYPE_CHECKING

from repo_clip.config import BINARY_SNIFF_BYTES, MAX_FILE_SIZE, Classification, SkipReason

if TYPE_CHECKING:
    from pathlib import Path


def is_too_large(path: Path, max_file_size: int = MAX_FILE_SIZE) -> bool:
    """Check a file's size against the ceiling without opening it.

    Args:
        path (Path): the file to check
        max_file_size (int, optional): size ceiling in bytes. Defaults to 1 MiB.

    Returns:
        bool: True if the file is strictly larger than `max_file_size`
    """
    return path.stat().st_size > max_file_size


def is_binary_file(path: Path, nbytes: int = BINARY_SNIFF_BYTES) -> bool:
    """Check if a file looks binary.

    Heuristic: a NUL byte within the first `nbytes` bytes marks the file as
    binary. Binary files without a NUL in that prefix are reported as text;
    that false negative is accepted.

    Args:
        path (Path): the file to sniff
        nbytes (int, optional): number of leading bytes to scan. Defaults to 8000.

    Returns:
        bool: True if a NUL byte was found, False otherwise
    """
    with path.open("rb") as f:
        chunk = f.read(nbytes)
    return b"\x00" in chunk


def classify(path: Path, *, max_file_size: int = MAX_FILE_SIZE) -> Classification:
    """Decide whether a file must be skipped before reading it in full.

    The size check runs first and short-circuits: an oversized file is never
    opened. `OSError` from stat or the sniff read propagates to the caller.

    Args:
        path (Path): the file to classify
        max_file_size (int, optional): size ceiling in bytes. Defaults to 1 MiB.

    Returns:
        Classification: `skip=False` for text files, otherwise the skip reason
    """
    if is_too_large(path, max_file_size):
        return Classification.reject(SkipReason.TOO_LARGE)
    if is_binary_file(path):
        return Classification.reject(SkipReason.BINARY)
    return Classification.accept()
