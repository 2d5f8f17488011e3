from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from repo_clip.exceptions import FileProcessingError
from repo_clip.processor import format_file, process_file, read_lines, relpath

if TYPE_CHECKING:
    from repo_clip.tokenizer import Tokenizer


@pytest.mark.unit
def test_relpath_uses_posix_separators(tmp_path: Path) -> None:
    assert relpath(tmp_path / "sub" / "c.go", tmp_path) == "sub/c.go"


@pytest.mark.unit
def test_relpath_outside_root_returns_path(tmp_path: Path) -> None:
    other = Path("/elsewhere/file.txt")

    assert relpath(other, tmp_path) == str(other)


@pytest.mark.unit
def test_format_file_adds_header_and_trailing_blank_line() -> None:
    assert format_file("a.go", ["package a", "", "func A() {}"]) == (
        "File: a.go\npackage a\n\nfunc A() {}\n\n"
    )


@pytest.mark.unit
def test_read_lines_strips_line_endings(tmp_path: Path) -> None:
    path = tmp_path / "crlf.txt"
    path.write_bytes(b"one\r\ntwo\nthree")

    assert read_lines(path) == ["one", "two", "three"]


@pytest.mark.unit
def test_read_lines_ignores_undecodable_bytes(tmp_path: Path) -> None:
    path = tmp_path / "latin.txt"
    path.write_bytes(b"caf\xe9\n")

    assert read_lines(path) == ["caf"]


@pytest.mark.unit
def test_process_file_formats_and_counts(tmp_path: Path, word_tokenizer: Tokenizer) -> None:
    path = tmp_path / "sub" / "c.go"
    path.parent.mkdir()
    path.write_text("package sub\nfunc C() {}\n", encoding="utf-8")

    processed = process_file(path, tmp_path, word_tokenizer)

    assert processed is not None
    assert processed.rel_path == "sub/c.go"
    assert processed.text == "File: sub/c.go\npackage sub\nfunc C() {}\n\n"
    assert processed.token_count == word_tokenizer(processed.text)


@pytest.mark.unit
def test_process_empty_file_keeps_header(tmp_path: Path, word_tokenizer: Tokenizer) -> None:
    path = tmp_path / "empty.txt"
    path.write_text("", encoding="utf-8")

    processed = process_file(path, tmp_path, word_tokenizer)

    assert processed is not None
    assert processed.text == "File: empty.txt\n\n"


@pytest.mark.unit
def test_process_binary_file_returns_none(tmp_path: Path, word_tokenizer: Tokenizer) -> None:
    path = tmp_path / "b.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR")

    assert process_file(path, tmp_path, word_tokenizer) is None


@pytest.mark.unit
def test_process_oversized_file_returns_none(tmp_path: Path, word_tokenizer: Tokenizer) -> None:
    path = tmp_path / "big.txt"
    path.write_text("word " * 100, encoding="utf-8")

    assert process_file(path, tmp_path, word_tokenizer, max_file_size=10) is None


@pytest.mark.unit
def test_process_missing_file_raises_with_relative_path(tmp_path: Path, word_tokenizer: Tokenizer) -> None:
    with pytest.raises(FileProcessingError) as exc_info:
        process_file(tmp_path / "gone.txt", tmp_path, word_tokenizer)

    assert exc_info.value.path == "gone.txt"
    assert "gone.txt" in str(exc_info.value)


@pytest.mark.unit
def test_process_directory_raises_read_error(tmp_path: Path, word_tokenizer: Tokenizer) -> None:
    (tmp_path / "adir").mkdir()

    with pytest.raises(FileProcessingError):
        process_file(tmp_path / "adir", tmp_path, word_tokenizer)
