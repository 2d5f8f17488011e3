from pathlib import Path

import pytest

from repo_clip import cli
from repo_clip.exceptions import TokenizerInitError
from repo_clip.tokenizer import TiktokenTokenizer


@pytest.fixture(scope="module")
def real_tokenizer() -> TiktokenTokenizer:
    try:
        return TiktokenTokenizer("gpt-4o")
    except TokenizerInitError as e:
        pytest.skip(f"tiktoken encoding unavailable: {e.reason}")


def test_end_to_end_export_with_real_tokenizer(
    tmp_path: Path,
    real_tokenizer: TiktokenTokenizer,
    capsys: pytest.CaptureFixture[str],
) -> None:
    repo = tmp_path / "repo"
    (repo / "src").mkdir(parents=True)
    (repo / "src" / "app.py").write_text("print('hello')\n", encoding="utf-8")
    (repo / ".git").mkdir()
    (repo / ".git" / "config").write_text("[core]\n", encoding="utf-8")
    output = tmp_path / "export.txt"

    exit_code = cli.main(["--root", str(repo), "--output", str(output), "--model", real_tokenizer.model])

    assert exit_code == 0
    payload = output.read_text(encoding="utf-8")
    assert payload == "File Tree:\nsrc/app.py\n\n\nContents:\nFile: src/app.py\nprint('hello')\n\n"
    expected = real_tokenizer("File: src/app.py\nprint('hello')\n\n")
    assert f"Total tokens used: {expected}" in capsys.readouterr().out


def test_end_to_end_budget_smaller_than_any_file(
    tmp_path: Path,
    real_tokenizer: TiktokenTokenizer,
) -> None:
    repo = tmp_path / "repo"
    repo.mkdir()
    (repo / "big.txt").write_text("lorem ipsum dolor sit amet " * 50, encoding="utf-8")
    output = tmp_path / "export.txt"

    exit_code = cli.main([
        "--root",
        str(repo),
        "--output",
        str(output),
        "--max-tokens",
        "5",
        "--model",
        real_tokenizer.model,
    ])

    assert exit_code == 0
    assert output.read_text(encoding="utf-8") == "File Tree:\nbig.txt\n\n\nContents:\n"
