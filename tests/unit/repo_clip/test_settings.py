from pathlib import Path

import pytest

from repo_clip.config import DEFAULT_MODEL, MAX_FILE_SIZE, MAX_TOTAL_TOKENS, MAX_WORKERS
from repo_clip.output_construction import TreeStyle
from repo_clip.settings import Settings, split_csv


@pytest.mark.unit
def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("REPO_CLIP_MAX_TOKENS", raising=False)
    monkeypatch.delenv("REPO_CLIP_MODEL", raising=False)

    settings = Settings()

    assert settings.root == Path(".")
    assert settings.include == []
    assert settings.ignore == []
    assert settings.gitignore is True
    assert settings.max_tokens == MAX_TOTAL_TOKENS
    assert settings.max_file_size == MAX_FILE_SIZE
    assert settings.workers == MAX_WORKERS
    assert settings.model == DEFAULT_MODEL
    assert settings.output is None
    assert settings.tree_style == TreeStyle.FLAT


@pytest.mark.unit
def test_settings_reads_budget_and_model_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REPO_CLIP_MAX_TOKENS", "1234")
    monkeypatch.setenv("REPO_CLIP_MODEL", "cl100k_base")

    settings = Settings()

    assert settings.max_tokens == 1234  # noqa: PLR2004
    assert settings.model == "cl100k_base"


@pytest.mark.unit
def test_settings_splits_comma_separated_patterns() -> None:
    settings = Settings(include=".go, .txt,", ignore="vendor")

    assert settings.include == [".go", ".txt"]
    assert settings.ignore == ["vendor"]


@pytest.mark.unit
def test_settings_rejects_zero_workers() -> None:
    with pytest.raises(ValueError, match="workers"):
        Settings(workers=0)


@pytest.mark.unit
def test_split_csv_empty_value() -> None:
    assert split_csv("") == []
    assert split_csv(None) == []
