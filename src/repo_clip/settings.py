from __future__ import annotations

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from repo_clip.config import DEFAULT_MODEL, MAX_FILE_SIZE, MAX_TOTAL_TOKENS, MAX_WORKERS
from repo_clip.output_construction import TreeStyle

ENV_FILE = find_dotenv(usecwd=True)
ENV_PREFIX = "REPO_CLIP_"


def load_env() -> None:
    """Load `.env` from the working directory (or a parent) without overriding the environment."""
    if ENV_FILE:
        load_dotenv(ENV_FILE, override=False)


def _env_max_tokens() -> int:
    return int(os.environ.get(f"{ENV_PREFIX}MAX_TOKENS", MAX_TOTAL_TOKENS))


def _env_model() -> str:
    return os.environ.get(f"{ENV_PREFIX}MODEL", DEFAULT_MODEL)


def split_csv(value: str | list[str] | None) -> list[str]:
    """Split a comma-separated flag value. An empty value gives an empty list."""
    if not value:
        return []
    if isinstance(value, list):
        return [v.strip() for v in value if v.strip()]
    return [v.strip() for v in value.split(",") if v.strip()]


class Settings(BaseModel):
    """Configuration settings for the repo_clip module."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    root: Path = Field(default_factory=lambda: Path("."), description="Directory to collect.")
    include: list[str] = Field(default_factory=list, description="Include patterns.")
    ignore: list[str] = Field(default_factory=list, description="Extra exclude patterns.")
    gitignore: bool = Field(default=True, description="Add .gitignore patterns to the excludes.")

    max_tokens: int = Field(default_factory=_env_max_tokens, ge=0, description="Global token budget.")
    max_file_size: int = Field(default=MAX_FILE_SIZE, ge=0, description="Files above are skipped.")
    workers: int = Field(default=MAX_WORKERS, ge=1, description="Concurrent file workers.")
    model: str = Field(default_factory=_env_model, description="Tokenizer model or encoding.")

    output: Path | None = Field(default=None, description="Write the payload to this file.")
    stdout: bool = Field(default=False, description="Write the payload to stdout.")
    tree_style: TreeStyle = Field(default=TreeStyle.FLAT, description="File tree rendering.")
    log_file: str = Field(default="", description="Log file path.")
    verbose: bool = Field(default=False, description="Log every accepted file.")

    @field_validator("include", "ignore", mode="before")
    @classmethod
    def _split_patterns(cls, value: str | list[str] | None) -> list[str]:
        return split_csv(value)
