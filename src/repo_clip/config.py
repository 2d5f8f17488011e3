from __future__ import annotations

from enum import StrEnum, auto

from pydantic import BaseModel, ConfigDict, Field, computed_field

MAX_TOTAL_TOKENS = 50_000
MAX_FILE_SIZE = 1 * 1024 * 1024
BINARY_SNIFF_BYTES = 8000
MAX_WORKERS = 10
DEFAULT_MODEL = "gpt-4o"

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    ".git",
    ".svn",
    ".hg",
    "node_modules",
    "venv",
    "env",
    "__pycache__",
    "target",
    "bin",
    "obj",
    "build",
    "dist",
    "out",
    ".idea",
    ".vscode",
    ".settings",
    "*.log",
    "*.tmp",
    "*.swp",
    "*.exe",
    "*.dll",
    "*.so",
    "*.bin",
    "*.class",
    "*.jar",
    "*.war",
    "*.jpg",
    "*.jpeg",
    "*.png",
    "*.gif",
    "*.mp3",
    "*.mp4",
    "*.zip",
    "*.tar",
    "*.gz",
    "*.7z",
    "*.rar",
    "_build",
    "site",
)


class SkipReason(StrEnum):
    """Why a file was left out before its content was read."""

    TOO_LARGE = auto()
    BINARY = auto()


class Classification(BaseModel):
    """Outcome of the cheap pre-read checks on a file."""

    model_config = ConfigDict(frozen=True)

    skip: bool = False
    reason: SkipReason | None = None

    @classmethod
    def accept(cls) -> Classification:
        return cls()

    @classmethod
    def reject(cls, reason: SkipReason) -> Classification:
        return cls(skip=True, reason=reason)


class ProcessedFile(BaseModel):
    """A file rendered into its payload section, with its token cost.

    Attributes:
        rel_path: Path relative to the scan root, POSIX separators.
        text: The header, the file lines and the trailing blank line.
        token_count: Tokens of `text` as measured by the tokenizer.
    """

    model_config = ConfigDict(frozen=True)

    rel_path: str = Field(..., description="File path relative to the scan root")
    text: str = Field(..., description="Formatted section merged into the content blob")
    token_count: int = Field(..., ge=0, description="Token cost of `text`")


class CollectionResult(BaseModel):
    """Everything a collection run produced.

    `file_tree` lists every candidate in discovery order, whether or not its
    content made it into `content`. Sections in `content` appear in the order
    workers finished, which is not deterministic.
    """

    file_tree: list[str] = Field(default_factory=list, description="Candidates in discovery order")
    content: str = Field(default="", description="Accepted file sections")
    total_tokens: int = Field(default=0, ge=0, description="Tokens admitted into `content`")
    accepted: list[str] = Field(default_factory=list, description="Files merged into `content`")
    skipped_over_budget: list[str] = Field(
        default_factory=list,
        description="Files processed but discarded to stay within the token limit",
    )
    failed: list[str] = Field(default_factory=list, description="Files that raised an I/O error")

    @computed_field
    @property
    def file_tree_text(self) -> str:
        """One relative path per line, each terminated by a newline."""
        return "".join(f"{rel}\n" for rel in self.file_tree)
