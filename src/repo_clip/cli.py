"""
repo_clip: copy a directory tree into an LLM context window.

Overview
--------
Walks a directory, keeps the text files that survive the include/exclude
patterns, and concatenates them into one payload bounded by a token budget:

    File Tree:
    <one path per line>

    Contents:
    File: <path>
    <file lines>

The payload goes to the clipboard by default, or to a file (`--output`) or
stdout (`--stdout`). Binary files (NUL byte in the first 8000 bytes) and
files over `--max-file-size` are skipped. Files are read and tokenized on a
pool of `--workers` threads; once `--max-tokens` is reached no new file is
started, and a file that would overflow the budget is dropped.

Usage
-----
    repo-clip
    repo-clip --root src --include .py,.toml
    repo-clip --ignore tests,docs --max-tokens 100000 --output context.txt
    repo-clip --no-gitignore --stdout --tree-style ascii
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

from repo_clip import __version__
from repo_clip.collector import collect
from repo_clip.config import DEFAULT_IGNORE_PATTERNS
from repo_clip.exceptions import ClipboardUnavailableError, GitignoreParseError, TokenizerInitError
from repo_clip.gitignore import parse_gitignore
from repo_clip.logging import logger, setup_logging
from repo_clip.output_construction import TreeStyle, build_payload, render_file_tree
from repo_clip.settings import Settings, load_env
from repo_clip.sinks import select_sink
from repo_clip.tokenizer import load_tokenizer

if TYPE_CHECKING:
    from collections.abc import Sequence


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    p = argparse.ArgumentParser(
        prog="repo-clip",
        description="Concatenate a directory's text files into a token-bounded payload for an LLM.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--root", type=str, default=".", help="Directory to collect.")
    p.add_argument(
        "--include",
        type=str,
        default="",
        help="Comma-separated list of file extensions or patterns to include (e.g., .go,.txt).",
    )
    p.add_argument(
        "--ignore",
        type=str,
        default="",
        help="Comma-separated list of patterns to ignore.",
    )
    p.add_argument(
        "--gitignore",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Parse .gitignore files to exclude patterns.",
    )
    p.add_argument("--max-tokens", type=int, default=None, help="Global token budget.")
    p.add_argument("--max-file-size", type=int, default=None, help="Skip files larger than this (bytes).")
    p.add_argument("--workers", type=int, default=None, help="Concurrent file workers.")
    p.add_argument("--model", type=str, default=None, help="Tokenizer model or tiktoken encoding.")

    sink = p.add_mutually_exclusive_group()
    sink.add_argument("--output", type=str, default=None, help="Write the payload to a file.")
    sink.add_argument("--stdout", action="store_true", help="Write the payload to stdout.")

    p.add_argument(
        "--tree-style",
        choices=[s.value for s in TreeStyle],
        default=TreeStyle.FLAT.value,
        help="File tree rendering.",
    )
    p.add_argument("--log-file", type=str, default="", help="Log file path.")
    p.add_argument("--verbose", action="store_true", help="Log every accepted file.")
    args = p.parse_args(argv)
    # unset numeric flags fall back to the Settings defaults (and the environment)
    values = {k: v for k, v in vars(args).items() if v is not None}
    return Settings(**values)


def exclude_patterns(settings: Settings, root: Path) -> list[str]:
    """Build the effective exclude list: defaults, then `--ignore`, then `.gitignore`.

    An unreadable `.gitignore` is logged and contributes nothing.
    """
    patterns = [*DEFAULT_IGNORE_PATTERNS, *settings.ignore]
    if settings.gitignore:
        try:
            patterns.extend(parse_gitignore(root))
        except GitignoreParseError as e:
            logger.error("Error parsing .gitignore", path=str(e.path), error=e.reason)
    return patterns


def main(argv: Sequence[str] | None = None) -> int:
    load_env()
    settings = parse_args(argv)
    setup_logging(settings.log_file or None, verbose=settings.verbose)

    try:
        tokenizer = load_tokenizer(settings.model)
    except TokenizerInitError as e:
        logger.error("Error initializing tokenizer", model=e.model, error=e.reason)
        return 1

    root = settings.root
    if not root.is_dir():
        logger.error("Invalid root directory", root=str(root))
        return 1

    result = collect(
        root,
        settings.include,
        exclude_patterns(settings, root),
        tokenizer=tokenizer,
        max_total_tokens=settings.max_tokens,
        max_file_size=settings.max_file_size,
        max_workers=settings.workers,
    )

    tree = render_file_tree(result.file_tree, settings.tree_style, root_name=root.resolve().name or str(root))
    payload = build_payload(tree, result.content)

    sink = select_sink(settings)
    try:
        sink.write(payload)
    except ClipboardUnavailableError as e:
        logger.warning(e.message, error=e.reason)
    else:
        logger.info("Payload written", sink=sink.describe(), chars=len(payload))

    if not settings.stdout:
        print(f"Total tokens used: {result.total_tokens}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
