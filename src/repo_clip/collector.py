"""Discovery and budgeted concurrent collection of file contents.

A run has two phases. Discovery walks the tree once, sequentially, and
yields the candidate list in a deterministic order; that list is also the
displayed file tree. Processing then reads, classifies and tokenizes the
candidates on a bounded thread pool, and every result goes through
`Budget.try_admit`, the only place where workers share mutable state.

The exhaustion check runs before a file is dispatched, while the
accept/reject decision runs after the file has been read and tokenized. A
file dispatched just before the budget fills up is therefore tokenized and
then discarded. That wasted work is a known inefficiency, not a
correctness problem: the admitted total never exceeds the limit.
"""

from __future__ import annotations

import io
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING

from repo_clip.config import MAX_FILE_SIZE, MAX_TOTAL_TOKENS, MAX_WORKERS, CollectionResult
from repo_clip.exceptions import FileProcessingError
from repo_clip.logging import logger
from repo_clip.patterns import PatternSet, is_ignored, is_included
from repo_clip.processor import process_file, relpath

if TYPE_CHECKING:
    from collections.abc import Iterable
    from concurrent.futures import Future

    from repo_clip.config import ProcessedFile
    from repo_clip.tokenizer import Tokenizer


class Budget:
    """Token budget and content accumulator shared by all workers.

    `used` only grows, and a file is merged only if `used + cost <= limit`
    at the moment it is admitted. Check and merge happen under one lock,
    which is never held across I/O or tokenization.
    """

    def __init__(self, limit: int = MAX_TOTAL_TOKENS) -> None:
        self.limit = limit
        self.used = 0
        self.accepted: list[str] = []
        self.rejected: list[str] = []
        self._content = io.StringIO()
        self._lock = threading.Lock()

    def exhausted(self) -> bool:
        with self._lock:
            return self.used >= self.limit

    def snapshot(self) -> tuple[int, int]:
        """Return `(used, limit)` as seen under the lock."""
        with self._lock:
            return self.used, self.limit

    def try_admit(self, processed: ProcessedFile) -> bool:
        """Merge a processed file if it still fits in the budget.

        Args:
            processed (ProcessedFile): the formatted file and its token cost

        Returns:
            bool: True if the file was merged, False if it was discarded
        """
        with self._lock:
            if self.used + processed.token_count <= self.limit:
                self._content.write(processed.text)
                self.used += processed.token_count
                self.accepted.append(processed.rel_path)
                return True
            self.rejected.append(processed.rel_path)
            return False

    @property
    def content(self) -> str:
        with self._lock:
            return self._content.getvalue()


def discover(
    root: Path,
    include: Iterable[str] | PatternSet = (),
    exclude: Iterable[str] | PatternSet = (),
) -> list[Path]:
    """Walk `root` and return the files that survive filtering.

    The walk is depth-first. Within a directory, files come first and then
    subdirectories, each sorted by name, so two walks of an unchanged tree
    give the same list. A directory matching `exclude` is pruned with its
    whole subtree; a file must not match `exclude` and must match `include`
    (an empty include set accepts everything). Unreadable directories are
    logged and skipped.

    Args:
        root (Path): the directory to walk
        include (Iterable[str] | PatternSet): inclusion patterns
        exclude (Iterable[str] | PatternSet): exclusion patterns

    Returns:
        list[Path]: candidate files, in discovery order
    """
    include = include if isinstance(include, PatternSet) else PatternSet.of(include)
    exclude = exclude if isinstance(exclude, PatternSet) else PatternSet.of(exclude)

    def on_error(err: OSError) -> None:
        if err.filename is not None and Path(err.filename) == root:
            logger.error("Cannot walk root directory", root=str(root), error=str(err))
        else:
            logger.warning("Cannot read directory", path=str(err.filename), error=str(err))

    candidates: list[Path] = []
    for current, dirs, files in os.walk(root, onerror=on_error):
        base = Path(current)
        dirs[:] = sorted(d for d in dirs if not is_ignored(relpath(base / d, root), exclude))
        for name in sorted(files):
            path = base / name
            rel = relpath(path, root)
            if is_ignored(rel, exclude) or not is_included(rel, include):
                continue
            if path.is_file():
                candidates.append(path)
    return candidates


def _process_and_admit(
    path: Path,
    root: Path,
    tokenizer: Tokenizer,
    budget: Budget,
    max_file_size: int,
) -> str | None:
    """Worker body.

    Returns:
        str | None: the relative path if the file failed, None otherwise
    """
    try:
        processed = process_file(path, root, tokenizer, max_file_size=max_file_size)
    except FileProcessingError as e:
        logger.warning("Error processing file", path=e.path, error=e.reason)
        return e.path
    if processed is None:
        return None
    if budget.try_admit(processed):
        logger.debug("Added file", path=processed.rel_path, tokens=processed.token_count)
    else:
        logger.info(
            "Skipping file to stay within token limit",
            path=processed.rel_path,
            tokens=processed.token_count,
            limit=budget.limit,
        )
    return None


def collect(
    root: Path,
    include: Iterable[str] = (),
    exclude: Iterable[str] = (),
    *,
    tokenizer: Tokenizer,
    max_total_tokens: int = MAX_TOTAL_TOKENS,
    max_file_size: int = MAX_FILE_SIZE,
    max_workers: int = MAX_WORKERS,
) -> CollectionResult:
    """Collect the contents of `root` into a token-bounded blob.

    Discovery runs first and fixes the file tree. Candidates are then
    dispatched to at most `max_workers` concurrent workers; dispatch stops
    as soon as the budget is exhausted, but dispatched work always finishes.
    Per-file errors are logged and never stop the run.

    Args:
        root (Path): the directory to collect
        include (Iterable[str]): inclusion patterns, empty for everything
        exclude (Iterable[str]): exclusion patterns
        tokenizer (Tokenizer): measures each formatted file
        max_total_tokens (int, optional): token budget. Defaults to 50000.
        max_file_size (int, optional): per-file size ceiling in bytes. Defaults to 1 MiB.
        max_workers (int, optional): concurrency cap. Defaults to 10.

    Returns:
        CollectionResult: the file tree, the accepted content and the run bookkeeping
    """
    root = Path(root)
    candidates = discover(root, PatternSet.of(include), PatternSet.of(exclude))
    budget = Budget(max_total_tokens)

    slots = threading.BoundedSemaphore(max_workers)
    futures: list[Future[str | None]] = []
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="repo-clip") as executor:
        for path in candidates:
            slots.acquire()
            if budget.exhausted():
                slots.release()
                used, limit = budget.snapshot()
                logger.info("Reached maximum token limit", limit=limit, used=used)
                break
            future = executor.submit(_process_and_admit, path, root, tokenizer, budget, max_file_size)
            future.add_done_callback(lambda _f: slots.release())
            futures.append(future)

    failed = [rel for rel in (f.result() for f in futures) if rel is not None]
    total_tokens, _ = budget.snapshot()
    result = CollectionResult(
        file_tree=[relpath(p, root) for p in candidates],
        content=budget.content,
        total_tokens=total_tokens,
        accepted=list(budget.accepted),
        skipped_over_budget=list(budget.rejected),
        failed=failed,
    )
    logger.info(
        "Collection finished",
        candidates=len(candidates),
        accepted=len(result.accepted),
        skipped_over_budget=len(result.skipped_over_budget),
        failed=len(result.failed),
        total_tokens=result.total_tokens,
    )
    return result
