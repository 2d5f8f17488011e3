from __future__ import annotations

import fnmatch
import posixpath
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence


@dataclass(frozen=True)
class PatternSet:
    """An ordered, immutable list of glob/substring patterns.

    Blank entries are dropped. Instances are shared read-only between workers.
    """

    patterns: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        cleaned = tuple(p.strip() for p in self.patterns if p and p.strip())
        object.__setattr__(self, "patterns", cleaned)

    @classmethod
    def of(cls, patterns: Iterable[str] | None = None) -> PatternSet:
        return cls(patterns=tuple(patterns or ()))

    def __iter__(self) -> Iterator[str]:
        return iter(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)


def is_malformed_glob(pattern: str) -> bool:
    """Check whether a glob pattern cannot be compiled.

    `fnmatch` silently treats an unterminated `[` as a literal, so this
    detects the cases a strict glob engine rejects: a bracket class that
    never closes and a dangling trailing escape.

    Args:
        pattern (str): the glob pattern to check

    Returns:
        bool: True if the pattern is malformed, False otherwise
    """
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        i += 1
        if c == "\\":
            if i >= n:
                return True
            i += 1
        elif c == "[":
            j = i
            if j < n and pattern[j] in "!^":
                j += 1
            # a `]` right after the opening bracket is part of the class
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                return True
            i = j + 1
    return False


def _translate_escapes(pattern: str) -> str:
    """Rewrite backslash escapes into the form `fnmatch` understands.

    `fnmatch` has no escape character, so `\\x` outside a bracket class
    becomes the one-character class `[x]`, and inside a class the backslash
    is dropped. Only called on well-formed patterns.
    """
    out: list[str] = []
    in_class = False
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            escaped = pattern[i + 1]
            out.append(escaped if in_class else f"[{escaped}]")
            i += 2
            continue
        if c == "[" and not in_class:
            in_class = True
            out.append(c)
            i += 1
            # negation and a leading `]` belong to the class
            if i < len(pattern) and pattern[i] in "!^":
                out.append("!")
                i += 1
            if i < len(pattern) and pattern[i] == "]":
                out.append("]")
                i += 1
            continue
        if c == "]" and in_class:
            in_class = False
        out.append(c)
        i += 1
    return "".join(out)


def glob_match(base: str, pattern: str) -> bool:
    """Case-sensitive glob match of `pattern` against a base name.

    A backslash escapes the next character, so `a\\*` only matches `a*`.
    """
    if is_malformed_glob(pattern):
        return False
    return fnmatch.fnmatchcase(base, _translate_escapes(pattern))


def substring_match(path: str, pattern: str) -> bool:
    return pattern in path


def suffix_match(path: str, pattern: str) -> bool:
    return path.endswith(pattern)


def matches(rel_path: str, patterns: Iterable[str], *, suffix: bool = False) -> bool:
    """Check whether a relative path matches any pattern.

    A pattern matches when it glob-matches the base name of `rel_path`, or
    when it is found in the full path: as a substring for exclusion, as a
    suffix for inclusion (`suffix=True`). Malformed globs match nothing.

    Args:
        rel_path (str): the path relative to the scan root, POSIX separators
        patterns (Iterable[str]): the patterns to test
        suffix (bool, optional): use suffix instead of substring matching. Defaults to False.

    Returns:
        bool: True if any pattern matches, False otherwise
    """
    base = posixpath.basename(rel_path.rstrip("/"))
    literal = suffix_match if suffix else substring_match
    for pattern in patterns:
        if is_malformed_glob(pattern):
            continue
        if glob_match(base, pattern) or literal(rel_path, pattern):
            return True
    return False


def is_ignored(rel_path: str, patterns: Iterable[str]) -> bool:
    return matches(rel_path, patterns)


def is_included(rel_path: str, patterns: PatternSet | Sequence[str]) -> bool:
    """Check inclusion. An empty pattern set includes everything."""
    if len(patterns) == 0:
        return True
    return matches(rel_path, patterns, suffix=True)
