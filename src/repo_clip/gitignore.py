from __future__ import annotations

from pathlib import Path

from repo_clip.exceptions import GitignoreParseError


def parse_gitignore(root: Path) -> list[str]:
    """Read the exclusion patterns of `root/.gitignore`.

    Lines are trimmed; blank lines and `#` comments are dropped. Remaining
    lines are used verbatim as exclusion patterns, so gitignore-specific
    syntax (negation, anchoring) is not interpreted.

    Args:
        root (Path): the directory holding the `.gitignore`

    Raises:
        GitignoreParseError: if the file exists but cannot be read.

    Returns:
        list[str]: the patterns, empty when there is no `.gitignore`
    """
    gitignore = Path(root) / ".gitignore"
    try:
        text = gitignore.read_text(encoding="utf-8", errors="ignore")
    except FileNotFoundError:
        return []
    except OSError as e:
        raise GitignoreParseError(path=gitignore, reason=str(e)) from e

    patterns: list[str] = []
    for ln in text.splitlines():
        s = ln.strip()
        if not s or s.startswith("#"):
            continue
        patterns.append(s)
    return patterns
