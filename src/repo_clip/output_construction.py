from __future__ import annotations

from enum import StrEnum, auto
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


class TreeStyle(StrEnum):
    """How the file tree section is rendered."""

    FLAT = auto()
    ASCII = auto()


def _nest(rel_paths: Sequence[str]) -> dict[str, Any]:
    """Fold POSIX paths into nested dicts, keeping first-seen order. Files map to None."""
    tree: dict[str, Any] = {}
    for rel in rel_paths:
        *parents, name = rel.split("/")
        node = tree
        for part in parents:
            node = node.setdefault(part, {})
        node[name] = None
    return tree


def _ascii_lines(node: dict[str, Any], prefix: str = "") -> Iterator[str]:
    last_idx = len(node) - 1
    for idx, (name, child) in enumerate(node.items()):
        last = idx == last_idx
        if child is None:
            yield f"{prefix}{'└── ' if last else '├── '}{name}"
            continue
        yield f"{prefix}{'└── ' if last else '├── '}{name}/"
        yield from _ascii_lines(child, prefix + ("    " if last else "│   "))


def render_file_tree(rel_paths: Sequence[str], style: TreeStyle = TreeStyle.FLAT, root_name: str = ".") -> str:
    """Render the file tree section.

    Both styles keep discovery order. `flat` prints one path per line;
    `ascii` draws a box tree under `root_name`, so each directory lists its
    files before its subdirectories. Non-empty output ends with a newline.
    """
    if not rel_paths:
        return ""
    if style == TreeStyle.ASCII:
        return "\n".join([root_name, *_ascii_lines(_nest(rel_paths))]) + "\n"
    return "".join(f"{rel}\n" for rel in rel_paths)


def build_payload(file_tree: str, content: str) -> str:
    """Assemble the text handed to the output sink.

    Args:
        file_tree (str): the rendered file tree
        content (str): the accepted file sections

    Returns:
        str: `"File Tree:\\n<tree>\\n\\nContents:\\n<content>"`
    """
    return f"File Tree:\n{file_tree}\n\nContents:\n{content}"
