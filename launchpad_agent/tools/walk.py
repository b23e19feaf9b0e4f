"""Directory walking shared by the filesystem tools."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "IGNORED_DIR_PREFIXES",
    "IGNORED_DIR_NAMES",
    "WalkEntry",
    "is_ignored_dir",
    "walk",
    "split_lines",
]

# Dependency, VCS and build-output directories nobody wants the model to crawl
IGNORED_DIR_PREFIXES: tuple[str, ...] = ("node_modules", ".git", "target", ".next")
IGNORED_DIR_NAMES: frozenset[str] = frozenset({"out", "dist"})


def is_ignored_dir(name: str) -> bool:
    """Return True if a directory with this name is pruned from traversal."""
    return name.startswith(IGNORED_DIR_PREFIXES) or name in IGNORED_DIR_NAMES


@dataclass(frozen=True)
class WalkEntry:
    """One entry below the walk root."""

    path: Path
    relative_path: str  # forward slashes on every platform
    name: str
    depth: int  # children of the root are depth 1
    is_dir: bool
    is_file: bool
    size: int | None  # regular files only


def _scan(directory: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError:
        return []


def walk(root: Path, max_depth: int) -> Iterator[WalkEntry]:
    """Yield entries below root in pre-order, up to max_depth levels deep.

    Ignored directories are yielded neither themselves nor their contents.
    Symlinks are reported but never followed. Unreadable directories are
    skipped.
    """
    if max_depth <= 0:
        return

    # Stack of (entry, path, relative path, depth). Siblings are pushed
    # reversed so they pop in name order.
    stack: list[tuple[os.DirEntry[str], Path, str, int]] = []
    for entry in reversed(_scan(root)):
        stack.append((entry, Path(entry.path), entry.name, 1))

    while stack:
        entry, path, relative, depth = stack.pop()
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = entry.is_file(follow_symlinks=False)
        except OSError:
            continue

        if is_dir and is_ignored_dir(entry.name):
            continue

        size: int | None = None
        if is_file:
            try:
                size = entry.stat(follow_symlinks=False).st_size
            except OSError:
                size = None

        yield WalkEntry(
            path=path,
            relative_path=relative,
            name=entry.name,
            depth=depth,
            is_dir=is_dir,
            is_file=is_file,
            size=size,
        )

        if is_dir and depth < max_depth:
            for child in reversed(_scan(path)):
                stack.append(
                    (child, Path(child.path), f"{relative}/{child.name}", depth + 1)
                )


def split_lines(text: str) -> list[str]:
    """Split text into lines on '\\n', dropping one trailing '\\r' per line.

    A trailing newline does not produce an empty final line, and only '\\n'
    counts as a line break (unlike str.splitlines()).
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]
