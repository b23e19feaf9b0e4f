"""get_directory_tree tool: deterministic box-drawing tree of a directory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

from ..data_structures import TextContent
from ..sandbox import ValidatedPath
from .base import Desc, Tool
from .walk import is_ignored_dir

DEFAULT_MAX_DEPTH = 3

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_INDENT = "│   "
SPACE_INDENT = "    "


def _sorted_children(directory: Path) -> list[tuple[Path, str, bool]]:
    """Return (path, name, is_dir) children: directories first, then by name."""
    try:
        with os.scandir(directory) as it:
            children = []
            for entry in it:
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError:
                    continue
                if is_dir and is_ignored_dir(entry.name):
                    continue
                children.append((Path(entry.path), entry.name, is_dir))
    except OSError:
        return []
    children.sort(key=lambda child: (not child[2], child[1]))
    return children


def get_directory_tree(base: ValidatedPath, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """Render base as an indented tree, max_depth levels below base.

    max_depth=0 renders only the root line. An ignored root (e.g. a .git
    directory) renders as the empty string. Symlinked directories are shown
    but not expanded.
    """
    root = base.path
    root_name = root.name or str(root)
    root_is_dir = root.is_dir()
    if root_is_dir and is_ignored_dir(root_name):
        return ""

    lines: list[str] = []
    # (path, name, is_dir, prefix, is_last, remaining depth)
    stack: list[tuple[Path, str, bool, str, bool, int]] = [
        (root, root_name, root_is_dir, "", True, max_depth)
    ]
    while stack:
        path, name, is_dir, prefix, is_last, remaining = stack.pop()
        connector = LAST_BRANCH if is_last else BRANCH
        lines.append(f"{prefix}{connector}{name}/" if is_dir else f"{prefix}{connector}{name}")

        if not is_dir or remaining <= 0:
            continue
        children = _sorted_children(path)
        child_prefix = prefix + (SPACE_INDENT if is_last else PIPE_INDENT)
        last_index = len(children) - 1
        for index in range(last_index, -1, -1):
            child_path, child_name, child_is_dir = children[index]
            stack.append(
                (
                    child_path,
                    child_name,
                    child_is_dir,
                    child_prefix,
                    index == last_index,
                    remaining - 1,
                )
            )

    return "".join(f"{line}\n" for line in lines)


@dataclass
class DirectoryTreeInput:
    """Input for DirectoryTreeTool."""

    base_path: Annotated[str, Desc("The base directory path")]
    max_depth: Annotated[
        int | None, Desc("Maximum depth of the tree (default: 3)")
    ] = None


@dataclass
class DirectoryTreeTool(Tool):
    """Render the directory structure as a tree."""

    name: str = "get_directory_tree"
    description: str = (
        "Get a visual tree representation of the directory structure. Useful "
        "for understanding project layout."
    )

    async def __call__(self, input: DirectoryTreeInput) -> TextContent:
        base = self.resolve(input.base_path)
        depth = input.max_depth if input.max_depth is not None else DEFAULT_MAX_DEPTH
        return TextContent(text=get_directory_tree(base, depth))
