"""list_files tool: bounded directory listing with an optional glob filter."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Annotated, Any

from ..data_structures import TextContent
from ..sandbox import ValidatedPath
from .base import Desc, Tool
from .globbing import compile_glob
from .walk import walk

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 3
MAX_ENTRIES = 100


@dataclass(frozen=True)
class ListingEntry:
    """One listed entry, relative to the listing root."""

    relative_path: str
    is_directory: bool
    size_bytes: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.relative_path,
            "is_directory": self.is_directory,
            "size": self.size_bytes,
        }


def list_files(
    base: ValidatedPath,
    pattern: str | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[ListingEntry]:
    """List entries below base, at most max_depth levels deep.

    When pattern is given an entry is kept if the glob matches its relative
    path or its bare name. An invalid pattern is ignored. At most MAX_ENTRIES
    entries are returned, counted after filtering.
    """
    matcher = compile_glob(pattern) if pattern else None
    if pattern and matcher is None:
        logger.debug("Ignoring invalid glob pattern %r", pattern)

    results: list[ListingEntry] = []
    for entry in walk(base.path, max_depth):
        if matcher is not None and not (
            matcher.match(entry.relative_path) or matcher.match(entry.name)
        ):
            continue
        results.append(
            ListingEntry(
                relative_path=entry.relative_path,
                is_directory=entry.is_dir,
                size_bytes=entry.size if entry.is_file else None,
            )
        )
        if len(results) >= MAX_ENTRIES:
            break
    return results


@dataclass
class ListFilesInput:
    """Input for ListFilesTool."""

    base_path: Annotated[str, Desc("The base directory path to search in")]
    pattern: Annotated[
        str | None,
        Desc(
            "Optional glob pattern to filter files (e.g., '*.ts', '*.tsx', 'src/*')"
        ),
    ] = None
    max_depth: Annotated[
        int | None, Desc("Maximum directory depth to search (default: 3)")
    ] = None


@dataclass
class ListFilesTool(Tool):
    """Explore project structure by listing files."""

    name: str = "list_files"
    description: str = (
        "List files in a directory. Use this to explore project structure and "
        "find files. Automatically excludes node_modules, .git, target, .next, "
        "dist, and out directories."
    )

    async def __call__(self, input: ListFilesInput) -> TextContent:
        base = self.resolve(input.base_path)
        depth = input.max_depth if input.max_depth is not None else DEFAULT_MAX_DEPTH
        entries = list_files(base, input.pattern, depth)
        return TextContent(
            text=json.dumps([entry.to_dict() for entry in entries], indent=2)
        )
