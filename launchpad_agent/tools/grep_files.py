"""grep_files tool: case-insensitive substring search across a tree."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Annotated, Any

from ..data_structures import TextContent
from ..sandbox import ValidatedPath
from .base import Desc, Tool
from .globbing import compile_glob
from .walk import WalkEntry, split_lines, walk

DEFAULT_MAX_RESULTS = 50
MAX_SEARCH_DEPTH = 10
MAX_SEARCH_FILE_BYTES = 500_000
MAX_LINE_CHARS = 200

NO_MATCHES = "No matches found."


@dataclass(frozen=True)
class MatchEntry:
    """One matching line."""

    file: str
    line_number: int  # 1-based
    line_text: str  # at most MAX_LINE_CHARS code points

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "line_number": self.line_number,
            "line_content": self.line_text,
        }

    def render(self) -> str:
        return f"{self.file}:{self.line_number}: {self.line_text}"


def _search_targets(base: ValidatedPath) -> Iterator[WalkEntry]:
    """Files under base, or base itself when it is a file."""
    if base.is_file():
        path = base.path
        yield WalkEntry(
            path=path,
            relative_path=path.name,
            name=path.name,
            depth=0,
            is_dir=False,
            is_file=True,
            size=path.stat().st_size,
        )
        return
    for entry in walk(base.path, MAX_SEARCH_DEPTH):
        if entry.is_file:
            yield entry


def grep_files(
    base: ValidatedPath,
    search_pattern: str,
    file_pattern: str | None = None,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> list[MatchEntry]:
    """Find lines containing search_pattern (plain text, case-insensitive).

    Files whose name fails file_pattern, files over MAX_SEARCH_FILE_BYTES and
    files that cannot be decoded are skipped without error. Stops as soon as
    max_results matches are collected. A file base is searched on its own and
    reported under its name.
    """
    needle = search_pattern.lower()
    matcher = compile_glob(file_pattern) if file_pattern else None

    results: list[MatchEntry] = []
    if max_results <= 0:
        return results

    for entry in _search_targets(base):
        if matcher is not None and not matcher.match(entry.name):
            continue
        if entry.size is not None and entry.size > MAX_SEARCH_FILE_BYTES:
            continue
        try:
            with open(entry.path, encoding="utf-8", newline="") as f:
                content = f.read()
        except (OSError, UnicodeDecodeError):
            continue

        for line_number, line in enumerate(split_lines(content), start=1):
            if needle in line.lower():
                results.append(
                    MatchEntry(
                        file=entry.relative_path,
                        line_number=line_number,
                        line_text=line[:MAX_LINE_CHARS],
                    )
                )
                if len(results) >= max_results:
                    return results
    return results


@dataclass
class GrepFilesInput:
    """Input for GrepFilesTool."""

    base_path: Annotated[str, Desc("The base directory path to search in")]
    search_pattern: Annotated[
        str, Desc("The text pattern to search for (case-insensitive)")
    ]
    file_pattern: Annotated[
        str | None,
        Desc(
            "Optional glob pattern to filter which files to search "
            "(e.g., '*.ts', '*.tsx')"
        ),
    ] = None
    max_results: Annotated[
        int | None, Desc("Maximum number of results to return (default: 50)")
    ] = None


@dataclass
class GrepFilesTool(Tool):
    """Search file contents for a text pattern."""

    name: str = "grep_files"
    description: str = (
        "Search for text patterns in files. Use this to find specific code, "
        "function definitions, imports, or any text pattern across the codebase."
    )

    async def __call__(self, input: GrepFilesInput) -> TextContent:
        base = self.resolve(input.base_path)
        max_results = (
            input.max_results
            if input.max_results is not None
            else DEFAULT_MAX_RESULTS
        )
        matches = grep_files(base, input.search_pattern, input.file_pattern, max_results)
        if not matches:
            return TextContent(text=NO_MATCHES)
        return TextContent(text="\n".join(match.render() for match in matches))
