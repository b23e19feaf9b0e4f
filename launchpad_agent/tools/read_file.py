"""read_file tool: size- and line-capped text reads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from ..data_structures import TextContent
from ..errors import NotAFileError, ReadError, TooLargeError
from ..sandbox import ValidatedPath
from .base import Desc, Tool
from .walk import split_lines

DEFAULT_MAX_LINES = 500
MAX_FILE_BYTES = 1_000_000


@dataclass(frozen=True)
class FileSnapshot:
    """Text of a file, possibly cut to a line cap.

    truncated is True exactly when total_line_count exceeds the cap; content
    then holds only the first max_lines lines.
    """

    path: str
    content: str
    total_line_count: int
    truncated: bool

    def render(self) -> str:
        suffix = " (truncated)" if self.truncated else ""
        return (
            f"File: {self.path}\nLines: {self.total_line_count}{suffix}\n\n"
            f"{self.content}"
        )


def read_file(path: ValidatedPath, max_lines: int = DEFAULT_MAX_LINES) -> FileSnapshot:
    """Read a text file, keeping at most max_lines lines.

    Raises:
        NotAFileError: path is a directory (or other non-file)
        TooLargeError: file is larger than MAX_FILE_BYTES
        ReadError: file cannot be read or is not UTF-8 text
    """
    if not path.is_file():
        raise NotAFileError(f"Path is not a file: {path}")

    try:
        size = path.path.stat().st_size
    except OSError as e:
        raise ReadError(f"Failed to read file: {e}") from e
    if size > MAX_FILE_BYTES:
        raise TooLargeError("File too large (> 1MB). Use grep_files for large files.")

    try:
        with open(path.path, encoding="utf-8", newline="") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ReadError(f"Failed to read file: {e}") from e

    lines = split_lines(content)
    total = len(lines)
    if total > max_lines:
        return FileSnapshot(
            path=str(path),
            content="\n".join(lines[:max_lines]),
            total_line_count=total,
            truncated=True,
        )
    return FileSnapshot(
        path=str(path), content=content, total_line_count=total, truncated=False
    )


@dataclass
class ReadFileInput:
    """Input for ReadFileTool."""

    file_path: Annotated[str, Desc("The full path to the file to read")]
    max_lines: Annotated[
        int | None, Desc("Maximum number of lines to read (default: 500)")
    ] = None


@dataclass
class ReadFileTool(Tool):
    """Read a file's text content."""

    name: str = "read_file"
    description: str = (
        "Read the contents of a file. Use this to examine code, configuration "
        "files, or documentation."
    )

    async def __call__(self, input: ReadFileInput) -> TextContent:
        path = self.resolve(input.file_path)
        max_lines = (
            input.max_lines if input.max_lines is not None else DEFAULT_MAX_LINES
        )
        return TextContent(text=read_file(path, max_lines).render())
