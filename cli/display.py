"""Output formatting for the launchpad CLI using Rich.

Each function returns a Rich renderable; app.py decides where it is printed.
"""

from __future__ import annotations

from typing import Iterable

from rich import box
from rich.console import RenderableType
from rich.markdown import Markdown
from rich.table import Table
from rich.text import Text

from launchpad_agent import (
    FileSnapshot,
    ListingEntry,
    MatchEntry,
    ProjectAnalysis,
    Usage,
)


def format_assistant_message(text: str) -> RenderableType:
    """Render the final answer as markdown."""
    return Markdown(text.rstrip(), code_theme="native")


def format_tool_call(name: str, params: dict[str, object]) -> Text:
    """Format a tool call as a function call."""
    result = Text()
    result.append(name, style="yellow bold")
    result.append("(", style="dim")

    items = list(params.items())
    for i, (key, value) in enumerate(items):
        val_str = str(value)
        if len(val_str) > 60:
            val_str = val_str[:57] + "..."

        result.append(key, style="cyan")
        result.append(": ", style="dim")
        result.append(val_str)

        if i < len(items) - 1:
            result.append(", ", style="dim")

    result.append(")", style="dim")
    return result


def format_error_message(text: str) -> Text:
    """Format an error message with red styling."""
    result = Text()
    result.append("Error: ", style="red bold")
    result.append(text, style="red")
    return result


def format_system_message(text: str) -> Text:
    """Format a system message with dim styling."""
    return Text(f"[{text}]", style="dim")


def format_listing(entries: Iterable[ListingEntry]) -> RenderableType:
    """Table of list_files results."""
    table = Table(box=box.SIMPLE)
    table.add_column("Path", style="cyan", overflow="fold")
    table.add_column("Size", justify="right", style="green")

    count = 0
    for entry in entries:
        count += 1
        if entry.is_directory:
            table.add_row(f"{entry.relative_path}/", "", style="bold")
        else:
            size = "" if entry.size_bytes is None else str(entry.size_bytes)
            table.add_row(entry.relative_path, size)
    if count == 0:
        return format_system_message("no entries")
    return table


def format_snapshot(snapshot: FileSnapshot) -> Text:
    """Header plus content of a read_file result."""
    result = Text(overflow="fold")
    result.append(snapshot.path, style="cyan bold")
    result.append(f"  {snapshot.total_line_count} lines", style="dim")
    if snapshot.truncated:
        result.append(" (truncated)", style="yellow")
    result.append("\n\n")
    result.append(snapshot.content)
    return result


def format_matches(matches: Iterable[MatchEntry]) -> Text:
    """grep_files results as file:line: text lines."""
    result = Text(overflow="fold")
    first = True
    for match in matches:
        if not first:
            result.append("\n")
        first = False
        result.append(match.file, style="magenta")
        result.append(":", style="dim")
        result.append(str(match.line_number), style="green")
        result.append(": ", style="dim")
        result.append(match.line_text)
    if first:
        return format_system_message("No matches found.")
    return result


def format_tree(tree: str) -> Text:
    return Text(tree.rstrip("\n"), style="cyan")


def format_analysis(analysis: ProjectAnalysis) -> RenderableType:
    """Two-column summary of a project analysis."""
    table = Table(box=box.SQUARE, show_header=False, title=analysis.project_path)
    table.add_column("Field", style="cyan bold")
    table.add_column("Value", overflow="fold")

    def yes_no(flag: bool) -> Text:
        return Text("yes", style="green") if flag else Text("no", style="red")

    table.add_row("Tech stack", ", ".join(analysis.tech_stack) or "-")
    table.add_row("Frameworks", ", ".join(analysis.frameworks) or "-")
    table.add_row("Services", ", ".join(analysis.detected_services) or "-")
    table.add_row("Files", str(analysis.file_count))
    table.add_row("Git", yes_no(analysis.has_git))
    table.add_row("Tests", yes_no(analysis.has_tests))
    table.add_row("CI", yes_no(analysis.has_ci))
    table.add_row(".env.example", yes_no(analysis.has_env_example))

    progress = analysis.sop_progress
    table.add_row(
        "SOP phase", f"{progress.estimated_phase:02d} {progress.phase_name}"
    )
    if progress.evidence:
        table.add_row("Evidence", "\n".join(progress.evidence))
    if analysis.recommendations:
        table.add_row(
            "Recommendations",
            "\n".join(f"• {rec}" for rec in analysis.recommendations),
        )
    return table


def format_token_count(usage: Usage, iterations: int | None = None) -> Text:
    """Format token usage statistics."""
    result = Text()
    result.append("Tokens: ", style="dim")
    result.append(f"in={usage.input_tokens}", style="cyan dim")
    result.append(" ", style="dim")
    result.append(f"out={usage.output_tokens}", style="green dim")

    if usage.cache_creation_input_tokens > 0:
        result.append(" ", style="dim")
        result.append(
            f"cache_write={usage.cache_creation_input_tokens}", style="yellow dim"
        )
    if usage.cache_read_input_tokens > 0:
        result.append(" ", style="dim")
        result.append(f"cache_read={usage.cache_read_input_tokens}", style="blue dim")

    total = usage.input_tokens + usage.output_tokens
    result.append(" ", style="dim")
    result.append(f"total={total}", style="magenta dim")

    if iterations is not None:
        result.append(" ", style="dim")
        result.append(f"requests={iterations}", style="dim")
    return result
