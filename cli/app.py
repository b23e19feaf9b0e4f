"""Command-line entry point for launchpad-agent.

Usage:
    launchpad ask ~/projects/app "Where is the Stripe webhook handled?"
    launchpad ls ~/projects/app --pattern '*.ts'
    launchpad read ~/projects/app/package.json
    launchpad grep ~/projects/app useAuth --files '*.tsx'
    launchpad tree ~/projects/app --depth 2
    launchpad analyze ~/projects/app
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Sequence

from rich.console import Console
from rich.logging import RichHandler

from launchpad_agent import (
    AgentSettings,
    ClaudeAPI,
    LaunchpadError,
    Message,
    Role,
    ToolUseContent,
    ValidatedPath,
    analyze_project,
    get_directory_tree,
    grep_files,
    list_files,
    read_file,
    run_agent,
    validate,
)

from . import display


def setup_logging(debug: bool = False, console: Console | None = None) -> None:
    """Route library logging through Rich: WARNING by default, DEBUG with --debug."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=debug,
        rich_tracebacks=debug,
    )
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # httpx logs every request at INFO; keep it quiet unless debugging.
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="launchpad",
        description="Sandboxed project assistant: explore a project or ask Claude about it.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show debug logging (requests, tool calls)",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="Settings file (default: ~/.launchpad-agent.json)",
    )
    parser.add_argument(
        "--root",
        metavar="DIR",
        help="Confine ls/read/grep/tree paths to this directory",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    ask = sub.add_parser("ask", help="Ask Claude a question about a project")
    ask.add_argument("project", help="Project directory the tools are confined to")
    ask.add_argument("question", nargs="+", help="The question")
    ask.add_argument("--model", help="Model override")
    ask.add_argument(
        "--max-iterations", type=int, help="Ceiling on model requests (default: 10)"
    )

    ls = sub.add_parser("ls", help="List files in a directory")
    ls.add_argument("path")
    ls.add_argument("--pattern", help="Glob filter, e.g. '*.ts'")
    ls.add_argument("--depth", type=int, default=3, help="Max depth (default: 3)")
    ls.add_argument("--json", action="store_true", help="Print raw JSON")

    read = sub.add_parser("read", help="Print a file")
    read.add_argument("path")
    read.add_argument(
        "--max-lines", type=int, default=500, help="Max lines (default: 500)"
    )

    grep = sub.add_parser("grep", help="Case-insensitive text search")
    grep.add_argument("path")
    grep.add_argument("pattern")
    grep.add_argument("--files", help="Glob filter on file names, e.g. '*.tsx'")
    grep.add_argument(
        "--max-results", type=int, default=50, help="Max matches (default: 50)"
    )

    tree = sub.add_parser("tree", help="Print the directory tree")
    tree.add_argument("path")
    tree.add_argument("--depth", type=int, default=3, help="Max depth (default: 3)")

    analyze = sub.add_parser("analyze", help="Analyze a project directory")
    analyze.add_argument("path")
    analyze.add_argument("--json", action="store_true", help="Print raw JSON")

    return parser


async def ask(settings: AgentSettings, project: str, question: str) -> int:
    console = Console()
    async with ClaudeAPI(
        api_key=settings.api_key,
        model=settings.model,
        max_tokens=settings.max_tokens,
        base_url=settings.base_url,
        timeout=settings.timeout,
    ) as api:
        with console.status("Thinking...", spinner="dots"):
            result = await run_agent(
                api,
                [Message.user(question)],
                project_path=project,
                max_iterations=settings.max_iterations,
                extra_denied=settings.denied_segments,
            )

    for message in result.messages:
        if message.role is not Role.ASSISTANT or isinstance(message.content, str):
            continue
        for block in message.content:
            if isinstance(block, ToolUseContent):
                console.print(display.format_tool_call(block.name, block.input or {}))
    console.print(display.format_assistant_message(result.text))
    console.print(display.format_token_count(result.usage, result.iterations))
    return 0


def run_command(args: argparse.Namespace, extra_denied: Sequence[str] = ()) -> int:
    """Run a local (non-model) subcommand."""
    console = Console()
    root = validate(args.root, extra_denied=extra_denied) if args.root else None

    def target() -> ValidatedPath:
        return validate(args.path, root, extra_denied)

    if args.command == "ls":
        entries = list_files(target(), args.pattern, args.depth)
        if args.json:
            console.print_json(json.dumps([entry.to_dict() for entry in entries]))
        else:
            console.print(display.format_listing(entries))
    elif args.command == "read":
        snapshot = read_file(target(), args.max_lines)
        console.print(display.format_snapshot(snapshot))
    elif args.command == "grep":
        matches = grep_files(target(), args.pattern, args.files, args.max_results)
        console.print(display.format_matches(matches))
    elif args.command == "tree":
        tree = get_directory_tree(target(), args.depth)
        console.print(display.format_tree(tree))
    elif args.command == "analyze":
        analysis = analyze_project(target())
        if args.json:
            console.print_json(json.dumps(analysis.to_dict()))
        else:
            console.print(display.format_analysis(analysis))
    else:
        raise ValueError(f"Unknown command: {args.command}")
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the launchpad command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.debug)

    settings = AgentSettings.load(path=args.config)
    err_console = Console(stderr=True)

    try:
        if args.command == "ask":
            if args.model:
                settings.model = args.model
            if args.max_iterations and args.max_iterations > 0:
                settings.max_iterations = args.max_iterations
            code = asyncio.run(ask(settings, args.project, " ".join(args.question)))
        else:
            code = run_command(args, settings.denied_segments)
    except KeyboardInterrupt:
        err_console.print(display.format_system_message("Interrupted"))
        sys.exit(130)
    except (LaunchpadError, ValueError) as e:
        err_console.print(display.format_error_message(str(e)))
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
