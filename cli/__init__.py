"""launchpad command-line interface.

Usage:
    launchpad ask <project> <question...>
    launchpad ls|read|grep|tree|analyze <path> [options]

Features:
    - Rich output for listings, file reads, search hits and trees
    - `ask` runs the sandboxed agent loop against the Claude API
    - --debug routes library logging through rich's handler at DEBUG level
"""

from .app import build_parser, main, run_command, setup_logging

__all__ = [
    "build_parser",
    "main",
    "run_command",
    "setup_logging",
]
