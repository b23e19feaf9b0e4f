"""Filesystem tools the agent can call.

Each tool is in its own module; registry.py holds the closed set the agent
loop dispatches against.
"""

from .base import (
    Desc,
    InputSchemaDict,
    Tool,
    ToolDict,
    convert_input,
    get_call_input_type,
    schema_from_dataclass,
)
from .directory_tree import DirectoryTreeInput, DirectoryTreeTool, get_directory_tree
from .globbing import compile_glob
from .grep_files import GrepFilesInput, GrepFilesTool, MatchEntry, grep_files
from .list_files import ListFilesInput, ListFilesTool, ListingEntry, list_files
from .read_file import FileSnapshot, ReadFileInput, ReadFileTool, read_file
from .registry import ToolName, ToolRegistry, get_default_tools

__all__ = [
    # Base classes and utilities
    "Tool",
    "ToolDict",
    "InputSchemaDict",
    "Desc",
    "convert_input",
    "get_call_input_type",
    "schema_from_dataclass",
    "compile_glob",
    # Operations
    "list_files",
    "read_file",
    "grep_files",
    "get_directory_tree",
    "ListingEntry",
    "FileSnapshot",
    "MatchEntry",
    # Tools
    "ListFilesTool",
    "ListFilesInput",
    "ReadFileTool",
    "ReadFileInput",
    "GrepFilesTool",
    "GrepFilesInput",
    "DirectoryTreeTool",
    "DirectoryTreeInput",
    # Registry
    "ToolName",
    "ToolRegistry",
    "get_default_tools",
]
