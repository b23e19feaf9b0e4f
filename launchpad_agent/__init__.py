"""launchpad_agent: a sandboxed, tool-using project assistant

A Python library that lets a Claude model explore a linked project directory
through four read-only filesystem tools (list_files, read_file, grep_files,
get_directory_tree). Every path the model supplies is canonicalized and
checked against a denylist and the project root before any filesystem access.
"""

# Project analysis
from .analyzer import ProjectAnalysis, SopProgress, analyze_project

# API base classes (shared infrastructure)
from .api_base import APIClientMixin, APIProtocol

# Cancellation support
from .cancellation import CancellationToken

# API client
from .claude_api import DEFAULT_MODEL, ClaudeAPI

# Configuration
from .config import AgentSettings, load_config, save_config

# Data structures
from .data_structures import (
    ContentBlock,
    JSONValue,
    Message,
    OpaqueContent,
    Response,
    Role,
    TextContent,
    ToolResultContent,
    ToolUseContent,
    Usage,
)

# Errors
from .errors import (
    AccessDeniedError,
    AgentCancelledError,
    AgentError,
    APIError,
    FileToolError,
    IterationLimitExceededError,
    LaunchpadError,
    MissingArgumentError,
    NotAFileError,
    NotFoundError,
    ParseError,
    ReadError,
    ToolDispatchError,
    TooLargeError,
    TransportError,
    TraversalDeniedError,
    UnknownToolError,
)

# Executor
from .executor import BASE_SYSTEM_PROMPT, AgentResult, run_agent

# Path validation
from .sandbox import ValidatedPath, validate

# Tools
from .tools import (
    DirectoryTreeTool,
    FileSnapshot,
    GrepFilesTool,
    ListFilesTool,
    ListingEntry,
    MatchEntry,
    ReadFileTool,
    Tool,
    ToolName,
    ToolRegistry,
    get_default_tools,
    get_directory_tree,
    grep_files,
    list_files,
    read_file,
)

__version__ = "0.1.0"

__all__ = [
    # Path validation
    "ValidatedPath",
    "validate",
    # Operations
    "list_files",
    "read_file",
    "grep_files",
    "get_directory_tree",
    "analyze_project",
    "ListingEntry",
    "FileSnapshot",
    "MatchEntry",
    "ProjectAnalysis",
    "SopProgress",
    # Tools
    "Tool",
    "ToolName",
    "ToolRegistry",
    "ListFilesTool",
    "ReadFileTool",
    "GrepFilesTool",
    "DirectoryTreeTool",
    "get_default_tools",
    # API
    "APIProtocol",
    "APIClientMixin",
    "ClaudeAPI",
    "DEFAULT_MODEL",
    # Agent loop
    "run_agent",
    "AgentResult",
    "BASE_SYSTEM_PROMPT",
    "CancellationToken",
    # Configuration
    "AgentSettings",
    "load_config",
    "save_config",
    # Data structures
    "ContentBlock",
    "OpaqueContent",
    "JSONValue",
    "Message",
    "Response",
    "Role",
    "TextContent",
    "ToolResultContent",
    "ToolUseContent",
    "Usage",
    # Errors
    "LaunchpadError",
    "FileToolError",
    "NotFoundError",
    "NotAFileError",
    "TraversalDeniedError",
    "AccessDeniedError",
    "TooLargeError",
    "ReadError",
    "ToolDispatchError",
    "MissingArgumentError",
    "UnknownToolError",
    "APIError",
    "TransportError",
    "ParseError",
    "AgentError",
    "IterationLimitExceededError",
    "AgentCancelledError",
]
