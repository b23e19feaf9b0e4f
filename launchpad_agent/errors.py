"""Exception hierarchy shared by the tools, the API client and the agent loop.

Three families with different handling rules:

- FileToolError: local failures of the filesystem tools. Recoverable by the
  caller and rendered as plain messages.
- ToolDispatchError: bad tool calls from the model. The agent loop turns these
  into "Error: ..." tool results so the model can retry.
- APIError: transport, status and parse failures talking to the model. Fatal
  to the current agent loop invocation.
"""

from __future__ import annotations

__all__ = [
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


class LaunchpadError(Exception):
    """Base class for every error raised by launchpad_agent."""


# =============================================================================
# Filesystem tool errors
# =============================================================================


class FileToolError(LaunchpadError):
    """A path or content failure inside one of the filesystem tools."""


class NotFoundError(FileToolError):
    """The path does not exist or could not be canonicalized."""


class NotAFileError(FileToolError):
    """A file was required but the path names something else."""


class TraversalDeniedError(FileToolError):
    """The path escapes the required base directory."""


class AccessDeniedError(FileToolError):
    """The path resolves into a denylisted system location."""


class TooLargeError(FileToolError):
    """The file exceeds the size the tool is willing to load."""


class ReadError(FileToolError):
    """The file could not be read or decoded as text."""


# =============================================================================
# Tool dispatch errors
# =============================================================================


class ToolDispatchError(LaunchpadError):
    """The model asked for a tool in a way that cannot be dispatched."""


class MissingArgumentError(ToolDispatchError):
    """A required tool argument is absent or has the wrong type."""

    def __init__(self, argument: str):
        self.argument = argument
        super().__init__(f"Missing {argument}")


class UnknownToolError(ToolDispatchError):
    """No tool with the requested name is registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


# =============================================================================
# Remote model errors
# =============================================================================


class APIError(LaunchpadError):
    """Unified API error with structured context.

    Raised as-is for non-success responses. The subclasses cover the cases
    where no usable response arrived at all.

    Example:
        >>> try:
        ...     response = await api.send(messages)
        ... except APIError as e:
        ...     if e.status_code == 401:
        ...         print("check ANTHROPIC_API_KEY")
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_type: str | None = None,
        provider: str = "Claude",
    ):
        self.status_code = status_code
        self.error_type = error_type
        self.provider = provider
        super().__init__(f"[{provider}] {message}")

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={str(self)!r}, "
            f"status_code={self.status_code}, "
            f"error_type={self.error_type!r}, "
            f"provider={self.provider!r})"
        )


class TransportError(APIError):
    """The request never produced a response (network failure or timeout)."""


class ParseError(APIError):
    """The response body could not be interpreted."""


# =============================================================================
# Agent loop errors
# =============================================================================


class AgentError(LaunchpadError):
    """Terminal conditions of the agent loop that are not API failures."""


class IterationLimitExceededError(AgentError):
    """The model kept requesting tools past the iteration ceiling."""

    def __init__(self, max_iterations: int):
        self.max_iterations = max_iterations
        super().__init__(
            f"Max tool iterations reached ({max_iterations}) without a final answer"
        )


class AgentCancelledError(AgentError):
    """The caller cancelled the agent loop through its cancellation token."""
