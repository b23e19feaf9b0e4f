"""Tool registry: the closed set of tools the agent may call, and dispatch."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from ..data_structures import TextContent, ToolResultContent, ToolUseContent
from ..errors import FileToolError, ToolDispatchError, UnknownToolError
from ..sandbox import ValidatedPath
from .base import Tool, ToolDict
from .directory_tree import DirectoryTreeTool
from .grep_files import GrepFilesTool
from .list_files import ListFilesTool
from .read_file import ReadFileTool

logger = logging.getLogger(__name__)


class ToolName(str, Enum):
    """Names of the registered tools, as the model sees them."""

    LIST_FILES = "list_files"
    READ_FILE = "read_file"
    GREP_FILES = "grep_files"
    GET_DIRECTORY_TREE = "get_directory_tree"


def get_default_tools(
    root: ValidatedPath | None = None, extra_denied: Iterable[str] = ()
) -> list[Tool]:
    """Get the four filesystem tools, optionally bound to a sandbox root.

    Returns a new list of tool instances each time it's called.
    """
    denied = tuple(extra_denied)
    return [
        ListFilesTool(root=root, extra_denied=denied),
        ReadFileTool(root=root, extra_denied=denied),
        GrepFilesTool(root=root, extra_denied=denied),
        DirectoryTreeTool(root=root, extra_denied=denied),
    ]


class ToolRegistry:
    """Maps tool names to tools and runs tool calls.

    A registry built with a root confines every path argument to that
    directory; without one, paths are only checked against the denylist.
    extra_denied extends the platform denylist for every tool in the registry.

    Example:
        >>> registry = ToolRegistry(root=validate("~/projects/app"))
        >>> await registry.dispatch("list_files", {"base_path": "src"})
    """

    def __init__(
        self,
        root: ValidatedPath | None = None,
        extra_denied: Iterable[str] = (),
    ):
        self.root = root
        self.tools: tuple[Tool, ...] = tuple(get_default_tools(root, extra_denied))
        self._by_name: dict[ToolName, Tool] = {
            ToolName(tool.name): tool for tool in self.tools
        }

    def __contains__(self, name: object) -> bool:
        return any(name == tool_name.value for tool_name in ToolName)

    def get(self, name: str) -> Tool:
        try:
            key = ToolName(name)
        except ValueError:
            raise UnknownToolError(name) from None
        return self._by_name[key]

    def schemas(self) -> list[ToolDict]:
        """Tool definitions in Messages API form."""
        return [tool.to_dict() for tool in self.tools]

    async def dispatch(self, name: str, args: dict | None) -> str:
        """Run one tool call and return its serialized output.

        Raises:
            UnknownToolError: name is not registered
            MissingArgumentError: a required argument is absent or not a string
            FileToolError: the filesystem operation failed
        """
        tool = self.get(name)
        result: TextContent = await tool.execute(args)
        return result.text

    async def execute(self, call: ToolUseContent) -> ToolResultContent:
        """Run a model tool call, turning failures into an error outcome."""
        logger.info("Executing tool %s", call.name)
        logger.debug("Tool %s input: %s", call.name, call.input)
        try:
            text = await self.dispatch(call.name, call.input)
        except (ToolDispatchError, FileToolError) as e:
            logger.warning("Tool %s failed: %s", call.name, e)
            return ToolResultContent(
                tool_use_id=call.id,
                content=[TextContent(text=f"Error: {e}")],
                is_error=True,
            )
        return ToolResultContent(tool_use_id=call.id, content=[TextContent(text=text)])
