"""
Core data structures for the agent conversation transcript.

Content blocks form a sum type (ContentBlock). Response blocks of a type this
client does not model are kept as OpaqueContent so an assistant turn can be
sent back unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias, TypedDict

# =============================================================================
# JSON Type Aliases
# =============================================================================

JSONValue: TypeAlias = (
    str | int | float | bool | None | list["JSONValue"] | dict[str, "JSONValue"]
)

# =============================================================================
# Serialization TypedDicts (for to_dict methods)
# =============================================================================


class TextContentDict(TypedDict):
    """Serialized form of TextContent."""

    type: str
    text: str


class ToolUseContentDict(TypedDict):
    """Serialized form of ToolUseContent."""

    type: str
    id: str
    name: str
    input: dict[str, JSONValue]


class ToolResultContentDict(TypedDict):
    """Serialized form of ToolResultContent."""

    type: str
    tool_use_id: str
    content: list[TextContentDict]
    is_error: bool


ContentBlockDict = (
    TextContentDict | ToolUseContentDict | ToolResultContentDict | dict[str, JSONValue]
)


class MessageDict(TypedDict):
    """Serialized form of Message."""

    role: str
    content: str | list[ContentBlockDict]


# =============================================================================
# Enums
# =============================================================================


class Role(str, Enum):
    """Message role in conversation."""

    USER = "user"
    ASSISTANT = "assistant"


# =============================================================================
# Content Blocks (for Message content)
# =============================================================================


@dataclass(frozen=True)
class TextContent:
    """Plain text content block."""

    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise TypeError(f"text must be str, got {type(self.text).__name__}")

    def to_dict(self) -> TextContentDict:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class ToolUseContent:
    """Tool invocation requested by the model."""

    id: str
    name: str
    input: dict[str, JSONValue] | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id cannot be empty")
        if not self.name:
            raise ValueError("name cannot be empty")
        if self.input is not None and not isinstance(self.input, dict):
            raise TypeError(
                f"input must be dict or None, got {type(self.input).__name__}"
            )

    def to_dict(self) -> ToolUseContentDict:
        return {
            "type": "tool_use",
            "id": self.id,
            "name": self.name,
            "input": self.input if self.input is not None else {},
        }


@dataclass(frozen=True)
class ToolResultContent:
    """Outcome of one tool invocation, correlated by tool_use_id."""

    tool_use_id: str
    content: list[TextContent]
    is_error: bool = False

    def __post_init__(self) -> None:
        if not self.tool_use_id:
            raise ValueError("tool_use_id cannot be empty")

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.content)

    def to_dict(self) -> ToolResultContentDict:
        return {
            "type": "tool_result",
            "tool_use_id": self.tool_use_id,
            "content": [block.to_dict() for block in self.content],
            "is_error": self.is_error,
        }


@dataclass(frozen=True)
class OpaqueContent:
    """A response block of a type not modeled here (e.g. thinking), kept as sent."""

    data: dict[str, JSONValue]

    @property
    def type(self) -> str:
        return str(self.data.get("type", ""))

    def to_dict(self) -> dict[str, JSONValue]:
        return dict(self.data)


# Sum type for content blocks
ContentBlock = TextContent | ToolUseContent | ToolResultContent | OpaqueContent


# =============================================================================
# Message
# =============================================================================


@dataclass(frozen=True)
class Message:
    """A conversation turn."""

    role: Role
    content: str | Sequence[ContentBlock]

    def to_dict(self) -> MessageDict:
        if isinstance(self.content, str):
            content_dict: str | list[ContentBlockDict] = self.content
        else:
            content_dict = [block.to_dict() for block in self.content]
        return {"role": self.role.value, "content": content_dict}

    @classmethod
    def user(cls, content: str | Sequence[ContentBlock]) -> "Message":
        return cls(Role.USER, content)

    @classmethod
    def assistant(cls, content: str | Sequence[ContentBlock]) -> "Message":
        return cls(Role.ASSISTANT, content)


# =============================================================================
# Parsing Helpers
# =============================================================================


def parse_content_block(raw: object) -> ContentBlock | None:
    """Parse one response content block.

    Blocks of other types come back as OpaqueContent; malformed text or
    tool_use blocks and untyped values give None.
    """
    if not isinstance(raw, dict):
        return None

    block_type = raw.get("type")
    if block_type == "text":
        text = raw.get("text")
        if not isinstance(text, str):
            return None
        return TextContent(text=text)

    if block_type == "tool_use":
        tool_id = raw.get("id")
        name = raw.get("name")
        if not isinstance(tool_id, str) or not isinstance(name, str):
            return None
        if not tool_id or not name:
            return None
        tool_input = raw.get("input")
        return ToolUseContent(
            id=tool_id,
            name=name,
            input=tool_input if isinstance(tool_input, dict) else None,
        )

    if isinstance(block_type, str) and block_type:
        return OpaqueContent(data=dict(raw))
    return None


# =============================================================================
# API Response Types
# =============================================================================


def _safe_int(value: object, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    return default


@dataclass
class Usage:
    """Token usage statistics from API responses."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cache_read_input_tokens: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "cache_creation_input_tokens": self.cache_creation_input_tokens,
            "cache_read_input_tokens": self.cache_read_input_tokens,
        }

    def __add__(self, other: "Usage") -> "Usage":
        return Usage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            cache_creation_input_tokens=(
                self.cache_creation_input_tokens + other.cache_creation_input_tokens
            ),
            cache_read_input_tokens=(
                self.cache_read_input_tokens + other.cache_read_input_tokens
            ),
        )


class Response:
    """API response from Claude."""

    def __init__(
        self,
        id: str,
        model: str,
        role: Role,
        content: list[ContentBlock],
        stop_reason: str | None,
        usage: Usage,
    ):
        self.id = id
        self.model = model
        self.role = role
        self.content = content
        self.stop_reason = stop_reason
        self.usage = usage

    def get_text(self) -> str:
        """Join all text blocks in arrival order."""
        return "\n".join(
            block.text for block in self.content if isinstance(block, TextContent)
        )

    def get_tool_use(self) -> list[ToolUseContent]:
        """Extract all tool_use blocks from response."""
        return [block for block in self.content if isinstance(block, ToolUseContent)]

    def has_tool_use(self) -> bool:
        return any(isinstance(block, ToolUseContent) for block in self.content)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "Response":
        content: list[ContentBlock] = []
        raw_content = data.get("content", [])
        if isinstance(raw_content, list):
            for raw_block in raw_content:
                block = parse_content_block(raw_block)
                if block is not None:
                    content.append(block)

        usage_data = data.get("usage", {})
        if not isinstance(usage_data, dict):
            usage_data = {}
        usage = Usage(
            input_tokens=_safe_int(usage_data.get("input_tokens")),
            output_tokens=_safe_int(usage_data.get("output_tokens")),
            cache_creation_input_tokens=_safe_int(
                usage_data.get("cache_creation_input_tokens")
            ),
            cache_read_input_tokens=_safe_int(
                usage_data.get("cache_read_input_tokens")
            ),
        )

        stop_reason = data.get("stop_reason")
        return cls(
            id=str(data.get("id", "")),
            model=str(data.get("model", "")),
            role=Role.ASSISTANT,
            content=content,
            stop_reason=stop_reason if isinstance(stop_reason, str) else None,
            usage=usage,
        )
