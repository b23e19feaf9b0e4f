"""Base tool class and shared utilities."""

from __future__ import annotations

import dataclasses
import inspect
import types
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Annotated,
    Any,
    ClassVar,
    TypedDict,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from ..data_structures import TextContent
from ..errors import MissingArgumentError

if TYPE_CHECKING:
    from ..sandbox import ValidatedPath


# =============================================================================
# Type Extraction and Conversion Utilities
# =============================================================================


def _unwrap_annotated(hint: Any) -> tuple[Any, str | None]:
    """Split Annotated[T, Desc(...)] into (T, description)."""
    if get_origin(hint) is not Annotated:
        return hint, None
    base_type, *metadata = get_args(hint)
    for m in metadata:
        if isinstance(m, Desc):
            return base_type, m.description
    return base_type, None


def _unwrap_optional(py_type: Any) -> tuple[Any, bool]:
    """Return (T, True) for T | None, else (py_type, False)."""
    origin = get_origin(py_type)
    if origin is Union or origin is types.UnionType:
        non_none = [a for a in get_args(py_type) if a is not type(None)]
        if len(non_none) == 1:
            return non_none[0], True
    return py_type, False


def get_call_input_type(cls: type) -> type | None:
    """Extract the input dataclass from a Tool's __call__ 'input' parameter.

    Returns:
        The dataclass type for input, or None for no-input tools.

    Raises:
        TypeError: If the annotation is not a dataclass.
    """
    call_method = getattr(cls, "__call__", None)
    if call_method is None:
        raise TypeError(f"{cls.__name__} does not have a __call__ method")

    try:
        hints = get_type_hints(call_method, include_extras=True)
    except Exception:
        raise TypeError(f"{cls.__name__}.__call__ has no valid type annotations")

    if "input" not in hints:
        return None

    input_type, _ = _unwrap_optional(hints["input"])
    if input_type is type(None):
        return None
    if not dataclasses.is_dataclass(input_type) or not isinstance(input_type, type):
        raise TypeError(
            f"{cls.__name__}.__call__ input type must be a dataclass, "
            f"got {input_type}"
        )
    return input_type


def _coerce(value: Any, target_type: Any) -> Any:
    """Return value if it fits target_type, else None.

    Model-generated arguments are loosely typed: integers arrive as floats or
    strings, counts arrive negative. Anything that is not a clean value of the
    declared type is treated as absent.
    """
    if target_type is int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return None
        return value
    if target_type is str:
        return value if isinstance(value, str) else None
    if target_type is bool:
        return value if isinstance(value, bool) else None
    return value


def convert_input(input_dict: dict[str, Any] | None, input_type: type | None) -> Any:
    """Convert a raw argument dict from the API to a typed dataclass instance.

    Unknown keys are dropped. Optional fields with unusable values fall back to
    their defaults.

    Raises:
        MissingArgumentError: A required field is absent or has the wrong type.
    """
    if input_type is None:
        return None
    if input_dict is None:
        input_dict = {}

    hints = get_type_hints(input_type, include_extras=True)
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(input_type):
        field_type, _ = _unwrap_annotated(hints.get(f.name, str))
        field_type, _ = _unwrap_optional(field_type)
        required = (
            f.default is dataclasses.MISSING
            and f.default_factory is dataclasses.MISSING
        )
        value = _coerce(input_dict.get(f.name), field_type)
        if value is None:
            if required:
                raise MissingArgumentError(f.name)
            continue
        kwargs[f.name] = value
    return input_type(**kwargs)


# =============================================================================
# Schema Generation Utilities
# =============================================================================

# Loose type for schema dicts (allows dynamic schema generation)
InputSchemaDict = dict[str, object]


class Desc:
    """Field description for JSON schema generation, used inside Annotated[].

        @dataclass
        class Input:
            base_path: Annotated[str, Desc("The base directory path")]
    """

    def __init__(self, description: str):
        self.description = description


_JSON_TYPES: dict[type, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
}


def schema_from_dataclass(cls: type) -> InputSchemaDict:
    """Generate a JSON schema from an input dataclass.

    Example:
        @dataclass
        class ReadFileInput:
            file_path: Annotated[str, Desc("The full path to the file to read")]
            max_lines: Annotated[int | None, Desc("Maximum lines")] = None

        schema_from_dataclass(ReadFileInput)
        # {
        #   "type": "object",
        #   "properties": {
        #     "file_path": {"type": "string", "description": "The full path..."},
        #     "max_lines": {"type": "integer", "description": "Maximum lines"}
        #   },
        #   "required": ["file_path"]
        # }
    """
    hints = get_type_hints(cls, include_extras=True)

    properties: dict[str, dict[str, Any]] = {}
    required: list[str] = []
    for f in dataclasses.fields(cls):
        py_type, description = _unwrap_annotated(hints.get(f.name, str))
        py_type, _ = _unwrap_optional(py_type)

        prop: dict[str, Any] = {"type": _JSON_TYPES.get(py_type, "string")}
        if description:
            prop["description"] = description
        properties[f.name] = prop

        if (
            f.default is dataclasses.MISSING
            and f.default_factory is dataclasses.MISSING
        ):
            required.append(f.name)

    return {
        "type": "object",
        "properties": properties,
        "required": required,
    }


# =============================================================================
# Tool Base Class
# =============================================================================


class ToolDict(TypedDict):
    name: str
    description: str
    input_schema: InputSchemaDict


@dataclass
class Tool:
    """Base class for all tools with automatic schema inference.

    The input_schema is inferred once per class from the __call__ method's
    'input' parameter annotation, which must be a dataclass.

    Example:
        @dataclass
        class CountLinesInput:
            file_path: Annotated[str, Desc("File to count")]

        @dataclass
        class CountLines(Tool):
            name: str = "count_lines"
            description: str = "Count the lines of a file"

            async def __call__(self, input: CountLinesInput) -> TextContent:
                path = self.resolve(input.file_path)
                return TextContent(text=str(len(path.path.read_text().splitlines())))

    root binds the tool to a sandbox: every path argument must resolve inside
    it, and relative paths are taken from it. extra_denied adds denylist
    segments for this tool only.
    """

    name: str
    description: str
    root: ValidatedPath | None = None
    extra_denied: tuple[str, ...] = ()

    # Class-level attributes set by __init_subclass__
    _input_type: ClassVar[type | None] = None
    _inferred_schema: ClassVar[InputSchemaDict | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Compute input schema from __call__ type annotation at class definition."""
        super().__init_subclass__(**kwargs)

        if "__call__" not in cls.__dict__:
            return

        sig = inspect.signature(cls.__call__)
        if "input" not in sig.parameters:
            return
        try:
            input_type = get_call_input_type(cls)
        except TypeError:
            return
        cls._input_type = input_type
        if input_type is not None:
            cls._inferred_schema = schema_from_dataclass(input_type)

    @property
    def input_schema(self) -> InputSchemaDict:
        if self._inferred_schema is not None:
            return self._inferred_schema
        return {"type": "object", "properties": {}, "required": []}

    def to_dict(self) -> ToolDict:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }

    def resolve(self, raw_path: str) -> ValidatedPath:
        """Validate a path argument against this tool's sandbox root."""
        from ..sandbox import validate

        return validate(
            raw_path, required_base=self.root, extra_denied=self.extra_denied
        )

    async def execute(self, input: dict[str, Any] | None = None) -> TextContent:
        """Convert the raw API dict to the typed input and run the tool.

        Raises:
            MissingArgumentError: A required argument is missing
            FileToolError: The underlying filesystem operation failed
        """
        typed_input = convert_input(input, self._input_type)
        return await self(typed_input)

    async def __call__(self, input: Any) -> TextContent:
        """Execute the tool with typed input. Override in subclasses."""
        raise NotImplementedError(f"{self.name} does not implement __call__()")
