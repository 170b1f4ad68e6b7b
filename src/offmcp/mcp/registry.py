"""Tool registry for Open Food Facts MCP tools.

Tools are declared as data: a ToolSpec lists its argument FieldSpecs, and
the JSON input schema is produced from those declarations. Argument
validation (required fields, types, enums, defaults) happens in
``ToolSpec.bind`` before a handler ever runs.

The registry itself is an immutable mapping built once by
``offmcp.mcp.initialize.build_tool_registry``.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Literal

from pydantic.alias_generators import to_snake

from offmcp.utils.errors import InvalidArgument

if TYPE_CHECKING:
    from mcp.types import Tool

    from offmcp.mcp.container import DependencyContainer

logger = logging.getLogger(__name__)

JSONType = Literal["string", "integer", "number", "boolean", "array"]

_MISSING = object()


@dataclass(frozen=True)
class FieldSpec:
    """One tool argument.

    Attributes:
        name: Wire name as sent by MCP clients (camelCase)
        type: JSON schema type
        description: Shown to the model in the tool listing
        required: Whether the argument must be present
        default: Value used when the argument is omitted
        enum: Allowed values
        items: Item type for arrays
        minimum: Lower bound for integers
        maximum: Upper bound for integers
        param: Handler parameter name (defaults to snake_case of ``name``)
    """

    name: str
    type: JSONType = "string"
    description: str = ""
    required: bool = False
    default: Any = None
    enum: tuple[str, ...] | None = None
    items: JSONType | None = None
    minimum: int | None = None
    maximum: int | None = None
    param: str | None = None

    @property
    def parameter(self) -> str:
        return self.param or to_snake(self.name)

    def schema(self) -> dict[str, Any]:
        prop: dict[str, Any] = {"type": self.type}
        if self.description:
            prop["description"] = self.description
        if self.enum:
            prop["enum"] = list(self.enum)
        if self.type == "array":
            prop["items"] = {"type": self.items or "string"}
        if self.minimum is not None:
            prop["minimum"] = self.minimum
        if self.maximum is not None:
            prop["maximum"] = self.maximum
        if self.default is not None:
            prop["default"] = self.default
        return prop

    def coerce(self, value: Any) -> Any:
        """Validate one supplied value, returning it in handler form."""
        if self.type == "string":
            if not isinstance(value, str):
                raise InvalidArgument(f"'{self.name}' must be a string")
            value = value.strip()
            if self.required and not value:
                raise InvalidArgument(f"'{self.name}' must not be empty")
            if self.enum and value not in self.enum:
                raise InvalidArgument(f"'{self.name}' must be one of: {', '.join(self.enum)}")
            return value or None

        if self.type == "integer":
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidArgument(f"'{self.name}' must be an integer")
            if isinstance(value, float) and not value.is_integer():
                raise InvalidArgument(f"'{self.name}' must be an integer")
            value = int(value)
            if self.minimum is not None and value < self.minimum:
                raise InvalidArgument(f"'{self.name}' must be >= {self.minimum}")
            if self.maximum is not None and value > self.maximum:
                raise InvalidArgument(f"'{self.name}' must be <= {self.maximum}")
            return value

        if self.type == "number":
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidArgument(f"'{self.name}' must be a number")
            return float(value)

        if self.type == "boolean":
            if not isinstance(value, bool):
                raise InvalidArgument(f"'{self.name}' must be a boolean")
            return value

        # array
        if not isinstance(value, list):
            raise InvalidArgument(f"'{self.name}' must be an array")
        if self.items == "string" and not all(isinstance(item, str) for item in value):
            raise InvalidArgument(f"'{self.name}' must be an array of strings")
        if self.required and not value:
            raise InvalidArgument(f"'{self.name}' must not be empty")
        return list(value)


Handler = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class ToolSpec:
    """Declaration of one MCP tool.

    Attributes:
        name: MCP tool name (e.g., "getNutriScore")
        description: Human-readable description of what the tool does
        handler: Async function implementing the tool
        fields: Declared arguments
        category: Tool category for organization (e.g., "nutrition")
        title: Display title
        dependencies: Names injected from the DependencyContainer
    """

    name: str
    description: str
    handler: Handler
    fields: tuple[FieldSpec, ...] = ()
    category: str = "general"
    title: str | None = None
    dependencies: tuple[str, ...] = ("client",)

    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {f.name: f.schema() for f in self.fields},
            "required": [f.name for f in self.fields if f.required],
        }

    def bind(self, arguments: Mapping[str, Any] | None) -> dict[str, Any]:
        """Map wire arguments to handler keyword arguments.

        Raises:
            InvalidArgument: On a missing required field, wrong type or bad enum value
        """
        arguments = arguments or {}
        known = {f.name for f in self.fields}
        unknown = sorted(set(arguments) - known)
        if unknown:
            logger.debug("Ignoring unknown arguments for %s: %s", self.name, unknown)

        bound: dict[str, Any] = {}
        for spec in self.fields:
            value = arguments.get(spec.name, _MISSING)
            if value is _MISSING or value is None:
                if spec.required:
                    raise InvalidArgument(f"Missing required argument '{spec.name}'")
                bound[spec.parameter] = spec.default
                continue
            coerced = spec.coerce(value)
            bound[spec.parameter] = spec.default if coerced is None else coerced
        return bound

    def to_mcp_tool(self) -> Tool:
        from mcp.types import Tool, ToolAnnotations

        return Tool(
            name=self.name,
            title=self.title,
            description=self.description,
            inputSchema=self.input_schema(),
            annotations=ToolAnnotations(readOnlyHint=True, openWorldHint=True),
        )


@dataclass(frozen=True)
class ToolRegistry(Mapping[str, ToolSpec]):
    """Read-only mapping of tool name to ToolSpec.

    Holds the DependencyContainer whose services are injected into handlers.
    """

    _tools: Mapping[str, ToolSpec] = field(default_factory=dict)
    container: DependencyContainer | None = None

    @classmethod
    def from_specs(cls, specs: list[ToolSpec], container: DependencyContainer | None = None) -> ToolRegistry:
        """Build a registry, rejecting duplicate names.

        Raises:
            ValueError: If two specs share a name
        """
        tools: dict[str, ToolSpec] = {}
        for spec in specs:
            if spec.name in tools:
                raise ValueError(f"Tool '{spec.name}' is already registered")
            tools[spec.name] = spec
        return cls(MappingProxyType(tools), container)

    def __getitem__(self, name: str) -> ToolSpec:
        return self._tools[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def list_tools(self, category: str | None = None) -> list[ToolSpec]:
        """List registered tools, optionally filtered by category."""
        tools = list(self._tools.values())
        if category is not None:
            tools = [t for t in tools if t.category == category]
        return tools

    def get_categories(self) -> list[str]:
        return sorted({t.category for t in self._tools.values()})

    def get_mcp_tool_list(self) -> list[Tool]:
        """Generate the MCP tool listing, in declaration order."""
        return [spec.to_mcp_tool() for spec in self._tools.values()]
