"""Dispatch MCP tool calls for the Open Food Facts server."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from mcp.types import TextContent

from offmcp.mcp.container import resolve_dependencies
from offmcp.mcp.registry import ToolRegistry
from offmcp.observability.tool_observer import ToolExecutionContext
from offmcp.utils.errors import ErrorCodes, NotFound, ToolErrorDetail, tool_error
from offmcp.utils.logging import get_call_id

logger = logging.getLogger(__name__)


@dataclass
class ToolExecutionResult:
    """Result wrapper for MCP tool execution."""

    contents: list[TextContent]
    status: str = "success"
    error_message: str | None = None
    result_data: Any = None

    @property
    def is_error(self) -> bool:
        """Any failed call, NOT_FOUND included; the payload code tells them apart."""
        return self.status != "success"


def _ok(payload: Any, *, indent: int | None = 2) -> ToolExecutionResult:
    if isinstance(payload, str):
        text = payload
    else:
        text = json.dumps(payload, indent=indent, ensure_ascii=False)
    return ToolExecutionResult([TextContent(type="text", text=text)], result_data=payload)


def _error(detail: ToolErrorDetail) -> ToolExecutionResult:
    # NOT_FOUND is a normal outcome for lookups and is reported apart from failures
    status = "not_found" if detail.error == ErrorCodes.NOT_FOUND else "error"
    return ToolExecutionResult(
        contents=[TextContent(type="text", text=json.dumps(detail.model_dump(exclude_none=True), indent=2))],
        status=status,
        error_message=detail.message,
    )


async def dispatch_tool_call(
    registry: ToolRegistry, name: str, arguments: dict[str, Any] | None
) -> ToolExecutionResult:
    """Execute an MCP tool and return standardized results.

    No exception escapes: validation, upstream and unexpected failures all
    become a structured error payload.
    """
    arguments = dict(arguments or {})

    spec = registry.get(name)
    if spec is None:
        logger.warning("Unknown tool requested: %s", name)
        return _error(
            ToolErrorDetail(
                error=ErrorCodes.UNKNOWN_TOOL,
                message=f"Unknown tool: {name}. Available tools: {', '.join(registry)}",
                tool=name,
            )
        )

    async with ToolExecutionContext(tool_name=name, arguments=arguments) as ctx:
        try:
            call_args = spec.bind(arguments)
            if spec.dependencies:
                if registry.container is None:
                    raise RuntimeError(f"No dependency container configured for {name}")
                call_args.update(resolve_dependencies(spec.dependencies, registry.container))

            result = await spec.handler(**call_args)
        except Exception as e:
            if isinstance(e, NotFound):
                logger.info("Tool %s: %s", name, e.message)
            detail = tool_error(e, name, arguments)
            outcome = _error(detail)
            ctx.set_status(outcome.status)
            return outcome

        logger.debug("Tool %s succeeded (call %s)", name, get_call_id())
        return _ok(result)
