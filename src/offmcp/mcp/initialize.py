"""Tool registry construction for the Open Food Facts MCP server."""

import logging

from offmcp.mcp.container import PROVIDERS, DependencyContainer
from offmcp.mcp.registry import ToolRegistry, ToolSpec

logger = logging.getLogger(__name__)


def all_tool_specs() -> list[ToolSpec]:
    """Every tool, in listing order."""
    from offmcp.tools import analysis, categories, insights, nutrition, prices, products

    return [
        *products.TOOLS,
        *categories.TOOLS,
        *nutrition.TOOLS,
        *prices.TOOLS,
        *insights.TOOLS,
        *analysis.TOOLS,
    ]


def build_tool_registry(container: DependencyContainer) -> ToolRegistry:
    """Build the immutable registry served by the protocol adapter.

    Every declared dependency must have a provider. Services are resolved
    from ``container`` per call by the dispatcher.

    Raises:
        ValueError: On duplicate tool names or an unknown dependency
    """
    specs = all_tool_specs()
    for spec in specs:
        missing = [name for name in spec.dependencies if name not in PROVIDERS]
        if missing:
            raise ValueError(f"Tool '{spec.name}' depends on unknown services: {', '.join(missing)}")

    registry = ToolRegistry.from_specs(specs, container)
    logger.info("Initialized %d Open Food Facts tools (%s)", len(registry), ", ".join(registry.get_categories()))
    return registry
