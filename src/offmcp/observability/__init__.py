"""Observability package for the Open Food Facts MCP server.

Provides per-call tool execution tracking: correlation IDs for logs and
Prometheus call/latency metrics.
"""

from offmcp.observability.tool_observer import ToolExecutionContext

__all__ = ["ToolExecutionContext"]
