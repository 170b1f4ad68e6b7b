"""Prometheus metrics for the Open Food Facts MCP server.

Provides:
- Tool execution metrics (call count, latency)
- Upstream request metrics per Open Food Facts service
- Advanced-search degradation counter
- /metrics ASGI app for the HTTP transport
"""

import logging

from prometheus_client import Counter, Histogram, make_asgi_app

from offmcp.settings import settings

logger = logging.getLogger(__name__)

# =============================================================================
# MCP Tool Execution Metrics
# =============================================================================

TOOL_CALLS = Counter(
    "offmcp_tool_calls_total",
    "Total MCP tool calls",
    ["tool_name", "status"],
)

TOOL_LATENCY = Histogram(
    "offmcp_tool_latency_seconds",
    "Tool execution latency in seconds",
    ["tool_name"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# =============================================================================
# Upstream Metrics
# =============================================================================

UPSTREAM_REQUESTS = Counter(
    "offmcp_upstream_requests_total",
    "Requests sent to Open Food Facts services",
    ["service", "outcome"],  # catalog/search/prices/robotoff, ok/unavailable/malformed/not_found
)

UPSTREAM_LATENCY = Histogram(
    "offmcp_upstream_latency_seconds",
    "Upstream request latency",
    ["service"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)

SEARCH_FALLBACKS = Counter(
    "offmcp_search_fallbacks_total",
    "Advanced searches served by the legacy search backend",
    ["reason"],  # unavailable, malformed
)


def record_tool_call(tool_name: str, status: str, duration_seconds: float) -> None:
    """Record an MCP tool call with status and timing.

    Args:
        tool_name: Name of the MCP tool (e.g., "searchProducts")
        status: "success", "not_found" or "error"
        duration_seconds: How long the tool execution took
    """
    if not settings.enable_metrics:
        return
    TOOL_CALLS.labels(tool_name=tool_name, status=status).inc()
    TOOL_LATENCY.labels(tool_name=tool_name).observe(duration_seconds)


def record_upstream_request(service: str, outcome: str, latency_seconds: float) -> None:
    """Record one upstream HTTP request."""
    if not settings.enable_metrics:
        return
    UPSTREAM_REQUESTS.labels(service=service, outcome=outcome).inc()
    UPSTREAM_LATENCY.labels(service=service).observe(latency_seconds)


def record_search_fallback(reason: str) -> None:
    """Record an advanced search that degraded to the legacy backend."""
    if not settings.enable_metrics:
        return
    SEARCH_FALLBACKS.labels(reason=reason).inc()


def metrics_app():
    """ASGI app serving the Prometheus exposition format."""
    return make_asgi_app()
