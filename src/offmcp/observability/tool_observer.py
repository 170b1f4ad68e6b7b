"""Tool execution observability context manager.

Provides unified observability for MCP tool execution:
- A correlation id per call, propagated to every log line
- Prometheus metrics (latency, call count)

Usage:
    async with ToolExecutionContext(
        tool_name="getNutriScore",
        arguments={"nameOrBarcode": "3017620422003"},
    ) as ctx:
        result = await execute_tool()
        ctx.set_status("success")
"""

import logging
import time
import uuid
from typing import Any

from offmcp.utils.logging import call_id_ctx
from offmcp.utils.metrics import record_tool_call

logger = logging.getLogger(__name__)


class ToolExecutionContext:
    """Async context manager wrapping one tool invocation.

    The status defaults to "success"; a raised exception marks it "error".
    The dispatcher converts errors into payloads itself, so it reports the
    final status through ``set_status``.
    """

    def __init__(self, tool_name: str, arguments: dict[str, Any]):
        self.tool_name = tool_name
        self.arguments = arguments
        self.call_id = uuid.uuid4().hex[:12]

        self._start_time: float | None = None
        self._status = "success"
        self._token = None

    async def __aenter__(self) -> "ToolExecutionContext":
        self._token = call_id_ctx.set(self.call_id)
        self._start_time = time.perf_counter()
        logger.info("Tool call %s started", self.tool_name)
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: Any) -> bool:
        duration = time.perf_counter() - (self._start_time or 0)

        if exc_type is not None:
            self._status = "error"

        record_tool_call(tool_name=self.tool_name, status=self._status, duration_seconds=duration)
        logger.info("Tool call %s finished: %s in %.3fs", self.tool_name, self._status, duration)

        if self._token is not None:
            call_id_ctx.reset(self._token)

        # Don't suppress exceptions
        return False

    def set_status(self, status: str) -> None:
        """Override the recorded status ("success", "not_found", "error")."""
        self._status = status

    @property
    def status(self) -> str:
        return self._status
