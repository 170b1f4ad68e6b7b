"""Logging utilities with tool-call correlation IDs.

Provides:
- Call ID tracing so every log line of one tool invocation can be correlated
- File logging for stdio mode (stdout is reserved for the MCP protocol)
- Structured JSON logging when LOG_FORMAT=json
- Standard text logging for development

Uses ContextVar to propagate call IDs across async boundaries.
"""

import datetime
import json
import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any

# Context variable to store the current tool call ID across async boundaries
call_id_ctx: ContextVar[str | None] = ContextVar("call_id", default=None)

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(call_id)s] %(message)s"


class ToolCallIDFilter(logging.Filter):
    """Inject call_id into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add call_id attribute to log record."""
        record.call_id = call_id_ctx.get() or "-"
        return True


class StructuredLogFormatter(logging.Formatter):
    """Format logs as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        timestamp = datetime.datetime.fromtimestamp(record.created, tz=datetime.UTC).isoformat(timespec="milliseconds")

        log_entry: dict[str, Any] = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "timestamp": timestamp,
        }

        call_id = getattr(record, "call_id", None)
        if call_id and call_id != "-":
            log_entry["call_id"] = call_id

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def get_call_id() -> str | None:
    """Get the current tool call ID from context.

    Returns:
        The call ID if set, None otherwise.
    """
    return call_id_ctx.get()


def _build_handler(transport: str, log_file: str) -> logging.Handler:
    if transport == "stdio":
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(path, mode="a", encoding="utf-8")
    return logging.StreamHandler(sys.stderr)


def setup_logging(
    transport: str = "stdio",
    *,
    log_file: str = "mcp-server.log",
    level: str = "INFO",
    log_format: str = "text",
    testing: bool = False,
) -> None:
    """Configure root logging for the selected transport.

    stdio: logs go to ``log_file``; anything written to stdout would corrupt
    the protocol stream.
    http: logs go to stderr.
    Tests only get a NullHandler so nothing is written to disk.
    """
    root_logger = logging.getLogger()

    if testing:
        root_logger.addHandler(logging.NullHandler())
        return

    handler = _build_handler(transport, log_file)
    handler.addFilter(ToolCallIDFilter())
    if log_format == "json":
        handler.setFormatter(StructuredLogFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    for existing in list(root_logger.handlers):
        existing.close()
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())
