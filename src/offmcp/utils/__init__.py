"""Utility functions for the Open Food Facts MCP server."""

from .errors import ErrorCodes, InvalidArgument, NotFound, OFFError, SamplingFailed, UpstreamError
from .logging import get_call_id, setup_logging

__all__ = [
    "ErrorCodes",
    "InvalidArgument",
    "NotFound",
    "OFFError",
    "SamplingFailed",
    "UpstreamError",
    "get_call_id",
    "setup_logging",
]
