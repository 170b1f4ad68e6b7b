"""Open Food Facts services - upstream HTTP and LLM sampling wrappers."""

from .sampling import McpSampler, SamplingRequest
from .upstream import UpstreamClient, validate_barcode

__all__ = [
    "McpSampler",
    "SamplingRequest",
    "UpstreamClient",
    "validate_barcode",
]
