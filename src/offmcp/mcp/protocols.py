"""Protocol interfaces for dependency injection.

These define the contracts that tool dependencies must satisfy.
Using protocols allows for easy testing with mocks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from offmcp.services.sampling import SamplingRequest


@runtime_checkable
class ProductSource(Protocol):
    """Open Food Facts upstream interface.

    Implemented by ``offmcp.services.upstream.UpstreamClient``.
    """

    async def fetch_product(self, barcode: str) -> dict[str, Any]:
        """Get the raw ``product`` object for a barcode."""
        ...

    async def text_search(self, query: str, page: int, page_size: int) -> dict[str, Any]:
        """Legacy full-text search."""
        ...

    async def category_search(self, slug: str, page: int) -> dict[str, Any]:
        """Category facet page."""
        ...

    async def brand_search(self, slug: str, page: int) -> dict[str, Any]:
        """Brand facet page."""
        ...

    async def advanced_search(self, q: str, page: int, page_size: int, sort_by: str | None = None) -> dict[str, Any]:
        """Search-a-licious query."""
        ...

    async def autocomplete(self, q: str, taxonomy: str, lang: str, size: int) -> dict[str, Any]:
        """Taxonomy autocomplete suggestions."""
        ...

    async def prices(self, **filters: Any) -> dict[str, Any]:
        """Open Prices listing."""
        ...

    async def questions(self, barcode: str | None = None, **filters: Any) -> dict[str, Any]:
        """Robotoff questions for a product, or random ones."""
        ...

    async def insights(self, **filters: Any) -> dict[str, Any]:
        """Robotoff insights listing."""
        ...


@runtime_checkable
class Sampler(Protocol):
    """LLM completion through the connected client."""

    async def complete(self, request: SamplingRequest) -> str:
        """Return the completion text or raise SamplingFailed."""
        ...
