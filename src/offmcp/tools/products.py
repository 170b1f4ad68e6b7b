"""Product search and barcode lookup tools."""

import logging
from typing import Any

from offmcp.config import BARCODE_PATTERN, Config
from offmcp.mcp.protocols import ProductSource
from offmcp.mcp.registry import FieldSpec, ToolSpec
from offmcp.models import SearchResultPage
from offmcp.normalize import normalize_product, normalize_search_page, product_as_search_product
from offmcp.utils.errors import InvalidArgument, OFFError

logger = logging.getLogger(__name__)

PAGE = FieldSpec("page", "integer", "Page number", default=1, minimum=1)
PAGE_SIZE = FieldSpec(
    "pageSize", "integer", "Number of results per page", default=Config.DEFAULT_PAGE_SIZE, minimum=1, maximum=100
)


async def search_products(query: str, page: int, page_size: int, *, client: ProductSource) -> dict[str, Any]:
    """Search by name, brand or ingredients; barcode-like queries try a direct lookup first."""
    query = (query or "").strip()
    if not query:
        raise InvalidArgument("Search query must not be empty")

    if BARCODE_PATTERN.match(query):
        try:
            product = normalize_product(await client.fetch_product(query), barcode=query)
            return SearchResultPage(
                products=[product_as_search_product(product)],
                count=1,
                page=1,
                page_size=1,
                page_count=1,
                source="catalog",
            ).dump()
        except OFFError as e:
            logger.info("Barcode lookup failed for %s, falling back to text search: %s", query, e.message)

    data = await client.text_search(query, page, page_size)
    return normalize_search_page(data, page=page, page_size=page_size, source="catalog").dump()


async def get_product_by_barcode(barcode: str, *, client: ProductSource) -> dict[str, Any]:
    product = normalize_product(await client.fetch_product(barcode), barcode=barcode)
    return product.dump()


TOOLS = [
    ToolSpec(
        name="searchProducts",
        title="Search products",
        description="Search for food products in the Open Food Facts database by name, brand, or ingredients",
        category="products",
        handler=search_products,
        fields=(
            FieldSpec("query", "string", "Search query (product name, brand, ingredients or barcode)", required=True),
            PAGE,
            PAGE_SIZE,
        ),
    ),
    ToolSpec(
        name="getProductByBarcode",
        title="Get product by barcode",
        description="Get detailed information about a food product by its barcode (EAN/UPC)",
        category="products",
        handler=get_product_by_barcode,
        fields=(FieldSpec("barcode", "string", "Product barcode (8-14 digits)", required=True),),
    ),
]
