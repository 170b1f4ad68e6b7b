"""Open Prices tools: crowd-sourced product prices."""

from typing import Any

from offmcp.config import Config
from offmcp.mcp.protocols import ProductSource
from offmcp.mcp.registry import FieldSpec, ToolSpec
from offmcp.normalize import normalize_price_page
from offmcp.services.upstream import validate_barcode

PAGE = FieldSpec("page", "integer", "Page number", default=1, minimum=1)
PRICE_PAGE_SIZE = FieldSpec(
    "pageSize", "integer", "Number of prices per page", default=Config.DEFAULT_PRICE_PAGE_SIZE, minimum=1, maximum=100
)

NO_MATCHING_PRICES = "No price data found matching your criteria."


def no_product_prices(barcode: str) -> str:
    return (
        f"No price data available for product {barcode}. "
        "Price data is crowd-sourced and may not be available for all products."
    )


async def get_product_prices(barcode: str, page: int, page_size: int, *, client: ProductSource) -> dict[str, Any]:
    code = validate_barcode(barcode)
    data = await client.prices(product_code=code, order_by=Config.DEFAULT_PRICE_ORDER, page=page, size=page_size)
    return normalize_price_page(data, page=page, page_size=page_size, empty_message=no_product_prices(code)).dump()


async def search_prices(
    barcode: str | None,
    currency: str | None,
    country: str | None,
    location_osm_id: int | None,
    location_osm_type: str | None,
    order_by: str,
    page: int,
    page_size: int,
    *,
    client: ProductSource,
) -> dict[str, Any]:
    data = await client.prices(
        product_code=barcode,
        currency=currency,
        country=country,
        location_osm_id=location_osm_id,
        location_osm_type=location_osm_type,
        order_by=order_by,
        page=page,
        size=page_size,
    )
    return normalize_price_page(data, page=page, page_size=page_size, empty_message=NO_MATCHING_PRICES).dump()


async def get_recent_prices(page: int, page_size: int, *, client: ProductSource) -> dict[str, Any]:
    data = await client.prices(order_by=Config.DEFAULT_PRICE_ORDER, page=page, size=page_size)
    return normalize_price_page(data, page=page, page_size=page_size, empty_message=NO_MATCHING_PRICES).dump()


TOOLS = [
    ToolSpec(
        name="getProductPrices",
        title="Get product prices",
        description="Get crowd-sourced prices for a product from Open Prices, newest first",
        category="prices",
        handler=get_product_prices,
        fields=(
            FieldSpec("barcode", "string", "Product barcode to get prices for", required=True),
            PAGE,
            PRICE_PAGE_SIZE,
        ),
    ),
    ToolSpec(
        name="searchPrices",
        title="Search prices",
        description="Search Open Prices by product, currency, country or OpenStreetMap location",
        category="prices",
        handler=search_prices,
        fields=(
            FieldSpec("barcode", "string", "Filter by product barcode"),
            FieldSpec("currency", "string", 'Filter by currency (e.g., "EUR", "USD")'),
            FieldSpec("country", "string", "Filter by country"),
            FieldSpec("locationOsmId", "integer", "OpenStreetMap location ID"),
            FieldSpec("locationOsmType", "string", "OpenStreetMap location type", enum=Config.OSM_TYPES),
            FieldSpec(
                "orderBy",
                "string",
                'Order by field (e.g., "-date" for newest first)',
                default=Config.DEFAULT_PRICE_ORDER,
            ),
            PAGE,
            PRICE_PAGE_SIZE,
        ),
    ),
    ToolSpec(
        name="getRecentPrices",
        title="Get recent prices",
        description="Get the most recently submitted prices, to discover which products have price data",
        category="prices",
        handler=get_recent_prices,
        fields=(PAGE, PRICE_PAGE_SIZE),
    ),
]
