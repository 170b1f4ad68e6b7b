"""Flexible product lookup: accepts either a barcode or a product name."""

import json
import logging

from offmcp.mcp.protocols import ProductSource
from offmcp.models import ProductRecord
from offmcp.normalize import normalize_product
from offmcp.utils.errors import InvalidArgument, NotFound, OFFError

logger = logging.getLogger(__name__)


def not_found_message(identifier: str) -> str:
    example = json.dumps({"query": identifier})
    return (
        f'Product "{identifier}" not found in the Open Food Facts database. '
        "Please try using the searchProducts tool first to find the exact product, "
        "then use its barcode. "
        f"Example: First search with searchProducts({example}), then use the barcode from the results."
    )


async def resolve_product(client: ProductSource, identifier: str) -> ProductRecord:
    """Resolve a barcode or free-text name to one product.

    All-digit identifiers try a direct lookup first; any failure there, or a
    non-numeric identifier, falls through to a one-result text search whose
    hit is then fetched by barcode.

    Raises:
        InvalidArgument: If the identifier is blank
        NotFound: If neither path yields a product
    """
    query = (identifier or "").strip()
    if not query:
        raise InvalidArgument("A product name or barcode is required")

    if query.isdigit():
        try:
            return normalize_product(await client.fetch_product(query), barcode=query)
        except OFFError as e:
            logger.info("Barcode lookup failed for %s, trying text search: %s", query, e.message)

    try:
        results = await client.text_search(query, 1, 1)
        hits = results.get("products") or []
        barcode = str(hits[0].get("code") or "").strip() if hits and isinstance(hits[0], dict) else ""
        if barcode:
            return normalize_product(await client.fetch_product(barcode), barcode=barcode)
    except OFFError as e:
        logger.info("Text search lookup failed for %s: %s", query, e.message)

    raise NotFound(not_found_message(query))
