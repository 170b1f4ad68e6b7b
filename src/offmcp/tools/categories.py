"""Category, brand, advanced search and autocomplete tools."""

import logging
from typing import Any

from offmcp.config import Config
from offmcp.mcp.protocols import ProductSource
from offmcp.mcp.registry import FieldSpec, ToolSpec
from offmcp.mcp.strategy import FallbackStrategy
from offmcp.models import SearchResultPage
from offmcp.normalize import normalize_search_page, slugify
from offmcp.tools.products import PAGE, PAGE_SIZE
from offmcp.utils.errors import InvalidArgument

logger = logging.getLogger(__name__)


async def _facet_search(kind: str, value: str, page: int, page_size: int, client: ProductSource) -> dict[str, Any]:
    slug = slugify(value or "")
    if not slug:
        raise InvalidArgument(f"A {kind} is required")
    if kind == "category":
        data = await client.category_search(slug, page)
    else:
        data = await client.brand_search(slug, page)
    return normalize_search_page(data, page=page, page_size=page_size, source="facet").dump()


async def search_by_category(category: str, page: int, page_size: int, *, client: ProductSource) -> dict[str, Any]:
    return await _facet_search("category", category, page, page_size, client)


async def search_by_brand(brand: str, page: int, page_size: int, *, client: ProductSource) -> dict[str, Any]:
    return await _facet_search("brand", brand, page, page_size, client)


def build_search_query(
    query: str | None = None,
    category: str | None = None,
    brand: str | None = None,
    nutriscore_grade: str | None = None,
    ecoscore_grade: str | None = None,
    nova_group: str | None = None,
    allergen_free: str | None = None,
    labels: str | None = None,
    countries: str | None = None,
) -> str:
    """Build the Search-a-licious query: clauses joined by spaces (implicit AND).

    >>> build_search_query("chocolate", nutriscore_grade="a", allergen_free="milk")
    'chocolate nutriscore_grade:a -allergens_tags:"en:milk"'
    """
    clauses: list[str] = []
    if query:
        clauses.append(query)
    if category:
        clauses.append(f'categories_tags:"en:{category}"')
    if brand:
        clauses.append(f'brands:"{brand}"')
    if nutriscore_grade:
        clauses.append(f"nutriscore_grade:{nutriscore_grade}")
    if ecoscore_grade:
        clauses.append(f"ecoscore_grade:{ecoscore_grade}")
    if nova_group:
        clauses.append(f"nova_group:{nova_group}")
    if labels:
        clauses.append(f'labels_tags:"en:{labels}"')
    if countries:
        clauses.append(f'countries_tags:"en:{countries}"')
    if allergen_free:
        clauses.append(f'-allergens_tags:"en:{allergen_free}"')
    return " ".join(clauses)


async def advanced_search(
    query: str | None,
    category: str | None,
    brand: str | None,
    nutriscore_grade: str | None,
    ecoscore_grade: str | None,
    nova_group: str | None,
    allergen_free: str | None,
    labels: str | None,
    countries: str | None,
    sort_by: str | None,
    page: int,
    page_size: int,
    *,
    client: ProductSource,
) -> dict[str, Any]:
    lucene = build_search_query(
        query,
        category=category,
        brand=brand,
        nutriscore_grade=nutriscore_grade,
        ecoscore_grade=ecoscore_grade,
        nova_group=nova_group,
        allergen_free=allergen_free,
        labels=labels,
        countries=countries,
    )

    async def primary() -> SearchResultPage:
        data = await client.advanced_search(lucene or "*", page, page_size, sort_by)
        return normalize_search_page(
            data,
            page=page,
            page_size=page_size,
            source="search-a-licious",
            products_key="hits",
            trust_upstream_paging=True,
        )

    async def legacy() -> SearchResultPage:
        # Structured filters cannot be expressed here; only the free text survives
        data = await client.text_search(query or "", page, page_size)
        return normalize_search_page(data, page=page, page_size=page_size, source="legacy")

    outcome = await FallbackStrategy("advancedSearch", primary, legacy).run()
    result = outcome.value
    if outcome.degraded:
        result = result.model_copy(update={"degraded": True})
    return result.dump()


async def autocomplete(
    query: str, taxonomy_type: str, lang: str, limit: int, *, client: ProductSource
) -> dict[str, Any]:
    return await client.autocomplete(query, taxonomy_type, lang, limit)


TOOLS = [
    ToolSpec(
        name="searchByCategory",
        title="Search by category",
        description="Browse products in a food category (e.g. beverages, snacks, dairy, organic)",
        category="search",
        handler=search_by_category,
        fields=(
            FieldSpec("category", "string", 'Food category (e.g., "beverages", "snacks", "dairy")', required=True),
            PAGE,
            PAGE_SIZE,
        ),
    ),
    ToolSpec(
        name="searchByBrand",
        title="Search by brand",
        description="Browse products of a brand",
        category="search",
        handler=search_by_brand,
        fields=(
            FieldSpec("brand", "string", "Brand name to search for", required=True),
            PAGE,
            PAGE_SIZE,
        ),
    ),
    ToolSpec(
        name="advancedSearch",
        title="Advanced search",
        description=(
            "Search products with multiple filters: category, brand, Nutri-Score, Eco-Score, NOVA group, "
            "allergen exclusion, labels and countries"
        ),
        category="search",
        handler=advanced_search,
        fields=(
            FieldSpec("query", "string", "Search query (product name, ingredients, etc.)"),
            FieldSpec("category", "string", "Filter by category"),
            FieldSpec("brand", "string", "Filter by brand"),
            FieldSpec("nutriscoreGrade", "string", "Filter by Nutri-Score grade", enum=Config.GRADES),
            FieldSpec("ecoscoreGrade", "string", "Filter by Eco-Score grade", enum=Config.GRADES),
            FieldSpec("novaGroup", "string", "Filter by NOVA group (food processing level)", enum=Config.NOVA_GROUPS),
            FieldSpec("allergenFree", "string", 'Exclude products containing an allergen (e.g., "gluten", "milk")'),
            FieldSpec("labels", "string", 'Filter by label (e.g., "organic", "fair-trade", "vegan")'),
            FieldSpec("countries", "string", 'Filter by country (e.g., "united-states", "france")'),
            FieldSpec("sortBy", "string", "Sort order", enum=Config.SORT_FIELDS),
            PAGE,
            PAGE_SIZE,
        ),
    ),
    ToolSpec(
        name="autocomplete",
        title="Taxonomy autocomplete",
        description=(
            "Autocomplete suggestions for categories, brands, labels, countries, ingredients, allergens or additives"
        ),
        category="search",
        handler=autocomplete,
        fields=(
            FieldSpec("query", "string", "Autocomplete query", required=True),
            FieldSpec(
                "taxonomyType", "string", "Taxonomy to search", required=True, enum=Config.TAXONOMY_TYPES
            ),
            FieldSpec("lang", "string", "Language code", default=Config.DEFAULT_LANG),
            FieldSpec(
                "limit",
                "integer",
                "Maximum number of suggestions",
                default=Config.DEFAULT_AUTOCOMPLETE_LIMIT,
                minimum=1,
            ),
        ),
    ),
]
