"""Open Food Facts tools - handlers exposed via MCP."""

from .analysis import analyze_product, compare_products, suggest_recipes
from .categories import advanced_search, autocomplete, search_by_brand, search_by_category
from .insights import get_insight_types, get_product_insights, get_product_questions, get_random_questions
from .nutrition import check_allergens, get_additives_info, get_allergen_check, get_eco_score, get_nutri_score
from .prices import get_product_prices, get_recent_prices, search_prices
from .products import get_product_by_barcode, search_products
from .resolver import resolve_product

__all__ = [
    "advanced_search",
    "analyze_product",
    "autocomplete",
    "check_allergens",
    "compare_products",
    "get_additives_info",
    "get_allergen_check",
    "get_eco_score",
    "get_insight_types",
    "get_nutri_score",
    "get_product_by_barcode",
    "get_product_insights",
    "get_product_prices",
    "get_product_questions",
    "get_random_questions",
    "get_recent_prices",
    "resolve_product",
    "search_by_brand",
    "search_by_category",
    "search_prices",
    "search_products",
    "suggest_recipes",
]
