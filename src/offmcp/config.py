"""Application configuration constants.

Environment-based config lives in settings.py (pydantic-settings).
This module contains only static constants.
"""

import re
from dataclasses import dataclass

from offmcp.settings import settings

# ==========================================================================
# Re-export settings for convenience
# ==========================================================================
CATALOG_URL = settings.off_catalog_url
SEARCH_URL = settings.off_search_url
PRICES_URL = settings.off_prices_url
ROBOTOFF_URL = settings.off_robotoff_url

BARCODE_PATTERN = re.compile(r"^[0-9]{8,14}$")
ADDITIVE_PATTERN = re.compile(r"(e\d+[a-z]?)", re.IGNORECASE)


@dataclass(frozen=True)
class _Config:
    """Static configuration constants (not loaded from environment)."""

    # ==========================================================================
    # Service Info
    # ==========================================================================
    SERVICE_NAME: str = "OpenFoodFacts-MCP"
    SERVICE_DESCRIPTION: str = "MCP server for the Open Food Facts project"
    API_VERSION: str = "1.1.0"
    URI_SCHEME: str = "openfoodfacts"

    # ==========================================================================
    # Pagination defaults
    # ==========================================================================
    DEFAULT_PAGE_SIZE: int = 10
    DEFAULT_PRICE_PAGE_SIZE: int = 20
    DEFAULT_QUESTION_COUNT: int = 10
    PRODUCT_QUESTION_COUNT: int = 25
    DEFAULT_AUTOCOMPLETE_LIMIT: int = 10
    DEFAULT_LANG: str = "en"
    DEFAULT_PRICE_ORDER: str = "-date"

    # ==========================================================================
    # Upstream field selection
    # ==========================================================================
    PRODUCT_FIELDS: tuple[str, ...] = (
        "_id",
        "code",
        "product_name",
        "brands",
        "image_url",
        "image_front_url",
        "selected_images",
        "ingredients_text",
        "allergens",
        "allergens_tags",
        "allergens_hierarchy",
        "traces_tags",
        "nutriscore_grade",
        "nutriscore_score",
        "ecoscore_grade",
        "ecoscore_score",
        "nova_group",
        "additives_tags",
        "additives_original_tags",
        "categories",
        "countries",
        "labels",
        "packaging",
        "origins",
        "nutriments",
    )

    # ==========================================================================
    # Enumerations accepted by tool schemas
    # ==========================================================================
    GRADES: tuple[str, ...] = ("a", "b", "c", "d", "e")
    NOVA_GROUPS: tuple[str, ...] = ("1", "2", "3", "4")
    TAXONOMY_TYPES: tuple[str, ...] = (
        "categories",
        "brands",
        "labels",
        "countries",
        "ingredients",
        "allergens",
        "additives",
    )
    SORT_FIELDS: tuple[str, ...] = (
        "popularity",
        "nutriscore_score",
        "ecoscore_score",
        "created_t",
        "last_modified_t",
    )
    OSM_TYPES: tuple[str, ...] = ("NODE", "WAY", "RELATION")
    INSIGHT_TYPES: tuple[str, ...] = (
        "label",
        "category",
        "product_weight",
        "brand",
        "expiration_date",
        "packaging",
        "store",
        "nutrient",
        "ingredient_spellcheck",
        "nutrition_image",
    )

    # ==========================================================================
    # Sampling model hints
    # ==========================================================================
    ANALYSIS_MODEL_HINTS: tuple[str, ...] = ("claude-3", "gpt-4")
    RECIPE_MODEL_HINTS: tuple[str, ...] = ("claude-3", "gpt-4o")


Config = _Config()
