"""Pure functions turning raw Open Food Facts JSON into canonical records.

Nothing here performs I/O. Upstream payloads are treated as untrusted:
every field may be missing, null or of the wrong type, and the output is
independent of upstream key ordering.
"""

import math
import re
from collections.abc import Iterable
from typing import Any

from offmcp.config import ADDITIVE_PATTERN, BARCODE_PATTERN, Config
from offmcp.models import (
    Additive,
    AdditivesResult,
    AllergenCheckResult,
    AllergenStatus,
    EcoScoreResult,
    InsightRecord,
    MultiAllergenResult,
    NutriScoreResult,
    NutritionFacts,
    PricePage,
    PriceRecord,
    ProductRecord,
    QuestionRecord,
    SearchProduct,
    SearchResultPage,
    SearchSource,
)
from offmcp.utils.errors import InvalidArgument

NUTRI_SCORE_EXPLANATIONS = {
    "a": "Excellent nutritional quality - This is a very healthy choice!",
    "b": "Good nutritional quality - A healthy option.",
    "c": "Average nutritional quality - Consume in moderation.",
    "d": "Poor nutritional quality - Consider healthier alternatives.",
    "e": "Very poor nutritional quality - Best to avoid or consume rarely.",
    "unknown": "Nutri-Score not available for this product.",
}

ECO_SCORE_EXPLANATIONS = {
    "a": "Very low environmental impact - Excellent eco choice!",
    "b": "Low environmental impact - Good for the planet.",
    "c": "Moderate environmental impact - Consider the environment.",
    "d": "High environmental impact - Consider eco-friendlier options.",
    "e": "Very high environmental impact - Significant environmental footprint.",
    "unknown": "Eco-Score not available for this product.",
}

NOVA_EXPLANATIONS = {
    1: "Unprocessed or minimally processed foods",
    2: "Processed culinary ingredients",
    3: "Processed foods",
    4: "Ultra-processed foods - contains industrial additives",
}
NOVA_UNAVAILABLE = "NOVA group not available"

NOT_SPECIFIED = "Not specified"

# upstream nutriment key -> NutritionFacts field
NUTRIMENT_KEYS = {
    "energy": "energy-kcal_100g",
    "fat": "fat_100g",
    "saturated_fat": "saturated-fat_100g",
    "carbohydrates": "carbohydrates_100g",
    "sugars": "sugars_100g",
    "fiber": "fiber_100g",
    "proteins": "proteins_100g",
    "salt": "salt_100g",
}

_LANG_PREFIX = re.compile(r"^[a-z]{2,3}:")
_WHITESPACE = re.compile(r"\s+")


# =============================================================================
# Scalar helpers
# =============================================================================


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, list):
        value = ", ".join(str(v) for v in value if v)
    text = str(value).strip()
    return text or default


def _number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _int(value: Any, default: int | None = None) -> int | None:
    number = _number(value)
    return default if number is None else int(number)


def _tags(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(tag) for tag in value if isinstance(tag, str) and tag]


def _unique(tags: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(tags))


def normalize_grade(raw: Any) -> str:
    """Lower-case a-e grade, "unknown" for anything else."""
    grade = _text(raw).lower()
    return grade if grade in Config.GRADES else "unknown"


def normalize_nova(raw: Any) -> int:
    """NOVA group 1-4, 0 when absent or out of range."""
    group = _int(raw, 0)
    return group if group in NOVA_EXPLANATIONS else 0


def nova_explanation(group: int) -> str:
    return NOVA_EXPLANATIONS.get(group, NOVA_UNAVAILABLE)


def humanize_tag(tag: str) -> str:
    """``en:soy-lecithin`` -> ``soy lecithin``."""
    return _LANG_PREFIX.sub("", tag).replace("-", " ")


def additive_name(tag: str) -> str:
    """``en:e322i`` -> ``E322I``; non E-number tags keep their stripped text."""
    stripped = _LANG_PREFIX.sub("", tag)
    match = ADDITIVE_PATTERN.match(stripped)
    if match:
        return match.group(1).upper()
    return stripped.upper()


def slugify(value: str) -> str:
    """Facet slug: lower-case, whitespace runs collapsed to a hyphen."""
    return _WHITESPACE.sub("-", value.strip().lower())


def page_count(count: int, page_size: int) -> int:
    if page_size <= 0 or count <= 0:
        return 0
    return math.ceil(count / page_size)


def display_grade(grade: str) -> str:
    return grade.upper()


# =============================================================================
# Products
# =============================================================================


def _image_url(raw: dict[str, Any]) -> str:
    selected = raw.get("selected_images")
    if isinstance(selected, dict):
        front = selected.get("front") or {}
        display = front.get("display") if isinstance(front, dict) else None
        if isinstance(display, dict) and display.get("en"):
            return str(display["en"])
    return _text(raw.get("image_url")) or _text(raw.get("image_front_url"))


def normalize_nutrition(nutriments: Any) -> NutritionFacts:
    if not isinstance(nutriments, dict):
        return NutritionFacts()
    return NutritionFacts(**{field: _number(nutriments.get(key)) for field, key in NUTRIMENT_KEYS.items()})


def normalize_product(raw: dict[str, Any], barcode: str | None = None) -> ProductRecord:
    """Build a ProductRecord from a product API payload's ``product`` object."""
    code = _text(raw.get("code")) or (barcode or "")
    if code and not BARCODE_PATTERN.match(code):
        code = barcode if barcode and BARCODE_PATTERN.match(barcode) else ""

    allergens_tags = _unique(_tags(raw.get("allergens_tags")) + _tags(raw.get("allergens_hierarchy")))
    traces_tags = _unique(_tags(raw.get("traces_tags")))
    additives = _tags(raw.get("additives_tags")) or _tags(raw.get("additives_original_tags"))

    return ProductRecord(
        id=_text(raw.get("_id")) or code,
        barcode=code,
        name=_text(raw.get("product_name"), "Unknown product"),
        brand=_text(raw.get("brands"), "Unknown brand"),
        image_url=_image_url(raw),
        ingredients=_text(raw.get("ingredients_text")),
        allergens_text=_text(raw.get("allergens")),
        allergens_tags=allergens_tags,
        allergens=[humanize_tag(tag) for tag in allergens_tags],
        traces_tags=traces_tags,
        traces=[humanize_tag(tag) for tag in traces_tags],
        nutriscore_grade=normalize_grade(raw.get("nutriscore_grade")),
        nutriscore_score=_number(raw.get("nutriscore_score")),
        ecoscore_grade=normalize_grade(raw.get("ecoscore_grade")),
        ecoscore_score=_number(raw.get("ecoscore_score")),
        nova_group=normalize_nova(raw.get("nova_group")),
        additives_tags=_unique(additives),
        categories=_text(raw.get("categories")),
        countries=_text(raw.get("countries")),
        labels=_text(raw.get("labels")),
        packaging=_text(raw.get("packaging")),
        origins=_text(raw.get("origins")),
        nutrition_facts=normalize_nutrition(raw.get("nutriments")),
    )


def normalize_search_product(raw: dict[str, Any]) -> SearchProduct:
    code = _text(raw.get("code"))
    return SearchProduct(
        id=_text(raw.get("_id")) or _text(raw.get("id")) or code,
        name=_text(raw.get("product_name"), "Unknown product"),
        brand=_text(raw.get("brands"), "Unknown brand"),
        barcode=code,
        image_url=_text(raw.get("image_url")),
        nutri_score=display_grade(normalize_grade(raw.get("nutriscore_grade"))),
        eco_score=display_grade(normalize_grade(raw.get("ecoscore_grade"))),
        nova_group=normalize_nova(raw.get("nova_group")),
        categories=_text(raw.get("categories")),
        ingredients=_text(raw.get("ingredients_text")),
    )


def product_as_search_product(product: ProductRecord) -> SearchProduct:
    return SearchProduct(
        id=product.id,
        name=product.name,
        brand=product.brand,
        barcode=product.barcode,
        image_url=product.image_url,
        nutri_score=display_grade(product.nutriscore_grade),
        eco_score=display_grade(product.ecoscore_grade),
        nova_group=product.nova_group,
        categories=product.categories,
        ingredients=product.ingredients,
    )


def normalize_search_page(
    data: dict[str, Any],
    *,
    page: int,
    page_size: int,
    source: SearchSource,
    products_key: str = "products",
    trust_upstream_paging: bool = False,
) -> SearchResultPage:
    """Build a result page.

    Only the advanced search backend reports its own paging; everywhere
    else page, page size and page count are derived locally.
    """
    raw_products = data.get(products_key) or []
    products = [normalize_search_product(p) for p in raw_products if isinstance(p, dict)]
    count = _int(data.get("count"), 0) or 0

    if trust_upstream_paging:
        page = _int(data.get("page"), page) or page
        page_size = _int(data.get("page_size"), page_size) or page_size
        pages = _int(data.get("page_count")) or page_count(count, page_size)
    else:
        pages = page_count(count, page_size)

    return SearchResultPage(
        products=products,
        count=count,
        page=page,
        page_size=page_size,
        page_count=pages,
        source=source,
    )


# =============================================================================
# Nutrition views
# =============================================================================


def nutri_score(product: ProductRecord) -> NutriScoreResult:
    grade = product.nutriscore_grade
    return NutriScoreResult(
        barcode=product.barcode,
        product_name=product.name,
        brand=product.brand,
        nutri_score_grade=display_grade(grade),
        nutri_score_score=product.nutriscore_score,
        explanation=NUTRI_SCORE_EXPLANATIONS[grade],
    )


def eco_score(product: ProductRecord) -> EcoScoreResult:
    grade = product.ecoscore_grade
    return EcoScoreResult(
        barcode=product.barcode,
        product_name=product.name,
        brand=product.brand,
        eco_score_grade=display_grade(grade),
        eco_score_score=product.ecoscore_score,
        packaging=product.packaging or NOT_SPECIFIED,
        origins=product.origins or NOT_SPECIFIED,
        explanation=ECO_SCORE_EXPLANATIONS[grade],
    )


def additives_info(product: ProductRecord) -> AdditivesResult:
    additives = [Additive(tag=tag, name=additive_name(tag)) for tag in product.additives_tags]
    return AdditivesResult(
        barcode=product.barcode,
        product_name=product.name,
        additives=additives,
        count=len(additives),
        nova_group=product.nova_group,
        nova_explanation=nova_explanation(product.nova_group),
    )


def _mentions(tags: list[str], allergen: str) -> bool:
    needle = allergen.lower()
    return any(needle in tag.lower() for tag in tags)


def _clean_allergen(allergen: str) -> str:
    cleaned = allergen.strip() if isinstance(allergen, str) else ""
    if not cleaned:
        raise InvalidArgument("Allergen names must be non-empty strings")
    return cleaned


def check_allergen(product: ProductRecord, allergen: str) -> AllergenCheckResult:
    """Check one allergen; presence in traces counts as found."""
    allergen = _clean_allergen(allergen)
    in_ingredients = _mentions(product.allergens_tags, allergen)
    in_traces = _mentions(product.traces_tags, allergen)
    found = in_ingredients or in_traces

    if found:
        message = f"WARNING: {allergen.upper()} found in this product!"
    else:
        message = f"{allergen.upper()} not detected in this product."
    if product.traces:
        message += f"\n\nNote: May contain traces of: {', '.join(product.traces)}"

    return AllergenCheckResult(
        barcode=product.barcode,
        product_name=product.name,
        allergen_checked=allergen,
        allergen_found=found,
        found_in_ingredients=in_ingredients,
        found_in_traces=in_traces,
        all_allergens=product.allergens,
        allergens_tags=product.allergens_tags,
        traces=product.traces,
        message=message,
    )


def _allergen_status_label(status: AllergenStatus) -> str:
    if status.found:
        return "FOUND"
    if status.in_traces:
        return "TRACES"
    return "NOT FOUND"


def check_multiple_allergens(product: ProductRecord, allergens: list[str]) -> MultiAllergenResult:
    """Check several allergens; safe only when none is found or in traces."""
    if not allergens:
        raise InvalidArgument("At least one allergen is required")

    results = []
    for allergen in allergens:
        allergen = _clean_allergen(allergen)
        results.append(
            AllergenStatus(
                allergen=allergen,
                found=_mentions(product.allergens_tags, allergen),
                in_traces=_mentions(product.traces_tags, allergen),
            )
        )

    safe = not any(r.found or r.in_traces for r in results)
    if safe:
        message = "Product appears safe - none of the checked allergens were found."
    else:
        message = "WARNING: Some allergens were detected!"
    for r in results:
        message += f"\n  • {r.allergen}: {_allergen_status_label(r)}"

    return MultiAllergenResult(
        barcode=product.barcode,
        product_name=product.name,
        check_results=results,
        safe_to_consume=safe,
        all_allergens=product.allergens,
        traces=product.traces,
        message=message,
    )


# =============================================================================
# Open Prices
# =============================================================================


def normalize_price(raw: dict[str, Any]) -> PriceRecord:
    location = raw.get("location")
    location_name = None
    if isinstance(location, dict):
        location_name = _text(location.get("osm_display_name")) or None
    return PriceRecord(
        product_code=_text(raw.get("product_code")) or None,
        price=_number(raw.get("price")),
        currency=_text(raw.get("currency")) or None,
        location_name=location_name or "Unknown location",
        location_id=_int(raw.get("location_id")),
        date=_text(raw.get("date")) or None,
        proof_id=_int(raw.get("proof_id")),
    )


def normalize_price_page(data: dict[str, Any], *, page: int, page_size: int, empty_message: str) -> PricePage:
    items = [normalize_price(item) for item in data.get("items") or [] if isinstance(item, dict)]
    total = _int(data.get("total"))
    return PricePage(
        prices=items,
        count=total if total is not None else len(items),
        page=page,
        page_size=page_size,
        message=None if items else empty_message,
    )


# =============================================================================
# Robotoff
# =============================================================================


def normalize_question(raw: dict[str, Any]) -> QuestionRecord:
    return QuestionRecord(
        barcode=_text(raw.get("barcode")) or None,
        type=_text(raw.get("type")) or None,
        value=_text(raw.get("value")) or None,
        question=_text(raw.get("question")) or None,
        insight_id=_text(raw.get("insight_id")) or None,
        insight_type=_text(raw.get("insight_type")) or None,
        image_url=_text(raw.get("source_image_url")),
    )


def normalize_insight(raw: dict[str, Any]) -> InsightRecord:
    return InsightRecord(
        id=_text(raw.get("id")) or None,
        barcode=_text(raw.get("barcode")) or None,
        type=_text(raw.get("type")) or None,
        value=_text(raw.get("value")) or None,
        value_tag=_text(raw.get("value_tag")) or None,
        confidence=_number(raw.get("confidence")) or 0,
        latest_event=_text(raw.get("latest_event")),
        predictor=_text(raw.get("predictor")),
    )
