"""LLM-backed tools: product analysis, comparison and recipe suggestions.

These tools fetch product data, then ask the connected client to run a
completion through MCP sampling. Analysis and comparison degrade to a
plain data summary when sampling is unavailable; recipe suggestions have
no meaningful fallback and report the failure.
"""

import asyncio
import json
import logging

from offmcp.config import Config
from offmcp.mcp.protocols import ProductSource, Sampler
from offmcp.mcp.registry import FieldSpec, ToolSpec
from offmcp.models import NutritionFacts, ProductRecord
from offmcp.prompts import PROMPTS
from offmcp.services.sampling import SamplingRequest
from offmcp.tools.nutrition import NAME_OR_BARCODE
from offmcp.tools.resolver import resolve_product
from offmcp.utils.errors import OFFError, SamplingFailed

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

# (label, NutritionFacts field, unit)
NUTRIENT_ROWS = (
    ("Energy", "energy", " kcal"),
    ("Fat", "fat", "g"),
    ("Saturated Fat", "saturated_fat", "g"),
    ("Carbohydrates", "carbohydrates", "g"),
    ("Sugars", "sugars", "g"),
    ("Fiber", "fiber", "g"),
    ("Proteins", "proteins", "g"),
    ("Salt", "salt", "g"),
)


def _nutrient(facts: NutritionFacts, field: str, unit: str) -> str:
    value = getattr(facts, field)
    if value is None:
        return NOT_AVAILABLE
    return f"{value:g}{unit}"


def _grade(grade: str) -> str:
    return NOT_AVAILABLE if grade == "unknown" else grade.upper()


def _nova(group: int) -> str:
    return str(group) if group else NOT_AVAILABLE


def _product_json(product: ProductRecord) -> str:
    return json.dumps(product.dump(), indent=2)


# =============================================================================
# analyzeProduct
# =============================================================================


def analysis_header(product: ProductRecord) -> str:
    header = f"# {product.name} ({product.brand})\n"
    badges = []
    if product.nutriscore_grade != "unknown":
        badges.append(f"Nutri-Score: {product.nutriscore_grade.upper()}")
    if product.nova_group:
        badges.append(f"NOVA Group: {product.nova_group}")
    if badges:
        header += f"*{' • '.join(badges)}*\n"
    return header + "\n"


def product_summary(product: ProductRecord) -> str:
    """Plain product data used when no LLM analysis is available."""
    lines = [
        f"Analysis of {product.name} (AI analysis unavailable, showing Open Food Facts data):",
        "",
        f"Product: {product.name}",
        f"Brand: {product.brand}",
        f"Barcode: {product.barcode or NOT_AVAILABLE}",
        f"Nutri-Score: {_grade(product.nutriscore_grade)}",
        f"Eco-Score: {_grade(product.ecoscore_grade)}",
        f"Processing (NOVA): Group {_nova(product.nova_group)}",
        "",
        "Nutrition Facts (per 100g/100ml):",
    ]
    lines += [f"- {label}: {_nutrient(product.nutrition_facts, field, unit)}" for label, field, unit in NUTRIENT_ROWS]
    lines += [
        "",
        f"Ingredients: {product.ingredients or NOT_AVAILABLE}",
        "",
        f"Allergens: {', '.join(product.allergens) or 'None listed'}",
        "",
        f"Countries: {product.countries or NOT_AVAILABLE}",
    ]
    return "\n".join(lines)


async def analyze_product(name_or_barcode: str, *, client: ProductSource, sampler: Sampler) -> str:
    product = await resolve_product(client, name_or_barcode)
    request = SamplingRequest(
        messages=(PROMPTS["product_analysis"].format(product_json=_product_json(product)),),
        system_prompt=PROMPTS["product_analysis_system"],
        model_hints=Config.ANALYSIS_MODEL_HINTS,
        intelligence_priority=0.9,
        speed_priority=0.6,
        cost_priority=0.4,
        temperature=0.3,
        max_tokens=1500,
        stop_sequences=("[END]",),
    )
    try:
        analysis = await sampler.complete(request)
    except SamplingFailed as e:
        logger.warning("Product analysis fell back to raw data for %s: %s", product.barcode, e.message)
        return product_summary(product)
    return analysis_header(product) + analysis


# =============================================================================
# compareProducts
# =============================================================================


def comparison_header(first: ProductRecord, second: ProductRecord) -> str:
    return (
        f"# Comparison: {first.name} vs {second.name}\n\n"
        f"**{first.name}** ({first.brand}) - Nutri-Score: {_grade(first.nutriscore_grade)}\n"
        f"**{second.name}** ({second.brand}) - Nutri-Score: {_grade(second.nutriscore_grade)}\n\n"
    )


def comparison_table(first: ProductRecord, second: ProductRecord) -> str:
    """Side-by-side table used when no LLM comparison is available."""
    rows = [
        ("Brand", first.brand, second.brand),
        ("Barcode", first.barcode or NOT_AVAILABLE, second.barcode or NOT_AVAILABLE),
        ("Nutri-Score", _grade(first.nutriscore_grade), _grade(second.nutriscore_grade)),
        ("Eco-Score", _grade(first.ecoscore_grade), _grade(second.ecoscore_grade)),
        ("NOVA group", _nova(first.nova_group), _nova(second.nova_group)),
    ]
    rows += [
        (
            f"{label} (per 100g)",
            _nutrient(first.nutrition_facts, field, unit),
            _nutrient(second.nutrition_facts, field, unit),
        )
        for label, field, unit in NUTRIENT_ROWS
    ]
    rows += [
        ("Additives", str(len(first.additives_tags)), str(len(second.additives_tags))),
        ("Allergens", ", ".join(first.allergens) or "None listed", ", ".join(second.allergens) or "None listed"),
    ]

    lines = [
        f"Comparison of {first.name} vs {second.name} (AI analysis unavailable, showing Open Food Facts data):",
        "",
        f"| | {first.name} | {second.name} |",
        "|---|---|---|",
    ]
    lines += [f"| {label} | {a} | {b} |" for label, a, b in rows]
    return "\n".join(lines)


async def _resolve_pair(client: ProductSource, first: str, second: str) -> tuple[ProductRecord, ProductRecord]:
    """Resolve both products concurrently.

    A failing lookup cancels the other one; its error is raised as is,
    preferring an OFFError over anything else in the group.
    """
    try:
        async with asyncio.TaskGroup() as tg:
            first_task = tg.create_task(resolve_product(client, first))
            second_task = tg.create_task(resolve_product(client, second))
    except ExceptionGroup as group:
        errors = [e for e in group.exceptions if isinstance(e, OFFError)] or list(group.exceptions)
        raise errors[0] from None
    return first_task.result(), second_task.result()


async def compare_products(
    name_or_barcode_1: str, name_or_barcode_2: str, *, client: ProductSource, sampler: Sampler
) -> str:
    first, second = await _resolve_pair(client, name_or_barcode_1, name_or_barcode_2)
    request = SamplingRequest(
        messages=(
            PROMPTS["product_comparison"].format(
                product1_json=_product_json(first),
                product2_json=_product_json(second),
            ),
        ),
        system_prompt=PROMPTS["product_comparison_system"],
        model_hints=Config.ANALYSIS_MODEL_HINTS,
        intelligence_priority=0.9,
        speed_priority=0.5,
        cost_priority=0.4,
        temperature=0.2,
        max_tokens=2000,
        stop_sequences=("[END]",),
    )
    try:
        comparison = await sampler.complete(request)
    except SamplingFailed as e:
        logger.warning("Product comparison fell back to a basic table: %s", e.message)
        return comparison_table(first, second)
    return comparison_header(first, second) + comparison


# =============================================================================
# suggestRecipes
# =============================================================================


def _unknown(value: float | None) -> str:
    return "unknown" if value is None else f"{value:g}"


async def suggest_recipes(name_or_barcode: str, *, client: ProductSource, sampler: Sampler) -> str:
    product = await resolve_product(client, name_or_barcode)
    facts = product.nutrition_facts
    request = SamplingRequest(
        messages=(
            PROMPTS["recipe_suggestions"].format(
                name=product.name,
                brand=product.brand,
                energy=_unknown(facts.energy),
                fat=_unknown(facts.fat),
                proteins=_unknown(facts.proteins),
                carbohydrates=_unknown(facts.carbohydrates),
                categories=product.categories or "food item",
                ingredients=product.ingredients,
                allergens=", ".join(product.allergens),
            ),
        ),
        system_prompt=PROMPTS["recipe_suggestions_system"],
        model_hints=Config.RECIPE_MODEL_HINTS,
        intelligence_priority=0.8,
        speed_priority=0.5,
        temperature=0.7,
        max_tokens=3500,
    )
    recipes = await sampler.complete(request)
    return f"Recipe suggestions using {product.name}:\n\n{recipes}"


TOOLS = [
    ToolSpec(
        name="analyzeProduct",
        title="Analyze product",
        description="Get an AI-generated nutritional analysis of a product (uses the client's LLM via sampling)",
        category="analysis",
        handler=analyze_product,
        fields=(NAME_OR_BARCODE,),
        dependencies=("client", "sampler"),
    ),
    ToolSpec(
        name="compareProducts",
        title="Compare products",
        description="Compare two products side by side and find the healthier option (uses sampling)",
        category="analysis",
        handler=compare_products,
        fields=(
            FieldSpec(
                "nameOrBarcode1", "string", "First product name or barcode", required=True, param="name_or_barcode_1"
            ),
            FieldSpec(
                "nameOrBarcode2", "string", "Second product name or barcode", required=True, param="name_or_barcode_2"
            ),
        ),
        dependencies=("client", "sampler"),
    ),
    ToolSpec(
        name="suggestRecipes",
        title="Suggest recipes",
        description="Suggest four recipes using a product: low-calorie, protein-rich, quick and family-friendly",
        category="analysis",
        handler=suggest_recipes,
        fields=(NAME_OR_BARCODE,),
        dependencies=("client", "sampler"),
    ),
]
