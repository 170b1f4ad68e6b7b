"""Nutri-Score, Eco-Score, additives and allergen tools.

Every tool here accepts a barcode or a product name and goes through
``resolve_product``.
"""

from typing import Any

from offmcp.mcp.protocols import ProductSource
from offmcp.mcp.registry import FieldSpec, ToolSpec
from offmcp.normalize import additives_info, check_allergen, check_multiple_allergens, eco_score, nutri_score
from offmcp.tools.resolver import resolve_product

NAME_OR_BARCODE = FieldSpec("nameOrBarcode", "string", "Product name or barcode (EAN/UPC)", required=True)


async def get_nutri_score(name_or_barcode: str, *, client: ProductSource) -> dict[str, Any]:
    product = await resolve_product(client, name_or_barcode)
    return nutri_score(product).dump()


async def get_eco_score(name_or_barcode: str, *, client: ProductSource) -> dict[str, Any]:
    product = await resolve_product(client, name_or_barcode)
    return eco_score(product).dump()


async def get_additives_info(name_or_barcode: str, *, client: ProductSource) -> dict[str, Any]:
    product = await resolve_product(client, name_or_barcode)
    return additives_info(product).dump()


async def get_allergen_check(name_or_barcode: str, allergen: str, *, client: ProductSource) -> dict[str, Any]:
    product = await resolve_product(client, name_or_barcode)
    return check_allergen(product, allergen).dump()


async def check_allergens(name_or_barcode: str, allergens: list[str], *, client: ProductSource) -> dict[str, Any]:
    product = await resolve_product(client, name_or_barcode)
    return check_multiple_allergens(product, allergens).dump()


TOOLS = [
    ToolSpec(
        name="getNutriScore",
        title="Get Nutri-Score",
        description="Get the Nutri-Score (A-E nutritional quality grade) of a product with an explanation",
        category="nutrition",
        handler=get_nutri_score,
        fields=(NAME_OR_BARCODE,),
    ),
    ToolSpec(
        name="getEcoScore",
        title="Get Eco-Score",
        description="Get the Eco-Score (A-E environmental impact grade) of a product with packaging and origins",
        category="nutrition",
        handler=get_eco_score,
        fields=(NAME_OR_BARCODE,),
    ),
    ToolSpec(
        name="getAdditivesInfo",
        title="Get additives",
        description="List the food additives (E-numbers) of a product and its NOVA processing group",
        category="nutrition",
        handler=get_additives_info,
        fields=(NAME_OR_BARCODE,),
    ),
    ToolSpec(
        name="getAllergenCheck",
        title="Check allergen",
        description="Check whether a product contains a specific allergen, including traces",
        category="nutrition",
        handler=get_allergen_check,
        fields=(
            NAME_OR_BARCODE,
            FieldSpec(
                "allergen",
                "string",
                'Allergen to check for (e.g., "gluten", "milk", "eggs", "nuts", "peanuts", "soy", "fish")',
                required=True,
            ),
        ),
    ),
    ToolSpec(
        name="checkMultipleAllergens",
        title="Check multiple allergens",
        description="Check a product against several allergens at once and report whether it is safe to consume",
        category="nutrition",
        handler=check_allergens,
        fields=(
            NAME_OR_BARCODE,
            FieldSpec(
                "allergens",
                "array",
                'List of allergens to check (e.g., ["gluten", "milk", "eggs"])',
                required=True,
                items="string",
            ),
        ),
    ),
]
