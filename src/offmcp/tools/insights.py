"""Robotoff tools: AI-generated questions and insights about products."""

from typing import Any

from offmcp.config import Config
from offmcp.mcp.protocols import ProductSource
from offmcp.mcp.registry import FieldSpec, ToolSpec
from offmcp.models import InsightsResult, QuestionsResult
from offmcp.normalize import normalize_insight, normalize_question
from offmcp.services.upstream import validate_barcode

INSIGHT_TYPES = {
    "label": "Detected product labels (organic, fair-trade, etc.)",
    "category": "Product category suggestions",
    "product_weight": "Detected product weight/quantity",
    "brand": "Brand name detection",
    "expiration_date": "Expiration date detection from images",
    "packaging": "Packaging material and type",
    "store": "Store/retailer information",
    "nutrient": "Nutritional value detection",
    "ingredient_spellcheck": "Ingredient spellings corrections",
    "nutrition_image": "Nutrition table image detection",
}

NO_RANDOM_QUESTIONS = "No AI questions available at this time."
NO_INSIGHTS = "No insights available matching your criteria."


def no_product_questions(barcode: str) -> str:
    return (
        f"No AI questions pending for product {barcode}. "
        "The product data may be complete or not yet analyzed."
    )


def _questions(data: dict[str, Any], empty_message: str) -> QuestionsResult:
    questions = [normalize_question(q) for q in data.get("questions") or [] if isinstance(q, dict)]
    if not questions:
        return QuestionsResult(status="no_questions", questions=[], count=0, message=empty_message)
    return QuestionsResult(status=str(data.get("status") or "found"), questions=questions, count=len(questions))


def _reported_count(data: dict[str, Any], fallback: int) -> int:
    count = data.get("count")
    if isinstance(count, int) and not isinstance(count, bool) and count > 0:
        return count
    return fallback


async def get_product_questions(barcode: str, lang: str, *, client: ProductSource) -> dict[str, Any]:
    code = validate_barcode(barcode)
    data = await client.questions(code, lang=lang, count=Config.PRODUCT_QUESTION_COUNT)
    return _questions(data, no_product_questions(code)).dump()


async def get_random_questions(
    barcode: str | None, insight_type: str | None, lang: str, count: int, *, client: ProductSource
) -> dict[str, Any]:
    data = await client.questions(barcode, insight_types=insight_type, lang=lang, count=count)
    empty = no_product_questions(barcode) if barcode else NO_RANDOM_QUESTIONS
    return _questions(data, empty).dump()


async def get_product_insights(
    barcode: str | None, insight_type: str | None, country: str | None, count: int, page: int, *, client: ProductSource
) -> dict[str, Any]:
    data = await client.insights(barcode=barcode, insight_types=insight_type, countries=country, count=count, page=page)
    insights = [normalize_insight(i) for i in data.get("insights") or [] if isinstance(i, dict)]
    if not insights:
        return InsightsResult(status="no_insights", insights=[], count=0, message=NO_INSIGHTS).dump()
    return InsightsResult(
        status=str(data.get("status") or "found"),
        insights=insights,
        count=_reported_count(data, len(insights)),
    ).dump()


async def get_insight_types() -> dict[str, Any]:
    return {
        "insightTypes": [{"type": name, "description": text} for name, text in INSIGHT_TYPES.items()],
        "count": len(INSIGHT_TYPES),
    }


INSIGHT_TYPE = FieldSpec("insightType", "string", "Filter by insight type", enum=Config.INSIGHT_TYPES)

TOOLS = [
    ToolSpec(
        name="getProductAIQuestions",
        title="Get product AI questions",
        description="Get the questions Robotoff generated about a product to help complete its data",
        category="insights",
        handler=get_product_questions,
        fields=(
            FieldSpec("barcode", "string", "Product barcode (EAN/UPC)", required=True),
            FieldSpec("lang", "string", "Language for questions", default=Config.DEFAULT_LANG),
        ),
    ),
    ToolSpec(
        name="getRandomAIQuestions",
        title="Get random AI questions",
        description="Get random Robotoff questions, optionally filtered by product or insight type",
        category="insights",
        handler=get_random_questions,
        fields=(
            FieldSpec("barcode", "string", "Filter by product barcode"),
            INSIGHT_TYPE,
            FieldSpec("lang", "string", "Language for questions", default=Config.DEFAULT_LANG),
            FieldSpec(
                "count", "integer", "Number of questions to return", default=Config.DEFAULT_QUESTION_COUNT, minimum=1
            ),
        ),
    ),
    ToolSpec(
        name="getProductInsights",
        title="Get product insights",
        description="Get unannotated Robotoff insights (detected labels, categories, brands...)",
        category="insights",
        handler=get_product_insights,
        fields=(
            FieldSpec("barcode", "string", "Filter by product barcode"),
            INSIGHT_TYPE,
            FieldSpec("country", "string", "Filter by country"),
            FieldSpec(
                "count", "integer", "Number of insights to return", default=Config.DEFAULT_QUESTION_COUNT, minimum=1
            ),
            FieldSpec("page", "integer", "Page number", default=1, minimum=1),
        ),
    ),
    ToolSpec(
        name="getInsightTypes",
        title="List insight types",
        description="List the Robotoff insight types and what each one detects",
        category="insights",
        handler=get_insight_types,
        dependencies=(),
    ),
]
