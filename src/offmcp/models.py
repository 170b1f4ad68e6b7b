"""Canonical records returned by the Open Food Facts tools.

Every record serializes with camelCase keys (``model_dump(by_alias=True)``)
so tool output keeps the field names MCP clients already know.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Base for all canonical records."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def dump(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# =============================================================================
# Products
# =============================================================================


class NutritionFacts(Record):
    """Nutrients per 100g/100ml. None means the value is not available."""

    energy: float | None = None
    fat: float | None = None
    saturated_fat: float | None = None
    carbohydrates: float | None = None
    sugars: float | None = None
    fiber: float | None = None
    proteins: float | None = None
    salt: float | None = None


class ProductRecord(Record):
    id: str
    barcode: str
    name: str = "Unknown product"
    brand: str = "Unknown brand"
    image_url: str = ""
    ingredients: str = ""
    allergens_text: str = ""
    allergens_tags: list[str] = Field(default_factory=list)
    allergens: list[str] = Field(default_factory=list)
    traces_tags: list[str] = Field(default_factory=list)
    traces: list[str] = Field(default_factory=list)
    nutriscore_grade: str = "unknown"
    nutriscore_score: float | None = None
    ecoscore_grade: str = "unknown"
    ecoscore_score: float | None = None
    nova_group: int = 0
    additives_tags: list[str] = Field(default_factory=list)
    categories: str = ""
    countries: str = ""
    labels: str = ""
    packaging: str = ""
    origins: str = ""
    nutrition_facts: NutritionFacts = Field(default_factory=NutritionFacts)


class SearchProduct(Record):
    id: str
    name: str = "Unknown product"
    brand: str = "Unknown brand"
    barcode: str = ""
    image_url: str = ""
    nutri_score: str = "UNKNOWN"
    eco_score: str = "UNKNOWN"
    nova_group: int = 0
    categories: str = ""
    ingredients: str = ""


SearchSource = Literal["catalog", "facet", "search-a-licious", "legacy"]


class SearchResultPage(Record):
    products: list[SearchProduct]
    count: int
    page: int
    page_size: int
    page_count: int
    source: SearchSource = "catalog"
    degraded: bool = False


# =============================================================================
# Nutrition
# =============================================================================


class NutriScoreResult(Record):
    barcode: str
    product_name: str
    brand: str
    nutri_score_grade: str
    nutri_score_score: float | None
    explanation: str


class EcoScoreResult(Record):
    barcode: str
    product_name: str
    brand: str
    eco_score_grade: str
    eco_score_score: float | None
    packaging: str
    origins: str
    explanation: str


class Additive(Record):
    tag: str
    name: str


class AdditivesResult(Record):
    barcode: str
    product_name: str
    additives: list[Additive]
    count: int
    nova_group: int
    nova_explanation: str


class AllergenCheckResult(Record):
    barcode: str
    product_name: str
    allergen_checked: str
    allergen_found: bool
    found_in_ingredients: bool
    found_in_traces: bool
    all_allergens: list[str]
    allergens_tags: list[str]
    traces: list[str]
    message: str


class AllergenStatus(Record):
    allergen: str
    found: bool
    in_traces: bool


class MultiAllergenResult(Record):
    barcode: str
    product_name: str
    check_results: list[AllergenStatus]
    safe_to_consume: bool
    all_allergens: list[str]
    traces: list[str]
    message: str


# =============================================================================
# Open Prices
# =============================================================================


class PriceRecord(Record):
    product_code: str | None = None
    price: float | None = None
    currency: str | None = None
    location_name: str = "Unknown location"
    location_id: int | None = None
    date: str | None = None
    proof_id: int | None = None


class PricePage(Record):
    prices: list[PriceRecord]
    count: int
    page: int
    page_size: int
    message: str | None = None


# =============================================================================
# Robotoff
# =============================================================================


class QuestionRecord(Record):
    barcode: str | None = None
    type: str | None = None
    value: str | None = None
    question: str | None = None
    insight_id: str | None = None
    insight_type: str | None = None
    image_url: str = ""


class InsightRecord(Record):
    id: str | None = None
    barcode: str | None = None
    type: str | None = None
    value: str | None = None
    value_tag: str | None = None
    confidence: float = 0
    latest_event: str = ""
    predictor: str = ""


class QuestionsResult(Record):
    status: str
    questions: list[QuestionRecord]
    count: int
    message: str | None = None


class InsightsResult(Record):
    status: str
    insights: list[InsightRecord]
    count: int
    message: str | None = None
