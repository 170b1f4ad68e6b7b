"""Tests for product and search-page normalization."""

from offmcp.normalize import (
    additive_name,
    humanize_tag,
    normalize_grade,
    normalize_nova,
    normalize_product,
    normalize_search_page,
    page_count,
    product_as_search_product,
    slugify,
)
from tests.constants import NUTELLA_BARCODE, SAMPLE_PRODUCT, SEARCH_RESPONSE


class TestScalarHelpers:
    def test_grades(self):
        assert normalize_grade("A") == "a"
        assert normalize_grade(" e ") == "e"
        assert normalize_grade("not-applicable") == "unknown"
        assert normalize_grade(None) == "unknown"
        assert normalize_grade(3) == "unknown"

    def test_nova(self):
        assert normalize_nova(4) == 4
        assert normalize_nova("2") == 2
        assert normalize_nova(7) == 0
        assert normalize_nova(None) == 0
        assert normalize_nova("n/a") == 0

    def test_humanize_tag(self):
        assert humanize_tag("en:soy-lecithin") == "soy lecithin"
        assert humanize_tag("fr:lait") == "lait"
        assert humanize_tag("gluten") == "gluten"

    def test_additive_name(self):
        assert additive_name("en:e322i") == "E322I"
        assert additive_name("en:e150d") == "E150D"
        assert additive_name("en:lecithins") == "LECITHINS"

    def test_slugify(self):
        assert slugify("  Plant Based   Foods ") == "plant-based-foods"
        assert slugify("snacks") == "snacks"

    def test_page_count(self):
        assert page_count(23, 10) == 3
        assert page_count(20, 10) == 2
        assert page_count(0, 10) == 0
        assert page_count(5, 0) == 0


class TestNormalizeProduct:
    def test_full_product(self):
        product = normalize_product(SAMPLE_PRODUCT)
        assert product.barcode == NUTELLA_BARCODE
        assert product.name == "Nutella"
        assert product.brand == "Ferrero"
        assert product.nutriscore_grade == "e"
        assert product.nova_group == 4
        assert product.allergens == ["milk", "nuts", "soybeans"]
        assert product.additives_tags == ["en:e322", "en:e322i"]
        assert product.nutrition_facts.energy == 539
        assert product.nutrition_facts.fiber is None

    def test_sparse_product_uses_defaults(self):
        product = normalize_product({}, barcode="12345678")
        assert product.barcode == "12345678"
        assert product.name == "Unknown product"
        assert product.brand == "Unknown brand"
        assert product.nutriscore_grade == "unknown"
        assert product.nova_group == 0
        assert product.allergens == []
        assert product.nutrition_facts.energy is None

    def test_wrong_types_are_tolerated(self):
        product = normalize_product(
            {
                "code": NUTELLA_BARCODE,
                "allergens_tags": "en:milk",
                "nutriments": ["not", "a", "dict"],
                "nova_group": "four",
                "brands": ["Ferrero", "Nutella"],
            }
        )
        assert product.allergens_tags == []
        assert product.nutrition_facts.fat is None
        assert product.nova_group == 0
        assert product.brand == "Ferrero, Nutella"

    def test_allergens_merge_hierarchy_without_duplicates(self):
        product = normalize_product(
            {
                "code": NUTELLA_BARCODE,
                "allergens_tags": ["en:milk"],
                "allergens_hierarchy": ["en:milk", "en:gluten"],
                "traces_tags": ["en:peanuts"],
            }
        )
        assert product.allergens_tags == ["en:milk", "en:gluten"]
        assert product.traces == ["peanuts"]

    def test_front_image_preferred(self):
        raw = dict(SAMPLE_PRODUCT)
        raw["selected_images"] = {"front": {"display": {"en": "https://images.test/front.jpg"}}}
        assert normalize_product(raw).image_url == "https://images.test/front.jpg"

    def test_additives_fall_back_to_original_tags(self):
        product = normalize_product({"code": NUTELLA_BARCODE, "additives_original_tags": ["en:e330"]})
        assert product.additives_tags == ["en:e330"]

    def test_camel_case_dump(self):
        dumped = normalize_product(SAMPLE_PRODUCT).dump()
        assert dumped["nutriscoreGrade"] == "e"
        assert dumped["nutritionFacts"]["saturatedFat"] == 10.6
        assert "allergensTags" in dumped


class TestNormalizeSearchPage:
    def test_catalog_page(self):
        page = normalize_search_page(SEARCH_RESPONSE, page=1, page_size=10, source="catalog")
        assert page.count == 23
        assert page.page_count == 3
        assert page.source == "catalog"
        assert page.degraded is False
        assert [p.barcode for p in page.products] == [NUTELLA_BARCODE, "8000500310427"]
        assert page.products[0].nutri_score == "E"
        assert page.products[1].eco_score == "UNKNOWN"

    def test_paging_is_local_unless_trusted(self):
        data = {"count": 50, "page": 4, "page_size": 25, "products": []}
        local = normalize_search_page(data, page=2, page_size=10, source="facet")
        assert (local.page, local.page_size, local.page_count) == (2, 10, 5)

    def test_trusted_paging(self):
        data = {"count": 50, "page": 2, "page_size": 25, "page_count": 2, "hits": [{"code": "12345678"}]}
        page = normalize_search_page(
            data, page=1, page_size=10, source="search-a-licious", products_key="hits", trust_upstream_paging=True
        )
        assert (page.page, page.page_size, page.page_count) == (2, 25, 2)
        assert page.products[0].barcode == "12345678"

    def test_skips_non_object_entries(self):
        raw = {"count": 2, "products": [None, "x", {"code": "12345678"}]}
        page = normalize_search_page(raw, page=1, page_size=10, source="catalog")
        assert len(page.products) == 1

    def test_product_as_search_product(self):
        item = product_as_search_product(normalize_product(SAMPLE_PRODUCT))
        assert item.barcode == NUTELLA_BARCODE
        assert item.nutri_score == "E"
        assert item.nova_group == 4
