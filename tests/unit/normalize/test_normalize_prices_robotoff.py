"""Tests for Open Prices and Robotoff normalization."""

from offmcp.normalize import normalize_insight, normalize_price, normalize_price_page, normalize_question


class TestPrices:
    def test_price(self):
        price = normalize_price(
            {
                "product_code": "3017620422003",
                "price": "3.49",
                "currency": "EUR",
                "location": {"osm_display_name": "Carrefour, Paris"},
                "location_id": 12,
                "date": "2024-05-01",
                "proof_id": 99,
            }
        ).dump()
        assert price["price"] == 3.49
        assert price["locationName"] == "Carrefour, Paris"
        assert price["locationId"] == 12
        assert price["proofId"] == 99

    def test_price_without_location(self):
        assert normalize_price({"price": 1}).location_name == "Unknown location"

    def test_page_uses_total(self):
        page = normalize_price_page(
            {"items": [{"price": 1.0}], "total": 42}, page=1, page_size=20, empty_message="none"
        )
        assert page.count == 42
        assert page.message is None

    def test_empty_page_has_message(self):
        page = normalize_price_page({"items": []}, page=3, page_size=20, empty_message="No price data")
        assert page.prices == []
        assert page.count == 0
        assert page.page == 3
        assert page.message == "No price data"


class TestRobotoff:
    def test_question(self):
        question = normalize_question(
            {
                "barcode": "3017620422003",
                "type": "add-binary",
                "value": "Organic",
                "question": "Does the product have this label?",
                "insight_id": "abc",
                "insight_type": "label",
                "source_image_url": "https://images.test/1.jpg",
            }
        ).dump()
        assert question["insightType"] == "label"
        assert question["imageUrl"] == "https://images.test/1.jpg"

    def test_insight_defaults(self):
        insight = normalize_insight({"id": "i1", "type": "category"})
        assert insight.confidence == 0
        assert insight.predictor == ""
        assert insight.value_tag is None
