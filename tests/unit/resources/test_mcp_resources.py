"""Tests for MCP resource and prompt listings."""

import pytest

from offmcp.mcp_resources import get_prompts, get_resource_templates, get_resources, render_prompt
from offmcp.utils.errors import InvalidArgument, NotFound


class TestResources:
    def test_resources(self):
        resources = {str(r.uri): r for r in get_resources()}
        assert "openfoodfacts://help" in resources
        assert "openfoodfacts://taxonomy/categories" in resources
        assert resources["openfoodfacts://info"].mimeType == "application/json"
        assert resources["openfoodfacts://nova-guide"].title == "NOVA Processing Guide"

    def test_template(self):
        (template,) = get_resource_templates()
        assert template.uriTemplate == "openfoodfacts://taxonomy/{type}"
        assert "allergens" in template.description


class TestPrompts:
    def test_prompt_listing(self):
        prompts = {p.name: p for p in get_prompts()}
        assert set(prompts) == {
            "analyze-product",
            "compare-products",
            "find-healthy-alternatives",
            "check-allergens",
            "whats-for-dinner",
            "check-additives",
        }
        assert [a.name for a in prompts["compare-products"].arguments] == ["product1", "product2"]
        assert all(a.required for a in prompts["check-allergens"].arguments)

    def test_render(self):
        result = render_prompt("check-allergens", {"product": "Nutella", "allergens": "milk, nuts"})
        text = result.messages[0].content.text
        assert result.messages[0].role == "user"
        assert '"Nutella"' in text
        assert "milk, nuts" in text

    def test_render_check_additives(self):
        text = render_prompt("check-additives", {"barcode": "3017620422003"}).messages[0].content.text
        assert "3017620422003" in text

    def test_missing_argument(self):
        with pytest.raises(InvalidArgument, match="product2"):
            render_prompt("compare-products", {"product1": "Nutella"})

    def test_blank_argument(self):
        with pytest.raises(InvalidArgument):
            render_prompt("whats-for-dinner", {"product": "  "})

    def test_unknown_prompt(self):
        with pytest.raises(NotFound):
            render_prompt("plan-my-week", {})
