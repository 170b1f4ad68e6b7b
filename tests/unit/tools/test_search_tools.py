"""Tests for category, brand, advanced search and autocomplete tools."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from offmcp.tools.categories import (
    advanced_search,
    autocomplete,
    build_search_query,
    search_by_brand,
    search_by_category,
)
from offmcp.utils.errors import InvalidArgument, UpstreamUnavailable
from tests.constants import CATALOG_URL, SEARCH_RESPONSE, SEARCH_URL

NO_FILTERS = {
    "category": None,
    "brand": None,
    "nutriscore_grade": None,
    "ecoscore_grade": None,
    "nova_group": None,
    "allergen_free": None,
    "labels": None,
    "countries": None,
    "sort_by": None,
}


class TestFacetSearch:
    @pytest.mark.asyncio
    async def test_category_is_slugified(self, upstream, respx_mock):
        route = respx_mock.get(f"{CATALOG_URL}/category/breakfast-cereals/2.json").mock(
            return_value=httpx.Response(200, json=SEARCH_RESPONSE)
        )
        result = await search_by_category("Breakfast Cereals", 2, 10, client=upstream)
        assert route.called
        assert result["source"] == "facet"
        assert result["page"] == 2
        assert len(result["products"]) == 2

    @pytest.mark.asyncio
    async def test_brand(self, mock_client):
        await search_by_brand("Ferrero", 1, 10, client=mock_client)
        mock_client.brand_search.assert_awaited_once_with("ferrero", 1)

    @pytest.mark.asyncio
    async def test_blank_category(self, mock_client):
        with pytest.raises(InvalidArgument):
            await search_by_category("  ", 1, 10, client=mock_client)


class TestBuildSearchQuery:
    def test_all_filters(self):
        query = build_search_query(
            "yogurt",
            category="dairies",
            brand="Danone",
            nutriscore_grade="a",
            ecoscore_grade="b",
            nova_group="1",
            allergen_free="gluten",
            labels="organic",
            countries="france",
        )
        assert query == (
            'yogurt categories_tags:"en:dairies" brands:"Danone" nutriscore_grade:a ecoscore_grade:b '
            'nova_group:1 labels_tags:"en:organic" countries_tags:"en:france" -allergens_tags:"en:gluten"'
        )

    def test_empty(self):
        assert build_search_query() == ""


class TestAdvancedSearch:
    """Tests for advanced_search and its legacy fallback."""

    @pytest.mark.asyncio
    async def test_primary_backend(self, upstream, respx_mock):
        route = respx_mock.get(f"{SEARCH_URL}/search").mock(
            return_value=httpx.Response(
                200,
                json={
                    "hits": [{"code": "3017620422003", "product_name": "Nutella", "nutriscore_grade": "e"}],
                    "count": 40,
                    "page": 1,
                    "page_size": 20,
                    "page_count": 2,
                },
            )
        )
        filters = dict(NO_FILTERS, nutriscore_grade="e", sort_by="popularity")
        result = await advanced_search("spread", **filters, page=1, page_size=20, client=upstream)

        assert result["source"] == "search-a-licious"
        assert result["degraded"] is False
        assert result["pageCount"] == 2
        params = route.calls.last.request.url.params
        assert params["q"] == "spread nutriscore_grade:e"
        assert params["sort_by"] == "popularity"

    @pytest.mark.asyncio
    async def test_no_filters_searches_everything(self, mock_client):
        await advanced_search(None, **NO_FILTERS, page=1, page_size=10, client=mock_client)
        mock_client.advanced_search.assert_awaited_once_with("*", 1, 10, None)

    @pytest.mark.asyncio
    async def test_error_payload_falls_back_to_text_search(self, upstream, respx_mock):
        respx_mock.get(f"{SEARCH_URL}/search").mock(
            return_value=httpx.Response(200, json={"errors": [{"title": "bad query"}]})
        )
        legacy = respx_mock.get(f"{CATALOG_URL}/cgi/search.pl").mock(
            return_value=httpx.Response(200, json=SEARCH_RESPONSE)
        )
        filters = dict(NO_FILTERS, allergen_free="milk", brand="Ferrero")

        with patch("offmcp.mcp.strategy.record_search_fallback") as record:
            result = await advanced_search("chocolate", **filters, page=1, page_size=10, client=upstream)

        assert result["degraded"] is True
        assert result["source"] == "legacy"
        assert result["count"] == 23
        # Only the free text reaches the legacy backend
        assert legacy.calls.last.request.url.params["search_terms"] == "chocolate"
        record.assert_called_once_with("malformed")

    @pytest.mark.asyncio
    async def test_unavailable_falls_back(self, mock_client):
        mock_client.advanced_search = AsyncMock(side_effect=UpstreamUnavailable("search", "HTTP 502", 502))
        mock_client.text_search = AsyncMock(return_value={"count": 0, "products": []})

        result = await advanced_search(None, **NO_FILTERS, page=3, page_size=10, client=mock_client)

        assert result["degraded"] is True
        mock_client.text_search.assert_awaited_once_with("", 3, 10)

    @pytest.mark.asyncio
    async def test_fallback_failure_propagates(self, mock_client):
        mock_client.advanced_search = AsyncMock(side_effect=UpstreamUnavailable("search", "down"))
        mock_client.text_search = AsyncMock(side_effect=UpstreamUnavailable("catalog", "down too"))
        with pytest.raises(UpstreamUnavailable, match="down too"):
            await advanced_search("x", **NO_FILTERS, page=1, page_size=10, client=mock_client)


class TestAutocomplete:
    @pytest.mark.asyncio
    async def test_passes_through_options(self, mock_client):
        mock_client.autocomplete = AsyncMock(return_value={"options": [{"id": "en:organic", "text": "Organic"}]})
        result = await autocomplete("org", "labels", "en", 5, client=mock_client)
        assert result["options"][0]["text"] == "Organic"
        mock_client.autocomplete.assert_awaited_once_with("org", "labels", "en", 5)
