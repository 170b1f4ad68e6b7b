"""Tests for Open Prices tools."""

from unittest.mock import AsyncMock

import httpx
import pytest

from offmcp.tools.prices import NO_MATCHING_PRICES, get_product_prices, get_recent_prices, search_prices
from offmcp.utils.errors import InvalidArgument
from tests.constants import NUTELLA_BARCODE, PRICES_URL

PRICE_ITEM = {
    "product_code": NUTELLA_BARCODE,
    "price": 4.15,
    "currency": "EUR",
    "location": {"osm_display_name": "Lidl, Berlin"},
    "location_id": 3,
    "date": "2024-06-10",
    "proof_id": 7,
}


class TestProductPrices:
    @pytest.mark.asyncio
    async def test_prices_found(self, upstream, respx_mock):
        route = respx_mock.get(f"{PRICES_URL}/prices").mock(
            return_value=httpx.Response(200, json={"items": [PRICE_ITEM], "total": 1, "page": 1, "size": 20})
        )
        result = await get_product_prices(NUTELLA_BARCODE, 1, 20, client=upstream)

        assert result["count"] == 1
        assert result["prices"][0]["locationName"] == "Lidl, Berlin"
        assert result["message"] is None
        params = route.calls.last.request.url.params
        assert params["product_code"] == NUTELLA_BARCODE
        assert params["order_by"] == "-date"

    @pytest.mark.asyncio
    async def test_no_prices(self, mock_client):
        result = await get_product_prices(NUTELLA_BARCODE, 1, 20, client=mock_client)
        assert result["prices"] == []
        assert result["message"].startswith(f"No price data available for product {NUTELLA_BARCODE}")

    @pytest.mark.asyncio
    async def test_invalid_barcode(self, mock_client):
        with pytest.raises(InvalidArgument):
            await get_product_prices("not-a-code", 1, 20, client=mock_client)
        mock_client.prices.assert_not_awaited()


class TestSearchPrices:
    @pytest.mark.asyncio
    async def test_filters_are_forwarded(self, mock_client):
        result = await search_prices(
            None, "EUR", "Germany", 123456, "NODE", "price", 2, 50, client=mock_client
        )
        mock_client.prices.assert_awaited_once_with(
            product_code=None,
            currency="EUR",
            country="Germany",
            location_osm_id=123456,
            location_osm_type="NODE",
            order_by="price",
            page=2,
            size=50,
        )
        assert result["message"] == NO_MATCHING_PRICES

    @pytest.mark.asyncio
    async def test_recent_prices(self, mock_client):
        mock_client.prices = AsyncMock(return_value={"items": [PRICE_ITEM, PRICE_ITEM]})
        result = await get_recent_prices(1, 20, client=mock_client)
        assert result["count"] == 2
        assert mock_client.prices.call_args.kwargs["order_by"] == "-date"
