"""Tests for Nutri-Score, Eco-Score, additives and allergen tools."""

from unittest.mock import AsyncMock

import pytest

from offmcp.tools.nutrition import (
    check_allergens,
    get_additives_info,
    get_allergen_check,
    get_eco_score,
    get_nutri_score,
)
from offmcp.utils.errors import NotFound
from tests.constants import NUTELLA_BARCODE


class TestNutritionTools:
    """Each tool resolves the product, then renders a view of it."""

    @pytest.mark.asyncio
    async def test_nutri_score_by_barcode(self, mock_client):
        result = await get_nutri_score(NUTELLA_BARCODE, client=mock_client)
        assert result["nutriScoreGrade"] == "E"
        assert result["productName"] == "Nutella"

    @pytest.mark.asyncio
    async def test_nutri_score_by_name(self, mock_client):
        result = await get_nutri_score("nutella", client=mock_client)
        assert result["barcode"] == NUTELLA_BARCODE
        mock_client.text_search.assert_awaited_once_with("nutella", 1, 1)

    @pytest.mark.asyncio
    async def test_eco_score(self, mock_client):
        result = await get_eco_score(NUTELLA_BARCODE, client=mock_client)
        assert result["ecoScoreGrade"] == "D"
        assert result["origins"] == "Not specified"

    @pytest.mark.asyncio
    async def test_additives(self, mock_client):
        result = await get_additives_info(NUTELLA_BARCODE, client=mock_client)
        assert result["count"] == 2
        assert result["novaGroup"] == 4

    @pytest.mark.asyncio
    async def test_single_allergen(self, mock_client):
        result = await get_allergen_check(NUTELLA_BARCODE, "nuts", client=mock_client)
        assert result["allergenFound"] is True
        assert result["allergenChecked"] == "nuts"

    @pytest.mark.asyncio
    async def test_multiple_allergens(self, mock_client):
        result = await check_allergens(NUTELLA_BARCODE, ["gluten", "soy"], client=mock_client)
        assert result["safeToConsume"] is False
        statuses = {r["allergen"]: r["found"] for r in result["checkResults"]}
        assert statuses == {"gluten": False, "soy": True}

    @pytest.mark.asyncio
    async def test_unresolvable_product(self, mock_client):
        mock_client.text_search = AsyncMock(return_value={"products": []})
        with pytest.raises(NotFound):
            await get_nutri_score("does not exist", client=mock_client)
