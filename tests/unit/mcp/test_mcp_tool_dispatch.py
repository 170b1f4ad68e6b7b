"""Tests for MCP tool dispatch."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from offmcp.mcp.registry import FieldSpec, ToolRegistry, ToolSpec
from offmcp.mcp_tool_dispatch import dispatch_tool_call
from offmcp.utils.errors import UpstreamUnavailable
from tests.constants import NUTELLA_BARCODE


@pytest.mark.asyncio
async def test_dispatch_json_result(registry):
    """Dict results are returned as indented JSON text."""
    result = await dispatch_tool_call(registry, "getNutriScore", {"nameOrBarcode": NUTELLA_BARCODE})
    assert result.status == "success"
    assert not result.is_error
    data = json.loads(result.contents[0].text)
    assert data["nutriScoreGrade"] == "E"
    assert result.contents[0].text.startswith("{\n  ")


@pytest.mark.asyncio
async def test_dispatch_text_result(registry):
    """String results (analysis tools) are passed through unchanged."""
    result = await dispatch_tool_call(registry, "suggestRecipes", {"nameOrBarcode": NUTELLA_BARCODE})
    assert result.status == "success"
    assert result.contents[0].text == "Recipe suggestions using Nutella:\n\nLooks balanced."


@pytest.mark.asyncio
async def test_dispatch_injects_dependencies(registry, mock_client):
    await dispatch_tool_call(registry, "searchByBrand", {"brand": "Ferrero", "page": 2})
    mock_client.brand_search.assert_awaited_once_with("ferrero", 2)


@pytest.mark.asyncio
async def test_dispatch_without_dependencies(registry):
    result = await dispatch_tool_call(registry, "getInsightTypes", None)
    assert json.loads(result.contents[0].text)["count"] == 10


@pytest.mark.asyncio
async def test_dispatch_unknown_tool(registry):
    result = await dispatch_tool_call(registry, "getMealPlan", {})
    assert result.status == "error"
    assert "Unknown tool" in result.error_message
    data = json.loads(result.contents[0].text)
    assert data["error"] == "UNKNOWN_TOOL"
    assert "searchProducts" in data["message"]


@pytest.mark.asyncio
async def test_dispatch_invalid_arguments(registry, mock_client):
    result = await dispatch_tool_call(registry, "getAllergenCheck", {"nameOrBarcode": NUTELLA_BARCODE})
    data = json.loads(result.contents[0].text)
    assert result.status == "error"
    assert data["error"] == "INVALID_ARGUMENT"
    assert data["tool"] == "getAllergenCheck"
    assert data["arguments"] == {"nameOrBarcode": NUTELLA_BARCODE}
    mock_client.fetch_product.assert_not_awaited()


@pytest.mark.asyncio
async def test_dispatch_bad_enum(registry):
    result = await dispatch_tool_call(registry, "autocomplete", {"query": "x", "taxonomyType": "planets"})
    assert json.loads(result.contents[0].text)["error"] == "INVALID_ARGUMENT"


@pytest.mark.asyncio
async def test_dispatch_not_found(registry, mock_client):
    mock_client.text_search = AsyncMock(return_value={"products": []})
    result = await dispatch_tool_call(registry, "getEcoScore", {"nameOrBarcode": "unicorn"})
    assert result.status == "not_found"
    assert result.is_error
    data = json.loads(result.contents[0].text)
    assert data["error"] == "NOT_FOUND"
    assert "searchProducts" in data["message"]


@pytest.mark.asyncio
async def test_dispatch_upstream_failure(registry, mock_client):
    mock_client.prices = AsyncMock(side_effect=UpstreamUnavailable("prices", "prices returned HTTP 502", 502))
    result = await dispatch_tool_call(registry, "getRecentPrices", {})
    data = json.loads(result.contents[0].text)
    assert data["error"] == "UPSTREAM_UNAVAILABLE"
    assert data["status_code"] == 502
    assert data["call_id"]


@pytest.mark.asyncio
async def test_dispatch_unexpected_error_is_masked():
    async def broken(**kwargs):
        raise RuntimeError("database password is hunter2")

    registry = ToolRegistry.from_specs(
        [ToolSpec(name="broken", description="", handler=broken, fields=(FieldSpec("x"),), dependencies=())]
    )
    result = await dispatch_tool_call(registry, "broken", {"x": "1"})
    data = json.loads(result.contents[0].text)
    assert data["error"] == "INTERNAL_ERROR"
    assert "hunter2" not in result.contents[0].text


@pytest.mark.asyncio
async def test_dispatch_without_container():
    async def needs_client(*, client):
        return {}

    registry = ToolRegistry.from_specs([ToolSpec(name="lonely", description="", handler=needs_client)])
    result = await dispatch_tool_call(registry, "lonely", {})
    assert json.loads(result.contents[0].text)["error"] == "INTERNAL_ERROR"
