"""Tests for the primary/fallback strategy."""

from unittest.mock import AsyncMock, patch

import pytest

from offmcp.mcp.strategy import FallbackStrategy, fallback_reason
from offmcp.utils.errors import InvalidArgument, UpstreamMalformed, UpstreamUnavailable


class TestFallbackStrategy:
    @pytest.mark.asyncio
    async def test_primary_success(self):
        fallback = AsyncMock(return_value="legacy")
        outcome = await FallbackStrategy("search", AsyncMock(return_value="primary"), fallback).run()
        assert outcome.value == "primary"
        assert outcome.degraded is False
        assert outcome.reason is None
        fallback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_upstream_error_uses_fallback_once(self):
        fallback = AsyncMock(return_value="legacy")
        primary = AsyncMock(side_effect=UpstreamUnavailable("search", "HTTP 503", 503))

        with patch("offmcp.mcp.strategy.record_search_fallback") as record:
            outcome = await FallbackStrategy("search", primary, fallback).run()

        assert outcome.value == "legacy"
        assert outcome.degraded is True
        assert outcome.reason == "unavailable"
        fallback.assert_awaited_once()
        record.assert_called_once_with("unavailable")

    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self):
        fallback = AsyncMock(return_value="legacy")
        primary = AsyncMock(side_effect=InvalidArgument("bad"))
        with pytest.raises(InvalidArgument):
            await FallbackStrategy("search", primary, fallback).run()
        fallback.assert_not_awaited()


def test_fallback_reason():
    assert fallback_reason(UpstreamMalformed("search", "errors")) == "malformed"
    assert fallback_reason(UpstreamUnavailable("search", "down")) == "unavailable"
