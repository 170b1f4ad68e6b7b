"""Pytest fixtures for Open Food Facts MCP server tests.

Note: Upstream URLs and sample payloads are centralized in
tests/constants.py. Import from there instead of hard-coding values.
"""

import logging
import os

os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("ENABLE_METRICS", "false")

from unittest.mock import AsyncMock

import pytest
from hypothesis import Verbosity, settings

from tests.constants import (  # sourcery skip: dont-import-test-modules
    CATALOG_URL,
    PRICES_URL,
    ROBOTOFF_URL,
    SAMPLE_PRODUCT,
    SEARCH_URL,
)

logger = logging.getLogger("tests.conftest")

# =============================================================================
# Hypothesis Configuration
# =============================================================================
# Register profiles for different environments
# Usage: HYPOTHESIS_PROFILE=ci pytest ...

settings.register_profile(
    "ci",
    max_examples=500,
    deadline=None,
    suppress_health_check=[],
)

settings.register_profile(
    "dev",
    max_examples=100,
    deadline=5000,
)

settings.register_profile(
    "quick",
    max_examples=10,
    deadline=1000,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)

# Load profile from environment variable, default to "dev"
_hypothesis_profile = os.environ.get("HYPOTHESIS_PROFILE", "dev")
settings.load_profile(_hypothesis_profile)


# =============================================================================
# Test Size Classification
# =============================================================================
def pytest_collection_modifyitems(config, items):
    """Auto-assign size markers based on test paths and enforce size tags."""
    size_markers = {"small", "medium", "large"}
    missing_size = []

    for item in items:
        path_str = str(item.fspath)
        if "/tests/unit/property_based/" in path_str:
            item.add_marker(pytest.mark.property)
            item.add_marker(pytest.mark.medium)
        elif "/tests/unit/server/" in path_str:
            item.add_marker(pytest.mark.large)
        elif "/tests/" in path_str:
            item.add_marker(pytest.mark.small)

        if not any(item.get_closest_marker(name) for name in size_markers):
            missing_size.append(item.nodeid)

    if missing_size:
        preview = "\n".join(missing_size[:10])
        raise pytest.UsageError(
            "All tests must be marked with a size marker (small/medium/large).\n"
            f"Missing size marker for {len(missing_size)} tests. Examples:\n{preview}"
        )


@pytest.fixture(autouse=True)
def block_httpx_network(respx_mock):
    """Block any unmocked HTTPX request; every upstream call must be mocked."""
    yield respx_mock


# =============================================================================
# Upstream fixtures
# =============================================================================
@pytest.fixture
def upstream():
    """UpstreamClient pointed at the test URLs (routes are mocked with respx)."""
    from offmcp.services.upstream import UpstreamClient

    return UpstreamClient(
        catalog_url=CATALOG_URL,
        search_url=SEARCH_URL,
        prices_url=PRICES_URL,
        robotoff_url=ROBOTOFF_URL,
        timeout=5,
    )


@pytest.fixture
def sample_product():
    """Raw ``product`` object as returned by the product API."""
    return dict(SAMPLE_PRODUCT)


@pytest.fixture
def mock_client(sample_product):
    """Mock ProductSource returning the sample product."""
    mock = AsyncMock()
    mock.fetch_product = AsyncMock(return_value=sample_product)
    mock.text_search = AsyncMock(return_value={"count": 1, "products": [{"code": sample_product["code"]}]})
    mock.category_search = AsyncMock(return_value={"count": 0, "products": []})
    mock.brand_search = AsyncMock(return_value={"count": 0, "products": []})
    mock.advanced_search = AsyncMock(return_value={"hits": [], "count": 0, "page": 1, "page_size": 10})
    mock.autocomplete = AsyncMock(return_value={"options": []})
    mock.prices = AsyncMock(return_value={"items": [], "total": 0})
    mock.questions = AsyncMock(return_value={"status": "no_questions", "questions": []})
    mock.insights = AsyncMock(return_value={"status": "found", "insights": []})
    return mock


@pytest.fixture
def mock_sampler():
    """Mock Sampler returning a canned completion."""
    mock = AsyncMock()
    mock.complete = AsyncMock(return_value="Looks balanced.")
    return mock


@pytest.fixture
def container(mock_client, mock_sampler):
    from offmcp.mcp.container import DependencyContainer

    return DependencyContainer(client=mock_client, sampler=mock_sampler)


@pytest.fixture
def registry(container):
    from offmcp.mcp.initialize import build_tool_registry

    return build_tool_registry(container)
