"""HTTP client for the public Open Food Facts services.

Four upstreams are used, all read-only and keyless:

- catalog:  product API, legacy text search and category/brand facets
- search:   Search-a-licious (advanced search, taxonomy autocomplete)
- prices:   Open Prices
- robotoff: Robotoff questions and insights

API docs: https://openfoodfacts.github.io/openfoodfacts-server/api/

Each method issues exactly one GET and returns the decoded JSON object.
Failures are raised as UpstreamUnavailable / UpstreamMalformed; a missing
product is NotFound. There are no retries here.
"""

import logging
import time
from typing import Any

import httpx

from offmcp.config import BARCODE_PATTERN, Config
from offmcp.settings import settings
from offmcp.utils.errors import InvalidArgument, NotFound, UpstreamMalformed, UpstreamUnavailable
from offmcp.utils.metrics import record_upstream_request

logger = logging.getLogger(__name__)

# Limit returned product fields to reduce payload size and parsing time
PRODUCT_FIELDS = ",".join(Config.PRODUCT_FIELDS)


def validate_barcode(barcode: str) -> str:
    """Return the trimmed barcode or raise InvalidArgument."""
    code = (barcode or "").strip()
    if not BARCODE_PATTERN.match(code):
        raise InvalidArgument(f"Invalid barcode format: {barcode!r}. Expected 8-14 digits.")
    return code


class UpstreamClient:
    """Async client shared by all tool handlers.

    Usage:
        async with UpstreamClient() as client:
            raw = await client.fetch_product("3017620422003")
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        catalog_url: str | None = None,
        search_url: str | None = None,
        prices_url: str | None = None,
        robotoff_url: str | None = None,
        timeout: float | None = None,
    ):
        self.catalog_url = catalog_url or settings.off_catalog_url
        self.search_url = search_url or settings.off_search_url
        self.prices_url = prices_url or settings.off_prices_url
        self.robotoff_url = robotoff_url or settings.off_robotoff_url
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout or settings.http_timeout_seconds),
            headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
            follow_redirects=True,
        )

    async def __aenter__(self) -> "UpstreamClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    # =========================================================================
    # Transport
    # =========================================================================

    async def _get_json(
        self,
        service: str,
        url: str,
        params: dict[str, Any] | None = None,
        *,
        expect: tuple[str, ...] = (),
        not_found_on_404: bool = False,
    ) -> dict[str, Any]:
        """GET ``url`` and return its JSON object.

        Args:
            service: Metrics/log label (catalog, search, prices, robotoff)
            url: Absolute URL
            params: Query parameters; None values are dropped
            expect: Top-level keys that must be present in the payload
            not_found_on_404: Raise NotFound instead of UpstreamUnavailable on 404
        """
        query = {k: v for k, v in (params or {}).items() if v is not None}
        start = time.perf_counter()
        outcome = "unavailable"
        try:
            try:
                response = await self._http.get(url, params=query)
            except httpx.TimeoutException as e:
                logger.warning("%s timeout: %s", service, url)
                raise UpstreamUnavailable(service, f"{service} request timed out") from e
            except httpx.HTTPError as e:
                logger.warning("%s transport error on %s: %s", service, url, e)
                raise UpstreamUnavailable(service, f"{service} request failed: {e}") from e

            if response.status_code == 404 and not_found_on_404:
                outcome = "not_found"
                raise NotFound(f"Nothing found at {url}")
            if response.is_error:
                logger.warning("%s returned HTTP %s for %s", service, response.status_code, url)
                raise UpstreamUnavailable(
                    service,
                    f"{service} returned HTTP {response.status_code}",
                    status_code=response.status_code,
                )

            outcome = "malformed"
            try:
                data = response.json()
            except ValueError as e:
                raise UpstreamMalformed(service, f"{service} returned invalid JSON") from e
            if not isinstance(data, dict):
                raise UpstreamMalformed(service, f"{service} returned a non-object JSON payload")
            missing = [key for key in expect if key not in data]
            if missing:
                raise UpstreamMalformed(service, f"{service} response is missing: {', '.join(missing)}")

            outcome = "ok"
            return data
        finally:
            record_upstream_request(service, outcome, time.perf_counter() - start)

    # =========================================================================
    # Catalog
    # =========================================================================

    async def fetch_product(self, barcode: str) -> dict[str, Any]:
        """Fetch one product; returns the ``product`` object."""
        code = validate_barcode(barcode)
        try:
            data = await self._get_json(
                "catalog",
                f"{self.catalog_url}/api/v2/product/{code}.json",
                {"fields": PRODUCT_FIELDS},
                not_found_on_404=True,
            )
        except NotFound as e:
            raise NotFound(f"Product with barcode {code} not found") from e

        product = data.get("product")
        if data.get("status") == 0 or not isinstance(product, dict):
            raise NotFound(f"Product with barcode {code} not found")
        return product

    async def text_search(self, query: str, page: int, page_size: int) -> dict[str, Any]:
        return await self._get_json(
            "catalog",
            f"{self.catalog_url}/cgi/search.pl",
            {"search_terms": query, "page": page, "page_size": page_size, "json": 1},
            expect=("products",),
        )

    async def category_search(self, slug: str, page: int) -> dict[str, Any]:
        return await self._get_json("catalog", f"{self.catalog_url}/category/{slug}/{page}.json", expect=("products",))

    async def brand_search(self, slug: str, page: int) -> dict[str, Any]:
        return await self._get_json("catalog", f"{self.catalog_url}/brand/{slug}/{page}.json", expect=("products",))

    # =========================================================================
    # Search-a-licious
    # =========================================================================

    async def advanced_search(self, q: str, page: int, page_size: int, sort_by: str | None = None) -> dict[str, Any]:
        """Run a Lucene-style query. An ``errors`` payload counts as malformed."""
        data = await self._get_json(
            "search",
            f"{self.search_url}/search",
            {"q": q, "page": page, "page_size": page_size, "sort_by": sort_by},
        )
        # Any errors field, even an empty list, means the query was rejected
        if data.get("errors") is not None:
            raise UpstreamMalformed("search", f"search returned errors: {data['errors']}")
        if "hits" not in data:
            raise UpstreamMalformed("search", "search response is missing: hits")
        return data

    async def autocomplete(self, q: str, taxonomy: str, lang: str, size: int) -> dict[str, Any]:
        return await self._get_json(
            "search",
            f"{self.search_url}/autocomplete",
            {"q": q, "taxonomy_names": taxonomy, "lang": lang, "size": size},
        )

    # =========================================================================
    # Open Prices
    # =========================================================================

    async def prices(
        self,
        *,
        product_code: str | None = None,
        currency: str | None = None,
        country: str | None = None,
        location_osm_id: int | None = None,
        location_osm_type: str | None = None,
        order_by: str | None = Config.DEFAULT_PRICE_ORDER,
        page: int = 1,
        size: int = Config.DEFAULT_PRICE_PAGE_SIZE,
    ) -> dict[str, Any]:
        params = {
            "product_code": validate_barcode(product_code) if product_code else None,
            "currency": currency,
            "location__osm_address_country": country,
            "location_osm_id": location_osm_id,
            "location_osm_type": location_osm_type,
            "order_by": order_by,
            "page": page,
            "size": size,
        }
        return await self._get_json("prices", f"{self.prices_url}/prices", params, expect=("items",))

    # =========================================================================
    # Robotoff
    # =========================================================================

    async def questions(
        self,
        barcode: str | None = None,
        *,
        insight_types: str | None = None,
        lang: str | None = Config.DEFAULT_LANG,
        count: int | None = Config.DEFAULT_QUESTION_COUNT,
    ) -> dict[str, Any]:
        path = f"/questions/{validate_barcode(barcode)}" if barcode else "/questions/random"
        params = {"insight_types": insight_types, "lang": lang, "count": count}
        return await self._get_json("robotoff", f"{self.robotoff_url}{path}", params)

    async def insights(
        self,
        *,
        barcode: str | None = None,
        insight_types: str | None = None,
        countries: str | None = None,
        count: int | None = Config.DEFAULT_QUESTION_COUNT,
        page: int | None = 1,
    ) -> dict[str, Any]:
        params = {
            "barcode": validate_barcode(barcode) if barcode else None,
            "insight_types": insight_types,
            "countries": countries,
            "count": count,
            "page": page,
            "annotated": 0,
        }
        return await self._get_json("robotoff", f"{self.robotoff_url}/insights", params)
