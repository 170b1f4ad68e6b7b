"""MCP Server with streamable HTTP transport.

This allows MCP clients to connect over HTTP instead of stdio. The same
FastAPI app serves a health check and the Prometheus scrape endpoint.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from offmcp.config import Config
from offmcp.mcp.protocols import ProductSource
from offmcp.server import create_server
from offmcp.services.upstream import UpstreamClient
from offmcp.settings import settings
from offmcp.utils.errors import register_exception_handlers
from offmcp.utils.metrics import metrics_app

logger = logging.getLogger(__name__)

BANNER = "Open Food Facts MCP Server is running"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


class StreamableHTTPEndpoint:
    """ASGI endpoint handing /mcp requests to the session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager):
        self.session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.session_manager.handle_request(scope, receive, send)


def create_app(client: ProductSource | None = None) -> FastAPI:
    """Create the HTTP transport app.

    Args:
        client: Upstream client to use; one is created (and closed on
            shutdown) when omitted
    """
    owned = UpstreamClient() if client is None else None
    upstream = client or owned
    mcp_server, registry = create_server(upstream)

    # Stateless: every POST is handled on its own, responses are plain JSON
    session_manager = StreamableHTTPSessionManager(app=mcp_server, json_response=True, stateless=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("HTTP transport starting with %d tools", len(registry))
        async with session_manager.run():
            yield
        if owned is not None:
            await owned.aclose()
        logger.info("HTTP transport stopped")

    app = FastAPI(
        title="Open Food Facts MCP Server",
        description="Model Context Protocol server for the Open Food Facts database",
        version=Config.API_VERSION,
        lifespan=lifespan,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    register_exception_handlers(app)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        """Banner for quick manual checks."""
        return BANNER

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "UP", "version": Config.API_VERSION, "tools": len(registry)}

    app.add_route("/mcp", StreamableHTTPEndpoint(session_manager), methods=["GET", "POST", "DELETE"])

    if settings.enable_metrics:
        app.mount("/metrics", metrics_app())

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        create_app(),
        host="0.0.0.0",
        port=int(settings.port),
        log_level="info",
    )
