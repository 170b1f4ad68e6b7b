#!/usr/bin/env python3
"""Open Food Facts MCP Server.

Exposes the Open Food Facts product database, Open Prices and Robotoff to
AI assistants via MCP. Claude Desktop, Cursor and other MCP-compatible
clients can search products, read nutrition and environmental scores,
check allergens and ask the connected model for analysis.
"""

import logging
from collections.abc import Iterable
from typing import Any

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import (
    INVALID_PARAMS,
    CallToolResult,
    ErrorData,
    GetPromptResult,
    Prompt,
    Resource,
    ResourceTemplate,
    Tool,
)
from pydantic import AnyUrl

from offmcp.config import Config
from offmcp.mcp.container import DependencyContainer
from offmcp.mcp.initialize import build_tool_registry
from offmcp.mcp.protocols import ProductSource
from offmcp.mcp.registry import ToolRegistry
from offmcp.mcp_resources import get_prompts, get_resource_templates, get_resources, render_prompt
from offmcp.mcp_tool_dispatch import dispatch_tool_call
from offmcp.resources.knowledge import KnowledgeBase, knowledge_base
from offmcp.services.sampling import McpSampler
from offmcp.services.upstream import UpstreamClient
from offmcp.settings import settings
from offmcp.utils.errors import InvalidArgument, NotFound
from offmcp.utils.logging import setup_logging

logger = logging.getLogger(__name__)

# JSON-RPC code for an unknown resource URI
RESOURCE_NOT_FOUND = -32002

INSTRUCTIONS = (
    "Tools for the Open Food Facts database. Start with searchProducts to find a barcode, "
    "then use the nutrition, price and insight tools. Read openfoodfacts://help for a quick reference."
)


def create_server(client: ProductSource, kb: KnowledgeBase = knowledge_base) -> tuple[Server, ToolRegistry]:
    """Build the MCP server and the tool registry it serves.

    Args:
        client: Upstream client shared by every tool call
        kb: Static documents exposed as resources

    Returns:
        The wired low-level server and its registry
    """
    server: Server = Server(Config.SERVICE_NAME, version=Config.API_VERSION, instructions=INSTRUCTIONS)
    container = DependencyContainer(
        client=client,
        sampler=McpSampler(lambda: server.request_context.session),
    )
    registry = build_tool_registry(container)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available Open Food Facts tools for AI assistants."""
        logger.debug("MCP list_tools called")
        return registry.get_mcp_tool_list()

    # Arguments are validated by ToolSpec.bind so errors keep the structured payload
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        """Execute a tool and return its JSON or text result."""
        logger.info("MCP call_tool: %s", name)
        logger.debug("MCP call_tool args: %s", arguments)
        result = await dispatch_tool_call(registry, name, arguments)
        return CallToolResult(content=result.contents, isError=result.is_error)

    @server.list_resources()
    async def list_resources() -> list[Resource]:
        """List the reference documents."""
        return get_resources(kb)

    @server.list_resource_templates()
    async def list_resource_templates() -> list[ResourceTemplate]:
        return get_resource_templates()

    @server.read_resource()
    async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
        """Read a reference document by URI."""
        try:
            entry = kb.entry_for_uri(str(uri))
        except NotFound as e:
            logger.info("Unknown resource requested: %s", uri)
            raise McpError(ErrorData(code=RESOURCE_NOT_FOUND, message=e.message)) from e
        return [ReadResourceContents(content=entry.text, mime_type=entry.mime_type)]

    @server.list_prompts()
    async def list_prompts() -> list[Prompt]:
        """List the prompt templates."""
        return get_prompts()

    @server.get_prompt()
    async def get_prompt(name: str, arguments: dict[str, str] | None) -> GetPromptResult:
        """Render a prompt template with the client's arguments."""
        try:
            return render_prompt(name, arguments)
        except (NotFound, InvalidArgument) as e:
            raise McpError(ErrorData(code=INVALID_PARAMS, message=e.message)) from e

    return server, registry


async def run_mcp_server() -> None:
    """Run the Open Food Facts MCP server on stdio."""
    logger.info("MCP server starting on stdio...")
    async with UpstreamClient() as client:
        server, registry = create_server(client)
        async with stdio_server() as (read_stream, write_stream):
            logger.info("MCP server ready with %d tools, waiting for connections", len(registry))
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    logger.info("MCP server shutting down")


def main():
    """CLI entry point for the offmcp-server command.

    Supports both stdio and streamable HTTP transports. Without a flag the
    transport comes from settings (TRANSPORT env var, default stdio).
    """
    import argparse
    import asyncio
    import sys

    parser = argparse.ArgumentParser(description="Open Food Facts MCP Server")
    parser.add_argument("--stdio", action="store_true", help="Run MCP server on stdio (default)")
    parser.add_argument("--http", action="store_true", help="Run MCP server over streamable HTTP")
    parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port for HTTP server (default: {settings.port})"
    )

    args = parser.parse_args()

    # Can't run both at once
    if args.stdio and args.http:
        print("Error: Cannot run both --stdio and --http simultaneously", file=sys.stderr)
        sys.exit(1)

    transport = "http" if args.http else "stdio" if args.stdio else settings.transport

    setup_logging(
        transport,
        log_file=settings.log_file,
        level=settings.log_level,
        log_format=settings.log_format,
        testing=settings.is_test,
    )

    if transport == "stdio":
        asyncio.run(run_mcp_server())
    else:
        import uvicorn

        from offmcp.server_http import create_app

        logger.info("Starting HTTP server on port %d...", args.port)
        uvicorn.run(create_app(), host="0.0.0.0", port=args.port, log_level="info")


if __name__ == "__main__":
    main()
