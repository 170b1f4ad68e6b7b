"""MCP resources and prompts for the Open Food Facts server."""

from mcp.types import (
    GetPromptResult,
    Prompt,
    PromptArgument,
    PromptMessage,
    Resource,
    ResourceTemplate,
    TextContent,
)
from pydantic import AnyUrl

from offmcp.config import Config
from offmcp.prompts import PROMPTS
from offmcp.resources.knowledge import KnowledgeBase, knowledge_base
from offmcp.utils.errors import InvalidArgument, NotFound


def get_resources(kb: KnowledgeBase = knowledge_base) -> list[Resource]:
    """Return the list of MCP resources exposed by the server."""
    return [
        Resource(
            uri=AnyUrl(entry.uri),
            name=entry.key,
            title=entry.title,
            mimeType=entry.mime_type,
            description=entry.description,
        )
        for entry in kb.entries()
    ]


def get_resource_templates() -> list[ResourceTemplate]:
    return [
        ResourceTemplate(
            uriTemplate=f"{Config.URI_SCHEME}://taxonomy/{{type}}",
            name="taxonomy",
            title="Open Food Facts taxonomy",
            description=f"Taxonomy overview; type is one of: {', '.join(Config.TAXONOMY_TYPES)}",
            mimeType="text/plain",
        )
    ]


# name -> (title, description, [(argument, description)])
_PROMPTS = {
    "analyze-product": (
        "Analyze Product",
        "Get a detailed health analysis of any food product",
        [("barcode", "Product barcode or name")],
    ),
    "compare-products": (
        "Compare Products",
        "Compare two products to find the healthier option",
        [("product1", "First product (barcode or name)"), ("product2", "Second product (barcode or name)")],
    ),
    "find-healthy-alternatives": (
        "Find Healthy Alternatives",
        "Find healthier alternatives to a product",
        [("product", "Product to find alternatives for")],
    ),
    "check-allergens": (
        "Check Allergens",
        "Check if a product is safe for your allergies",
        [("product", "Product barcode or name"), ("allergens", "Your allergens (comma-separated)")],
    ),
    "whats-for-dinner": (
        "What's for Dinner?",
        "Get recipe ideas using a product",
        [("product", "Main ingredient or product")],
    ),
    "check-additives": (
        "Check Additives",
        "Check if a product contains questionable additives",
        [("barcode", "The product barcode (EAN, UPC, etc.)")],
    ),
}


def get_prompts() -> list[Prompt]:
    """Return the list of MCP prompts exposed by the server."""
    return [
        Prompt(
            name=name,
            title=title,
            description=description,
            arguments=[PromptArgument(name=arg, description=text, required=True) for arg, text in arguments],
        )
        for name, (title, description, arguments) in _PROMPTS.items()
    ]


def render_prompt(name: str, arguments: dict[str, str] | None) -> GetPromptResult:
    """Fill a prompt template.

    Raises:
        NotFound: Unknown prompt name
        InvalidArgument: Missing or blank required argument
    """
    if name not in _PROMPTS:
        raise NotFound(f"Prompt not found: {name}")

    _title, description, expected = _PROMPTS[name]
    values = {}
    for arg, _ in expected:
        value = (arguments or {}).get(arg)
        if not isinstance(value, str) or not value.strip():
            raise InvalidArgument(f"Missing required argument: {arg}")
        values[arg] = value.strip()

    text = PROMPTS[name].format(**values)
    return GetPromptResult(
        description=description,
        messages=[PromptMessage(role="user", content=TextContent(type="text", text=text))],
    )
