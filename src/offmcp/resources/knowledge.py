"""Static reference documents served as ``openfoodfacts://`` resources.

The table is loaded once from the package's ``content/`` directory and is
read-only afterwards.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from offmcp.config import Config
from offmcp.utils.errors import NotFound

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent / "content"

TAXONOMY_PREFIX = "taxonomy/"
TAXONOMY_SOURCE = "https://github.com/openfoodfacts/openfoodfacts-server/tree/main/taxonomies"


@dataclass(frozen=True)
class KnowledgeEntry:
    key: str
    title: str
    description: str
    mime_type: str
    text: str

    @property
    def uri(self) -> str:
        return f"{Config.URI_SCHEME}://{self.key}"


# key -> (file, title, description, mime type)
_CATALOG = {
    "help": ("help.md", "Quick Help Guide", "How to use the Open Food Facts tools - quick reference", "text/markdown"),
    "nutriscore-guide": (
        "nutriscore-guide.md",
        "Nutri-Score Guide",
        "Understanding Nutri-Score health ratings (A-E)",
        "text/markdown",
    ),
    "ecoscore-guide": (
        "ecoscore-guide.md",
        "Eco-Score Guide",
        "Understanding Eco-Score environmental ratings (A-E)",
        "text/markdown",
    ),
    "allergens-list": (
        "allergens-list.md",
        "Allergens Reference",
        "Common food allergens and where they hide",
        "text/markdown",
    ),
    "additives-guide": (
        "additives-guide.md",
        "Food Additives Guide",
        "Understanding E-numbers and food additives",
        "text/markdown",
    ),
    "nova-guide": (
        "nova-guide.md",
        "NOVA Processing Guide",
        "Understanding food processing levels (1-4)",
        "text/markdown",
    ),
    "info": ("info.json", "About Open Food Facts", "The Open Food Facts project and its APIs", "application/json"),
    "schema": ("schema.md", "Database Schema", "Open Food Facts product fields and taxonomies", "text/markdown"),
    "taxonomy/categories": (
        "taxonomy-categories.txt",
        "Taxonomy: categories",
        "Food categories taxonomy overview",
        "text/plain",
    ),
}


def _load() -> MappingProxyType:
    entries = {}
    for key, (filename, title, description, mime_type) in _CATALOG.items():
        text = (CONTENT_DIR / filename).read_text(encoding="utf-8")
        entries[key] = KnowledgeEntry(key, title, description, mime_type, text)
    return MappingProxyType(entries)


def taxonomy_text(taxonomy_type: str) -> str:
    return (
        f"Taxonomy: {taxonomy_type}\n\n"
        f"The {taxonomy_type} taxonomy normalizes product {taxonomy_type} across languages. "
        f'Tags look like "en:<name>".\n\n'
        f'Use the autocomplete tool with taxonomyType "{taxonomy_type}" to look up tag names.\n\n'
        f"For full taxonomy data, please visit:\n{TAXONOMY_SOURCE}\n"
    )


class KnowledgeBase:
    """Read-only lookup of static reference documents."""

    def __init__(self, entries: MappingProxyType | None = None):
        self._entries = entries if entries is not None else _load()

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def keys(self) -> list[str]:
        return list(self._entries)

    def entries(self) -> list[KnowledgeEntry]:
        return list(self._entries.values())

    def entry(self, key: str) -> KnowledgeEntry:
        """Look up a document, rendering ``taxonomy/{type}`` on demand.

        Raises:
            NotFound: If the key is unknown
        """
        if key in self._entries:
            return self._entries[key]

        if key.startswith(TAXONOMY_PREFIX):
            taxonomy_type = key[len(TAXONOMY_PREFIX) :]
            if taxonomy_type in Config.TAXONOMY_TYPES:
                return KnowledgeEntry(
                    key,
                    f"Taxonomy: {taxonomy_type}",
                    f"{taxonomy_type} taxonomy overview",
                    "text/plain",
                    taxonomy_text(taxonomy_type),
                )

        known = ", ".join(self.keys())
        raise NotFound(f"Resource not found: {Config.URI_SCHEME}://{key}. Available resources: {known}")

    def get(self, key: str) -> str:
        return self.entry(key).text

    def entry_for_uri(self, uri: str) -> KnowledgeEntry:
        prefix = f"{Config.URI_SCHEME}://"
        if not uri.startswith(prefix):
            raise NotFound(f"Resource not found: {uri}")
        return self.entry(uri[len(prefix) :])


knowledge_base = KnowledgeBase()
