"""Static reference documents served as MCP resources."""

from .knowledge import KnowledgeBase, KnowledgeEntry, knowledge_base

__all__ = ["KnowledgeBase", "KnowledgeEntry", "knowledge_base"]
