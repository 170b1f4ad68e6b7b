"""LLM sampling through the connected MCP client.

The server has no model of its own: analysis, comparison and recipe tools
ask the client to run a completion (``sampling/createMessage``) on their
behalf, passing model hints and priorities.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

from mcp.server.session import ServerSession
from mcp.types import ModelHint, ModelPreferences, SamplingMessage, TextContent

from offmcp.utils.errors import SamplingFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SamplingRequest:
    """Everything needed for one ``sampling/createMessage`` call."""

    messages: tuple[str, ...]
    system_prompt: str
    max_tokens: int
    temperature: float
    model_hints: tuple[str, ...] = ()
    intelligence_priority: float | None = None
    speed_priority: float | None = None
    cost_priority: float | None = None
    include_context: Literal["none", "thisServer", "allServers"] = "thisServer"
    stop_sequences: tuple[str, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)

    def model_preferences(self) -> ModelPreferences:
        return ModelPreferences(
            hints=[ModelHint(name=name) for name in self.model_hints],
            intelligencePriority=self.intelligence_priority,
            speedPriority=self.speed_priority,
            costPriority=self.cost_priority,
        )


def _completion_text(content: Any) -> str:
    items = content if isinstance(content, list) else [content]
    text = "".join(item.text for item in items if isinstance(item, TextContent))
    if not text.strip():
        raise SamplingFailed("The client returned a completion without text")
    return text


class McpSampler:
    """Sampler backed by the session of the MCP request being served.

    Args:
        session_provider: Returns the active ServerSession. Raises
            LookupError when called outside a request.
    """

    def __init__(self, session_provider: Callable[[], ServerSession]):
        self._session_provider = session_provider

    async def complete(self, request: SamplingRequest) -> str:
        try:
            session = self._session_provider()
            result = await session.create_message(
                messages=[
                    SamplingMessage(role="user", content=TextContent(type="text", text=message))
                    for message in request.messages
                ],
                max_tokens=request.max_tokens,
                system_prompt=request.system_prompt,
                include_context=request.include_context,
                temperature=request.temperature,
                stop_sequences=list(request.stop_sequences) or None,
                metadata=request.metadata or None,
                model_preferences=request.model_preferences(),
            )
        except SamplingFailed:
            raise
        except Exception as e:
            logger.warning("Sampling request failed: %s", e)
            raise SamplingFailed(f"LLM sampling is not available: {e}") from e

        logger.info("Sampling completed by model %s", getattr(result, "model", "unknown"))
        return _completion_text(result.content)
