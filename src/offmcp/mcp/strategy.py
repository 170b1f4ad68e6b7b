"""Explicit two-step fallback used by the advanced search tool.

A primary attempt that fails with an upstream error is followed by exactly
one fallback attempt. The degradation is logged, counted and reported to
the caller; fallback failures propagate unchanged.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from offmcp.utils.errors import UpstreamError, UpstreamMalformed
from offmcp.utils.metrics import record_search_fallback

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class StrategyOutcome(Generic[T]):
    """Result plus whether it came from the fallback path."""

    value: T
    degraded: bool = False
    reason: str | None = None


def fallback_reason(exc: UpstreamError) -> str:
    return "malformed" if isinstance(exc, UpstreamMalformed) else "unavailable"


@dataclass(frozen=True)
class FallbackStrategy(Generic[T]):
    """Run ``primary``; on an UpstreamError run ``fallback`` once.

    Attributes:
        name: Label used in logs
        primary: Preferred attempt
        fallback: Degraded attempt
    """

    name: str
    primary: Callable[[], Awaitable[T]]
    fallback: Callable[[], Awaitable[T]]

    async def run(self) -> StrategyOutcome[T]:
        try:
            return StrategyOutcome(await self.primary())
        except UpstreamError as e:
            reason = fallback_reason(e)
            logger.warning("%s primary attempt failed (%s: %s), using fallback", self.name, reason, e.message)
            record_search_fallback(reason)

        return StrategyOutcome(await self.fallback(), degraded=True, reason=reason)
