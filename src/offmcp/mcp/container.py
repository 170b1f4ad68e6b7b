"""Dependency injection container for Open Food Facts tools.

Provides a lightweight DI system for managing tool dependencies
and enabling easy testing with mocks.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from offmcp.mcp.protocols import ProductSource, Sampler


@dataclass
class DependencyContainer:
    """Container for managing tool dependencies.

    This container holds references to all services that tools depend on.
    During testing, you can override these with mocks.

    Example:
        # Production
        container = DependencyContainer(
            client=UpstreamClient(),
            sampler=McpSampler(lambda: server.request_context.session),
        )

        # Testing
        container = DependencyContainer(
            client=AsyncMock(spec=UpstreamClient),
            sampler=AsyncMock(spec=Sampler),
        )
    """

    client: ProductSource
    sampler: Sampler

    def override_client(self, mock_client: ProductSource) -> None:
        """Override the upstream client for testing.

        Args:
            mock_client: Mock upstream implementation
        """
        self.client = mock_client

    def override_sampler(self, mock_sampler: Sampler) -> None:
        """Override the sampler for testing.

        Args:
            mock_sampler: Mock sampler implementation
        """
        self.sampler = mock_sampler


# Dependency providers
def get_client(container: DependencyContainer) -> ProductSource:
    """Provide the upstream client dependency."""
    return container.client


def get_sampler(container: DependencyContainer) -> Sampler:
    """Provide the sampling dependency."""
    return container.sampler


PROVIDERS: dict[str, Callable[[DependencyContainer], Any]] = {
    "client": get_client,
    "sampler": get_sampler,
}


def resolve_dependencies(names: tuple[str, ...], container: DependencyContainer) -> dict[str, Any]:
    """Resolve the declared dependencies of a tool.

    Args:
        names: Dependency names declared on the tool spec
        container: Container holding the live services

    Returns:
        Dict mapping parameter names to resolved dependency instances

    Raises:
        KeyError: If a name has no provider (a wiring bug, not a client error)
    """
    return {name: PROVIDERS[name](container) for name in names}
