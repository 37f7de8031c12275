"""
Provider registry.

Maps platform keys to provider classes and instantiates them on demand.
"""

import logging
from typing import Optional

from live_resolver.errors import ProviderNotFoundError
from live_resolver.transport import HttpClient

from .base import LiveProvider
from .bilibili import BilibiliProvider
from .yqs173 import Yqs173Provider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """
    Registry of available platform providers.

    Providers register here under their platform key; create_provider
    uses it to build instances bound to a shared HttpClient.
    """

    _providers: dict[str, type[LiveProvider]] = {}

    @classmethod
    def register(cls, key: str, provider_class: type[LiveProvider]) -> None:
        """Register a provider class."""
        cls._providers[key] = provider_class
        logger.debug(f"Registered provider: {key}")

    @classmethod
    def get(cls, key: str) -> Optional[type[LiveProvider]]:
        """Get provider class by platform key."""
        return cls._providers.get(key)

    @classmethod
    def available(cls) -> list[str]:
        """Get sorted list of registered platform keys."""
        return sorted(cls._providers.keys())


def create_provider(key: str, client: HttpClient) -> LiveProvider:
    """
    Instantiate the provider registered under key.

    Raises:
        ProviderNotFoundError: If no provider is registered for key
    """
    provider_class = ProviderRegistry.get(key)
    if not provider_class:
        raise ProviderNotFoundError(
            f"Platform '{key}' not available. Available platforms: {ProviderRegistry.available()}"
        )
    return provider_class(client)


# Register providers
ProviderRegistry.register(BilibiliProvider.name, BilibiliProvider)
ProviderRegistry.register(Yqs173Provider.name, Yqs173Provider)
