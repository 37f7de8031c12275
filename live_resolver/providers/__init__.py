"""
Platform providers.

Provides the abstract provider interface, the registry and the bundled
platform integrations.
"""

from .base import LiveProvider, ResolveResult
from .bilibili import BiliQuality, BilibiliProvider
from .registry import ProviderRegistry, create_provider
from .yqs173 import Yqs173Provider

__all__ = [
    "LiveProvider",
    "ResolveResult",
    "ProviderRegistry",
    "create_provider",
    # Platforms
    "BiliQuality",
    "BilibiliProvider",
    "Yqs173Provider",
]
