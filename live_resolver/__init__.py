"""
live_resolver - Resolve live-streaming rooms into playable stream URLs.

Each platform integration hides its own undocumented API behind one
provider contract that returns a LiveNode or a NotLive outcome.
"""

__version__ = "0.1.0"

from .config import Config, ConfigError, load_config
from .errors import (
    NetworkError,
    NoTiersAdvertisedError,
    ProviderNotFoundError,
    ResolveError,
    SchemaMismatchError,
)
from .models import LiveNode, NotLive
from .resolver import resolve_room, resolve_rooms

__all__ = [
    "__version__",
    "Config",
    "ConfigError",
    "load_config",
    "LiveNode",
    "NotLive",
    "ResolveError",
    "NetworkError",
    "SchemaMismatchError",
    "NoTiersAdvertisedError",
    "ProviderNotFoundError",
    "resolve_room",
    "resolve_rooms",
]
