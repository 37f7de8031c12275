"""
Abstract live provider interface.

Defines the contract that every platform integration must implement.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Union

from live_resolver.models import LiveNode, NotLive
from live_resolver.transport import HttpClient

logger = logging.getLogger(__name__)

ResolveResult = Union[LiveNode, NotLive]


class LiveProvider(ABC):
    """
    Abstract base class for platform providers.

    A provider turns a caller-supplied room id into a LiveNode, or a
    NotLive outcome when the room is not broadcasting. Providers hold no
    per-call state; the shared HttpClient is the only collaborator, so one
    instance may serve many concurrent resolutions.
    """

    name: str = ""  # Registry key, e.g. "bilibili"
    display_name: str = ""
    homepage: str = ""

    def __init__(self, client: HttpClient):
        """Initialize provider with the shared transport."""
        self._client = client

    @abstractmethod
    async def resolve(
        self, room_id: str, headers: Optional[dict[str, str]] = None
    ) -> ResolveResult:
        """
        Resolve a room to its current broadcast.

        Args:
            room_id: Room id as shown to users (may be a vanity/short id)
            headers: Extra request headers, e.g. a platform session cookie

        Returns:
            LiveNode if broadcasting, NotLive otherwise

        Raises:
            NetworkError: Upstream unreachable, non-200 or timed out
            SchemaMismatchError: Upstream response lacks an expected field
            NoTiersAdvertisedError: Quality negotiation found no tiers
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
