"""
Resolution entry points.

Looks providers up in the registry and resolves one or many rooms over a
shared HttpClient. No retries and no cross-platform fallback happen here;
every outcome is handed back to the caller as-is.
"""

import asyncio
import logging
from typing import Optional, Sequence, Union

from live_resolver.errors import ResolveError
from live_resolver.providers import ResolveResult, create_provider
from live_resolver.transport import HttpClient

logger = logging.getLogger(__name__)

RoomOutcome = Union[ResolveResult, ResolveError]


async def resolve_room(
    client: HttpClient,
    platform: str,
    room_id: str,
    headers: Optional[dict[str, str]] = None,
) -> ResolveResult:
    """
    Resolve a single room.

    Args:
        client: Shared transport
        platform: Registry key of the provider
        room_id: Room id as shown to users
        headers: Extra request headers forwarded to the provider

    Returns:
        LiveNode or NotLive

    Raises:
        ProviderNotFoundError: Unknown platform
        ResolveError: Any provider failure
    """
    provider = create_provider(platform, client)
    return await provider.resolve(room_id, headers)


async def resolve_rooms(
    client: HttpClient,
    platform: str,
    room_ids: Sequence[str],
    headers: Optional[dict[str, str]] = None,
) -> list[RoomOutcome]:
    """
    Resolve several rooms of one platform concurrently.

    Returns:
        One outcome per room id, in input order. ResolveError failures are
        returned as exception instances rather than raised.

    Raises:
        BaseException: The first non-ResolveError failure (a bug or a
            cancellation), after every room has finished
    """
    provider = create_provider(platform, client)
    outcomes = await asyncio.gather(
        *(provider.resolve(room_id, headers) for room_id in room_ids),
        return_exceptions=True,
    )
    for room_id, outcome in zip(room_ids, outcomes):
        if isinstance(outcome, ResolveError):
            logger.debug(f"{platform} room {room_id} failed: {outcome!r}")
        elif isinstance(outcome, BaseException):
            raise outcome
    return list(outcomes)
