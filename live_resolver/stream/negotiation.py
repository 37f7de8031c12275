"""
Two-phase quality negotiation.

Some platforms only reveal which tiers the current stream supports after
being asked for one. Negotiation first probes with a sentinel tier higher
than any real one, then re-queries at the best advertised tier unless the
probe already answered at the sentinel.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from live_resolver.errors import NoTiersAdvertisedError

logger = logging.getLogger(__name__)

SENTINEL_MAX = 10000

FetchDescriptor = Callable[[int], Awaitable[Any]]
TierCollector = Callable[[Any], set[int]]


@dataclass(frozen=True)
class NegotiationResult:
    """Outcome of a negotiation: the final descriptor and how it was reached."""

    descriptor: Any
    quality: int
    requests: int  # Number of play-info queries issued (1 or 2)


async def negotiate_quality(
    fetch: FetchDescriptor,
    collect_tiers: TierCollector,
    sentinel: int = SENTINEL_MAX,
) -> NegotiationResult:
    """
    Run the probe and, if needed, the refine query.

    Args:
        fetch: Coroutine returning the raw descriptor for a requested tier
        collect_tiers: Extracts the advertised tier set from a descriptor
        sentinel: Tier requested by the probe

    Returns:
        NegotiationResult with the descriptor to extract URLs from

    Raises:
        NoTiersAdvertisedError: If the probe carries no tiers or the refine
            carries no streams
    """
    # Probe
    probe = await fetch(sentinel)
    tiers = collect_tiers(probe)
    if not tiers:
        raise NoTiersAdvertisedError(f"Probe at qn={sentinel} advertised no quality tiers")

    best = max(tiers)
    if best == sentinel:
        logger.debug(f"Probe already at best tier {sentinel}")
        return NegotiationResult(descriptor=probe, quality=best, requests=1)

    # Refine
    logger.debug(f"Advertised tiers {sorted(tiers)}, refining at {best}")
    refined = await fetch(best)
    if not refined:
        raise NoTiersAdvertisedError(f"Refine at qn={best} returned no streams")

    return NegotiationResult(descriptor=refined, quality=best, requests=2)
