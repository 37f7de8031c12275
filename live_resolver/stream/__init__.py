"""Stream descriptor negotiation and extraction."""

from .extraction import (
    collect_quality_tiers,
    descriptor_from_play_info,
    extract_stream_urls,
)
from .negotiation import SENTINEL_MAX, NegotiationResult, negotiate_quality

__all__ = [
    "collect_quality_tiers",
    "descriptor_from_play_info",
    "extract_stream_urls",
    "SENTINEL_MAX",
    "NegotiationResult",
    "negotiate_quality",
]
