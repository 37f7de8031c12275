"""
Unified result types returned by every provider.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class LiveNode:
    """
    Normalized description of a live broadcast.

    Only built once a room has been confirmed live. Metadata fields are
    empty strings when the platform did not supply them.
    """

    room_id: str  # Resolved (canonical) room id
    title: str = ""
    cover_url: str = ""
    anchor_name: str = ""
    anchor_avatar_url: str = ""
    stream_urls: tuple[str, ...] = field(default_factory=tuple)
    platform: str = ""
    quality: int = 0  # Negotiated tier, 0 if the platform has none

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "live": True,
            "platform": self.platform,
            "room_id": self.room_id,
            "title": self.title,
            "cover_url": self.cover_url,
            "anchor_name": self.anchor_name,
            "anchor_avatar_url": self.anchor_avatar_url,
            "quality": self.quality,
            "stream_urls": list(self.stream_urls),
        }


@dataclass(frozen=True)
class NotLive:
    """The room exists but has no resolvable stream right now."""

    room_id: str  # Room id as supplied by the caller
    platform: str = ""
    status: Optional[int] = None  # Raw upstream status, if one was reported

    def __bool__(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "live": False,
            "platform": self.platform,
            "room_id": self.room_id,
            "status": self.status,
        }
