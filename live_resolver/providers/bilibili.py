"""
Bilibili live provider.

https://live.bilibili.com/

Resolution takes three round trips at most: room-init (canonical id and
live status), play-info (probe and, if needed, refine), and room info for
metadata. Without a logged-in cookie the platform caps quality at 480P.
"""

import logging
from typing import Any, Optional

from live_resolver.errors import NetworkError, SchemaMismatchError
from live_resolver.models import LiveNode, NotLive
from live_resolver.stream import (
    SENTINEL_MAX,
    collect_quality_tiers,
    descriptor_from_play_info,
    extract_stream_urls,
    negotiate_quality,
)
from live_resolver.stream.json_tree import (
    optional_dict,
    optional_int,
    optional_str,
    require_dict,
    require_int,
)

from .base import LiveProvider, ResolveResult

logger = logging.getLogger(__name__)

INIT_URL = "https://api.live.bilibili.com/room/v1/Room/room_init"
INFO_URL = "https://api.live.bilibili.com/xlive/web-room/v1/index/getInfoByRoom"
PLAY_URL = "https://api.live.bilibili.com/xlive/web-room/v2/index/getRoomPlayInfo"

LIVE_STATUS_BROADCASTING = 1


class BiliQuality:
    """Bilibili live quality tiers (qn)."""

    SMOOTH = 80
    HD = 150
    ULTRA_HD = 250
    BLURAY = 400
    ORIGINAL = 10000

    NAMES: dict[int, str] = {
        80: "Smooth",
        150: "HD",
        250: "Ultra HD",
        400: "Blu-ray",
        10000: "Original",
    }

    @classmethod
    def get_name(cls, qn: int) -> str:
        """Get human-readable name for a quality tier."""
        return cls.NAMES.get(qn, f"Unknown ({qn})")


class BilibiliProvider(LiveProvider):
    """Bilibili live rooms."""

    name = "bilibili"
    display_name = "Bilibili Live"
    homepage = "https://live.bilibili.com/"

    async def resolve(
        self, room_id: str, headers: Optional[dict[str, str]] = None
    ) -> ResolveResult:
        """Resolve a Bilibili room (short or canonical id)."""
        init = await self._client.get_json(INIT_URL, params={"id": room_id}, headers=headers)
        init_data = require_dict(init, "data")

        # Closed allow-list: only "broadcasting" proceeds
        live_status = optional_int(init_data, "live_status")
        if live_status != LIVE_STATUS_BROADCASTING:
            logger.info(f"Bilibili room {room_id} not live (live_status={live_status})")
            return NotLive(room_id=room_id, platform=self.name, status=live_status)

        real_id = str(require_int(init_data, "room_id"))
        if real_id != room_id:
            logger.debug(f"Bilibili room {room_id} resolved to {real_id}")

        async def fetch(qn: int) -> list[Any]:
            return await self.get_stream_descriptor(real_id, qn, headers)

        result = await negotiate_quality(fetch, collect_quality_tiers, sentinel=SENTINEL_MAX)
        urls = extract_stream_urls(result.descriptor)

        metadata = await self._fetch_room_metadata(real_id, headers)

        node = LiveNode(
            room_id=real_id,
            stream_urls=tuple(urls),
            platform=self.name,
            quality=result.quality,
            **metadata,
        )
        logger.info(
            f"Bilibili room {real_id}: {len(urls)} URL(s) at "
            f"{BiliQuality.get_name(result.quality)} ({result.requests} play-info request(s))"
        )
        return node

    async def get_stream_descriptor(
        self, room_id: str, qn: int, headers: Optional[dict[str, str]] = None
    ) -> list[Any]:
        """
        Query play-info for a canonical room id at the given tier.

        Args:
            room_id: Canonical room id
            qn: Requested quality tier
            headers: Caller headers (a cookie unlocks higher tiers)

        Returns:
            The raw stream descriptor array (possibly empty)
        """
        params = {
            "room_id": room_id,
            "protocol": "0,1",
            "format": "0,1,2",
            "codec": "0,1",
            "qn": str(qn),
            "platform": "h5",
            "ptype": "8",
        }
        response = await self._client.get_json(PLAY_URL, params=params, headers=headers)
        return descriptor_from_play_info(response)

    async def _fetch_room_metadata(
        self, room_id: str, headers: Optional[dict[str, str]] = None
    ) -> dict[str, str]:
        """Fetch title/cover/anchor; degrades to empty strings on failure."""
        metadata = {
            "title": "",
            "cover_url": "",
            "anchor_name": "",
            "anchor_avatar_url": "",
        }
        try:
            response = await self._client.get_json(
                INFO_URL, params={"room_id": room_id}, headers=headers
            )
            data = optional_dict(response, "data")
        except (NetworkError, SchemaMismatchError) as e:
            logger.warning(f"Bilibili room {room_id}: metadata unavailable: {e}")
            return metadata

        room_info = data.get("room_info")
        anchor_info = data.get("anchor_info")
        base_info = anchor_info.get("base_info") if isinstance(anchor_info, dict) else None

        metadata["title"] = optional_str(room_info, "title")
        metadata["cover_url"] = optional_str(room_info, "cover")
        metadata["anchor_name"] = optional_str(base_info, "uname")
        metadata["anchor_avatar_url"] = optional_str(base_info, "face")
        return metadata
