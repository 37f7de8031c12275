"""
173.com (Yiqishan) live provider.

https://www.173.com/

Single POST; data.status == 2 means live and data.url is the stream.
"""

import logging
from typing import Optional

from live_resolver.models import LiveNode, NotLive
from live_resolver.stream.json_tree import optional_int, require_dict, require_str

from .base import LiveProvider, ResolveResult

logger = logging.getLogger(__name__)

URL = "https://www.173.com/room/getVieoUrl"

STATUS_BROADCASTING = 2


class Yqs173Provider(LiveProvider):
    """173.com live rooms."""

    name = "173"
    display_name = "173 Live"
    homepage = "https://www.173.com/"

    async def resolve(
        self, room_id: str, headers: Optional[dict[str, str]] = None
    ) -> ResolveResult:
        response = await self._client.post_json(URL, data={"roomId": room_id}, headers=headers)
        data = require_dict(response, "data")

        status = optional_int(data, "status")
        if status != STATUS_BROADCASTING:
            logger.info(f"173 room {room_id} not live (status={status})")
            return NotLive(room_id=room_id, platform=self.name, status=status)

        url = require_str(data, "url")
        return LiveNode(room_id=room_id, stream_urls=(url,), platform=self.name)
