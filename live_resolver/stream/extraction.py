"""
Stream descriptor traversal.

A descriptor is the array found at data.playurl_info.playurl.stream:

    stream[] -> format[] -> codec[] (base_url, accept_qn[]) -> url_info[] (host, extra)
"""

import logging
from typing import Any

from live_resolver.errors import SchemaMismatchError

from .json_tree import optional_dict, optional_list, require_list, require_str

logger = logging.getLogger(__name__)


def descriptor_from_play_info(response: Any) -> list[Any]:
    """
    Pull the stream array out of a play-info response.

    Returns an empty list when the platform reports no playurl at all;
    the caller decides whether that is fatal.
    """
    data = optional_dict(response, "data")
    playurl = optional_dict(optional_dict(data, "playurl_info"), "playurl")
    return optional_list(playurl, "stream")


def collect_quality_tiers(descriptor: list[Any]) -> set[int]:
    """
    Collect every advertised quality tier across all streams, formats and codecs.

    Absent arrays contribute nothing; wrongly-typed entries raise
    SchemaMismatchError.
    """
    tiers: set[int] = set()
    for stream in descriptor:
        for fmt in optional_list(stream, "format"):
            for codec in optional_list(fmt, "codec"):
                for qn in optional_list(codec, "accept_qn"):
                    if isinstance(qn, bool) or not isinstance(qn, int) or qn < 0:
                        raise SchemaMismatchError("accept_qn", f"invalid tier {qn!r}")
                    tiers.add(qn)
    return tiers


def extract_stream_urls(descriptor: list[Any]) -> list[str]:
    """
    Flatten a descriptor into playable URLs.

    One URL per (format, codec, url_info) triple, built as
    host + base_url + extra, in input order at every level.
    """
    if not isinstance(descriptor, list):
        raise SchemaMismatchError("stream", "expected an array")

    urls: list[str] = []
    for stream in descriptor:
        for fmt in require_list(stream, "format"):
            for codec in require_list(fmt, "codec"):
                base_url = require_str(codec, "base_url")
                for url_info in require_list(codec, "url_info"):
                    host = require_str(url_info, "host")
                    extra = require_str(url_info, "extra")
                    urls.append(f"{host}{base_url}{extra}")

    logger.debug(f"Extracted {len(urls)} stream URL(s)")
    return urls
