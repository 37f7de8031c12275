"""
Shared HTTP transport.

Thin aiohttp wrapper that every provider goes through. One session is
shared across concurrent resolutions; every request is bounded by a timeout.
"""

import asyncio
import json
import logging
from typing import Any, Optional

import aiohttp

from live_resolver.errors import NetworkError, SchemaMismatchError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_TIMEOUT = 10.0


class HttpClient:
    """JSON-over-HTTP client with default headers and a per-request timeout."""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        default_headers: Optional[dict[str, str]] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            user_agent: User-Agent sent when the caller does not override it
            timeout: Total timeout per request in seconds
            default_headers: Extra headers sent with every request
        """
        self.timeout = timeout
        self.default_headers: dict[str, str] = {"User-Agent": user_agent}
        if default_headers:
            self.default_headers.update(default_headers)
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "HttpClient":
        """Async context manager entry."""
        self._session = aiohttp.ClientSession(headers=self.default_headers)
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        """Async context manager exit."""
        if self._session:
            await self._session.close()
            self._session = None

    async def get_json(
        self,
        url: str,
        params: Optional[dict[str, str]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """
        GET a URL and decode the JSON body.

        Raises:
            NetworkError: On transport failure, timeout or non-200 status
            SchemaMismatchError: If the body is not JSON
        """
        return await self._request("GET", url, params=params, headers=headers)

    async def post_json(
        self,
        url: str,
        data: Optional[dict[str, str]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """
        POST form data and decode the JSON body.

        Raises:
            NetworkError: On transport failure, timeout or non-200 status
            SchemaMismatchError: If the body is not JSON
        """
        return await self._request("POST", url, data=data, headers=headers)

    def merge_headers(self, headers: Optional[dict[str, str]]) -> dict[str, str]:
        """Caller headers layered over the defaults."""
        merged = dict(self.default_headers)
        if headers:
            merged.update(headers)
        return merged

    async def _request(
        self,
        method: str,
        url: str,
        params: Optional[dict[str, str]] = None,
        data: Optional[dict[str, str]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Issue a request and return the decoded body."""
        session = self._session
        close_session = False
        if session is None:
            session = aiohttp.ClientSession(headers=self.default_headers)
            close_session = True

        timeout = aiohttp.ClientTimeout(total=self.timeout)
        logger.debug(f"{method} {url} params={params}")
        try:
            async with session.request(
                method,
                url,
                params=params,
                data=data,
                headers=self.merge_headers(headers),
                timeout=timeout,
            ) as resp:
                if resp.status != 200:
                    raise NetworkError(f"{method} {url} returned HTTP {resp.status}", resp.status)
                body = await resp.read()
        except asyncio.TimeoutError as e:
            raise NetworkError(f"{method} {url} timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e
        finally:
            if close_session:
                await session.close()

        try:
            return json.loads(body.decode("utf-8"))
        except ValueError as e:
            # UnicodeDecodeError is a ValueError
            raise SchemaMismatchError("body", f"response from {url} is not UTF-8 JSON") from e
