"""HTTP transport shared by all providers."""

from .http_client import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, HttpClient

__all__ = [
    "DEFAULT_TIMEOUT",
    "DEFAULT_USER_AGENT",
    "HttpClient",
]
