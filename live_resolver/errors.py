"""
Resolution error types.

NotLive is not an error and is returned, never raised (see models.NotLive).
"""


class ResolveError(Exception):
    """Base class for all resolution failures."""

    pass


class NetworkError(ResolveError):
    """Transport failure, non-200 response or timeout."""

    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.status = status


class SchemaMismatchError(ResolveError):
    """An expected JSON field is missing or has the wrong type."""

    def __init__(self, field: str, detail: str = ""):
        message = f"Unexpected response shape at '{field}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.field = field


class NoTiersAdvertisedError(ResolveError):
    """Quality negotiation found no advertised quality tiers."""

    pass


class ProviderNotFoundError(ResolveError):
    """Raised when a requested platform key is not registered."""

    pass
