"""
Matching exceptions.

Only NotFoundException, InvalidRequestException and MatchingCancelledException
ever reach callers of the MatchingEngine, plus CacheUnavailableException from
invalidation and cache clearing. ModelUnavailableException is raised
by the model scorer and always absorbed into a fallback score.
"""


class MatchingException(Exception):
    """Base exception for matching layer errors."""
    pass


class NotFoundException(MatchingException):
    """Raised when a student profile or project does not exist."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} {resource_id} not found")
        self.resource = resource
        self.resource_id = resource_id


class InvalidRequestException(MatchingException):
    """Raised for malformed ids or limits, before any work begins."""
    pass


class ModelUnavailableException(MatchingException):
    """Raised when the remote scoring model times out, errors, or returns garbage.

    ``retryable`` is True for transient transport failures (timeouts,
    connection errors, rate limits, 5xx) and False for malformed output.
    """

    def __init__(self, message: str, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable


class MatchingCancelledException(MatchingException):
    """Raised when a batch ranking call is cancelled before completion."""
    pass


class CacheUnavailableException(MatchingException):
    """Raised when the cache store cannot complete an invalidation.

    Reads and writes degrade to misses instead; only removals raise, since
    a removal that silently fails leaves stale scores readable.
    """
    pass
