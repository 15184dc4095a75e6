"""
Exception types raised by the jobs client, the feed controller and storage.
"""

from typing import Optional


class JobFeedError(Exception):
    """Base class for every error raised by jobfeed."""
    pass


class NetworkError(JobFeedError):
    """Connectivity failure or timeout while talking to the jobs API."""
    pass


class HttpStatusError(JobFeedError):
    """The jobs API answered with a non-success status code."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message or f"HTTP error! status: {status_code}")


class ParseError(JobFeedError):
    """Response body was not JSON or did not have the expected shape."""
    pass


class PersistenceError(JobFeedError):
    """Serialising, reading or writing persisted data failed."""
    pass


class ValidationError(JobFeedError):
    """A job record is not usable, e.g. it has no numeric id."""
    pass
