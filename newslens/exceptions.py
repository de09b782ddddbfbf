"""
Exception types raised by the NewsLens pipeline.

Neither error is retried by the library; a retry is always a fresh,
caller-initiated run.
"""

from typing import Optional


class NewsLensError(Exception):
    """Base class for all NewsLens errors."""


class AcquisitionError(NewsLensError):
    """The search feed reported an error or could not be reached.

    Raised before anything from the batch is persisted.
    """

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code:
            return f"{self.message} (code={self.code})"
        return self.message


class PersistenceError(NewsLensError):
    """A single insert into the article store failed.

    Records inserted earlier in the same run stay stored; there is no
    transaction spanning the batch.
    """
