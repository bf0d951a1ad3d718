"""Exceptions raised by the search core."""

from typing import Optional


class AimaiError(Exception):
    """Base class for search engine errors."""


class ReadingProviderError(AimaiError):
    """The reading provider could not be initialized or failed on a call."""


class IndexBuildError(AimaiError):
    """Building the index failed; no partial index is kept."""

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.position = position


class IndexFormatError(AimaiError):
    """A serialized index does not have the expected shape."""
