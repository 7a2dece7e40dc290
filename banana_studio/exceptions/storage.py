"""History storage exceptions."""

from .base import StudioException


class StorageUnavailableError(StudioException):
    """Raised when the history database cannot be opened, read or written."""

    pass
