"""Custom exceptions for Banana Studio."""

from .base import StudioException
from .generation import (
    AlreadyInProgressError,
    AuthDialogError,
    AuthorizationRequiredError,
    RemoteGenerationError,
)
from .storage import StorageUnavailableError
from .validation import ValidationError

__all__ = [
    "StudioException",
    "AlreadyInProgressError",
    "AuthorizationRequiredError",
    "AuthDialogError",
    "RemoteGenerationError",
    "StorageUnavailableError",
    "ValidationError",
]
