"""Validation-related exceptions."""

from .base import StudioException


class ValidationError(StudioException):
    """Raised when parameters or configuration values are invalid."""

    pass
