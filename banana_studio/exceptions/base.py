"""Base exception classes for Banana Studio."""


class StudioException(Exception):
    """Base exception for all Banana Studio errors.

    All custom exceptions in the banana_studio package should inherit
    from this base class for consistent error handling.
    """

    pass
