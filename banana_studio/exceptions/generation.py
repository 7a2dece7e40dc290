"""Generation and authorization related exceptions."""

from .base import StudioException


class AlreadyInProgressError(StudioException):
    """Raised when a request is submitted while another one is in flight."""

    pass


class AuthorizationRequiredError(StudioException):
    """Raised when a request is submitted without an authorized session."""

    pass


class AuthDialogError(StudioException):
    """Raised when the authorization dialog cannot be opened or fails."""

    pass


class RemoteGenerationError(StudioException):
    """Raised by remote generators when the generation service fails.

    Attributes:
        message: Error text reported by the service
        code: Optional status code (e.g. 429)
    """

    def __init__(self, message: str = "", code: int | str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
