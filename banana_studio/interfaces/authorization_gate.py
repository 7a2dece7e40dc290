"""Protocol for the session authorization collaborator."""

from typing import Protocol


class AuthorizationGate(Protocol):
    """Interface for whatever decides if the session may call the generator.

    The gate keeps the current authorization flag. Controllers clear it
    when the service reports an expired session and set it again after a
    successful re-authorization.
    """

    @property
    def interactive(self) -> bool:
        """True if request_authorization prompts the user (e.g. a key picker)."""
        ...

    def is_authorized(self) -> bool:
        """Check if the session is currently authorized."""
        ...

    def set_authorized(self, value: bool) -> None:
        """Record the session's authorization status."""
        ...

    async def request_authorization(self) -> None:
        """Ask for authorization.

        Raises:
            AuthDialogError: If authorization could not be obtained
        """
        ...
