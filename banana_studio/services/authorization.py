"""Authorization gate implementations for local and hosted runs."""

import logging
from collections.abc import Awaitable, Callable

from banana_studio.exceptions import AuthDialogError

logger = logging.getLogger(__name__)

DIALOG_FAILED_MESSAGE = "Failed to open API key selection dialog."


class ApiKeyGate:
    """Gate for local runs where an API key comes from the environment.

    Authorization is never interactive: the session is authorized exactly
    when a key is configured.
    """

    def __init__(self, api_key: str | None):
        """Initialize the gate.

        Args:
            api_key: Locally configured API key, if any
        """
        self._api_key = api_key
        self._authorized = bool(api_key)

    @property
    def interactive(self) -> bool:
        return False

    def is_authorized(self) -> bool:
        return self._authorized

    def set_authorized(self, value: bool) -> None:
        self._authorized = value

    async def request_authorization(self) -> None:
        """Re-authorize using the configured key.

        Raises:
            AuthDialogError: If no API key is configured
        """
        if not self._api_key:
            raise AuthDialogError("No API key configured")
        self._authorized = True


class DialogGate:
    """Gate backed by a host-provided key selection dialog.

    Wraps two async callables supplied by the hosting environment: one that
    reports whether a key has been selected and one that opens the picker.
    """

    def __init__(
        self,
        has_selected_key: Callable[[], Awaitable[bool]],
        open_select_key: Callable[[], Awaitable[None]],
    ):
        """Initialize the gate.

        Args:
            has_selected_key: Returns True if the user already picked a key
            open_select_key: Opens the key picker; resolves once closed
        """
        self._has_selected_key = has_selected_key
        self._open_select_key = open_select_key
        self._authorized = False

    @property
    def interactive(self) -> bool:
        return True

    def is_authorized(self) -> bool:
        return self._authorized

    def set_authorized(self, value: bool) -> None:
        self._authorized = value

    async def refresh(self) -> bool:
        """Ask the host whether a key is selected and update the flag.

        Returns:
            The refreshed authorization status
        """
        try:
            self._authorized = bool(await self._has_selected_key())
        except Exception as e:
            logger.info(f"Key selection status unavailable, treating as unauthorized: {e}")
            self._authorized = False
        return self._authorized

    async def request_authorization(self) -> None:
        """Open the key picker.

        Raises:
            AuthDialogError: If the dialog could not be opened
        """
        try:
            await self._open_select_key()
        except Exception as e:
            raise AuthDialogError(DIALOG_FAILED_MESSAGE) from e
        # The host does not report the outcome; closing the picker counts as selection
        self._authorized = True
