"""Observer protocol for session state changes."""

from typing import Any, Protocol

from banana_studio.models import SessionState


class SessionObserver(Protocol):
    """Interface for reacting to session state transitions.

    Lets a UI layer refresh itself without polling the controller.
    """

    def on_state_changed(self, mode: str, state: SessionState[Any]) -> None:
        """Called after every state transition.

        Args:
            mode: Generation mode name ("image" or "video")
            state: Snapshot of the new state
        """
        ...
