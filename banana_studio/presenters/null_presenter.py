"""Null session observer for testing (no output)."""

from typing import Any

from banana_studio.models import SessionState


class NullSessionObserver:
    """Observe session changes and do nothing (testing implementation)."""

    def on_state_changed(self, mode: str, state: SessionState[Any]) -> None:
        """Called after every state transition (no-op)."""
        pass
