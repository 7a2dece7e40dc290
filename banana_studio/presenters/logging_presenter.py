"""Session observer that writes state changes to the log."""

import logging
from typing import Any

from banana_studio.models import Phase, SessionState

logger = logging.getLogger(__name__)


class LoggingSessionObserver:
    """Report session state changes through the logging module."""

    def __init__(self, log: logging.Logger | None = None):
        self._log = log or logger

    def on_state_changed(self, mode: str, state: SessionState[Any]) -> None:
        """Log the new state; failures and rate limits at WARNING."""
        if state.phase is Phase.SUCCEEDED:
            self._log.info(f"[{mode}] Generated {state.latest_artifact_reference}")
        elif state.phase is Phase.FAILED:
            kind = state.failure_kind.value if state.failure_kind else "unknown"
            self._log.warning(f"[{mode}] Failed ({kind}): {state.error_message}")
        elif state.phase is Phase.RATE_LIMITED:
            self._log.warning(f"[{mode}] Rate limited: {state.error_message}")
        else:
            self._log.info(f"[{mode}] {state.phase.value}")
