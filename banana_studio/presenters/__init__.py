"""Session observer implementations."""

from .logging_presenter import LoggingSessionObserver
from .null_presenter import NullSessionObserver

__all__ = ["LoggingSessionObserver", "NullSessionObserver"]
