"""Interface protocols for Banana Studio."""

from .authorization_gate import AuthorizationGate
from .remote_generator import RemoteGenerator
from .session_observer import SessionObserver

__all__ = ["AuthorizationGate", "RemoteGenerator", "SessionObserver"]
