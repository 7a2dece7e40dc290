"""Session lifecycle state for one generation mode."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Generic, TypeVar

from .record import GenerationRecord

P = TypeVar("P")


class Phase(Enum):
    """Lifecycle phase of a generation session."""

    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    RATE_LIMITED = "rate_limited"


class FailureKind(Enum):
    """Category of a remote generation failure."""

    AUTH_EXPIRED = "auth_expired"
    RATE_LIMITED = "rate_limited"
    GENERIC = "generic"


@dataclass
class SessionState(Generic[P]):
    """Mutable lifecycle state owned by a session controller."""

    draft: P
    phase: Phase = Phase.IDLE
    failure_kind: FailureKind | None = None
    latest_artifact_reference: str | None = None
    latest_record: GenerationRecord[P] | None = None
    error_message: str | None = None

    @property
    def is_loading(self) -> bool:
        """Check if a request is currently in flight."""
        return self.phase is Phase.IN_FLIGHT

    @property
    def has_error(self) -> bool:
        """Check if an error or rate-limit notice should be shown."""
        return self.phase in (Phase.FAILED, Phase.RATE_LIMITED)

    def snapshot(self) -> SessionState[P]:
        """Return a copy that callers may hold without seeing later changes."""
        return replace(self)

    def __str__(self) -> str:
        kind = f"({self.failure_kind.value})" if self.failure_kind else ""
        return f"SessionState({self.phase.value}{kind})"
