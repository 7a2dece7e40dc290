"""Classification of remote generation failures."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from banana_studio.exceptions import RemoteGenerationError
from banana_studio.models import FailureKind

AUTH_EXPIRED_MESSAGE = "Your API key session has expired. Please re-select your project."
RATE_LIMITED_MESSAGE = (
    "You've reached your daily API quota. The limit will reset at midnight (Pacific Time)."
)
DEFAULT_GENERIC_MESSAGE = "An unexpected error occurred during generation."


@dataclass(frozen=True)
class FailureSignal:
    """Normalized view of an error raised by a remote generator."""

    message: str
    code: str | None = None

    @classmethod
    def from_exception(cls, error: BaseException) -> FailureSignal:
        """Extract message and status code from any exception."""
        if isinstance(error, RemoteGenerationError):
            message = error.message
        else:
            message = getattr(error, "message", None) or str(error)
        code = getattr(error, "code", None)
        if code is None:
            code = getattr(error, "status_code", None)
        return cls(
            message=message if isinstance(message, str) else str(message),
            code=None if code is None else str(code),
        )


@dataclass(frozen=True)
class ClassificationRule:
    """A predicate over a failure signal and the kind it maps to."""

    name: str
    predicate: Callable[[FailureSignal], bool]
    kind: FailureKind


@dataclass(frozen=True)
class FailureClassification:
    """Outcome of classifying a failure."""

    kind: FailureKind
    message: str


def _entity_not_found(signal: FailureSignal) -> bool:
    return "entity was not found" in signal.message.lower()


def _quota_exhausted(signal: FailureSignal) -> bool:
    if signal.code in ("429", "RESOURCE_EXHAUSTED"):
        return True
    message = signal.message
    # "quota" is matched in any case ("Quota exceeded")
    return "429" in message or "RESOURCE_EXHAUSTED" in message or "quota" in message.lower()


# Order matters: an expired session can produce otherwise generic-looking errors.
DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule("auth_expired", _entity_not_found, FailureKind.AUTH_EXPIRED),
    ClassificationRule("rate_limited", _quota_exhausted, FailureKind.RATE_LIMITED),
)


def classify_failure(
    error: BaseException,
    rules: Sequence[ClassificationRule] = DEFAULT_RULES,
    default_message: str = DEFAULT_GENERIC_MESSAGE,
) -> FailureClassification:
    """Classify a remote failure using the first matching rule.

    Args:
        error: Exception raised by the remote generator
        rules: Rules evaluated in order; first match wins
        default_message: Message for generic failures without any text

    Returns:
        FailureClassification with the kind and a user-facing message
    """
    signal = FailureSignal.from_exception(error)
    for rule in rules:
        if rule.predicate(signal):
            return FailureClassification(rule.kind, _message_for(rule.kind, signal, default_message))
    return FailureClassification(
        FailureKind.GENERIC, _message_for(FailureKind.GENERIC, signal, default_message)
    )


def _message_for(kind: FailureKind, signal: FailureSignal, default_message: str) -> str:
    if kind is FailureKind.AUTH_EXPIRED:
        return AUTH_EXPIRED_MESSAGE
    if kind is FailureKind.RATE_LIMITED:
        return RATE_LIMITED_MESSAGE
    return signal.message if signal.message.strip() else default_message
