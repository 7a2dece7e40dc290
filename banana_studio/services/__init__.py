"""Business logic services for Banana Studio."""

from .authorization import ApiKeyGate, DialogGate
from .failure_classifier import (
    DEFAULT_RULES,
    ClassificationRule,
    FailureClassification,
    FailureSignal,
    classify_failure,
)
from .record_store import BoundedRecordStore

__all__ = [
    "BoundedRecordStore",
    "ApiKeyGate",
    "DialogGate",
    "ClassificationRule",
    "FailureClassification",
    "FailureSignal",
    "DEFAULT_RULES",
    "classify_failure",
]
