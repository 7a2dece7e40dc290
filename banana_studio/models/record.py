"""Data model for generation history records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

P = TypeVar("P")


@dataclass(frozen=True)
class GenerationRecord(Generic[P]):
    """A persisted description of one successful generation.

    Records are created once by the session controller and never
    mutated afterwards.
    """

    id: str
    kind: str  # "image" or "video"
    artifact_reference: str  # URL or content handle, never raw bytes
    prompt_text: str
    parameters: P
    created_at: float

    def __str__(self) -> str:
        return f"GenerationRecord({self.kind}, id={self.id}, created_at={self.created_at:.3f})"
