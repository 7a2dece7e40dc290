"""Immutable generation parameter snapshots and per-request attachments."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any

from banana_studio.exceptions import ValidationError

IMAGE_ASPECT_RATIOS = ("1:1", "16:9", "9:16", "4:3", "3:4", "3:2", "2:3")
IMAGE_SIZES = ("1K", "2K", "4K")

VIDEO_ASPECT_RATIOS = ("16:9", "9:16")
VIDEO_RESOLUTIONS = ("720p", "1080p")
VIDEO_GENERATION_SPEEDS = ("fast", "normal")


def _check_choice(name: str, value: Any, allowed: tuple) -> None:
    if value not in allowed:
        raise ValidationError(f"Unsupported {name} {value!r}, expected one of {', '.join(allowed)}")


class _ParametersMixin:
    """Shared serialization helpers for parameter dataclasses."""

    @property
    def has_prompt(self) -> bool:
        """Check if the prompt contains anything besides whitespace."""
        return bool(self.prompt.strip())  # type: ignore[attr-defined]

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-safe snapshot of the parameters."""
        return asdict(self)  # type: ignore[call-overload]

    @classmethod
    def from_dict(cls, data: dict[str, Any]):
        """Build parameters from a stored snapshot, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class ImageGenerationParameters(_ParametersMixin):
    """Configuration snapshot for one image generation."""

    prompt: str
    negative_prompt: str = ""
    aspect_ratio: str = "1:1"
    image_size: str = "1K"
    seed: int | None = None

    def __post_init__(self):
        _check_choice("aspect ratio", self.aspect_ratio, IMAGE_ASPECT_RATIOS)
        _check_choice("image size", self.image_size, IMAGE_SIZES)
        if self.seed is not None and (not isinstance(self.seed, int) or isinstance(self.seed, bool)):
            raise ValidationError(f"Seed must be an integer, got {self.seed!r}")


@dataclass(frozen=True)
class VideoGenerationParameters(_ParametersMixin):
    """Configuration snapshot for one video generation."""

    prompt: str
    negative_prompt: str = ""
    aspect_ratio: str = "16:9"
    resolution: str = "1080p"
    generation_speed: str = "fast"

    def __post_init__(self):
        _check_choice("aspect ratio", self.aspect_ratio, VIDEO_ASPECT_RATIOS)
        _check_choice("resolution", self.resolution, VIDEO_RESOLUTIONS)
        _check_choice("generation speed", self.generation_speed, VIDEO_GENERATION_SPEEDS)


@dataclass(frozen=True)
class ImageAttachments:
    """Reference images sent along with an image request (data URLs or handles)."""

    reference_images: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any iterable (e.g. a list from the UI) but store a tuple
        if not isinstance(self.reference_images, tuple):
            object.__setattr__(self, "reference_images", tuple(self.reference_images))


@dataclass(frozen=True)
class VideoAttachments:
    """Optional first/last frame images for a video request."""

    first_frame: str | None = None
    last_frame: str | None = None
