"""Data models for Banana Studio."""

from .parameters import (
    IMAGE_ASPECT_RATIOS,
    IMAGE_SIZES,
    VIDEO_ASPECT_RATIOS,
    VIDEO_GENERATION_SPEEDS,
    VIDEO_RESOLUTIONS,
    ImageAttachments,
    ImageGenerationParameters,
    VideoAttachments,
    VideoGenerationParameters,
)
from .record import GenerationRecord
from .session import FailureKind, Phase, SessionState

__all__ = [
    "ImageGenerationParameters",
    "VideoGenerationParameters",
    "ImageAttachments",
    "VideoAttachments",
    "IMAGE_ASPECT_RATIOS",
    "IMAGE_SIZES",
    "VIDEO_ASPECT_RATIOS",
    "VIDEO_RESOLUTIONS",
    "VIDEO_GENERATION_SPEEDS",
    "GenerationRecord",
    "SessionState",
    "Phase",
    "FailureKind",
]
