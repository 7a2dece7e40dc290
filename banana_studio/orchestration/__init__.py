"""Orchestration of generation sessions."""

from .modes import IMAGE_MODE, VIDEO_MODE, GenerationMode, ImageMode, VideoMode
from .session_controller import GenerationSessionController
from .studio_session import StudioSession, create_default_gate

__all__ = [
    "GenerationMode",
    "ImageMode",
    "VideoMode",
    "IMAGE_MODE",
    "VIDEO_MODE",
    "GenerationSessionController",
    "StudioSession",
    "create_default_gate",
]
