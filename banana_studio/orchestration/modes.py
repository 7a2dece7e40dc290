"""Generation modes: how each record kind is dispatched to the generator."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from banana_studio.interfaces import RemoteGenerator
from banana_studio.models import (
    ImageAttachments,
    ImageGenerationParameters,
    VideoAttachments,
    VideoGenerationParameters,
)

P = TypeVar("P")
A = TypeVar("A")


class GenerationMode(Generic[P, A]):
    """Describes one generation kind for the session controller.

    Subclasses bind the parameter and attachment types and know which
    remote generator call produces the artifact.
    """

    name: str = ""
    parameters_type: Any = None
    attachments_type: Any = None
    default_error_message: str = "An unexpected error occurred during generation."

    def default_parameters(self) -> P:
        """Return the initial draft for a fresh session."""
        return self.parameters_type(prompt="")

    async def dispatch(
        self, generator: RemoteGenerator, parameters: P, attachments: A | None
    ) -> str:
        """Call the remote generator and return the artifact reference."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ImageMode(GenerationMode[ImageGenerationParameters, ImageAttachments]):
    """Image generation with optional reference images."""

    name = "image"
    parameters_type = ImageGenerationParameters
    attachments_type = ImageAttachments

    async def dispatch(
        self,
        generator: RemoteGenerator,
        parameters: ImageGenerationParameters,
        attachments: ImageAttachments | None,
    ) -> str:
        references = list(attachments.reference_images) if attachments else []
        return await generator.generate_image(parameters, references or None)


class VideoMode(GenerationMode[VideoGenerationParameters, VideoAttachments]):
    """Video generation with optional first and last frames."""

    name = "video"
    parameters_type = VideoGenerationParameters
    attachments_type = VideoAttachments
    default_error_message = "An unexpected error occurred during video generation."

    async def dispatch(
        self,
        generator: RemoteGenerator,
        parameters: VideoGenerationParameters,
        attachments: VideoAttachments | None,
    ) -> str:
        attachments = attachments or VideoAttachments()
        return await generator.generate_video(
            parameters, attachments.first_frame or None, attachments.last_frame or None
        )


IMAGE_MODE = ImageMode()
VIDEO_MODE = VideoMode()
