"""Protocol for the remote generation service client."""

from typing import Protocol

from banana_studio.models import ImageGenerationParameters, VideoGenerationParameters


class RemoteGenerator(Protocol):
    """Interface for a client that performs the actual content generation.

    Implementations talk to the generation service and return a reference
    to the produced artifact (a URL or content handle). Timeouts are the
    implementation's responsibility.
    """

    async def generate_image(
        self,
        config: ImageGenerationParameters,
        reference_images: list[str] | None = None,
    ) -> str:
        """Generate an image.

        Args:
            config: Image parameters snapshot
            reference_images: Optional reference images (data URLs)

        Returns:
            Reference to the generated image

        Raises:
            RemoteGenerationError: If the service reports a failure
        """
        ...

    async def generate_video(
        self,
        config: VideoGenerationParameters,
        first_frame: str | None = None,
        last_frame: str | None = None,
    ) -> str:
        """Generate a video.

        Args:
            config: Video parameters snapshot
            first_frame: Optional first frame image (data URL)
            last_frame: Optional last frame image (data URL)

        Returns:
            Reference to the generated video

        Raises:
            RemoteGenerationError: If the service reports a failure
        """
        ...
