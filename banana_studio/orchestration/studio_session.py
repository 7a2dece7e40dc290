"""Factory wiring the image and video session controllers."""

from __future__ import annotations

import logging
from typing import Any

from banana_studio.config import StudioConfig
from banana_studio.exceptions import StorageUnavailableError
from banana_studio.interfaces import AuthorizationGate, RemoteGenerator, SessionObserver
from banana_studio.models import (
    GenerationRecord,
    ImageAttachments,
    ImageGenerationParameters,
    VideoAttachments,
    VideoGenerationParameters,
)
from banana_studio.services.authorization import ApiKeyGate
from banana_studio.services.record_store import BoundedRecordStore

from .modes import IMAGE_MODE, VIDEO_MODE
from .session_controller import GenerationSessionController

logger = logging.getLogger(__name__)


def create_default_gate(config: StudioConfig) -> AuthorizationGate:
    """Create the gate used when the host does not provide one."""
    if not config.local_mode:
        logger.warning("No API key configured; generation stays unauthorized until one is set")
    return ApiKeyGate(config.api_key)


class StudioSession:
    """Owns both history stores and both session controllers.

    The image and video controllers share the authorization gate and the
    remote generator but keep separate state and separate history tables.

    Example:
        async with StudioSession(config, generator) as studio:
            await studio.image.submit(ImageGenerationParameters(prompt="a fox"))
    """

    def __init__(
        self,
        config: StudioConfig,
        generator: RemoteGenerator,
        gate: AuthorizationGate | None = None,
        observer: SessionObserver | None = None,
    ):
        """Initialize the session.

        Args:
            config: Studio configuration
            generator: Remote generation client
            gate: Authorization gate (defaults to an API key gate built
                from the configuration)
            observer: Optional listener for state changes of both modes
        """
        self.config = config
        self.gate = gate if gate is not None else create_default_gate(config)

        self.image_store: BoundedRecordStore[ImageGenerationParameters] = BoundedRecordStore(
            config.history_db_path,
            config.image_history_table,
            ImageGenerationParameters,
            kind=IMAGE_MODE.name,
            max_items=config.max_image_history,
        )
        self.video_store: BoundedRecordStore[VideoGenerationParameters] = BoundedRecordStore(
            config.history_db_path,
            config.video_history_table,
            VideoGenerationParameters,
            kind=VIDEO_MODE.name,
            max_items=config.max_video_history,
        )

        self.image: GenerationSessionController[ImageGenerationParameters, ImageAttachments] = (
            GenerationSessionController(
                IMAGE_MODE,
                self.image_store,
                generator,
                self.gate,
                observer=observer,
                interactive_reauth=config.interactive_auth,
            )
        )
        self.video: GenerationSessionController[VideoGenerationParameters, VideoAttachments] = (
            GenerationSessionController(
                VIDEO_MODE,
                self.video_store,
                generator,
                self.gate,
                observer=observer,
                interactive_reauth=config.interactive_auth,
            )
        )

    async def __aenter__(self) -> StudioSession:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        """Open both history stores.

        A store that cannot be opened is logged and left closed; its
        controller then reports an empty history and fails to save.
        """
        for store in (self.image_store, self.video_store):
            try:
                await store.open()
            except StorageUnavailableError:
                logger.exception(f"Could not open {store.kind} history at {store.db_path}")

    async def close(self) -> None:
        """Close both history stores."""
        await self.image_store.close()
        await self.video_store.close()

    def controller(self, mode: str) -> GenerationSessionController[Any, Any]:
        """Look up a controller by mode name.

        Raises:
            KeyError: If the mode is unknown
        """
        controllers = {IMAGE_MODE.name: self.image, VIDEO_MODE.name: self.video}
        return controllers[mode]

    async def load_history(self) -> dict[str, list[GenerationRecord[Any]]]:
        """Load both histories, newest first. Unreadable histories come back empty."""
        return {
            IMAGE_MODE.name: await self.image.list_history(),
            VIDEO_MODE.name: await self.video.list_history(),
        }
