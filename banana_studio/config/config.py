"""Configuration classes for Banana Studio."""

import re
from dataclasses import dataclass, field
from pathlib import Path

from banana_studio.exceptions import ValidationError

_TABLE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class StudioConfig:
    """Immutable configuration for the generation session core.

    All configuration is frozen (immutable) so that both generation
    modes see the same settings for the lifetime of a session.
    """

    # History storage settings
    history_db_path: Path = field(
        default_factory=lambda: Path.home() / ".banana_studio" / "history.db"
    )
    image_history_table: str = "history"
    video_history_table: str = "video_history"
    max_image_history: int = 100  # Oldest records are evicted past this count
    max_video_history: int = 100

    # Authorization settings
    api_key: str | None = None  # Set = local mode, no interactive key selection
    interactive_auth: bool = True

    def __post_init__(self):
        """Convert string paths to Path objects and validate values."""
        if isinstance(self.history_db_path, str):
            object.__setattr__(self, "history_db_path", Path(self.history_db_path))

        for name in ("image_history_table", "video_history_table"):
            value = getattr(self, name)
            if not _TABLE_NAME_PATTERN.match(value):
                raise ValidationError(f"{name} must be a valid identifier, got {value!r}")
        if self.image_history_table == self.video_history_table:
            raise ValidationError("Image and video history must use different tables")

        for name in ("max_image_history", "max_video_history"):
            if getattr(self, name) < 1:
                raise ValidationError(f"{name} must be at least 1")

    @property
    def local_mode(self) -> bool:
        """Check if an API key is configured locally."""
        return bool(self.api_key)
