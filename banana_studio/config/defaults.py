"""Default configuration values for Banana Studio."""

from .config import StudioConfig


def create_default_config(**overrides) -> StudioConfig:
    """Create a default configuration with optional overrides.

    Args:
        **overrides: Keyword arguments to override default values

    Returns:
        StudioConfig with defaults and overrides applied

    Example:
        config = create_default_config(
            max_image_history=50,
            api_key="local-key"
        )
    """
    return StudioConfig(**overrides)
