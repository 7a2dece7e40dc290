"""Configuration management for Banana Studio."""

from .config import StudioConfig
from .config_manager import StudioConfigManager
from .defaults import create_default_config

__all__ = ["StudioConfig", "StudioConfigManager", "create_default_config"]
