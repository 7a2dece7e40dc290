"""Configuration persistence manager."""

import json
import logging
import os
from dataclasses import asdict, fields, replace
from pathlib import Path
from typing import Any

from banana_studio.exceptions import ValidationError

from .config import StudioConfig
from .defaults import create_default_config

logger = logging.getLogger(__name__)

API_KEY_ENV_VARS = ("API_KEY", "GEMINI_API_KEY")
DB_PATH_ENV_VAR = "BANANA_STUDIO_DB"


class StudioConfigManager:
    """Manager for configuration persistence.

    Saves and loads the user configuration to/from a JSON file stored in
    the user's home directory. The API key is never written to disk; it
    comes from the environment via apply_env_overrides.
    """

    CONFIG_FILE = Path.home() / ".banana_studio" / "config.json"

    @classmethod
    def save_config(cls, config: StudioConfig) -> None:
        """Save configuration to JSON file.

        Args:
            config: Configuration to save

        Raises:
            OSError: If unable to create directory or write file
        """
        cls.CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)

        config_dict = asdict(config)
        config_dict.pop("api_key", None)
        config_dict = {
            key: str(value) if isinstance(value, Path) else value
            for key, value in config_dict.items()
        }

        with cls.CONFIG_FILE.open("w", encoding="utf-8") as f:
            json.dump(config_dict, f, indent=2, ensure_ascii=False)

    @classmethod
    def load_config(cls) -> StudioConfig:
        """Load configuration from JSON file.

        Returns:
            Loaded configuration, or default configuration if the file
            doesn't exist or is invalid
        """
        if not cls.CONFIG_FILE.exists():
            return create_default_config()

        try:
            with cls.CONFIG_FILE.open("r", encoding="utf-8") as f:
                config_dict = json.load(f)
            if not isinstance(config_dict, dict):
                raise ValueError("config root must be an object")

            known = {f.name for f in fields(StudioConfig)}
            config_dict = {k: v for k, v in config_dict.items() if k in known and k != "api_key"}
            return StudioConfig(**config_dict)

        except (json.JSONDecodeError, TypeError, ValueError, ValidationError) as e:
            logger.warning(f"Invalid config file, using defaults: {e}")
            return create_default_config()

    @classmethod
    def config_exists(cls) -> bool:
        """Check if configuration file exists."""
        return cls.CONFIG_FILE.exists()

    @classmethod
    def delete_config(cls) -> None:
        """Delete the configuration file."""
        if cls.CONFIG_FILE.exists():
            cls.CONFIG_FILE.unlink()

    @staticmethod
    def apply_env_overrides(
        config: StudioConfig, environ: dict[str, str] | None = None
    ) -> StudioConfig:
        """Return a copy of config with environment overrides applied.

        Args:
            config: Base configuration
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Configuration with API key and database path taken from the
            environment when present
        """
        env: Any = os.environ if environ is None else environ
        changes: dict[str, Any] = {}

        for name in API_KEY_ENV_VARS:
            value = env.get(name, "").strip()
            if value:
                changes["api_key"] = value
                break

        db_path = env.get(DB_PATH_ENV_VAR, "").strip()
        if db_path:
            changes["history_db_path"] = Path(db_path).expanduser()

        return replace(config, **changes) if changes else config
