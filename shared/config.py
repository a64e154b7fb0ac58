"""
Configuration management for the editor services.
"""

import json
import os
from typing import Any

import yaml

from dotenv import load_dotenv


class ServiceConfig:
    """Configuration management for services using environment variables."""

    def __init__(self) -> None:
        """Initialize configuration by loading environment variables."""
        env_path = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.env"))
        load_dotenv(dotenv_path=env_path, override=True)
        self.config: dict[str, Any] = {}
        self.editor_config: dict[str, Any] = {}
        self.editor_config_path = os.getenv(
            "EDITOR_CONFIG_PATH",
            os.path.join(os.path.dirname(__file__), "../config/editor.yaml"),
        )
        self.load_from_env()
        self.load_editor_config()

    def load_from_env(self) -> None:
        """Load configuration from environment variables."""
        self.config = {
            "openai_api_key": os.getenv("OPENAI_API_KEY"),
            "speech_driver": os.getenv("SPEECH_DRIVER", "http"),
            "speech_api_base": os.getenv("SPEECH_API_BASE", "http://localhost:8005"),
            "speech_timeout": int(os.getenv("SPEECH_TIMEOUT", "60")),
            "storage_upload_url": os.getenv("STORAGE_UPLOAD_URL"),
            "media_root": os.getenv("MEDIA_ROOT", "./media"),
            "media_base_url": os.getenv("MEDIA_BASE_URL", "/media"),
            "debug": os.getenv("DEBUG", "false").lower() == "true",
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
            "allowed_origins": json.loads(os.getenv("ALLOWED_ORIGINS", '["*"]')),
        }

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return self.config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value.

        Args:
            key: Configuration key
            value: Configuration value
        """
        self.config[key] = value

    def load_editor_config(self) -> None:
        """Load engine tunables from the YAML file."""
        path = os.path.abspath(self.editor_config_path)
        try:
            with open(path, "r", encoding="utf-8") as stream:
                data = yaml.safe_load(stream) or {}
        except FileNotFoundError:
            data = {}
        self.editor_config = data

    def get_editor_value(self, path: str, default: Any = None) -> Any:
        """Retrieve an editor configuration value via dotted path."""
        env_override_key = f"EDITOR_FLAG_{path.replace('.', '_').upper()}"
        env_value = os.getenv(env_override_key)
        if env_value is not None:
            return self._coerce_env_value(env_value, default)

        node: Any = self.editor_config
        for part in path.split("."):
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node if node is not None else default

    def set_editor_config(self, editor_config: dict[str, Any]) -> None:
        """Override editor configuration (useful for tests)."""
        self.editor_config = editor_config

    @staticmethod
    def _coerce_env_value(raw: str, default: Any) -> Any:
        lowered = raw.lower()
        if lowered in {"true", "false"}:
            return lowered == "true"
        unsigned = lowered.lstrip("-")
        if unsigned.replace(".", "", 1).isdigit():
            try:
                return float(lowered) if "." in lowered else int(lowered)
            except ValueError:
                return raw
        return raw or default


# Global configuration instance
config = ServiceConfig()
