"""API configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


class APIConfig:
    """Load and manage API server configuration from api.yaml."""

    def __init__(self, config_path: str | None = None):
        """Initialize configuration.

        Args:
            config_path: Path to api.yaml (default: $PORTAL_API_CONFIG or config/api.yaml)
        """
        if config_path is None:
            config_path = os.getenv("PORTAL_API_CONFIG", os.path.join("config", "api.yaml"))

        self.config_path = Path(config_path)
        self.config: dict[str, Any] = {}

        self._load_config()

    def _load_config(self):
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            logger.warning(f"Config file not found: {self.config_path}, using defaults")
            self._load_defaults()
            return

        try:
            with open(self.config_path) as f:
                self.config = yaml.safe_load(f) or {}

            logger.info(f"Loaded API configuration from {self.config_path}")

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load config: {e}")
            self._load_defaults()

    def _load_defaults(self):
        self.config = {
            "server": {
                "host": "0.0.0.0",
                "port": 9100,
                "workers": 1,
                "reload": False,
            },
            "catalog": {
                "config_dir": "config",
            },
            "cors": {
                "enabled": True,
                "allow_origins": ["*"],
                "allow_methods": ["GET", "POST", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization"],
            },
            "logging": {
                "level": "INFO",
                "structured": False,
                "file": None,
            },
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-separated key.

        Args:
            key: Dot-separated key path (e.g., "server.port")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.config

        for k in key.split("."):
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value
