"""Configuration loader for the component catalog and proxy settings."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from devportal.lib.proxy_client import DEFAULT_PROXY_PATH, DEFAULT_TIMEOUT_SECONDS, ProxyClient
from devportal.models.component import Component, Landscape

logger = logging.getLogger(__name__)


@dataclass
class ProxySettings:
    """Where and how to reach the proxy gateway."""

    base_url: str
    path: str
    token: str | None
    timeout_seconds: float

    def create_client(self) -> ProxyClient:
        return ProxyClient(
            base_url=self.base_url,
            proxy_path=self.path,
            token=self.token,
            timeout=self.timeout_seconds,
        )


class ConfigLoader:
    """Loads landscapes, components and environment settings."""

    def __init__(self, config_dir: str | None = None, env_file: str | None = None):
        """Initialize configuration loader.

        Args:
            config_dir: Directory containing config files (default: ./config)
            env_file: Path to .env file (default: ./.env)
        """
        self.config_dir = Path(config_dir or "config")
        self.env_file = Path(env_file or ".env")

        if self.env_file.exists():
            load_dotenv(self.env_file)
            logger.info(f"Loaded environment from {self.env_file}")
        else:
            logger.debug(f"Environment file not found: {self.env_file}")

        self.landscapes = self._load_landscapes()
        self.components = self._load_components()
        self.proxy = self._load_proxy_settings()

    def _read_yaml(self, filename: str) -> dict[str, Any]:
        path = self.config_dir / filename
        if not path.exists():
            logger.warning(f"Config not found: {path}")
            return {}

        with open(path) as f:
            return yaml.safe_load(f) or {}

    def _load_landscapes(self) -> dict[str, Landscape]:
        """Load landscapes from landscapes.yaml, keyed by name."""
        data = self._read_yaml("landscapes.yaml")

        landscapes = {}
        for entry in data.get("landscapes", []):
            if not entry.get("name"):
                raise ValueError(f"Landscape entry without name: {entry}")
            landscape = Landscape.from_dict(entry)
            landscapes[landscape.name] = landscape

        logger.info(f"Loaded {len(landscapes)} landscapes")
        return landscapes

    def _load_components(self) -> list[Component]:
        """Load components from components.yaml."""
        data = self._read_yaml("components.yaml")

        components = []
        seen = set()
        for entry in data.get("components", []):
            if not entry.get("name"):
                raise ValueError(f"Component entry without name: {entry}")
            component = Component.from_dict(entry)
            if component.id in seen:
                raise ValueError(f"Duplicate component id: {component.id}")
            seen.add(component.id)
            components.append(component)

        logger.info(f"Loaded {len(components)} components")
        return components

    def _load_proxy_settings(self) -> ProxySettings:
        """Load proxy settings from environment variables."""
        raw_timeout = os.getenv("PROBE_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(f"PROBE_TIMEOUT_SECONDS must be a number, got {raw_timeout!r}")
        if timeout <= 0:
            raise ValueError(f"PROBE_TIMEOUT_SECONDS must be positive, got {timeout}")

        return ProxySettings(
            base_url=os.getenv("PORTAL_PROXY_BASE_URL", "http://localhost:8080"),
            path=os.getenv("PORTAL_PROXY_PATH", DEFAULT_PROXY_PATH),
            token=os.getenv("PORTAL_PROXY_TOKEN") or None,
            timeout_seconds=timeout,
        )

    def get_landscape(self, name: str) -> Landscape | None:
        return self.landscapes.get(name)

    def list_landscapes(self) -> list[Landscape]:
        return list(self.landscapes.values())

    def get_components(self) -> list[Component]:
        return list(self.components)
