"""
User configuration for Hummanta.

The configuration lives in ``<home>/config.yaml`` and carries the registry
URL and the network timeout. The registry URL used by commands is resolved
with the precedence: command-line flag > HUMMANTA_REGISTRY environment
variable > configuration file > built-in default.

Example ``config.yaml``::

    registry: https://hummanta.github.io/registry
    timeout: 60
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from hummanta.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY = "https://hummanta.github.io/registry"
REGISTRY_ENV_VAR = "HUMMANTA_REGISTRY"


@dataclass
class Config:
    """
    User configuration.

    Attributes:
        registry: URL of the registry to use
        timeout: Network timeout in seconds for registry requests, if set
    """

    registry: str = DEFAULT_REGISTRY
    timeout: Optional[int] = None

    @classmethod
    def load(cls, path: Path) -> "Config":
        """
        Load configuration from a YAML file.

        A missing file yields the default configuration.

        Raises:
            ConfigError: If the file is not valid YAML or has invalid values
        """
        path = Path(path)
        if not path.exists():
            logger.debug(f"Config file not found, using defaults: {path}")
            return cls()

        logger.debug(f"Loading configuration from {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, OSError) as e:
            raise ConfigError(f"Invalid configuration in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Invalid configuration in {path}: expected a mapping")

        registry = data.get("registry", DEFAULT_REGISTRY)
        if not isinstance(registry, str) or not registry:
            raise ConfigError(f"Invalid 'registry' value in {path}: {registry!r}")

        timeout = data.get("timeout")
        if timeout is not None and (
            isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0
        ):
            raise ConfigError(f"Invalid 'timeout' value in {path}: {timeout!r}")

        return cls(registry=registry, timeout=timeout)

    def resolve_registry(self, registry: Optional[str] = None) -> str:
        """
        Compute the registry URL to use.

        Args:
            registry: Value passed on the command line, if any

        Returns:
            The registry URL by priority: argument > environment > config
        """
        if registry:
            return registry
        env_value = os.environ.get(REGISTRY_ENV_VAR)
        if env_value:
            return env_value
        return self.registry

    def resolve_timeout(self, timeout: Optional[int] = None) -> Optional[int]:
        """Network timeout to use: the command-line value, then the config file."""
        if timeout is not None:
            return timeout
        return self.timeout
