"""
Azure endpoint settings.

The API version pinned on gateway URLs and the model-family token lists
change whenever Azure ships a new model or API revision. They live here as
configuration rather than being scattered through the resolution logic.

Resolution order (later wins):
    1. Dataclass defaults below
    2. YAML file (bundled azure_endpoints.yaml, or AZURE_BYOK_CONFIG)
    3. AZURE_BYOK_API_VERSION environment variable

Usage:
    from azure_byok.config import AzureConfig

    settings = AzureConfig.get()
    print(settings.api_version)

    # Point at a different file (tests, staging)
    AzureConfig.reload(Path("/etc/azure-byok/endpoints.yaml"))
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "azure_endpoints.yaml"

API_VERSION = "2025-04-01-preview"

RAW_INFERENCE_HOSTS = ("models.ai.azure.com", "inference.ml.azure.com")
GATEWAY_HOSTS = ("openai.azure.com",)

REASONING_MODELS = ("o1", "o3", "o3-mini", "o4-mini", "codex-mini", "o3-pro")
ADVANCED_RESPONSES_MODELS = (
    "gpt-4.1",
    "gpt-4.1-mini",
    "gpt-4.1-nano",
    "gpt-image-1",
    "computer-use-preview",
)
VISION_MODELS = ("gpt-4o", "gpt-4.1", "gpt-image-1", "o1", "o3", "o4-mini", "codex-mini", "o3-pro")

_TUPLE_FIELDS = (
    "raw_inference_hosts",
    "gateway_hosts",
    "reasoning_models",
    "responses_api_models",
    "vision_models",
)


@dataclass(frozen=True)
class AzureSettings:
    """Immutable snapshot of Azure endpoint configuration."""

    api_version: str = API_VERSION
    raw_inference_hosts: tuple[str, ...] = RAW_INFERENCE_HOSTS
    gateway_hosts: tuple[str, ...] = GATEWAY_HOSTS
    reasoning_models: tuple[str, ...] = REASONING_MODELS
    # Reasoning models always use the Responses API; these are the extras
    responses_api_models: tuple[str, ...] = ADVANCED_RESPONSES_MODELS
    vision_models: tuple[str, ...] = VISION_MODELS
    request_timeout: float = 120.0

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "AzureSettings":
        """Build settings from a parsed YAML mapping.

        Unknown keys are ignored with a warning; list values become tuples.

        Args:
            data: Mapping of field name to value

        Returns:
            AzureSettings with the given overrides applied to defaults

        Raises:
            ValueError: If a list setting is given as a scalar
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                logger.warning(f"Ignoring unknown Azure setting: {key}")
                continue
            if key in _TUPLE_FIELDS:
                if not isinstance(value, (list, tuple)):
                    raise ValueError(f"{key} must be a list")
                value = tuple(str(v).lower() for v in value)
            elif key == "request_timeout":
                value = float(value)
            else:
                value = str(value)
            kwargs[key] = value
        return cls(**kwargs)


class AzureConfig:
    """Process-wide cached AzureSettings loader.

    Loads once on first access; call reload() to pick up a new file or
    reset() to go back to the unloaded state.
    """

    _settings: AzureSettings | None = None
    _config_path: Path = DEFAULT_CONFIG_PATH

    @classmethod
    def _resolve_path(cls, config_path: Path | None) -> Path:
        if config_path is not None:
            return config_path
        env_path = os.environ.get("AZURE_BYOK_CONFIG")
        if env_path:
            return Path(env_path)
        return cls._config_path

    @classmethod
    def _load(cls, config_path: Path | None = None) -> AzureSettings:
        """Load settings from YAML and the environment.

        Args:
            config_path: Path to config file (uses default if None)

        Returns:
            The loaded settings (also cached on the class)
        """
        path = cls._resolve_path(config_path)
        settings = AzureSettings()

        if not path.exists():
            logger.warning(f"Azure endpoint config not found: {path}, using defaults")
        else:
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}
                if not isinstance(data, dict):
                    raise ValueError(f"expected a mapping, got {type(data).__name__}")
                settings = AzureSettings.from_mapping(data)
                logger.info(f"Loaded Azure endpoint settings from {path}")
            except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
                logger.error(f"Failed to load Azure endpoint settings from {path}: {e}")
                settings = AzureSettings()

        api_version = os.environ.get("AZURE_BYOK_API_VERSION")
        if api_version:
            settings = replace(settings, api_version=api_version)

        cls._settings = settings
        return settings

    @classmethod
    def get(cls) -> AzureSettings:
        """Return the cached settings, loading them on first use."""
        if cls._settings is None:
            return cls._load()
        return cls._settings

    @classmethod
    def reload(cls, config_path: Path | None = None) -> AzureSettings:
        """Force reload of settings.

        Args:
            config_path: Path to config file (uses default if None)
        """
        cls._settings = None
        return cls._load(config_path)

    @classmethod
    def reset(cls) -> None:
        """Drop cached settings (useful for testing)."""
        cls._settings = None
