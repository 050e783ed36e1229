"""
Bring-your-own-key provider plumbing.

Defines how a user describes a model they want to register (the config
dataclasses), how those descriptions become ChatModelInfo records, and the
base registry class shared by OpenAI-compatible providers.

Providers differ in how keys are scoped:
    GLOBAL_API_KEY        One key for every model of the provider (OpenAI, Groq)
    PER_MODEL_DEPLOYMENT  Every model has its own URL and key (Azure)
    NONE                  No key at all (local servers)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

import httpx

from azure_byok.exceptions import ProviderError
from azure_byok.providers.base import (
    ChatModelInfo,
    ChatModelMetadata,
    ModelCapabilities,
)
from azure_byok.providers.openai_endpoint import OpenAIEndpoint
from azure_byok.providers.registry import ChatModelRegistry, Registration

logger = logging.getLogger(__name__)

DEFAULT_MAX_PROMPT_TOKENS = 100000
DEFAULT_MAX_OUTPUT_TOKENS = 8192


class BYOKAuthType(Enum):
    """How a provider's models are authenticated."""

    GLOBAL_API_KEY = "global_api_key"
    PER_MODEL_DEPLOYMENT = "per_model_deployment"
    NONE = "none"


@dataclass(frozen=True)
class BYOKModelCapabilities:
    """User-supplied capability overrides; None means "not specified"."""

    name: str | None = None
    max_input_tokens: int | None = None
    max_output_tokens: int | None = None
    tool_calling: bool | None = None
    vision: bool | None = None


@dataclass(frozen=True)
class GlobalKeyModelConfig:
    """Model registered under a provider-wide API key."""

    model_id: str
    api_key: str
    capabilities: BYOKModelCapabilities | None = None


@dataclass(frozen=True)
class PerModelConfig:
    """Model with its own deployment URL and API key."""

    model_id: str
    api_key: str
    deployment_url: str
    capabilities: BYOKModelCapabilities | None = None


@dataclass(frozen=True)
class NoAuthModelConfig:
    """Model served without authentication."""

    model_id: str
    capabilities: BYOKModelCapabilities | None = None


BYOKModelConfig = Union[GlobalKeyModelConfig, PerModelConfig, NoAuthModelConfig]


def is_per_model_config(config: BYOKModelConfig) -> bool:
    """True if config carries both a deployment URL and an API key."""
    return (
        isinstance(config, PerModelConfig)
        and bool(config.deployment_url)
        and bool(config.api_key)
    )


def missing_deployment_fields(config: BYOKModelConfig) -> tuple[str, ...]:
    """Names of the per-model fields config does not provide."""
    missing = []
    if not getattr(config, "deployment_url", None):
        missing.append("deployment_url")
    if not getattr(config, "api_key", None):
        missing.append("api_key")
    return tuple(missing)


def chat_model_info_to_metadata(info: ChatModelInfo, vendor: str = "byok") -> ChatModelMetadata:
    """Flatten a ChatModelInfo into what the host registry displays."""
    caps = info.capabilities
    return ChatModelMetadata(
        id=info.id,
        name=info.name,
        vendor=vendor,
        family=info.family or info.id,
        version=info.version,
        max_input_tokens=caps.max_prompt_tokens,
        max_output_tokens=caps.max_output_tokens,
        supports_tool_calls=caps.supports_tool_calls,
        supports_vision=caps.supports_vision,
        is_default=info.is_chat_default,
    )


class BaseOpenAICompatibleBYOKRegistry:
    """Registers user-keyed models of one OpenAI-compatible provider.

    Subclasses override get_model_info to add provider knowledge,
    get_all_models when the provider has no listing API, and register_model
    when URLs or endpoint types differ.

    Attributes:
        auth_type: How this provider's models are authenticated
        name: Display name, used as registration-name prefix
        base_url: API root for providers with a single host ('' otherwise)
    """

    def __init__(
        self,
        auth_type: BYOKAuthType,
        name: str,
        base_url: str,
        model_registry: ChatModelRegistry,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the provider registry.

        Args:
            auth_type: How this provider's models are authenticated
            name: Display name of the provider
            base_url: API root, e.g. "https://api.groq.com/openai/v1"
            model_registry: Host table new models are added to
            http_client: Shared client for endpoints and listing calls
        """
        self.auth_type = auth_type
        self.name = name
        self.base_url = base_url.rstrip("/")
        self._model_registry = model_registry
        self._http_client = http_client

    def get_model_info(
        self,
        model_id: str,
        api_key: str,
        capabilities: BYOKModelCapabilities | None = None,
    ) -> ChatModelInfo:
        """Baseline model info from user overrides or defaults.

        Args:
            model_id: Model identifier
            api_key: Key for the model (unused by the base implementation)
            capabilities: Optional user overrides

        Returns:
            A fresh ChatModelInfo
        """
        caps = capabilities or BYOKModelCapabilities()
        max_prompt = caps.max_input_tokens or DEFAULT_MAX_PROMPT_TOKENS
        max_output = caps.max_output_tokens or DEFAULT_MAX_OUTPUT_TOKENS

        return ChatModelInfo(
            id=model_id,
            name=caps.name or model_id,
            family=model_id,
            capabilities=ModelCapabilities(
                supports_tool_calls=bool(caps.tool_calling),
                supports_vision=bool(caps.vision),
                max_context_window_tokens=max_prompt + max_output,
                max_prompt_tokens=max_prompt,
                max_output_tokens=max_output,
            ),
        )

    async def get_all_models(self, api_key: str) -> list[dict[str, str]]:
        """List models the provider offers for this key.

        Returns:
            List of {"id": ..., "name": ...} dicts

        Raises:
            ProviderError: If the listing call fails
        """
        headers = {"Authorization": f"Bearer {api_key}"}
        try:
            if self._http_client is not None:
                response = await self._http_client.get(f"{self.base_url}/models", headers=headers)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(f"{self.base_url}/models", headers=headers)
            response.raise_for_status()
            data: list[dict[str, Any]] = response.json().get("data", [])
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"Failed to list {self.name} models: {e.response.status_code} {e.response.reason_phrase}",
                status_code=e.response.status_code,
                service=self.name,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(f"Failed to list {self.name} models: {e}", service=self.name) from e

        return [{"id": m["id"], "name": m.get("name", m["id"])} for m in data if "id" in m]

    def registration_name(self, model_id: str) -> str:
        return f"{self.name}-{model_id}"

    def register_model(self, config: BYOKModelConfig) -> Registration:
        """Register one model and return its disposable handle.

        Raises:
            Exception: Whatever endpoint construction or registration raised
        """
        api_key = getattr(config, "api_key", "")
        model_info = self.get_model_info(config.model_id, api_key, config.capabilities)

        try:
            endpoint = OpenAIEndpoint(
                model_info,
                api_key,
                f"{self.base_url}/chat/completions",
                http_client=self._http_client,
            )
            return self._model_registry.register(
                self.registration_name(config.model_id),
                endpoint,
                chat_model_info_to_metadata(model_info, vendor=self.name),
            )
        except Exception:
            logger.error(
                f"Error registering {self.name} model {config.model_id}",
                extra={"model_id": config.model_id, "provider": self.name},
            )
            raise
