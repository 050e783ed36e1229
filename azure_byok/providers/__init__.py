"""
Chat endpoint abstraction layer.

Architecture:
    Host (chat UI, agents)
         ↓
    ChatModelRegistry (registered endpoints)
         ↓
    BYOK provider registries (Azure, OpenAI-compatible)
         ↓
    ChatEndpoint implementations
         ↓
    HTTP APIs

Usage:
    from azure_byok.providers import ChatModelRegistry

    models = ChatModelRegistry()
    endpoint = models.get("Azure-gpt-4o")
    response = await endpoint.make_chat_request("chat", messages)
"""

from azure_byok.providers.base import (
    ChatEndpoint,
    ChatModelInfo,
    ChatModelMetadata,
    ChatResponse,
    ModelCapabilities,
)
from azure_byok.providers.byok import (
    BaseOpenAICompatibleBYOKRegistry,
    BYOKAuthType,
    BYOKModelCapabilities,
    GlobalKeyModelConfig,
    NoAuthModelConfig,
    PerModelConfig,
    chat_model_info_to_metadata,
    is_per_model_config,
)
from azure_byok.providers.openai_endpoint import OpenAIEndpoint
from azure_byok.providers.registry import ChatModelRegistry, Registration

__all__ = [
    "ChatEndpoint",
    "ChatModelInfo",
    "ChatModelMetadata",
    "ChatResponse",
    "ModelCapabilities",
    "OpenAIEndpoint",
    "ChatModelRegistry",
    "Registration",
    "BaseOpenAICompatibleBYOKRegistry",
    "BYOKAuthType",
    "BYOKModelCapabilities",
    "GlobalKeyModelConfig",
    "PerModelConfig",
    "NoAuthModelConfig",
    "chat_model_info_to_metadata",
    "is_per_model_config",
]
