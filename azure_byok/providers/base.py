"""
Base types for BYOK chat endpoints.

This module defines the records passed between the registry, the endpoints
and the host that displays registered models:

- ModelCapabilities: context limits and feature support of one model
- ChatModelInfo: a model's identity plus its capabilities
- ChatModelMetadata: the flattened view handed to the host registry
- ChatResponse: normalized result of one chat request
- ChatEndpoint: the interface every request-executing endpoint implements

All records are frozen; changing a limit means building a new record.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class ModelCapabilities:
    """Describes what a model can do and how much it can take.

    Records produced for reasoning models keep
    max_context_window_tokens == max_prompt_tokens + max_output_tokens.
    """

    supports_tool_calls: bool = False
    supports_vision: bool = False
    max_context_window_tokens: int = 108192
    max_prompt_tokens: int = 100000
    max_output_tokens: int = 8192


@dataclass(frozen=True)
class ChatModelInfo:
    """Identity and capabilities of one chat model."""

    id: str
    name: str
    capabilities: ModelCapabilities = field(default_factory=ModelCapabilities)
    version: str = "1.0.0"
    family: str = ""
    is_chat_default: bool = False

    @property
    def max_prompt_tokens(self) -> int:
        return self.capabilities.max_prompt_tokens

    @property
    def max_output_tokens(self) -> int:
        return self.capabilities.max_output_tokens

    def with_capabilities(self, capabilities: ModelCapabilities) -> "ChatModelInfo":
        """Return a copy carrying different capabilities."""
        return replace(self, capabilities=capabilities)

    def with_max_prompt_tokens(self, max_prompt_tokens: int) -> "ChatModelInfo":
        """Return a copy whose prompt-token limit is overridden."""
        return self.with_capabilities(
            replace(self.capabilities, max_prompt_tokens=max_prompt_tokens)
        )


@dataclass(frozen=True)
class ChatModelMetadata:
    """What the host registry shows for a registered model."""

    id: str
    name: str
    vendor: str
    family: str
    version: str
    max_input_tokens: int
    max_output_tokens: int
    supports_tool_calls: bool
    supports_vision: bool
    is_default: bool = False


@dataclass
class ChatResponse:
    """Standardized response from a chat endpoint.

    Both the Chat Completions and Responses surfaces are parsed into this shape.
    """

    content: str
    model: str
    input_tokens: int
    output_tokens: int
    latency_ms: float
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    finish_reason: str | None = None
    request_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def total_tokens(self) -> int:
        """Total tokens used."""
        return self.input_tokens + self.output_tokens


class ChatEndpoint(ABC):
    """Abstract base class for request-executing chat endpoints.

    Example:
        endpoint = AzureOpenAIEndpoint(model_info, api_key, url)
        response = await endpoint.make_chat_request(
            "panel-chat", [{"role": "user", "content": "Hello"}]
        )

        # Same deployment, smaller prompt window
        trimmed = endpoint.with_prompt_token_budget(32000)
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Model (deployment) identifier requests are sent for."""
        pass

    @property
    @abstractmethod
    def url(self) -> str:
        """Fully resolved request URL."""
        pass

    @property
    @abstractmethod
    def model_info(self) -> ChatModelInfo:
        """Identity and capabilities of the model behind this endpoint."""
        pass

    @property
    def max_prompt_tokens(self) -> int:
        return self.model_info.max_prompt_tokens

    @property
    def max_output_tokens(self) -> int:
        return self.model_info.max_output_tokens

    @property
    def supports_tool_calls(self) -> bool:
        return self.model_info.capabilities.supports_tool_calls

    @property
    def supports_vision(self) -> bool:
        return self.model_info.capabilities.supports_vision

    @abstractmethod
    def intercept_body(self, body: dict[str, Any] | None) -> None:
        """Adjust an outgoing request body in place right before it is sent."""
        pass

    @abstractmethod
    async def make_chat_request(
        self,
        debug_name: str,
        messages: list[dict[str, Any]],
        *,
        request_options: dict[str, Any] | None = None,
    ) -> ChatResponse:
        """Send one chat request and return the parsed response.

        Args:
            debug_name: Label of the calling feature, used in logs
            messages: Chat messages with 'role' and 'content' keys
            request_options: Extra body parameters (temperature, top_p, tools, ...)

        Returns:
            ChatResponse with the completion

        Raises:
            ProviderError: If the transport or the service fails
            RateLimitError: If rate limited
            AuthenticationError: If authentication fails
        """
        pass

    @abstractmethod
    def with_prompt_token_budget(self, max_prompt_tokens: int) -> "ChatEndpoint":
        """Return a new endpoint for the same model with a different prompt limit.

        The receiver is not modified.
        """
        pass
