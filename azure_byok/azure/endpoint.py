"""
Azure OpenAI chat endpoint.

OpenAIEndpoint with Azure-specific handling:
- API key sent the way both Azure hosting styles expect it
- o-series parameter restrictions applied to every outgoing body
- authentication failures re-raised with a hint about the key
"""

import logging
from typing import Any

import httpx

from azure_byok.azure.sanitizer import sanitize_body
from azure_byok.config.settings import AzureSettings
from azure_byok.exceptions import AuthenticationError
from azure_byok.providers.base import ChatModelInfo, ChatResponse
from azure_byok.providers.openai_endpoint import OpenAIEndpoint

logger = logging.getLogger(__name__)

_AUTH_MARKERS = ("auth", "authentication")


class AzureOpenAIEndpoint(OpenAIEndpoint):
    """Azure OpenAI endpoint for one deployment.

    Holds model_info, api_key and url for its whole lifetime. A different
    prompt-token budget means a new instance (with_prompt_token_budget).
    """

    def __init__(
        self,
        model_info: ChatModelInfo,
        api_key: str,
        url: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        settings: AzureSettings | None = None,
    ):
        super().__init__(model_info, api_key, url, http_client=http_client, timeout=timeout)
        self._settings = settings

    @classmethod
    def from_fields(
        cls,
        model_info: ChatModelInfo,
        api_key: str,
        url: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        settings: AzureSettings | None = None,
    ) -> "AzureOpenAIEndpoint":
        """Build an endpoint from its immutable fields."""
        return cls(
            model_info, api_key, url, http_client=http_client, timeout=timeout, settings=settings
        )

    def get_auth_headers(self) -> dict[str, str]:
        # Azure OpenAI resources read api-key; serverless endpoints read the bearer token
        return {
            "api-key": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
        }

    def intercept_body(self, body: dict[str, Any] | None) -> None:
        super().intercept_body(body)
        sanitize_body(body, self.model, self._settings)

    def with_prompt_token_budget(self, max_prompt_tokens: int) -> "AzureOpenAIEndpoint":
        """Return a new endpoint for this deployment with max_prompt_tokens overridden."""
        return AzureOpenAIEndpoint.from_fields(
            self._model_info.with_max_prompt_tokens(max_prompt_tokens),
            self._api_key,
            self._url,
            http_client=self._http_client,
            timeout=self._timeout,
            settings=self._settings,
        )

    async def make_chat_request(
        self,
        debug_name: str,
        messages: list[dict[str, Any]],
        *,
        request_options: dict[str, Any] | None = None,
    ) -> ChatResponse:
        """Send a chat request, translating authentication failures.

        Raises:
            AuthenticationError: If the failure message mentions authentication
            Exception: Any other failure, unchanged
        """
        try:
            return await super().make_chat_request(
                debug_name, messages, request_options=request_options
            )
        except Exception as e:
            error_message = getattr(e, "message", None) or str(e)
            lowered = error_message.lower()
            if any(marker in lowered for marker in _AUTH_MARKERS):
                logger.warning(
                    f"Azure OpenAI authentication failed for {self.model}",
                    extra={"model_id": self.model, "provider": "Azure"},
                )
                raise AuthenticationError(
                    f"Azure OpenAI authentication failed: {error_message}. "
                    "Please check your API key configuration.",
                    status_code=getattr(e, "status_code", None),
                    service="Azure",
                ) from None
            raise
