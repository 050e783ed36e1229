"""
OpenAI-compatible chat endpoint.

Sends one non-streaming request to a fully resolved URL and parses the
reply. Speaks both request shapes:

- Chat Completions: POST {...}/chat/completions with "messages"
- Responses API:    POST {...}/responses with "input"

The shape is chosen from the URL, so callers only need to resolve the
right URL. Requests are not retried; failures are mapped to
azure_byok.exceptions types and raised.

Example:
    >>> info = ChatModelInfo(id="gpt-4o", name="GPT-4o")
    >>> endpoint = OpenAIEndpoint(info, api_key, "https://api.openai.com/v1/chat/completions")
    >>> response = await endpoint.make_chat_request(
    ...     "inline-chat", [{"role": "user", "content": "Hello"}]
    ... )
"""

import logging
import time
from typing import Any

import httpx

from azure_byok.exceptions import ProviderError, RateLimitError
from azure_byok.providers.base import ChatEndpoint, ChatModelInfo, ChatResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120.0


class OpenAIEndpoint(ChatEndpoint):
    """Chat endpoint for any server speaking the OpenAI wire format.

    Attributes:
        model_info: Identity and capabilities of the model
        url: Fully resolved request URL
    """

    def __init__(
        self,
        model_info: ChatModelInfo,
        api_key: str,
        url: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        """Initialize the endpoint.

        Args:
            model_info: Identity and capabilities of the model
            api_key: Key sent with every request
            url: Fully resolved request URL
            http_client: Shared client; a short-lived one is used per request if None
            timeout: Request timeout in seconds
        """
        self._model_info = model_info
        self._api_key = api_key
        self._url = url
        self._http_client = http_client
        self._timeout = timeout if timeout is not None else DEFAULT_TIMEOUT

    @property
    def model(self) -> str:
        return self._model_info.id

    @property
    def url(self) -> str:
        return self._url

    @property
    def model_info(self) -> ChatModelInfo:
        return self._model_info

    @property
    def uses_responses_api(self) -> bool:
        """True when the URL targets the Responses API."""
        return "/responses" in self._url

    def get_auth_headers(self) -> dict[str, str]:
        """Headers carrying the API key."""
        return {"Authorization": f"Bearer {self._api_key}"}

    def create_request_body(
        self,
        messages: list[dict[str, Any]],
        request_options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Build the JSON body for the surface this endpoint targets.

        Args:
            messages: Chat messages
            request_options: Extra parameters merged into the body

        Returns:
            A fresh body dict owned by the caller
        """
        if self.uses_responses_api:
            body: dict[str, Any] = {
                "model": self.model,
                "input": messages,
                "max_output_tokens": self.max_output_tokens,
            }
        else:
            body = {
                "model": self.model,
                "messages": messages,
                "max_tokens": self.max_output_tokens,
            }
        body["stream"] = False
        if request_options:
            body.update(request_options)
        return body

    def intercept_body(self, body: dict[str, Any] | None) -> None:
        """Generic cleanup applied to every outgoing body.

        Drops None values, empty tool lists, a tool_choice without tools, and
        tools entirely when the model cannot call them.
        """
        if not body:
            return

        for key in [k for k, v in body.items() if v is None]:
            del body[key]

        if "tools" in body and (not body["tools"] or not self.supports_tool_calls):
            del body["tools"]
        if "tool_choice" in body and "tools" not in body:
            del body["tool_choice"]

    async def make_chat_request(
        self,
        debug_name: str,
        messages: list[dict[str, Any]],
        *,
        request_options: dict[str, Any] | None = None,
    ) -> ChatResponse:
        """Send one chat request and parse the result.

        Raises:
            RateLimitError: On HTTP 429
            ProviderError: On any other non-2xx status, timeout or network error
        """
        body = self.create_request_body(messages, request_options)
        self.intercept_body(body)

        headers = {"Content-Type": "application/json", **self.get_auth_headers()}
        logger.debug(
            f"[{debug_name}] POST {self._url} (model={self.model})",
            extra={"model_id": self.model},
        )

        start_time = time.monotonic()
        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    self._url, json=body, headers=headers, timeout=self._timeout
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(
                        self._url, json=body, headers=headers, timeout=self._timeout
                    )
        except httpx.TimeoutException as e:
            raise ProviderError(f"Chat request to {self.model} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Chat request to {self.model} failed: {e}") from e
        latency_ms = (time.monotonic() - start_time) * 1000

        if response.status_code == 429:
            retry_after = response.headers.get("retry-after")
            raise RateLimitError(
                f"Rate limited by {self.model}",
                retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None,
            )

        if response.is_error:
            raise ProviderError(
                f"Chat request to {self.model} failed: {response.status_code} "
                f"{response.reason_phrase}: {response.text}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError(f"Failed to parse response from {self.model}: {e}") from e

        return self._parse_response(payload, latency_ms, response.headers.get("x-request-id"))

    def _parse_response(
        self, payload: dict[str, Any], latency_ms: float, request_id: str | None
    ) -> ChatResponse:
        usage = payload.get("usage") or {}

        if self.uses_responses_api:
            content = payload.get("output_text") or ""
            if not content:
                chunks = [
                    part.get("text", "")
                    for item in payload.get("output") or []
                    for part in item.get("content") or []
                    if part.get("type") == "output_text"
                ]
                content = "".join(chunks)
            return ChatResponse(
                content=content,
                model=payload.get("model", self.model),
                input_tokens=usage.get("input_tokens", 0),
                output_tokens=usage.get("output_tokens", 0),
                latency_ms=latency_ms,
                finish_reason=payload.get("status"),
                request_id=request_id or payload.get("id"),
            )

        choices = payload.get("choices") or []
        first = choices[0] if choices else {}
        message = first.get("message") or {}
        return ChatResponse(
            content=message.get("content") or "",
            model=payload.get("model", self.model),
            input_tokens=usage.get("prompt_tokens", 0),
            output_tokens=usage.get("completion_tokens", 0),
            latency_ms=latency_ms,
            finish_reason=first.get("finish_reason"),
            request_id=request_id or payload.get("id"),
            metadata={"tool_calls": message["tool_calls"]} if message.get("tool_calls") else {},
        )

    def with_prompt_token_budget(self, max_prompt_tokens: int) -> "OpenAIEndpoint":
        """Return a new endpoint for the same model with a different prompt limit."""
        return OpenAIEndpoint(
            self._model_info.with_max_prompt_tokens(max_prompt_tokens),
            self._api_key,
            self._url,
            http_client=self._http_client,
            timeout=self._timeout,
        )
