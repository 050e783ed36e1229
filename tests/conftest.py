"""
Pytest configuration and shared fixtures.

Every test starts from default Azure settings and an empty chat model table.
"""

import json
from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest

from azure_byok.config.settings import AzureConfig, AzureSettings
from azure_byok.providers.base import ChatModelInfo, ModelCapabilities
from azure_byok.providers.registry import ChatModelRegistry

GATEWAY_URL = "https://contoso.openai.azure.com"
RAW_INFERENCE_URL = "https://contoso.models.ai.azure.com"


@pytest.fixture(autouse=True)
def reset_azure_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from environment overrides and cached settings."""
    monkeypatch.delenv("AZURE_BYOK_CONFIG", raising=False)
    monkeypatch.delenv("AZURE_BYOK_API_VERSION", raising=False)
    AzureConfig.reset()
    yield
    AzureConfig.reset()


@pytest.fixture
def settings() -> AzureSettings:
    """Default settings, independent of the bundled YAML file."""
    return AzureSettings()


@pytest.fixture
def model_registry() -> ChatModelRegistry:
    return ChatModelRegistry()


@pytest.fixture
def model_info() -> Callable[..., ChatModelInfo]:
    """Factory for ChatModelInfo records."""

    def _make(model_id: str = "gpt-4o", **caps: Any) -> ChatModelInfo:
        return ChatModelInfo(
            id=model_id,
            name=model_id,
            capabilities=ModelCapabilities(**caps),
        )

    return _make


class RecordingTransport:
    """httpx transport that records requests and replies with a canned response."""

    def __init__(
        self,
        status_code: int = 200,
        payload: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        text: str | None = None,
    ):
        self.status_code = status_code
        self.payload = payload if payload is not None else {}
        self.headers = headers or {}
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text, headers=self.headers)
        return httpx.Response(self.status_code, json=self.payload, headers=self.headers)

    @property
    def last_body(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def chat_completion_payload() -> dict[str, Any]:
    return {
        "id": "chatcmpl-123",
        "model": "gpt-4o",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "Hello there"},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 12, "completion_tokens": 3, "total_tokens": 15},
    }


@pytest.fixture
def responses_payload() -> dict[str, Any]:
    return {
        "id": "resp_123",
        "model": "o3-mini",
        "status": "completed",
        "output": [
            {
                "type": "message",
                "role": "assistant",
                "content": [{"type": "output_text", "text": "Reasoned answer"}],
            }
        ],
        "usage": {"input_tokens": 20, "output_tokens": 7},
    }


@pytest.fixture
def make_client() -> Callable[..., tuple[httpx.AsyncClient, RecordingTransport]]:
    """Factory returning an AsyncClient wired to a RecordingTransport."""

    def _make(**kwargs: Any) -> tuple[httpx.AsyncClient, RecordingTransport]:
        transport = RecordingTransport(**kwargs)
        return httpx.AsyncClient(transport=httpx.MockTransport(transport)), transport

    return _make
