"""Tests for azure_byok/providers/registry.py - Chat Model Registry."""

import logging

import pytest

from azure_byok.providers.base import ChatModelMetadata
from azure_byok.providers.openai_endpoint import OpenAIEndpoint
from azure_byok.providers.registry import ChatModelRegistry, Registration

URL = "https://api.example.com/v1/chat/completions"


def _metadata(model_id: str) -> ChatModelMetadata:
    return ChatModelMetadata(
        id=model_id,
        name=model_id,
        vendor="test",
        family=model_id,
        version="1.0.0",
        max_input_tokens=100000,
        max_output_tokens=8192,
        supports_tool_calls=False,
        supports_vision=False,
    )


@pytest.fixture
def endpoint(model_info):
    """Factory for endpoints of a given model."""

    def _make(model_id: str = "gpt-4o", **caps) -> OpenAIEndpoint:
        return OpenAIEndpoint(model_info(model_id, **caps), "key", URL)

    return _make


class TestChatModelRegistryBasics:
    """Tests for ChatModelRegistry basic operations."""

    def test_new_registry_is_empty(self, model_registry):
        assert model_registry.list_models() == []
        assert len(model_registry) == 0

    def test_registries_do_not_share_state(self, endpoint):
        """Each registry instance owns its own table."""
        first = ChatModelRegistry()
        second = ChatModelRegistry()

        first.register("test", endpoint(), _metadata("gpt-4o"))

        assert first.has_model("test")
        assert not second.has_model("test")

    def test_clear(self, model_registry, endpoint):
        """clear should remove all models."""
        model_registry.register("a", endpoint("a"), _metadata("a"))
        model_registry.register("b", endpoint("b"), _metadata("b"))

        model_registry.clear()

        assert model_registry.list_models() == []


class TestChatModelRegistryRegister:
    """Tests for ChatModelRegistry.register."""

    def test_register_returns_registration(self, model_registry, endpoint):
        ep = endpoint()

        registration = model_registry.register("Azure-gpt-4o", ep, _metadata("gpt-4o"))

        assert isinstance(registration, Registration)
        assert registration.name == "Azure-gpt-4o"
        assert registration.endpoint is ep
        assert registration.disposed is False
        assert model_registry.get("Azure-gpt-4o") is ep

    def test_register_multiple_models(self, model_registry, endpoint):
        model_registry.register("m1", endpoint("m1"), _metadata("m1"))
        model_registry.register("m2", endpoint("m2"), _metadata("m2"))

        assert model_registry.list_models() == ["m1", "m2"]

    def test_register_empty_name_raises(self, model_registry, endpoint):
        with pytest.raises(ValueError, match="non-empty"):
            model_registry.register("", endpoint(), _metadata("gpt-4o"))

    def test_register_replaces_with_warning(self, model_registry, endpoint, caplog):
        model_registry.register("dup", endpoint("old"), _metadata("old"))
        new = endpoint("new")

        with caplog.at_level(logging.WARNING, logger="azure_byok.providers.registry"):
            model_registry.register("dup", new, _metadata("new"))

        assert "Replacing existing chat model: dup" in caplog.text
        assert model_registry.get("dup") is new
        assert len(model_registry) == 1


class TestRegistrationDispose:
    """Tests for the disposable registration handle."""

    def test_dispose_removes_model(self, model_registry, endpoint):
        registration = model_registry.register("m", endpoint(), _metadata("m"))

        registration.dispose()

        assert registration.disposed is True
        assert not model_registry.has_model("m")

    def test_dispose_twice_is_noop(self, model_registry, endpoint):
        registration = model_registry.register("m", endpoint(), _metadata("m"))

        registration.dispose()
        registration.dispose()

        assert model_registry.list_models() == []

    def test_stale_handle_keeps_newer_entry(self, model_registry, endpoint):
        """Disposing an old handle must not remove a re-registered model."""
        old = model_registry.register("m", endpoint("old"), _metadata("old"))
        new_endpoint = endpoint("new")
        model_registry.register("m", new_endpoint, _metadata("new"))

        old.dispose()

        assert model_registry.get("m") is new_endpoint

    def test_dispose_after_unregister(self, model_registry, endpoint):
        registration = model_registry.register("m", endpoint(), _metadata("m"))
        model_registry.unregister("m")

        registration.dispose()

        assert registration.disposed is True

    def test_context_manager(self, model_registry, endpoint):
        with model_registry.register("scoped", endpoint(), _metadata("scoped")) as registration:
            assert model_registry.has_model("scoped")

        assert registration.disposed is True
        assert not model_registry.has_model("scoped")

    def test_repr(self, model_registry, endpoint):
        registration = model_registry.register("m", endpoint(), _metadata("m"))

        assert repr(registration) == "<Registration m (active)>"
        registration.dispose()
        assert repr(registration) == "<Registration m (disposed)>"


class TestChatModelRegistryLookup:
    """Tests for get / get_metadata / unregister."""

    def test_get_missing_lists_available(self, model_registry, endpoint):
        model_registry.register("present", endpoint(), _metadata("present"))

        with pytest.raises(KeyError, match="Available: present"):
            model_registry.get("absent")

    def test_get_missing_on_empty_registry(self, model_registry):
        with pytest.raises(KeyError, match="Available: none"):
            model_registry.get("absent")

    def test_get_metadata(self, model_registry, endpoint):
        metadata = _metadata("gpt-4o")
        model_registry.register("m", endpoint(), metadata)

        assert model_registry.get_metadata("m") is metadata

    def test_get_metadata_missing(self, model_registry):
        with pytest.raises(KeyError):
            model_registry.get_metadata("absent")

    def test_unregister(self, model_registry, endpoint):
        model_registry.register("m", endpoint(), _metadata("m"))

        model_registry.unregister("m")

        assert not model_registry.has_model("m")

    def test_unregister_missing(self, model_registry):
        with pytest.raises(KeyError, match="Chat model not found: absent"):
            model_registry.unregister("absent")


class TestCapabilitiesSummary:
    """Tests for get_capabilities_summary."""

    def test_summary(self, model_registry, endpoint):
        model_registry.register(
            "Azure-o3-mini",
            endpoint("o3-mini", supports_tool_calls=True, max_prompt_tokens=200000),
            _metadata("o3-mini"),
        )

        summary = model_registry.get_capabilities_summary()

        assert summary["Azure-o3-mini"]["model_id"] == "o3-mini"
        assert summary["Azure-o3-mini"]["url"] == URL
        assert summary["Azure-o3-mini"]["supports_tool_calls"] is True
        assert summary["Azure-o3-mini"]["max_prompt_tokens"] == 200000

    def test_summary_empty(self, model_registry):
        assert model_registry.get_capabilities_summary() == {}
