"""
Chat Model Registry.

Table of chat endpoints that are currently registered with the host,
keyed by registration name (e.g. "Azure-o3-mini").

Unlike a module-level singleton, the table is an ordinary object: whoever
hosts the BYOK providers creates one and passes it to every provider
registry, so tests and multiple hosts never share state.

Usage:
    from azure_byok.providers import ChatModelRegistry

    models = ChatModelRegistry()
    registration = models.register("Azure-gpt-4o", endpoint, metadata)

    endpoint = models.get("Azure-gpt-4o")

    # Removing the model again
    registration.dispose()

    # Or scoped
    with models.register("Azure-o3", endpoint, metadata):
        ...
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from azure_byok.providers.base import ChatEndpoint, ChatModelMetadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredModel:
    """One row of the registry table."""

    name: str
    endpoint: "ChatEndpoint"
    metadata: "ChatModelMetadata"


class Registration:
    """Disposable handle returned by ChatModelRegistry.register.

    dispose() removes exactly the entry this handle created; if the name was
    re-registered since, the newer entry is left alone. Disposing twice is a
    no-op.
    """

    def __init__(self, registry: "ChatModelRegistry", entry: RegisteredModel):
        self._registry = registry
        self._entry = entry
        self._disposed = False

    @property
    def name(self) -> str:
        return self._entry.name

    @property
    def endpoint(self) -> "ChatEndpoint":
        return self._entry.endpoint

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Unregister the model this handle refers to."""
        if self._disposed:
            return
        self._disposed = True
        self._registry._remove_entry(self._entry)

    def __enter__(self) -> "Registration":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else "active"
        return f"<Registration {self.name} ({state})>"


class ChatModelRegistry:
    """Registry of chat endpoints made available to the host.

    Allows:
    - Registering an endpoint under a name (returns a Registration)
    - Getting endpoints by name
    - Listing and clearing registered models
    """

    def __init__(self) -> None:
        self._models: dict[str, RegisteredModel] = {}

    def register(
        self,
        name: str,
        endpoint: "ChatEndpoint",
        metadata: "ChatModelMetadata",
    ) -> Registration:
        """Register an endpoint under a given name.

        Args:
            name: Unique identifier for this model
            endpoint: Endpoint that executes requests for the model
            metadata: What the host displays for the model

        Returns:
            Registration whose dispose() removes the model again

        Raises:
            ValueError: If name is empty
        """
        if not name:
            raise ValueError("Registration name must be non-empty")

        if name in self._models:
            logger.warning(f"Replacing existing chat model: {name}")

        entry = RegisteredModel(name=name, endpoint=endpoint, metadata=metadata)
        self._models[name] = entry
        logger.info(f"Registered chat model: {name} ({endpoint.model})")
        return Registration(self, entry)

    def _remove_entry(self, entry: RegisteredModel) -> None:
        if self._models.get(entry.name) is entry:
            del self._models[entry.name]
            logger.info(f"Unregistered chat model: {entry.name}")

    def unregister(self, name: str) -> None:
        """Remove a model from the registry.

        Args:
            name: Name of model to remove

        Raises:
            KeyError: If model not found
        """
        if name not in self._models:
            raise KeyError(f"Chat model not found: {name}")

        del self._models[name]
        logger.info(f"Unregistered chat model: {name}")

    def get(self, name: str) -> "ChatEndpoint":
        """Get a registered endpoint by name.

        Raises:
            KeyError: If model not found
        """
        if name not in self._models:
            available = ", ".join(self._models.keys()) or "none"
            raise KeyError(f"Chat model not found: {name}. Available: {available}")

        return self._models[name].endpoint

    def get_metadata(self, name: str) -> "ChatModelMetadata":
        """Get the metadata a model was registered with.

        Raises:
            KeyError: If model not found
        """
        if name not in self._models:
            raise KeyError(f"Chat model not found: {name}")
        return self._models[name].metadata

    def list_models(self) -> list[str]:
        """List all registered model names."""
        return list(self._models.keys())

    def has_model(self, name: str) -> bool:
        """Check if a model is registered."""
        return name in self._models

    def clear(self) -> None:
        """Remove all models (useful for testing)."""
        self._models.clear()
        logger.info("Cleared all chat models")

    def __len__(self) -> int:
        return len(self._models)

    def get_capabilities_summary(self) -> dict[str, dict]:
        """Get capabilities of all registered models.

        Returns:
            Dict mapping registration name to capabilities dict
        """
        summary = {}
        for name, entry in self._models.items():
            caps = entry.endpoint.model_info.capabilities
            summary[name] = {
                "model_id": entry.endpoint.model,
                "url": entry.endpoint.url,
                "supports_tool_calls": caps.supports_tool_calls,
                "supports_vision": caps.supports_vision,
                "max_context_window_tokens": caps.max_context_window_tokens,
                "max_prompt_tokens": caps.max_prompt_tokens,
                "max_output_tokens": caps.max_output_tokens,
            }
        return summary
