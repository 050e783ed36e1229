"""Capability derivation for Azure-hosted models."""

from dataclasses import replace

from azure_byok.azure.urls import is_reasoning_model, matches_any_family
from azure_byok.config.settings import AzureConfig, AzureSettings
from azure_byok.providers.base import ModelCapabilities

# o-series limits from Azure docs: 200k input + 100k output
REASONING_MODEL_LIMITS = {
    "max_context_window_tokens": 300000,
    "max_prompt_tokens": 200000,
    "max_output_tokens": 100000,
}

_MULTIMODAL_FAMILIES = ("gpt-4o", "gpt-4.1")


def supports_vision(model_id: str, settings: AzureSettings | None = None) -> bool:
    """Checks if a model supports image input."""
    settings = settings or AzureConfig.get()
    return matches_any_family(model_id, settings.vision_models)


def derive_capabilities(
    model_id: str,
    baseline: ModelCapabilities,
    settings: AzureSettings | None = None,
) -> ModelCapabilities:
    """Augment baseline capabilities with what Azure documents for the model.

    First match wins:
      1. Reasoning models get tool calls, vision per family and fixed
         300k/200k/100k limits (baseline limits are discarded).
      2. GPT-4o / GPT-4.1 get tool calls and vision; limits stay.
      3. Anything else is returned as-is.

    The baseline is never modified.
    """
    settings = settings or AzureConfig.get()

    if is_reasoning_model(model_id, settings):
        return replace(
            baseline,
            supports_tool_calls=True,
            supports_vision=supports_vision(model_id, settings),
            **REASONING_MODEL_LIMITS,
        )

    if matches_any_family(model_id, _MULTIMODAL_FAMILIES):
        return replace(baseline, supports_tool_calls=True, supports_vision=True)

    return baseline
