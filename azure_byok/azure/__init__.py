"""
Azure OpenAI bring-your-own-key support.

Resolves user-entered deployment URLs, picks the API surface per model,
derives capabilities and strips parameters o-series models reject.

Usage:
    from azure_byok.azure import AzureBYOKModelRegistry, resolve_azure_url

    url = resolve_azure_url("gpt-4o", "https://contoso.openai.azure.com")
"""

from azure_byok.azure.capabilities import (
    REASONING_MODEL_LIMITS,
    derive_capabilities,
    supports_vision,
)
from azure_byok.azure.endpoint import AzureOpenAIEndpoint
from azure_byok.azure.provider import AzureBYOKModelRegistry
from azure_byok.azure.sanitizer import sanitize_body
from azure_byok.azure.urls import (
    DeploymentTopology,
    SurfaceKind,
    classify_deployment_url,
    is_reasoning_model,
    resolve_azure_url,
    select_surface,
    should_use_responses_api,
)

__all__ = [
    "AzureBYOKModelRegistry",
    "AzureOpenAIEndpoint",
    "DeploymentTopology",
    "SurfaceKind",
    "REASONING_MODEL_LIMITS",
    "classify_deployment_url",
    "derive_capabilities",
    "is_reasoning_model",
    "resolve_azure_url",
    "sanitize_body",
    "select_surface",
    "should_use_responses_api",
    "supports_vision",
]
