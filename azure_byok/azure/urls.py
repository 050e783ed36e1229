"""
Azure deployment URL resolution and API surface selection.

Users paste whatever URL the Azure portal showed them. Two hosting styles
exist and they need different request paths:

    Gateway (Azure OpenAI resource, *.openai.azure.com)
        {base}/openai/deployments/{model}/chat/completions?api-version=...
        {base}/openai/v1/responses?api-version=...
    Raw inference (serverless / managed online endpoints)
        {base}/v1/chat/completions
        {base}/v1/responses

All functions here are pure and safe to call concurrently.
"""

from enum import Enum

from azure_byok.config.settings import AzureConfig, AzureSettings
from azure_byok.exceptions import UnrecognizedEndpointError

_RESOLVED_PATH_MARKERS = ("/chat/completions", "/responses")


class DeploymentTopology(Enum):
    """How the deployment behind a URL is hosted."""

    GATEWAY = "gateway"
    RAW_INFERENCE = "raw_inference"


class SurfaceKind(Enum):
    """Request/response shape a model must be called with."""

    CHAT_COMPLETIONS = "chat_completions"
    RESPONSES = "responses"


def matches_any_family(model_id: str, tokens: tuple[str, ...]) -> bool:
    lowered = model_id.lower()
    return any(token in lowered for token in tokens)


def is_reasoning_model(model_id: str, settings: AzureSettings | None = None) -> bool:
    """Check whether a model belongs to the o-series reasoning family.

    Case-insensitive substring match, so deployment names such as
    "O3-mini-prod" or "my-o4-mini" are recognized too. This is the single
    family test shared by surface selection, capability derivation and body
    sanitization.
    """
    settings = settings or AzureConfig.get()
    return matches_any_family(model_id, settings.reasoning_models)


def should_use_responses_api(model_id: str, settings: AzureSettings | None = None) -> bool:
    """Determine if a model should use the Responses API.

    True for every reasoning model and for the advanced families listed in
    settings.responses_api_models. Unknown models default to Chat Completions.

    Args:
        model_id: The model (deployment) identifier
        settings: Settings to use (process-wide settings if None)

    Returns:
        True for Responses API, False for Chat Completions API
    """
    settings = settings or AzureConfig.get()
    return is_reasoning_model(model_id, settings) or matches_any_family(
        model_id, settings.responses_api_models
    )


def select_surface(model_id: str, settings: AzureSettings | None = None) -> SurfaceKind:
    if should_use_responses_api(model_id, settings):
        return SurfaceKind.RESPONSES
    return SurfaceKind.CHAT_COMPLETIONS


def _normalize_base_url(url: str) -> str:
    if url.endswith("/"):
        url = url[:-1]
    if url.endswith("/v1"):
        url = url[:-3]
    return url


def classify_deployment_url(url: str, settings: AzureSettings | None = None) -> DeploymentTopology:
    """Work out the hosting style from a (normalized) deployment URL.

    Host markers are matched case-insensitively.

    Raises:
        UnrecognizedEndpointError: If the host matches no known Azure host
    """
    settings = settings or AzureConfig.get()
    lowered = url.lower()
    if any(host in lowered for host in settings.raw_inference_hosts):
        return DeploymentTopology.RAW_INFERENCE
    if any(host in lowered for host in settings.gateway_hosts):
        return DeploymentTopology.GATEWAY
    raise UnrecognizedEndpointError(url)


def resolve_azure_url(
    model_id: str,
    url: str,
    use_responses_api: bool = False,
    *,
    settings: AzureSettings | None = None,
) -> str:
    """Turn a user-supplied deployment URL into the full request URL.

    URLs that already contain a request path are returned unchanged, which
    makes the function idempotent.

    Args:
        model_id: Deployment name, used in gateway chat-completions paths
        url: URL as entered by the user (trailing "/" or "/v1" allowed)
        use_responses_api: Target the Responses API instead of Chat Completions
        settings: Settings to use (process-wide settings if None)

    Returns:
        Fully qualified request URL

    Raises:
        UnrecognizedEndpointError: If the host is not a known Azure host

    Example:
        >>> resolve_azure_url("gpt-4", "https://x.openai.azure.com/")
        'https://x.openai.azure.com/openai/deployments/gpt-4/chat/completions?api-version=2025-04-01-preview'
    """
    if any(marker in url for marker in _RESOLVED_PATH_MARKERS):
        return url

    settings = settings or AzureConfig.get()
    url = _normalize_base_url(url)
    topology = classify_deployment_url(url, settings)

    if topology is DeploymentTopology.RAW_INFERENCE:
        if use_responses_api:
            return f"{url}/v1/responses"
        return f"{url}/v1/chat/completions"

    if use_responses_api:
        return f"{url}/openai/v1/responses?api-version={settings.api_version}"
    return (
        f"{url}/openai/deployments/{model_id}/chat/completions"
        f"?api-version={settings.api_version}"
    )
