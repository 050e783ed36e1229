"""
BYOK registry for Azure OpenAI deployments.

Azure is different from other providers because each model has its own
deployment URL and key, and there is no central listing API. Every model
the user wants is registered individually from a PerModelConfig.

Usage:
    from azure_byok.azure import AzureBYOKModelRegistry
    from azure_byok.providers import ChatModelRegistry, PerModelConfig

    models = ChatModelRegistry()
    azure = AzureBYOKModelRegistry(models)

    registration = azure.register_model(
        PerModelConfig(
            model_id="o3-mini",
            api_key=api_key,
            deployment_url="https://contoso.openai.azure.com/",
        )
    )
    endpoint = models.get("Azure-o3-mini")

    # Later, when the user removes the model
    registration.dispose()
"""

import logging

import httpx

from azure_byok.azure.capabilities import derive_capabilities
from azure_byok.azure.endpoint import AzureOpenAIEndpoint
from azure_byok.azure.urls import resolve_azure_url, should_use_responses_api
from azure_byok.config.settings import AzureConfig, AzureSettings
from azure_byok.exceptions import MissingDeploymentFieldsError
from azure_byok.providers.base import ChatModelInfo
from azure_byok.providers.byok import (
    BaseOpenAICompatibleBYOKRegistry,
    BYOKAuthType,
    BYOKModelCapabilities,
    BYOKModelConfig,
    chat_model_info_to_metadata,
    is_per_model_config,
    missing_deployment_fields,
)
from azure_byok.providers.registry import ChatModelRegistry, Registration

logger = logging.getLogger(__name__)


class AzureBYOKModelRegistry(BaseOpenAICompatibleBYOKRegistry):
    """Registers Azure OpenAI / Azure AI deployments as chat models."""

    def __init__(
        self,
        model_registry: ChatModelRegistry,
        http_client: httpx.AsyncClient | None = None,
        settings: AzureSettings | None = None,
    ):
        """Initialize the Azure registry.

        Args:
            model_registry: Host table registered models are added to
            http_client: Shared client handed to every endpoint
            settings: Endpoint settings (process-wide settings if None)
        """
        super().__init__(
            BYOKAuthType.PER_MODEL_DEPLOYMENT,
            "Azure",
            "",
            model_registry,
            http_client,
        )
        self._settings = settings

    @property
    def settings(self) -> AzureSettings:
        return self._settings or AzureConfig.get()

    def get_model_info(
        self,
        model_id: str,
        api_key: str,
        capabilities: BYOKModelCapabilities | None = None,
    ) -> ChatModelInfo:
        base_info = super().get_model_info(model_id, api_key, capabilities)
        return base_info.with_capabilities(
            derive_capabilities(model_id, base_info.capabilities, self.settings)
        )

    async def get_all_models(self, api_key: str) -> list[dict[str, str]]:
        # No listing API: every deployment has its own URL
        return []

    def register_model(self, config: BYOKModelConfig) -> Registration:
        """Register one Azure deployment.

        Args:
            config: Per-model config with deployment URL and API key

        Returns:
            Registration whose dispose() removes the model

        Raises:
            MissingDeploymentFieldsError: If the URL or key is missing
            UnrecognizedEndpointError: If the URL is not an Azure host
        """
        if not is_per_model_config(config):
            raise MissingDeploymentFieldsError(
                model_id=config.model_id,
                missing=missing_deployment_fields(config),
                service=self.name,
            )

        settings = self.settings

        try:
            model_info = self.get_model_info(config.model_id, config.api_key, config.capabilities)
            use_responses_api = should_use_responses_api(config.model_id, settings)
            model_url = resolve_azure_url(
                config.model_id, config.deployment_url, use_responses_api, settings=settings
            )
            endpoint = AzureOpenAIEndpoint(
                model_info,
                config.api_key,
                model_url,
                http_client=self._http_client,
                timeout=settings.request_timeout,
                settings=settings,
            )
            registration = self._model_registry.register(
                self.registration_name(config.model_id),
                endpoint,
                chat_model_info_to_metadata(model_info, vendor=self.name),
            )
        except Exception:
            logger.error(
                f"Error registering {self.name} model {config.model_id}",
                extra={"model_id": config.model_id, "provider": self.name},
            )
            raise

        logger.info(
            f"Registered {self.name} model {config.model_id} "
            f"({'Responses' if use_responses_api else 'Chat Completions'} API)",
            extra={"model_id": config.model_id, "provider": self.name},
        )
        return registration
