"""
azure-byok: bring-your-own-key chat endpoints for Azure-hosted models.

Usage:
    from azure_byok import AzureBYOKModelRegistry, ChatModelRegistry, PerModelConfig

    models = ChatModelRegistry()
    registration = AzureBYOKModelRegistry(models).register_model(
        PerModelConfig("gpt-4o", api_key, "https://contoso.openai.azure.com")
    )
"""

from azure_byok.azure import AzureBYOKModelRegistry, AzureOpenAIEndpoint
from azure_byok.providers import ChatModelRegistry, PerModelConfig, Registration

__version__ = "0.1.0"

__all__ = [
    "AzureBYOKModelRegistry",
    "AzureOpenAIEndpoint",
    "ChatModelRegistry",
    "PerModelConfig",
    "Registration",
]
