"""
Configuration module.

Provides access to Azure endpoint settings.

Usage:
    from azure_byok.config import AzureConfig

    api_version = AzureConfig.get().api_version
"""

from azure_byok.config.settings import AzureConfig, AzureSettings

__all__ = ["AzureConfig", "AzureSettings"]
