"""
Configuration Loader Module for terraunit

This module provides dynamic loading of provider-specific configuration files.
Translators and the invocation surface ask for a provider's configuration at
runtime instead of importing the provider modules directly.

"""

from typing import Any
import importlib
import logging

from deployunit.exceptions import ConfigurationError, UnsupportedProviderError
from deployunit.models import SUPPORTED_PROVIDERS

# Configure logging
logger = logging.getLogger(__name__)

# Module name mapping for each provider
PROVIDER_CONFIG_MODULES = {
    "aws": "deployunit.config.cloud_config_aws",
    "azure": "deployunit.config.cloud_config_azure",
    "gcp": "deployunit.config.cloud_config_gcp",
}

REQUIRED_ATTRIBUTES = [
    "PROVIDER_NAME",
    "PROVIDER_PREFIX",
    "DEFAULT_REGION",
    "RESOURCE_TYPES",
    "OPTION_NAMES",
]


def check_provider(provider: str) -> str:
    """
    Normalise a provider selector and reject unknown ones.

    Args:
        provider: Provider selector as supplied by the user

    Returns:
        Lowercase provider name

    Raises:
        UnsupportedProviderError: If provider is not aws, gcp or azure
    """
    normalised = (provider or "").strip().lower()
    if normalised not in SUPPORTED_PROVIDERS:
        raise UnsupportedProviderError(
            f"Provider '{provider}' not supported. "
            f"Must be one of: {', '.join(SUPPORTED_PROVIDERS)}",
            context={"provider": provider},
        )
    return normalised


def load_config(provider: str) -> Any:
    """
    Load provider-specific configuration module dynamically.

    Args:
        provider: Cloud provider name ('aws' | 'azure' | 'gcp')

    Returns:
        Provider-specific configuration module with constants and mappings

    Raises:
        UnsupportedProviderError: If provider not supported
        ConfigurationError: If configuration module cannot be loaded

    Examples:
        >>> load_config('gcp').PROVIDER_NAME
        'GCP'
    """
    provider = check_provider(provider)

    module_name = PROVIDER_CONFIG_MODULES.get(provider)
    if not module_name:
        raise ConfigurationError(
            f"No configuration module mapped for provider '{provider}'"
        )

    try:
        config_module = importlib.import_module(module_name)
        logger.debug(
            f"Loaded configuration for provider '{provider}' from {module_name}"
        )
        return config_module

    except ImportError as e:
        logger.error(f"Failed to import configuration for provider '{provider}': {e}")
        raise ConfigurationError(
            f"Could not load configuration for provider '{provider}'. "
            f"Module '{module_name}' not found or has import errors. "
            f"Error: {e}"
        ) from e


def validate_config_module(config_module: Any, provider: str) -> bool:
    """
    Validate that a configuration module has required attributes.

    Args:
        config_module: Configuration module to validate
        provider: Provider name (for error messages)

    Returns:
        True if validation passes

    Raises:
        ConfigurationError: If validation fails
    """
    missing_attrs = [
        attr for attr in REQUIRED_ATTRIBUTES if not hasattr(config_module, attr)
    ]

    if missing_attrs:
        raise ConfigurationError(
            f"Configuration module for provider '{provider}' is missing required attributes: "
            f"{', '.join(missing_attrs)}. Please ensure cloud_config_{provider}.py defines all required constants."
        )

    logger.debug(f"Configuration module for '{provider}' passed validation")
    return True


def list_available_providers() -> list:
    """
    List all providers that have configuration modules available.

    Returns:
        List of provider names with available configurations

    Examples:
        >>> list_available_providers()
        ['aws', 'gcp', 'azure']
    """
    available = []

    for provider in SUPPORTED_PROVIDERS:
        try:
            validate_config_module(load_config(provider), provider)
            available.append(provider)
        except ConfigurationError as e:
            logger.warning(f"Provider '{provider}' unavailable: {e}")

    return available
