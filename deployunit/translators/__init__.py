"""
Provider translators and the registry that selects them.

Each provider has one Translator implementation. A provider selector is
resolved to its implementation once, when the translator is constructed;
translation itself never branches on the provider name.
"""

from typing import Dict, List, Optional, Sequence, Type

import deployunit.config_loader as config_loader
from deployunit.models import DeploymentUnit, Translation
from deployunit.translators.aws import AwsTranslator
from deployunit.translators.azure import AzureTranslator
from deployunit.translators.base import Translator
from deployunit.translators.gcp import GcpTranslator
from deployunit.validator import check_unique_names


class TranslatorRegistry:
    """
    Registry of translator implementations keyed by provider.

    Class-level state; the three built-in translators are registered on import.
    """

    _translators: Dict[str, Type[Translator]] = {}

    @classmethod
    def register(cls, translator_class: Type[Translator]) -> None:
        """
        Register a translator implementation.

        Raises:
            ValueError: If the provider already has a translator
        """
        provider = translator_class.provider_id
        if provider in cls._translators:
            raise ValueError(f"Translator for provider '{provider}' already registered")
        cls._translators[provider] = translator_class

    @classmethod
    def create(cls, provider: str) -> Translator:
        """
        Construct the translator for a provider.

        Raises:
            UnsupportedProviderError: If provider is not aws, gcp or azure
        """
        provider = config_loader.check_provider(provider)
        return cls._translators[provider]()

    @classmethod
    def list_providers(cls) -> List[str]:
        return sorted(cls._translators)


TranslatorRegistry.register(AwsTranslator)
TranslatorRegistry.register(GcpTranslator)
TranslatorRegistry.register(AzureTranslator)


def get_translator(provider: str) -> Translator:
    """Return a translator bound to provider ('aws' | 'gcp' | 'azure')."""
    return TranslatorRegistry.create(provider)


def translate(unit: DeploymentUnit, provider: Optional[str] = None) -> Translation:
    """
    Translate a unit for its own provider, or retarget it first.

    Args:
        unit: Deployment unit to lower
        provider: Target provider; defaults to unit.provider

    Returns:
        Translation with declarations in dependency order

    Raises:
        UnsupportedProviderError: If the target provider is unknown
        ValidationError: If the unit violates a field constraint
    """
    if provider is not None:
        unit = unit.for_provider(provider)
    return get_translator(unit.provider).translate(unit)


def translate_environment(units: Sequence[DeploymentUnit]) -> List[Translation]:
    """
    Translate every unit of an environment.

    Nothing is returned unless every unit translates; unit names must be
    unique within the environment.

    Raises:
        ValidationError: On duplicate unit names or an invalid unit
        UnsupportedProviderError: If any unit targets an unknown provider
    """
    check_unique_names(units)

    translators: Dict[str, Translator] = {}
    translations = []
    for unit in units:
        provider = config_loader.check_provider(unit.provider)
        if provider not in translators:
            translators[provider] = get_translator(provider)
        translations.append(translators[provider].translate(unit))
    return translations


__all__ = [
    "AwsTranslator",
    "AzureTranslator",
    "GcpTranslator",
    "Translator",
    "TranslatorRegistry",
    "get_translator",
    "translate",
    "translate_environment",
]
