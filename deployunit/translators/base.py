"""
Translator interface shared by the provider lowerings.

A translator is bound to one provider when it is constructed. It validates a
unit, lowers it into declarations and orders them so that every reference
points at an earlier declaration. Translation never touches a provider API.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List
import logging

import deployunit.config_loader as config_loader
from deployunit.exceptions import UnsupportedProviderError
from deployunit.models import Declaration, DeploymentUnit, Translation
from deployunit.utils.graph_utils import order_declarations
from deployunit.utils.string_utils import to_identifier
from deployunit.validator import validate_unit

logger = logging.getLogger(__name__)

MANAGED_BY_LABEL = "managed-by"
UNIT_LABEL = "deployment-unit"


class Translator(ABC):
    """
    Lowers deployment units into provider resource declarations.

    Subclasses set ``provider_id`` and implement ``lower``.
    """

    provider_id: str = ""

    def __init__(self) -> None:
        self.config = config_loader.load_config(self.provider_id)
        config_loader.validate_config_module(self.config, self.provider_id)

    @property
    def resource_types(self) -> List[str]:
        return list(self.config.RESOURCE_TYPES)

    def translate(self, unit: DeploymentUnit) -> Translation:
        """
        Produce the ordered declarations realising a unit.

        Args:
            unit: Unit targeting this translator's provider

        Returns:
            Translation holding declarations in dependency order

        Raises:
            UnsupportedProviderError: If the unit targets another provider
            ValidationError: If the unit violates a field constraint
            TranslationError: If the lowered declarations cannot be ordered
        """
        provider = config_loader.check_provider(unit.provider)
        if provider != self.provider_id:
            raise UnsupportedProviderError(
                f"Unit targets provider '{provider}' but this translator lowers to '{self.provider_id}'",
                context={"unit": unit.name},
            )
        self.validate(unit)

        declarations = order_declarations(self.lower(unit))
        logger.debug(
            f"Lowered unit '{unit.name}' into {len(declarations)} {self.config.PROVIDER_NAME} declarations"
        )
        return Translation(
            unit_name=unit.name,
            provider=self.provider_id,
            declarations=tuple(declarations),
        )

    def validate(self, unit: DeploymentUnit) -> DeploymentUnit:
        """
        Check field constraints plus any this provider adds.

        Raises:
            ValidationError: If the unit cannot be lowered for this provider
        """
        validate_unit(unit)
        self.check_provider_constraints(unit)
        return unit

    def check_provider_constraints(self, unit: DeploymentUnit) -> None:
        pass

    @abstractmethod
    def lower(self, unit: DeploymentUnit) -> List[Declaration]:
        """Emit declarations for a validated unit, dependencies first."""

    def label(self, unit: DeploymentUnit, suffix: str = "") -> str:
        """Terraform block label for a unit, optionally suffixed."""
        base = to_identifier(unit.name)
        return f"{base}_{suffix}" if suffix else base

    def region(self, unit: DeploymentUnit) -> str:
        return unit.region or self.config.DEFAULT_REGION

    def labels(self, unit: DeploymentUnit) -> Dict[str, Any]:
        """Tags applied to every taggable declaration of a unit."""
        merged = {MANAGED_BY_LABEL: "terraunit", UNIT_LABEL: unit.name}
        merged.update(unit.labels)
        return {key: merged[key] for key in sorted(merged)}
