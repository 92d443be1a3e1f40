"""Deployment unit validation.

Checks the field constraints a unit must satisfy before it can be lowered.
All violations are collected so the caller sees every failing field at once;
the first one becomes ``ValidationError.field``.
"""

import logging
import re
from typing import List, Sequence, Tuple

from deployunit.exceptions import ValidationError
from deployunit.models import DeploymentUnit, SecretRef

logger = logging.getLogger(__name__)

# Lowercase DNS label: accepted as a resource name by all three providers
UNIT_NAME_PATTERN = re.compile(r"^[a-z]([a-z0-9-]*[a-z0-9])?$")
UNIT_NAME_MAX_LENGTH = 63

ENV_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_name(unit: DeploymentUnit, errors: List[Tuple[str, str]]) -> None:
    if not unit.name:
        errors.append(("name", "must not be empty"))
    elif len(unit.name) > UNIT_NAME_MAX_LENGTH:
        errors.append(
            ("name", f"must be at most {UNIT_NAME_MAX_LENGTH} characters long")
        )
    elif not UNIT_NAME_PATTERN.match(unit.name):
        errors.append(
            (
                "name",
                "must start with a lowercase letter and contain only lowercase "
                "letters, digits and hyphens",
            )
        )


def _check_resources(unit: DeploymentUnit, errors: List[Tuple[str, str]]) -> None:
    if unit.resources.cpu <= 0:
        errors.append(("resources.cpu", "must be greater than zero"))
    if unit.resources.memory <= 0:
        errors.append(("resources.memory", "must be greater than zero"))


def _check_scaling(unit: DeploymentUnit, errors: List[Tuple[str, str]]) -> None:
    scaling = unit.scaling
    if scaling.min_instances < 0:
        errors.append(("scaling.min_instances", "must not be negative"))
    if scaling.max_instances < 0:
        errors.append(("scaling.max_instances", "must not be negative"))
    if scaling.min_instances > scaling.max_instances:
        errors.append(
            (
                "scaling.min_instances",
                f"must not exceed scaling.max_instances "
                f"({scaling.min_instances} > {scaling.max_instances})",
            )
        )
    if not 1 <= scaling.target_cpu_utilization <= 100:
        errors.append(
            ("scaling.target_cpu_utilization", "must be between 1 and 100")
        )


def _check_environment(unit: DeploymentUnit, errors: List[Tuple[str, str]]) -> None:
    for key in sorted(unit.environment):
        if not ENV_NAME_PATTERN.match(key):
            errors.append((f"environment.{key}", "is not a valid variable name"))
        if not isinstance(unit.environment[key], str):
            errors.append((f"environment.{key}", "value must be a string"))

    for key in sorted(unit.secrets):
        secret = unit.secrets[key]
        if not ENV_NAME_PATTERN.match(key):
            errors.append((f"secrets.{key}", "is not a valid variable name"))
        if key in unit.environment:
            errors.append(
                (f"secrets.{key}", "is also defined as a plain environment value")
            )
        if not isinstance(secret, SecretRef) or not secret.reference:
            errors.append((f"secrets.{key}", "must reference a secret"))


def validate_unit(unit: DeploymentUnit) -> DeploymentUnit:
    """Validate a deployment unit.

    Args:
        unit: Unit to check

    Returns:
        The same unit, unchanged, when every constraint holds

    Raises:
        ValidationError: If any constraint is violated
    """
    errors: List[Tuple[str, str]] = []

    _check_name(unit, errors)
    if not unit.container_image or not unit.container_image.strip():
        errors.append(("container_image", "must not be empty"))
    _check_resources(unit, errors)
    _check_scaling(unit, errors)
    _check_environment(unit, errors)
    if unit.ingress is not None and not 1 <= unit.ingress.port <= 65535:
        errors.append(("ingress.port", "must be between 1 and 65535"))

    if errors:
        field, message = errors[0]
        if len(errors) > 1:
            message = f"{message} (and {len(errors) - 1} more violation(s))"
        logger.debug(f"Unit '{unit.name}' failed validation: {errors}")
        raise ValidationError(
            message, field=field, errors=errors, context={"unit": unit.name}
        )

    return unit


def check_unique_names(units: Sequence[DeploymentUnit]) -> None:
    """Reject environments where two units share a name.

    Raises:
        ValidationError: On the first duplicated name
    """
    seen = set()
    for unit in units:
        if unit.name in seen:
            raise ValidationError(
                f"duplicate unit name '{unit.name}' in environment",
                field="name",
                context={"unit": unit.name},
            )
        seen.add(unit.name)
