"""Module invocation surface.

Each provider's catalogue module takes its own option names: ``app_name``
with ``min_capacity``/``max_capacity`` on AWS, ``service_name`` with
``min_instances``/``max_instances`` and ``env_vars`` on GCP, ``function_name``
with ``min_replicas``/``max_replicas`` on Azure. This module converts such an
option mapping into a DeploymentUnit and back.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import deployunit.config_loader as config_loader
from deployunit.exceptions import ValidationError
from deployunit.models import (
    DeploymentUnit,
    Ingress,
    Networking,
    Resources,
    Scaling,
    SecretRef,
)
from deployunit.utils.string_utils import parse_cpu, parse_memory
from deployunit.utils.terraform_utils import getvar

logger = logging.getLogger(__name__)

# Concept -> accepted option names, first one is the generic spelling
OPTION_ALIASES: Dict[str, Tuple[str, ...]] = {
    "name": ("name", "app_name", "service_name", "function_name"),
    "container_image": ("container_image", "image"),
    "cpu": ("cpu",),
    "memory": ("memory",),
    "min_instances": ("min_instances", "min_capacity", "min_replicas"),
    "max_instances": ("max_instances", "max_capacity", "max_replicas"),
    "target_cpu_utilization": ("target_cpu_utilization", "cpu_target"),
    "environment": ("environment", "env_vars"),
    "secrets": ("secrets",),
    "network_id": ("network_id", "vpc_id", "network", "virtual_network_id"),
    "subnet_ids": ("subnet_ids", "subnetwork", "subnets"),
    "container_port": ("container_port", "port"),
    "public": ("public", "allow_public_access"),
    "region": ("region", "location"),
    "labels": ("labels", "tags"),
}

# Options passed through untouched to DeploymentUnit.provider_options
PROVIDER_OPTION_ALIASES: Dict[str, Tuple[str, ...]] = {
    "project": ("project", "project_id"),
    "resource_group_name": ("resource_group_name",),
    "cluster_name": ("cluster_name",),
    "log_retention_days": ("log_retention_days",),
    "log_destination": ("log_destination",),
    "allowed_cidr_blocks": ("allowed_cidr_blocks",),
}

# Scalar concepts that may be supplied through TF_VAR_ environment variables
ENV_FALLBACK_CONCEPTS = (
    "container_image",
    "cpu",
    "memory",
    "min_instances",
    "max_instances",
    "target_cpu_utilization",
)

DEFAULT_CPU = 256
DEFAULT_MEMORY = 512
DEFAULT_MIN_INSTANCES = 1


def _lookup(
    options: Mapping[str, Any],
    concept: str,
    aliases: Sequence[str],
    fallback: bool = False,
) -> Any:
    """Find the value supplied for a concept under any of its aliases.

    Explicit options win; TF_VAR_ environment variables are consulted only
    when fallback is set.

    Raises:
        ValidationError: If two aliases carry different values
    """
    found = {alias: options[alias] for alias in aliases if alias in options}
    if len(found) > 1 and len({repr(v) for v in found.values()}) > 1:
        raise ValidationError(
            f"conflicting values given through {', '.join(sorted(found))}",
            field=concept,
        )
    if found:
        return next(iter(found.values()))
    if not fallback:
        return None
    for alias in aliases:
        value = getvar(alias, {})
        if value is not None:
            return value
    return None


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"must be an integer, got {value!r}", field=field)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"must be an integer, got {value!r}", field=field)
    if not number.is_integer():
        raise ValidationError(f"must be an integer, got {value!r}", field=field)
    return int(number)


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if str(value).lower() in ("true", "1", "yes"):
        return True
    if str(value).lower() in ("false", "0", "no"):
        return False
    raise ValidationError(f"must be a boolean, got {value!r}", field=field)


def _as_mapping(value: Any, field: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValidationError("must be a mapping", field=field)
    return dict(value)


def _env_value(value: Any, field: str) -> str:
    # Scalars are rendered the way Terraform renders variable values
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    raise ValidationError(f"must be a string, number or boolean, got {value!r}", field=field)


def _as_secret(value: Any, field: str) -> SecretRef:
    if isinstance(value, SecretRef):
        return value
    if isinstance(value, Mapping):
        reference = value.get("reference") or value.get("secret")
        if not reference:
            raise ValidationError("must name a secret reference", field=field)
        return SecretRef(str(reference), str(value.get("version", "latest")))
    if isinstance(value, str) and value:
        return SecretRef(value)
    raise ValidationError("must be a secret reference", field=field)


def _subnets(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value)


def unit_from_options(
    options: Mapping[str, Any], provider: Optional[str] = None, strict: bool = False
) -> DeploymentUnit:
    """
    Build a DeploymentUnit from a module invocation configuration object.

    Args:
        options: Module options, e.g. {"app_name": "web", "min_capacity": 2, ...}
        provider: Target provider; defaults to options["provider"]
        strict: Reject unrecognised options instead of logging a warning

    Returns:
        DeploymentUnit (not yet validated; translation validates it)

    Raises:
        ValidationError: For missing required options, malformed values,
            conflicting aliases, or unknown options in strict mode
    """
    provider = provider or options.get("provider")
    if not provider:
        raise ValidationError("must be set", field="provider")

    known = {"provider"}
    for aliases in list(OPTION_ALIASES.values()) + list(
        PROVIDER_OPTION_ALIASES.values()
    ):
        known.update(aliases)
    unknown = sorted(key for key in options if key not in known)
    if unknown:
        if strict:
            raise ValidationError(
                f"unrecognised option(s): {', '.join(unknown)}", field=unknown[0]
            )
        logger.warning(f"Ignoring unrecognised module option(s): {', '.join(unknown)}")

    values = {
        concept: _lookup(
            options, concept, aliases, fallback=concept in ENV_FALLBACK_CONCEPTS
        )
        for concept, aliases in OPTION_ALIASES.items()
    }

    name = values["name"]
    if name is None:
        raise ValidationError("must be set", field="name")
    image = values["container_image"]
    if image is None:
        raise ValidationError("must be set", field="container_image")

    try:
        cpu = parse_cpu(values["cpu"]) if values["cpu"] is not None else DEFAULT_CPU
    except (ValueError, OverflowError):
        raise ValidationError(f"is not a CPU quantity: {values['cpu']!r}", field="resources.cpu")
    try:
        memory = (
            parse_memory(values["memory"])
            if values["memory"] is not None
            else DEFAULT_MEMORY
        )
    except (ValueError, OverflowError):
        raise ValidationError(
            f"is not a memory quantity: {values['memory']!r}", field="resources.memory"
        )

    min_instances = (
        _as_int(values["min_instances"], "scaling.min_instances")
        if values["min_instances"] is not None
        else DEFAULT_MIN_INSTANCES
    )
    max_instances = (
        _as_int(values["max_instances"], "scaling.max_instances")
        if values["max_instances"] is not None
        else max(min_instances, DEFAULT_MIN_INSTANCES)
    )
    scaling = Scaling(min_instances=min_instances, max_instances=max_instances)
    if values["target_cpu_utilization"] is not None:
        scaling = Scaling(
            min_instances,
            max_instances,
            _as_int(values["target_cpu_utilization"], "scaling.target_cpu_utilization"),
        )

    environment = {
        str(key): _env_value(value, f"environment.{key}")
        for key, value in _as_mapping(values["environment"], "environment").items()
    }
    secrets = {
        str(key): _as_secret(value, f"secrets.{key}")
        for key, value in _as_mapping(values["secrets"], "secrets").items()
    }

    ingress = None
    if values["container_port"] is not None:
        ingress = Ingress(
            port=_as_int(values["container_port"], "ingress.port"),
            public=(
                _as_bool(values["public"], "ingress.public")
                if values["public"] is not None
                else False
            ),
        )

    provider_options = {}
    for key, aliases in PROVIDER_OPTION_ALIASES.items():
        value = _lookup(options, key, aliases)
        if value is not None:
            provider_options[key] = value

    network_id = values["network_id"]
    return DeploymentUnit(
        name=str(name),
        container_image=str(image),
        resources=Resources(cpu=cpu, memory=memory),
        scaling=scaling,
        provider=str(provider),
        networking=Networking(
            network_id=str(network_id) if network_id is not None else None,
            subnet_ids=_subnets(values["subnet_ids"]),
        ),
        environment=environment,
        secrets=secrets,
        ingress=ingress,
        region=str(values["region"]) if values["region"] is not None else None,
        labels={
            str(k): str(v) for k, v in _as_mapping(values["labels"], "labels").items()
        },
        provider_options=provider_options,
    )


def options_from_unit(unit: DeploymentUnit) -> Dict[str, Any]:
    """
    Express a unit as the option mapping of its provider's catalogue module.

    Raises:
        UnsupportedProviderError: If unit.provider is unknown
    """
    names = config_loader.load_config(unit.provider).OPTION_NAMES

    options: Dict[str, Any] = {
        names["name"]: unit.name,
        "container_image": unit.container_image,
        "cpu": unit.resources.cpu,
        "memory": unit.resources.memory,
        names["min_instances"]: unit.scaling.min_instances,
        names["max_instances"]: unit.scaling.max_instances,
        "target_cpu_utilization": unit.scaling.target_cpu_utilization,
        names["environment"]: dict(unit.environment),
    }
    if unit.secrets:
        options["secrets"] = {
            key: (
                secret.reference
                if secret.version == "latest"
                else {"reference": secret.reference, "version": secret.version}
            )
            for key, secret in unit.secrets.items()
        }
    if unit.networking.network_id:
        options[names["network_id"]] = unit.networking.network_id
    if unit.networking.subnet_ids:
        subnets = list(unit.networking.subnet_ids)
        # Cloud Run attaches to a single subnetwork
        options[names["subnet_ids"]] = (
            subnets[0] if names["subnet_ids"] == "subnetwork" else subnets
        )
    if unit.ingress is not None:
        options["container_port"] = unit.ingress.port
        options["public"] = unit.ingress.public
    if unit.region:
        options["region"] = unit.region
    if unit.labels:
        options["labels"] = dict(unit.labels)
    options.update(unit.provider_options)
    return options
