"""Azure lowering: Container Apps.

Replica bounds and the CPU scale rule are part of the container app
template; the environment carries the Log Analytics sink and, when given,
the infrastructure subnet.
"""

import re
from typing import Any, Dict, List

from deployunit.exceptions import ValidationError
from deployunit.models import Declaration, DeploymentUnit
from deployunit.translators.base import Translator
from deployunit.utils.string_utils import cpu_to_cores, memory_to_gib, truncate_name

# Container app names are limited to 32 characters
APP_NAME_MAX_LENGTH = 32


def secret_name(env_name: str) -> str:
    """Container Apps secret names: lowercase alphanumerics and hyphens."""
    return re.sub(r"[^a-z0-9-]", "-", env_name.lower()).strip("-") or "secret"


class AzureTranslator(Translator):
    """Lowers units to Azure Container Apps."""

    provider_id = "azure"

    def lower(self, unit: DeploymentUnit) -> List[Declaration]:
        cfg = self.config
        tags = self.labels(unit)
        placement = {
            "location": self.region(unit),
            "resource_group_name": unit.option(
                "resource_group_name", cfg.DEFAULT_RESOURCE_GROUP
            ),
        }

        workspace = Declaration(
            cfg.AZURE_LOG_WORKSPACE,
            self.label(unit),
            dict(
                placement,
                name=f"{unit.name}-logs",
                sku=cfg.LOG_SKU,
                retention_in_days=unit.option(
                    "log_retention_days", cfg.LOG_RETENTION_DAYS
                ),
                tags=tags,
            ),
        )
        identity = Declaration(
            cfg.AZURE_IDENTITY,
            self.label(unit),
            dict(placement, name=f"{unit.name}-identity", tags=tags),
        )

        environment_attributes = dict(
            placement,
            name=f"{unit.name}-env",
            log_analytics_workspace_id=workspace.ref("id"),
            tags=tags,
        )
        if unit.networking.subnet_ids:
            environment_attributes["infrastructure_subnet_id"] = (
                unit.networking.subnet_ids[0]
            )
        environment = Declaration(
            cfg.AZURE_ENVIRONMENT, self.label(unit), environment_attributes
        )

        app_attributes: Dict[str, Any] = {
            "name": truncate_name(unit.name, APP_NAME_MAX_LENGTH),
            "container_app_environment_id": environment.ref("id"),
            "resource_group_name": placement["resource_group_name"],
            "revision_mode": cfg.REVISION_MODE,
            "identity": {
                "type": cfg.IDENTITY_TYPE,
                "identity_ids": [identity.ref("id")],
            },
            "template": self._template(unit),
            "tags": tags,
        }
        if unit.secrets:
            app_attributes["secret"] = [
                {
                    "name": secret_name(key),
                    "key_vault_secret_id": unit.secrets[key].reference,
                    "identity": identity.ref("id"),
                }
                for key in sorted(unit.secrets)
            ]
        if unit.ingress is not None:
            app_attributes["ingress"] = {
                "external_enabled": unit.ingress.public,
                "target_port": unit.ingress.port,
                "traffic_weight": [{"latest_revision": True, "percentage": 100}],
            }
        app = Declaration(cfg.AZURE_APP, self.label(unit), app_attributes)

        return [workspace, identity, environment, app]

    def check_provider_constraints(self, unit: DeploymentUnit) -> None:
        """Container Apps secret names must stay distinct once normalised."""
        seen: Dict[str, str] = {}
        for key in sorted(unit.secrets):
            name = secret_name(key)
            if name in seen:
                raise ValidationError(
                    f"maps to Container Apps secret name '{name}' already used by {seen[name]}",
                    field=f"secrets.{key}",
                    context={"unit": unit.name},
                )
            seen[name] = key

    def _template(self, unit: DeploymentUnit) -> Dict[str, Any]:
        env: List[Dict[str, Any]] = [
            {"name": key, "value": unit.environment[key]}
            for key in sorted(unit.environment)
        ]
        env.extend(
            {"name": key, "secret_name": secret_name(key)}
            for key in sorted(unit.secrets)
        )
        return {
            "min_replicas": unit.scaling.min_instances,
            "max_replicas": unit.scaling.max_instances,
            "container": [
                {
                    "name": unit.name,
                    "image": unit.container_image,
                    "cpu": cpu_to_cores(unit.resources.cpu),
                    "memory": memory_to_gib(unit.resources.memory),
                    "env": env,
                }
            ],
            "custom_scale_rule": [
                {
                    "name": "cpu-utilization",
                    "custom_rule_type": "cpu",
                    "metadata": {
                        "type": "Utilization",
                        "value": str(unit.scaling.target_cpu_utilization),
                    },
                }
            ],
        }
