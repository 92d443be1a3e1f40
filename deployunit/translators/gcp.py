"""GCP lowering: Cloud Run services.

Cloud Run scales a service itself, so the scaling bounds live on the
service template rather than in a separate autoscaling resource.
"""

from typing import Any, Dict, List

from deployunit.models import Declaration, DeploymentUnit, Template
from deployunit.translators.base import Translator
from deployunit.utils.string_utils import cpu_to_millicores, truncate_name


class GcpTranslator(Translator):
    """Lowers units to Cloud Run v2 services."""

    provider_id = "gcp"

    def lower(self, unit: DeploymentUnit) -> List[Declaration]:
        cfg = self.config
        project = unit.option("project")

        account_attributes: Dict[str, Any] = {
            "account_id": truncate_name(
                f"{unit.name}-runner", cfg.SERVICE_ACCOUNT_ID_MAX_LENGTH
            ),
            "display_name": f"Cloud Run runtime identity for {unit.name}",
        }
        if project:
            account_attributes["project"] = project
        account = Declaration(
            cfg.GCP_SERVICE_ACCOUNT, self.label(unit), account_attributes
        )

        service_attributes: Dict[str, Any] = {
            "name": unit.name,
            "location": self.region(unit),
            "ingress": (
                cfg.INGRESS_ALL
                if unit.ingress is not None and unit.ingress.public
                else cfg.INGRESS_INTERNAL
            ),
            "labels": self.labels(unit),
            "template": self._template(unit, account),
        }
        if project:
            service_attributes["project"] = project
        service = Declaration(cfg.GCP_SERVICE, self.label(unit), service_attributes)

        filter_prefix, filter_suffix = cfg.LOG_FILTER_TEMPLATE.split("%s")
        destination = unit.option("log_destination") or Template(
            cfg.LOG_SINK_PREFIX, account.ref("project"), cfg.LOG_BUCKET_PATH
        )
        sink_attributes: Dict[str, Any] = {
            "name": f"{unit.name}-logs",
            "destination": destination,
            "filter": Template(filter_prefix, service.ref("name"), filter_suffix),
            "unique_writer_identity": True,
        }
        if project:
            sink_attributes["project"] = project
        declarations = [
            account,
            service,
            Declaration(cfg.GCP_LOG_SINK, self.label(unit), sink_attributes),
        ]

        if unit.ingress is not None and unit.ingress.public:
            invoker_attributes: Dict[str, Any] = {
                "name": service.ref("name"),
                "location": service.ref("location"),
                "role": cfg.INVOKER_ROLE,
                "member": cfg.PUBLIC_MEMBER,
            }
            if project:
                invoker_attributes["project"] = project
            declarations.append(
                Declaration(
                    cfg.GCP_INVOKER, self.label(unit, "invoker"), invoker_attributes
                )
            )
        return declarations

    def _template(self, unit: DeploymentUnit, account: Declaration) -> Dict[str, Any]:
        container: Dict[str, Any] = {
            "image": unit.container_image,
            "resources": {
                "limits": {
                    "cpu": cpu_to_millicores(unit.resources.cpu),
                    "memory": f"{unit.resources.memory}Mi",
                }
            },
            "env": self._env(unit),
        }
        if unit.ingress is not None:
            container["ports"] = [{"container_port": unit.ingress.port}]

        template: Dict[str, Any] = {
            "service_account": account.ref("email"),
            "scaling": {
                "min_instances": unit.scaling.min_instances,
                "max_instances": unit.scaling.max_instances,
            },
            "containers": [container],
        }

        networking = unit.networking
        if networking.network_id or networking.subnet_ids:
            interface: Dict[str, Any] = {}
            if networking.network_id:
                interface["network"] = networking.network_id
            if networking.subnet_ids:
                interface["subnetwork"] = networking.subnet_ids[0]
            template["vpc_access"] = {
                "network_interfaces": [interface],
                "egress": self.config.VPC_EGRESS,
            }
        return template

    def _env(self, unit: DeploymentUnit) -> List[Dict[str, Any]]:
        env: List[Dict[str, Any]] = [
            {"name": key, "value": unit.environment[key]}
            for key in sorted(unit.environment)
        ]
        for key in sorted(unit.secrets):
            secret = unit.secrets[key]
            env.append(
                {
                    "name": key,
                    "value_source": {
                        "secret_key_ref": {
                            "secret": secret.reference,
                            "version": secret.version,
                        }
                    },
                }
            )
        return env
