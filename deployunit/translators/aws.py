"""AWS lowering: ECS on Fargate behind Application Auto Scaling.

Emits the CloudWatch log group, task execution role, optional security
group, task definition, ECS service, scalable target and target tracking
policy that realise a deployment unit.
"""

import json
from typing import Any, Dict, List, Optional

from deployunit.models import Declaration, DeploymentUnit, Template
from deployunit.translators.base import Translator
from deployunit.utils.string_utils import truncate_name

# IAM role names are limited to 64 characters
IAM_NAME_MAX_LENGTH = 64


class AwsTranslator(Translator):
    """Lowers units to ECS Fargate services."""

    provider_id = "aws"

    def lower(self, unit: DeploymentUnit) -> List[Declaration]:
        cfg = self.config
        tags = self.labels(unit)

        log_group = Declaration(
            cfg.AWS_LOG_GROUP,
            self.label(unit),
            {
                "name": f"{cfg.LOG_GROUP_PREFIX}{unit.name}",
                "retention_in_days": unit.option(
                    "log_retention_days", cfg.LOG_RETENTION_DAYS
                ),
                "tags": tags,
            },
        )
        declarations = [log_group]

        role = Declaration(
            cfg.AWS_IAM_ROLE,
            self.label(unit, "execution"),
            {
                "name": truncate_name(f"{unit.name}-execution", IAM_NAME_MAX_LENGTH),
                "assume_role_policy": _policy_document(
                    {
                        "Effect": "Allow",
                        "Principal": {"Service": cfg.TASK_ASSUME_ROLE_SERVICE},
                        "Action": "sts:AssumeRole",
                    }
                ),
                "tags": tags,
            },
        )
        declarations.append(role)
        declarations.append(
            Declaration(
                cfg.AWS_IAM_POLICY_ATTACHMENT,
                self.label(unit, "execution"),
                {
                    "role": role.ref("name"),
                    "policy_arn": cfg.EXECUTION_ROLE_POLICY_ARN,
                },
            )
        )

        secret_policy = None
        if unit.secrets:
            secret_policy = Declaration(
                cfg.AWS_IAM_ROLE_POLICY,
                self.label(unit, "secrets"),
                {
                    "name": truncate_name(f"{unit.name}-secrets", IAM_NAME_MAX_LENGTH),
                    "role": role.ref("id"),
                    "policy": _policy_document(
                        {
                            "Effect": "Allow",
                            "Action": list(cfg.SECRET_READ_ACTIONS),
                            "Resource": sorted(
                                {secret.reference for secret in unit.secrets.values()}
                            ),
                        }
                    ),
                },
            )
            declarations.append(secret_policy)

        security_group = self._security_group(unit, tags)
        if security_group is not None:
            declarations.append(security_group)

        depends_on = [log_group.address]
        if secret_policy is not None:
            depends_on.append(secret_policy.address)
        task_definition = Declaration(
            cfg.AWS_TASK_DEFINITION,
            self.label(unit),
            {
                "family": unit.name,
                "requires_compatibilities": [cfg.LAUNCH_TYPE],
                "network_mode": "awsvpc",
                "cpu": str(unit.resources.cpu),
                "memory": str(unit.resources.memory),
                "execution_role_arn": role.ref("arn"),
                "container_definitions": self._container_definitions(unit),
                "tags": tags,
            },
            depends_on=tuple(depends_on),
        )
        declarations.append(task_definition)

        cluster = unit.option("cluster_name", cfg.DEFAULT_CLUSTER)
        service_attributes: Dict[str, Any] = {
            "name": unit.name,
            "cluster": cluster,
            "task_definition": task_definition.ref("arn"),
            "desired_count": unit.scaling.min_instances,
            "launch_type": cfg.LAUNCH_TYPE,
            "lifecycle": {"ignore_changes": ["desired_count"]},
            "tags": tags,
        }
        network_configuration = self._network_configuration(unit, security_group)
        if network_configuration:
            service_attributes["network_configuration"] = network_configuration
        service = Declaration(cfg.AWS_SERVICE, self.label(unit), service_attributes)
        declarations.append(service)

        scaling_target = Declaration(
            cfg.AWS_SCALING_TARGET,
            self.label(unit),
            {
                "service_namespace": "ecs",
                "scalable_dimension": cfg.SCALABLE_DIMENSION,
                "resource_id": Template(f"service/{cluster}/", service.ref("name")),
                "min_capacity": unit.scaling.min_instances,
                "max_capacity": unit.scaling.max_instances,
            },
        )
        declarations.append(scaling_target)
        declarations.append(
            Declaration(
                cfg.AWS_SCALING_POLICY,
                self.label(unit, "cpu"),
                {
                    "name": f"{unit.name}-cpu-target-tracking",
                    "policy_type": "TargetTrackingScaling",
                    "resource_id": scaling_target.ref("resource_id"),
                    "scalable_dimension": scaling_target.ref("scalable_dimension"),
                    "service_namespace": scaling_target.ref("service_namespace"),
                    "target_tracking_scaling_policy_configuration": {
                        "target_value": unit.scaling.target_cpu_utilization,
                        "scale_in_cooldown": cfg.SCALE_IN_COOLDOWN,
                        "scale_out_cooldown": cfg.SCALE_OUT_COOLDOWN,
                        "predefined_metric_specification": {
                            "predefined_metric_type": cfg.SCALING_METRIC
                        },
                    },
                },
            )
        )
        return declarations

    def _container_definitions(self, unit: DeploymentUnit) -> str:
        cfg = self.config
        container: Dict[str, Any] = {
            "name": unit.name,
            "image": unit.container_image,
            "cpu": unit.resources.cpu,
            "memory": unit.resources.memory,
            "essential": True,
            "environment": [
                {"name": key, "value": unit.environment[key]}
                for key in sorted(unit.environment)
            ],
            "secrets": [
                {"name": key, "valueFrom": unit.secrets[key].reference}
                for key in sorted(unit.secrets)
            ],
            "logConfiguration": {
                "logDriver": "awslogs",
                "options": {
                    "awslogs-group": f"{cfg.LOG_GROUP_PREFIX}{unit.name}",
                    "awslogs-region": self.region(unit),
                    "awslogs-stream-prefix": unit.name,
                },
            },
        }
        if unit.ingress is not None:
            container["portMappings"] = [
                {
                    "containerPort": unit.ingress.port,
                    "hostPort": unit.ingress.port,
                    "protocol": "tcp",
                }
            ]
        return json.dumps([container], sort_keys=True)

    def _security_group(
        self, unit: DeploymentUnit, tags: Dict[str, Any]
    ) -> Optional[Declaration]:
        if unit.ingress is None:
            return None
        cfg = self.config
        port = unit.ingress.port
        if unit.ingress.public:
            cidr_blocks = [cfg.DEFAULT_INGRESS_CIDR]
        else:
            cidr_blocks = sorted(unit.option("allowed_cidr_blocks", []))
        attributes: Dict[str, Any] = {
            "name": unit.name,
            "description": f"Ingress for {unit.name}",
            "ingress": [
                _rule(port, port, "tcp", cidr_blocks, self_only=not cidr_blocks)
            ],
            "egress": [_rule(0, 0, "-1", [cfg.DEFAULT_INGRESS_CIDR])],
            "tags": tags,
        }
        if unit.networking.network_id:
            attributes["vpc_id"] = unit.networking.network_id
        return Declaration(cfg.AWS_SECURITY_GROUP, self.label(unit), attributes)

    def _network_configuration(
        self, unit: DeploymentUnit, security_group: Optional[Declaration]
    ) -> Dict[str, Any]:
        if not unit.networking.subnet_ids and security_group is None:
            return {}
        configuration: Dict[str, Any] = {
            "subnets": list(unit.networking.subnet_ids),
            "assign_public_ip": bool(unit.ingress and unit.ingress.public),
        }
        if security_group is not None:
            configuration["security_groups"] = [security_group.ref("id")]
        return configuration


def _policy_document(statement: Dict[str, Any]) -> str:
    return json.dumps(
        {"Version": "2012-10-17", "Statement": [statement]}, sort_keys=True
    )


def _rule(
    from_port: int,
    to_port: int,
    protocol: str,
    cidr_blocks: List[str],
    self_only: bool = False,
) -> Dict[str, Any]:
    # Terraform JSON requires every attribute of an inline rule to be present
    return {
        "description": "",
        "from_port": from_port,
        "to_port": to_port,
        "protocol": protocol,
        "cidr_blocks": cidr_blocks,
        "ipv6_cidr_blocks": [],
        "prefix_list_ids": [],
        "security_groups": [],
        "self": self_only,
    }
