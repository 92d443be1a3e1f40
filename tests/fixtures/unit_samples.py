"""Fixture factories for deployment unit test samples.

Builds DeploymentUnit objects with varying complexity so tests only spell
out the fields they care about.
"""

from dataclasses import replace
from typing import Any

from deployunit.models import (
    DeploymentUnit,
    Ingress,
    Networking,
    Resources,
    Scaling,
    SecretRef,
)


def ai_agent_unit(provider: str = "aws", **overrides: Any) -> DeploymentUnit:
    """Minimal unit matching the documented ai-agent example.

    Returns:
        DeploymentUnit: 512 CPU units, 1024 MiB, 2..10 instances
    """
    unit = DeploymentUnit(
        name="ai-agent",
        container_image="registry/img:latest",
        resources=Resources(cpu=512, memory=1024),
        scaling=Scaling(min_instances=2, max_instances=10),
        provider=provider,
    )
    return replace(unit, **overrides) if overrides else unit


def full_unit(provider: str = "aws", **overrides: Any) -> DeploymentUnit:
    """Unit exercising every optional section: networking, secrets, ingress."""
    unit = DeploymentUnit(
        name="inference-api",
        container_image="123456789012.dkr.ecr.us-east-1.amazonaws.com/inference:1.4.2",
        resources=Resources(cpu=1024, memory=2048),
        scaling=Scaling(min_instances=1, max_instances=5, target_cpu_utilization=60),
        provider=provider,
        networking=Networking(
            network_id="vpc-0abc123", subnet_ids=("subnet-a", "subnet-b")
        ),
        environment={"MODEL_NAME": "llama", "LOG_LEVEL": "info"},
        secrets={
            "API_KEY": SecretRef("arn:aws:secretsmanager:us-east-1:123:secret:api-key")
        },
        ingress=Ingress(port=8080, public=True),
        region="eu-west-1",
        labels={"team": "ml"},
    )
    return replace(unit, **overrides) if overrides else unit
