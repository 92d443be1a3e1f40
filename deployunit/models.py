"""
Data model for deployment units and the declarations they lower into.

A DeploymentUnit is the provider-agnostic description of one containerised
workload. A Declaration is one resource block handed to the provisioning
engine. Both are frozen; translators never mutate their input.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

# Provider selectors understood by the translators
SUPPORTED_PROVIDERS = ("aws", "gcp", "azure")


@dataclass(frozen=True)
class Resources:
    """
    Compute request for a unit.

    Args:
        cpu: CPU units, 1024 units equal one vCPU
        memory: Memory in MiB
    """

    cpu: int
    memory: int


@dataclass(frozen=True)
class Scaling:
    """Instance bounds and the CPU utilisation target used by scaling rules."""

    min_instances: int = 1
    max_instances: int = 1
    target_cpu_utilization: int = 70


@dataclass(frozen=True)
class Networking:
    """Opaque network identifiers; their existence is never checked."""

    network_id: Optional[str] = None
    subnet_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SecretRef:
    """
    Reference to a secret held by the provider's secret store.

    The reference is passed through untouched: a Secrets Manager ARN on AWS,
    a Secret Manager secret id on GCP, a Key Vault secret id on Azure.
    """

    reference: str
    version: str = "latest"


@dataclass(frozen=True)
class Ingress:
    port: int = 8080
    public: bool = False


@dataclass(frozen=True)
class DeploymentUnit:
    """
    Provider-agnostic description of a single deployable workload.

    Args:
        name: Identifier, unique within an environment
        container_image: Registry reference of the image to run
        resources: CPU and memory request
        scaling: Instance bounds
        provider: One of "aws", "gcp", "azure"; selects the lowering
        networking: Provider network identifiers
        environment: Plain environment values
        secrets: Environment names bound to secret references
        ingress: Optional inbound traffic settings
        region: Provider region or location
        labels: Tags applied to every declaration
        provider_options: Provider-specific opaque values
    """

    name: str
    container_image: str
    resources: Resources
    scaling: Scaling
    provider: str
    networking: Networking = field(default_factory=Networking)
    environment: Mapping[str, str] = field(default_factory=dict)
    secrets: Mapping[str, SecretRef] = field(default_factory=dict)
    ingress: Optional[Ingress] = None
    region: Optional[str] = None
    labels: Mapping[str, str] = field(default_factory=dict)
    provider_options: Mapping[str, Any] = field(default_factory=dict)

    def for_provider(self, provider: str) -> "DeploymentUnit":
        """Return a copy of this unit targeting another provider."""
        return replace(self, provider=provider)

    def option(self, key: str, default: Any = None) -> Any:
        return self.provider_options.get(key, default)


@dataclass(frozen=True)
class Reference:
    """
    Pointer from one declaration's attribute to another declaration.

    Args:
        address: Address of the referenced declaration ("aws_ecs_service.web")
        attribute: Attribute exported by the referenced declaration
    """

    address: str
    attribute: str = "id"

    def interpolation(self) -> str:
        return "${%s.%s}" % (self.address, self.attribute)


@dataclass(frozen=True)
class Template:
    """
    String built from literal parts and references.

    Template("service/default/", Reference("aws_ecs_service.web", "name"))
    renders as "service/default/${aws_ecs_service.web.name}".
    """

    parts: Tuple[Union[str, Reference], ...]

    def __init__(self, *parts: Union[str, Reference]):
        object.__setattr__(self, "parts", tuple(parts))

    def interpolation(self) -> str:
        return "".join(
            part.interpolation() if isinstance(part, Reference) else part
            for part in self.parts
        )


def _collect_references(value: Any, found: List[str]) -> None:
    if isinstance(value, Reference):
        if value.address not in found:
            found.append(value.address)
    elif isinstance(value, Template):
        _collect_references(value.parts, found)
    elif isinstance(value, dict):
        for key in sorted(value):
            _collect_references(value[key], found)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _collect_references(item, found)


@dataclass(frozen=True)
class Declaration:
    """
    One resource declaration for the provisioning engine.

    Attribute values are plain JSON-compatible data, optionally embedding
    Reference and Template objects. depends_on lists addresses the engine
    must create first even though no attribute refers to them.
    """

    resource_type: str
    name: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    depends_on: Tuple[str, ...] = ()
    kind: str = "resource"

    @property
    def address(self) -> str:
        return f"{self.resource_type}.{self.name}"

    def ref(self, attribute: str = "id") -> Reference:
        """Reference to one of this declaration's exported attributes."""
        return Reference(self.address, attribute)

    def references(self) -> List[str]:
        """Addresses this declaration depends on, in first-seen order."""
        found: List[str] = []
        _collect_references(self.attributes, found)
        for address in self.depends_on:
            if address not in found:
                found.append(address)
        return found


@dataclass(frozen=True)
class Translation:
    """Ordered declarations produced from one unit for one provider."""

    unit_name: str
    provider: str
    declarations: Tuple[Declaration, ...]

    def addresses(self) -> List[str]:
        return [declaration.address for declaration in self.declarations]

    def find(self, resource_type: str) -> List[Declaration]:
        return [d for d in self.declarations if d.resource_type == resource_type]
