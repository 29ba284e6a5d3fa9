"""
Azure resource models shared by the client and the commands.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

AKS_PROVIDER = "Microsoft.ContainerService"
AKS_RESOURCE_TYPE = "managedClusters"
ACS_RESOURCE_TYPE = "containerServices"


class OrchestratorType(str, Enum):
    """Orchestrator a container service runs."""

    DCOS = "DCOS"
    KUBERNETES = "Kubernetes"
    SWARM = "Swarm"
    DOCKER_CE = "DockerCE"
    CUSTOM = "Custom"

    @classmethod
    def _missing_(cls, value):
        # Azure is not consistent about casing
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class ContainerServiceType(str, Enum):
    """Cluster variant selected for a deployment step."""

    AKS = "AKS"
    ACS_KUBERNETES = "ACS-Kubernetes"
    ACS_DCOS = "ACS-DCOS"
    ACS_SWARM = "ACS-Swarm"

    @property
    def is_managed(self) -> bool:
        """AKS clusters expose no master profile; their info comes from the access profile."""
        return self is ContainerServiceType.AKS

    @classmethod
    def normalize(cls, value: Optional[str]) -> str:
        """Map a raw type string to the name used in telemetry events."""
        if not value:
            return "Unknown"
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member.value
        return "Unknown"


@dataclass(frozen=True)
class ContainerServiceInfo:
    """Master endpoint details of an ACS cluster."""

    name: str
    orchestrator_type: OrchestratorType
    master_fqdn: Optional[str]
    admin_username: Optional[str]

    @classmethod
    def from_resource(cls, resource: Dict[str, Any]) -> "ContainerServiceInfo":
        """Create from a containerServices GET response body."""
        properties = resource.get("properties") or {}
        orchestrator = (properties.get("orchestratorProfile") or {}).get("orchestratorType")
        return cls(
            name=resource.get("name", ""),
            orchestrator_type=OrchestratorType(orchestrator),
            master_fqdn=(properties.get("masterProfile") or {}).get("fqdn"),
            admin_username=(properties.get("linuxProfile") or {}).get("adminUsername"),
        )
