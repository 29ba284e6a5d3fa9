"""
Azure Module - Black Box Interface

Purpose: Query the Azure control plane for cluster metadata
Interface: AzureHelper.build_client(), AzureManagementClient lookups
Hidden: ARM REST paths, api-versions, token handling

Can be replaced with the Azure SDK without affecting commands.
"""

from .client import AzureManagementClient, construct_resource_id
from .helper import AzureHelper
from .models import (
    AKS_PROVIDER,
    AKS_RESOURCE_TYPE,
    ContainerServiceInfo,
    ContainerServiceType,
    OrchestratorType,
)

__all__ = [
    "AKS_PROVIDER",
    "AKS_RESOURCE_TYPE",
    "AzureHelper",
    "AzureManagementClient",
    "ContainerServiceInfo",
    "ContainerServiceType",
    "OrchestratorType",
    "construct_resource_id",
]
