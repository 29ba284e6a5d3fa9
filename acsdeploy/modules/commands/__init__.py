"""
Commands Module - Black Box Interface

Purpose: Deployment steps for ACS and AKS clusters
Interface: GetContainerServiceInfoCommand, AKSDeploymentCommand,
           KubeconfigProvisioner, CommandPipeline
Hidden: Azure lookups, kubeconfig decoding, kubectl invocation

Every command follows the Command contract and never raises except on cancellation.
"""

from .aks_deployment import AKSDeploymentCommand, KubectlApplier, KubernetesDeployWorker
from .cluster_info import CONTAINER_SERVICE_INFO_TASK, GetContainerServiceInfoCommand, get_acs_info
from .kubeconfig import KubeconfigProvisioner, decode_kubeconfig
from .pipeline import CommandPipeline, PipelineResult

__all__ = [
    "AKSDeploymentCommand",
    "CONTAINER_SERVICE_INFO_TASK",
    "CommandPipeline",
    "GetContainerServiceInfoCommand",
    "KubeconfigProvisioner",
    "KubectlApplier",
    "KubernetesDeployWorker",
    "PipelineResult",
    "decode_kubeconfig",
    "get_acs_info",
]
