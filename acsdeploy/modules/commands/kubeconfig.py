"""
Kubeconfig provisioning for AKS clusters.

Reads the admin kubeconfig from the cluster's clusterAdmin access profile
and writes it, byte for byte, to a destination file.
"""

import base64
import binascii
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from ...errors import KubeconfigError
from ..azure import AKS_PROVIDER, AKS_RESOURCE_TYPE, AzureManagementClient, construct_resource_id

logger = logging.getLogger(__name__)

KUBECONFIG_PROPERTY = "kubeConfig"


def decode_kubeconfig(properties: Any) -> bytes:
    """
    Extract and decode the kubeConfig property of an access profile.

    Raises:
        KubeconfigError: If the property is missing, blank, not a string or not valid base64
    """
    if not isinstance(properties, dict):
        raise KubeconfigError(TypeError("access profile has no property bag"))

    value = properties.get(KUBECONFIG_PROPERTY)
    if value is None:
        raise KubeconfigError(KeyError(KUBECONFIG_PROPERTY))
    if not isinstance(value, str):
        raise KubeconfigError(TypeError(f"{KUBECONFIG_PROPERTY} is {type(value).__name__}, expected str"))
    if not value.strip():
        raise KubeconfigError(ValueError("Null user kubeconfig returned from Azure"))

    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise KubeconfigError(e) from e


def write_atomically(destination: Path, content: bytes) -> None:
    """Write content to destination; on failure the destination is left untouched."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    out = tempfile.NamedTemporaryFile(
        dir=destination.parent, prefix=f".{destination.name}.", suffix=".tmp", delete=False
    )
    temp_file = Path(out.name)
    try:
        with out:
            out.write(content)
        os.chmod(temp_file, 0o600)
        os.replace(temp_file, destination)
    except Exception:
        temp_file.unlink(missing_ok=True)
        raise


class KubeconfigProvisioner:
    """Fetches the cluster admin kubeconfig of an AKS cluster."""

    def __init__(self, client: AzureManagementClient, api_version: str):
        self.client = client
        self.api_version = api_version

    def access_profile_id(self, resource_group: str, cluster_name: str) -> str:
        return construct_resource_id(
            self.client.subscription_id,
            resource_group,
            AKS_PROVIDER,
            "accessProfiles",
            "clusterAdmin",
            f"{AKS_RESOURCE_TYPE}/{cluster_name}",
        )

    async def provision(self, resource_group: str, cluster_name: str, destination: Path) -> Path:
        """
        Write the cluster admin kubeconfig to destination.

        Returns:
            The destination path

        Raises:
            KubeconfigError: If the access profile carries no usable kubeconfig
            AzureRequestError: If the access profile cannot be fetched
        """
        resource_id = self.access_profile_id(resource_group, cluster_name)
        resource = await self.client.get_generic_resource_by_id(resource_id, self.api_version)

        kubeconfig = decode_kubeconfig(resource.get("properties"))
        write_atomically(Path(destination), kubeconfig)

        logger.info(f"Wrote kubeconfig for {cluster_name} to {destination}")
        return Path(destination)
