"""
Azure control-plane client.

Thin wrapper over the Azure Resource Manager REST API covering the two
lookups the deployment commands need: generic resources by id and ACS
container services by resource group and name.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ...config.provider import AzureConfig
from ...errors import AzureRequestError
from ..credentials.token import AccessToken
from .models import ACS_RESOURCE_TYPE, AKS_PROVIDER, ContainerServiceInfo

logger = logging.getLogger(__name__)


def construct_resource_id(
    subscription_id: str,
    resource_group: str,
    provider: str,
    resource_type: str,
    resource_name: str,
    parent_path: Optional[str] = None,
) -> str:
    """
    Build an ARM resource id.

    Args:
        subscription_id: Azure subscription
        resource_group: Resource group name
        provider: Resource provider namespace (e.g. Microsoft.ContainerService)
        resource_type: Leaf resource type
        resource_name: Leaf resource name
        parent_path: Optional "{type}/{name}" of the parent resource

    Returns:
        /subscriptions/{sub}/resourcegroups/{rg}/providers/{provider}/[{parent}/]{type}/{name}
    """
    parent = f"{parent_path}/" if parent_path else ""
    return (
        f"/subscriptions/{subscription_id}/resourcegroups/{resource_group}"
        f"/providers/{provider}/{parent}{resource_type}/{resource_name}"
    )


class AzureManagementClient:
    """Bearer-token authenticated ARM client for one subscription."""

    def __init__(
        self,
        token: AccessToken,
        subscription_id: str,
        config: AzureConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        management_endpoint: Optional[str] = None,
    ):
        self.token = token
        self.subscription_id = subscription_id
        self.config = config
        # Must match the audience the token was issued for
        self.management_endpoint = (management_endpoint or config.management_endpoint).rstrip("/")
        self._http = http_client
        self._owns_http = http_client is None

    async def __aenter__(self) -> "AzureManagementClient":
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self.config.request_timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    async def _get(self, path: str, api_version: str) -> Optional[Dict[str, Any]]:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self.config.request_timeout)
        url = f"{self.management_endpoint}{path}"
        logger.debug(f"GET {url}")
        try:
            response = await self._http.get(
                url,
                params={"api-version": api_version},
                headers={"Authorization": f"Bearer {self.token.token}"},
            )
        except httpx.HTTPError as e:
            raise AzureRequestError(f"Request to {url} failed: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise AzureRequestError(
                f"Azure returned {response.status_code} for {path}: {response.text}",
                status_code=response.status_code,
            )
        return response.json()

    async def get_generic_resource_by_id(self, resource_id: str, api_version: str) -> Dict[str, Any]:
        """
        Fetch any resource by its full id.

        Raises:
            AzureRequestError: If the resource does not exist or the request fails
        """
        resource = await self._get(resource_id, api_version)
        if resource is None:
            raise AzureRequestError(f"Resource {resource_id} not found", status_code=404)
        return resource

    async def get_container_service(
        self, resource_group: str, name: str
    ) -> Optional[ContainerServiceInfo]:
        """
        Fetch an ACS container service.

        Returns:
            ContainerServiceInfo, or None if no such container service exists
        """
        path = (
            f"/subscriptions/{self.subscription_id}/resourceGroups/{resource_group}"
            f"/providers/{AKS_PROVIDER}/{ACS_RESOURCE_TYPE}/{name}"
        )
        resource = await self._get(path, self.config.container_service_api_version)
        if resource is None:
            return None
        return ContainerServiceInfo.from_resource(resource)
