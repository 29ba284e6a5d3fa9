"""
Azure AD token exchange for service principal credentials.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from ...config.provider import AzureConfig
from ...errors import AzureRequestError
from .store import TokenCredentialData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessToken:
    """Bearer token for the management endpoint."""
    token: str
    expires_on: float

    @property
    def is_expired(self) -> bool:
        return time.time() >= self.expires_on


class AzureTokenProvider:
    """Exchanges service principal credentials for management-plane tokens."""

    def __init__(self, config: AzureConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._http = http_client

    def _token_url(self, credential: TokenCredentialData) -> str:
        authority = credential.authority or self.config.authority_host
        return f"{authority.rstrip('/')}/{credential.tenant_id}/oauth2/v2.0/token"

    async def get_token(self, credential: TokenCredentialData) -> AccessToken:
        """
        Run the OAuth2 client-credentials flow.

        Args:
            credential: Service principal data from the credential store

        Returns:
            AccessToken scoped to the management endpoint

        Raises:
            AzureRequestError: If the token endpoint rejects the request
        """
        endpoint = credential.management_endpoint or self.config.management_endpoint
        data = {
            "grant_type": "client_credentials",
            "client_id": credential.client_id,
            "client_secret": credential.client_secret,
            "scope": f"{endpoint.rstrip('/')}/.default",
        }
        url = self._token_url(credential)
        logger.debug(f"Requesting token for credential {credential.credential_id}")

        try:
            if self._http is not None:
                response = await self._http.post(url, data=data)
            else:
                async with httpx.AsyncClient(timeout=self.config.request_timeout) as client:
                    response = await client.post(url, data=data)
        except httpx.HTTPError as e:
            raise AzureRequestError(f"Token request for {credential.credential_id} failed: {e}") from e

        if response.status_code != 200:
            raise AzureRequestError(
                f"Token request for {credential.credential_id} returned {response.status_code}",
                status_code=response.status_code,
            )

        payload = response.json()
        expires_in = int(payload.get("expires_in", 3600))
        return AccessToken(token=payload["access_token"], expires_on=time.time() + expires_in)
