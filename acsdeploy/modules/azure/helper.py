"""Wiring between the credential store, token exchange and the ARM client."""

import logging
from typing import Optional

import httpx

from ...config.provider import AzureConfig
from ..credentials import AzureTokenProvider, CredentialStore, TokenCredentialData
from .client import AzureManagementClient

logger = logging.getLogger(__name__)


class AzureHelper:
    """Builds authenticated management clients from credential ids."""

    def __init__(
        self,
        store: CredentialStore,
        config: AzureConfig,
        token_provider: Optional[AzureTokenProvider] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.store = store
        self.config = config
        self.http_client = http_client
        self.token_provider = token_provider or AzureTokenProvider(config, http_client)

    def get_credential(self, credential_id: str, owner: Optional[str] = None) -> TokenCredentialData:
        return self.store.get(credential_id, owner)

    async def build_client(self, credential: TokenCredentialData) -> AzureManagementClient:
        """Exchange the credential and return a client bound to its subscription."""
        token = await self.token_provider.get_token(credential)
        logger.debug(f"Built management client for subscription {credential.subscription_id}")
        return AzureManagementClient(
            token=token,
            subscription_id=credential.subscription_id,
            config=self.config,
            http_client=self.http_client,
            management_endpoint=credential.management_endpoint or self.config.management_endpoint,
        )
