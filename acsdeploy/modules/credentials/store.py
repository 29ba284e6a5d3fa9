"""
Credential stores resolving opaque credential ids to service principals.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

import yaml

from ...errors import CredentialNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class TokenCredentialData:
    """Service principal able to obtain management-plane tokens."""

    credential_id: str
    subscription_id: str
    tenant_id: str
    client_id: str
    client_secret: str
    authority: Optional[str] = None
    management_endpoint: Optional[str] = None
    owners: List[str] = field(default_factory=list)

    def is_visible_to(self, owner: Optional[str]) -> bool:
        """Unscoped credentials are visible to everyone."""
        if not self.owners:
            return True
        return owner is not None and owner in self.owners

    @classmethod
    def from_dict(cls, credential_id: str, data: Dict[str, Any]) -> "TokenCredentialData":
        """Create from a credential file entry."""
        return cls(
            credential_id=credential_id,
            subscription_id=data["subscription_id"],
            tenant_id=data["tenant_id"],
            client_id=data["client_id"],
            client_secret=data["client_secret"],
            authority=data.get("authority"),
            management_endpoint=data.get("management_endpoint"),
            owners=list(data.get("owners", [])),
        )


class CredentialStore(Protocol):
    """Protocol for credential lookups."""

    def get(self, credential_id: str, owner: Optional[str] = None) -> TokenCredentialData:
        """
        Resolve a credential id.

        Raises:
            CredentialNotFoundError: If unknown or not visible to owner
        """
        ...


class StaticCredentialStore:
    """Credential store over an in-memory mapping."""

    def __init__(self, credentials: Optional[Dict[str, TokenCredentialData]] = None):
        self._credentials = dict(credentials or {})

    def add(self, credential: TokenCredentialData) -> None:
        self._credentials[credential.credential_id] = credential

    def get(self, credential_id: str, owner: Optional[str] = None) -> TokenCredentialData:
        credential = self._credentials.get(credential_id)
        if credential is None or not credential.is_visible_to(owner):
            raise CredentialNotFoundError(credential_id, owner)
        return credential


class FileCredentialStore(StaticCredentialStore):
    """
    Credential store backed by a YAML file.

    Format:
        credentials:
          my-sp:
            subscription_id: ...
            tenant_id: ...
            client_id: ...
            client_secret: ...
            owners: [team-a]     # optional
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> Dict[str, TokenCredentialData]:
        with open(self.path) as f:
            data = yaml.safe_load(f) or {}
        entries = data.get("credentials") or {}
        credentials = {
            credential_id: TokenCredentialData.from_dict(credential_id, entry)
            for credential_id, entry in entries.items()
        }
        logger.info(f"Loaded {len(credentials)} credentials from {self.path}")
        return credentials
