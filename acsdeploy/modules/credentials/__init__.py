"""
Credentials Module - Black Box Interface

Purpose: Resolve credential ids and exchange them for bearer tokens
Interface: CredentialStore.get(), AzureTokenProvider.get_token()
Hidden: Credential file format, OAuth2 flow details

Can be replaced with a vault-backed store without affecting commands.
"""

from .store import CredentialStore, FileCredentialStore, StaticCredentialStore, TokenCredentialData
from .token import AccessToken, AzureTokenProvider

__all__ = [
    "AccessToken",
    "AzureTokenProvider",
    "CredentialStore",
    "FileCredentialStore",
    "StaticCredentialStore",
    "TokenCredentialData",
]
