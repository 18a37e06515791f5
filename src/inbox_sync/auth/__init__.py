"""Access-token lookup for the users being synced."""

from .accounts import AccountRepository, CredentialProvider

__all__ = ["AccountRepository", "CredentialProvider"]
