"""Private-token persistence for logged-in profiles."""

from gitlab_client.auth.credential_store import CredentialEntry, CredentialStore

__all__ = ["CredentialEntry", "CredentialStore"]
