"""HTTP client module for gitlab_client.

Classes:
    :class:`SyncClient` -- blocking client backed by :class:`httpx.Client`,
    with private-token injection, proxy routing and error mapping.
    :class:`GitLabApiClient` -- typed API operations on top of ``SyncClient``.

Example::

    from gitlab_client.client import GitLabApiClient, SyncClient

    with SyncClient(profile, private_token=token) as client:
        groups = GitLabApiClient(client).get_groups()
"""

from gitlab_client.client.api import GitLabApiClient
from gitlab_client.client.sync_client import SyncClient

__all__ = ["GitLabApiClient", "SyncClient"]
