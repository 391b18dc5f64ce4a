"""Typed access to the GitLab v3 API resources.

:class:`GitLabApiClient` turns API calls made through a
:class:`~gitlab_client.client.sync_client.SyncClient` into model objects
from :mod:`gitlab_client.models`. Collection endpoints are paginated by
GitLab; the client follows the ``X-Next-Page`` header until every page has
been read.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional, Union

from gitlab_client.client.response import json_array, json_object
from gitlab_client.client.sync_client import SyncClient
from gitlab_client.models import (
    GitLabGroup,
    GitLabGroupMemberInfo,
    GitLabSession,
    GitLabUser,
)

PER_PAGE = 100
NEXT_PAGE_HEADER = "X-Next-Page"


class GitLabApiClient:
    """GitLab API operations returning typed models.

    Args:
        client: An open :class:`SyncClient`.

    Example::

        with SyncClient(profile, private_token=token) as http:
            api = GitLabApiClient(http)
            for group in api.get_groups():
                print(group, len(api.get_group_members(group)))
    """

    def __init__(self, client: SyncClient) -> None:
        self._client = client

    def get_session(self, login: str, password: str) -> GitLabSession:
        """Log in with a username (or email) and password.

        Returns:
            The session, carrying the user's private token.

        Raises:
            AuthError: If GitLab rejects the credentials.
        """
        response = self._client.post("/session", data={"login": login, "password": password})
        return GitLabSession.model_validate(json_object(response))

    def get_current_user(self) -> GitLabUser:
        """Return the user the private token belongs to."""
        return GitLabUser.model_validate(json_object(self._client.get("/user")))

    def get_users(self) -> list[GitLabUser]:
        return [GitLabUser.model_validate(item) for item in self._paginate("/users")]

    def get_groups(self) -> list[GitLabGroup]:
        """Return the groups visible to the current user."""
        return [GitLabGroup.model_validate(item) for item in self._paginate("/groups")]

    def get_group(self, group_id: int) -> GitLabGroup:
        """Return a single group.

        Raises:
            NotFoundError: If no such group is visible to the user.
        """
        return GitLabGroup.model_validate(json_object(self._client.get(f"/groups/{group_id}")))

    def get_group_members(self, group: Union[GitLabGroup, int]) -> list[GitLabGroupMemberInfo]:
        """Return the members of *group* with their access levels.

        Args:
            group: A group, or a group id (the group is fetched first so
                that each member record can carry the group's path).
        """
        if not isinstance(group, GitLabGroup):
            group = self.get_group(group)
        return [
            GitLabGroupMemberInfo.from_json(item, group.path)
            for item in self._paginate(f"/groups/{group.id}/members")
        ]

    def _paginate(self, path: str) -> Iterator[dict[str, Any]]:
        page: Optional[str] = "1"
        while page:
            response = self._client.get(path, params={"page": page, "per_page": PER_PAGE})
            yield from json_array(response)
            page = response.headers.get(NEXT_PAGE_HEADER) or None
