"""Decoding of API response bodies into JSON documents of a known shape.

GitLab answers resource requests with a JSON object and collection requests
with a JSON array. The helpers here decode a :class:`httpx.Response` and
check that shape before the document reaches a model constructor.
"""

from __future__ import annotations

from typing import Any

import httpx

from gitlab_client.exceptions import ServerError


def extract_response_data(response: httpx.Response) -> Any:
    """Decode the body of *response* as JSON.

    Returns ``None`` for an empty body.

    Raises:
        ServerError: If the body is not valid JSON.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise ServerError(
            f"Invalid JSON in response from {response.request.url}: {exc}"
        ) from exc


def json_object(response: httpx.Response) -> dict[str, Any]:
    """Return the body of *response* as a JSON object.

    Raises:
        ServerError: If the body is not a JSON object.
    """
    data = extract_response_data(response)
    if not isinstance(data, dict):
        raise ServerError(
            f"Expected a JSON object from {response.request.url}, got {type(data).__name__}"
        )
    return data


def json_array(response: httpx.Response) -> list[dict[str, Any]]:
    """Return the body of *response* as a JSON array of objects.

    Raises:
        ServerError: If the body is not a JSON array of objects.
    """
    data = extract_response_data(response)
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ServerError(f"Expected a JSON array of objects from {response.request.url}")
    return data
