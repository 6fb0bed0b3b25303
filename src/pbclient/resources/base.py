"""Base class for resource factories bound to a :class:`~pbclient.client.Client`.

A factory knows one collection path and turns the client's verb methods into
collection operations. It never talks to the network any other way, so it
inherits the client's headers, credentials and failure semantics.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional

import httpx

if TYPE_CHECKING:
    from pbclient.client import Client

_ENVELOPE_KEYS = frozenset({"data", "links", "pageCursor", "totalResults"})


def decode_body(response: httpx.Response) -> Any:
    """Return the decoded JSON body, unwrapping a top-level ``data`` envelope.

    Empty bodies decode to ``None``.
    """
    if not response.content:
        return None
    payload = response.json()
    if isinstance(payload, dict) and "data" in payload and set(payload) <= _ENVELOPE_KEYS:
        return payload["data"]
    return payload


class ResourceFactory:
    """Collection-level operations for one API resource.

    Subclasses set :attr:`path`.

    Args:
        client: A live, configured client used for every request.
    """

    path: str = "/"

    def __init__(self, client: Client) -> None:
        self.client = client

    def _member_path(self, resource_id: Any) -> str:
        return self.client.api_path(self.path, resource_id)

    def all(self, headers: Optional[Mapping[str, str]] = None) -> Any:
        """Fetch the collection."""
        response = self.client.get(self.client.api_path(self.path), headers)
        return decode_body(response)

    def find(self, resource_id: Any, headers: Optional[Mapping[str, str]] = None) -> Any:
        """Fetch a single member by id."""
        response = self.client.get(self._member_path(resource_id), headers)
        return decode_body(response)

    def create(self, attrs: Mapping[str, Any], headers: Optional[Mapping[str, str]] = None) -> Any:
        """Create a member from *attrs* (sent as JSON)."""
        response = self.client.post(self.client.api_path(self.path), dict(attrs), headers)
        return decode_body(response)

    def update(
        self,
        resource_id: Any,
        attrs: Mapping[str, Any],
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Replace fields of a member with *attrs* (sent as JSON)."""
        response = self.client.put(self._member_path(resource_id), dict(attrs), headers)
        return decode_body(response)

    def destroy(self, resource_id: Any, headers: Optional[Mapping[str, str]] = None) -> None:
        """Delete a member."""
        self.client.delete(self._member_path(resource_id), headers)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} path={self.path!r}>"
