"""Abstract base class for request transports.

A transport performs the actual network call and decides whether it
succeeded. The deciding part lives here and is shared by every variant:

- :meth:`RequestTransport.request` and
  :meth:`RequestTransport.request_multipart` are the public contract. They
  obtain a raw :class:`httpx.Response` from the variant, then classify it:
  any status in 200-299 is returned unchanged, anything else raises
  :class:`~pbclient.exceptions.HTTPError` with the response attached.
- :meth:`RequestTransport.make_request` and
  :meth:`RequestTransport.make_multipart_request` are what a variant
  implements (attaching credentials, building the URL, sending).

To add an auth strategy, subclass :class:`RequestTransport`, implement the
two ``make_*`` hooks, and add one arm to
:meth:`pbclient.client.Client._build_transport`.

See Also:
    :mod:`pbclient.transport.basic` for the HTTP Basic variant.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Mapping, Optional, Union

import httpx

from pbclient.exceptions import HTTPError

HTTP_METHODS = frozenset({"get", "post", "put", "delete", "head"})
"""Methods accepted by :meth:`RequestTransport.request` (lowercase)."""

FileInput = Union[str, "os.PathLike[str]", bytes, BinaryIO]
"""What :meth:`RequestTransport.request_multipart` accepts as the file payload."""


def is_success(response: httpx.Response) -> bool:
    """Return True for statuses in the inclusive 200-299 range."""
    return 200 <= response.status_code <= 299


class RequestTransport(ABC):
    """Contract every auth-specific transport must satisfy.

    Subclasses never override :meth:`request` or :meth:`request_multipart`,
    so every HTTP verb on :class:`~pbclient.client.Client` fails the same
    way regardless of method or auth strategy.
    """

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """Send a request and return the response if it was successful.

        Args:
            method: One of ``get``, ``post``, ``put``, ``delete``, ``head``
                (case-insensitive).
            path: Request path, appended to the configured site.
            body: Request payload; ``None`` or ``""`` for no body.
            headers: Fully merged request headers.

        Returns:
            The :class:`httpx.Response`, unmodified.

        Raises:
            ValueError: If *method* is not a supported HTTP method.
            HTTPError: If the response status is outside 200-299.
        """
        verb = method.lower()
        if verb not in HTTP_METHODS:
            raise ValueError(
                f"Unsupported HTTP method {method!r}; expected one of "
                f"{', '.join(sorted(HTTP_METHODS))}"
            )
        response = self.make_request(verb, path, body, dict(headers or {}))
        return self._classify(response)

    def request_multipart(
        self,
        path: str,
        file: FileInput,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """Upload *file* as ``multipart/form-data`` with the same success rules as :meth:`request`.

        Raises:
            HTTPError: If the response status is outside 200-299.
        """
        response = self.make_multipart_request(path, file, dict(headers or {}))
        return self._classify(response)

    @staticmethod
    def _classify(response: httpx.Response) -> httpx.Response:
        if not is_success(response):
            raise HTTPError(response)
        return response

    @abstractmethod
    def make_request(
        self, method: str, path: str, body: Any, headers: dict[str, str]
    ) -> httpx.Response:
        """Perform the network call for a regular request and return the raw response."""
        ...

    @abstractmethod
    def make_multipart_request(
        self, path: str, file: FileInput, headers: dict[str, str]
    ) -> httpx.Response:
        """Perform the network call for a multipart upload and return the raw response."""
        ...

    def close(self) -> None:
        """Release any pooled connections. The default has nothing to release."""
