"""HTTP Basic authentication transport.

This module provides :class:`BasicAuthTransport`, the implementation behind
``auth_type="basic"``. It owns one :class:`httpx.Client` configured from the
:class:`~pbclient.models.ClientConfig` (site, TLS, proxy, timeout, default
headers) and attaches credentials to every request:

- ``username`` + ``password`` -- ``Authorization: Basic`` per :rfc:`7617`.
- ``username`` + ``api_token`` -- Basic, with the token in the password slot.
- ``shared_secret`` alone -- ``Authorization: Bearer <shared_secret>``.
- nothing -- requests go out unauthenticated.

Credential values may be ``env:VAR`` / ``file:/path`` descriptors; they are
resolved once, when the transport is built.

See Also:
    :class:`pbclient.transport.base.RequestTransport` for the contract.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

import httpx

from pbclient.config import resolve_credential
from pbclient.exceptions import ConfigError
from pbclient.models import ClientConfig
from pbclient.transport.base import FileInput, RequestTransport
from pbclient.transport.tls import build_verify

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
"""Connect/write/pool timeout in seconds. ``read_timeout`` overrides the read part."""

MULTIPART_FIELD = "file"


def _resolve(value: Optional[str]) -> Optional[str]:
    return resolve_credential(value) if value is not None else None


def effective_site(config: ClientConfig) -> str:
    """Return the site URL requests are sent to.

    With ``use_ssl`` disabled an ``https`` site is downgraded to ``http``.
    """
    try:
        url = httpx.URL(config.site)
    except httpx.InvalidURL as exc:
        raise ConfigError(f"Invalid site {config.site!r}: {exc}") from exc
    if not config.use_ssl and url.scheme == "https":
        url = url.copy_with(scheme="http")
    return str(url)


def build_proxy_url(config: ClientConfig) -> Optional[str]:
    """Assemble a proxy URL from the ``proxy_*`` options, or ``None`` without an address."""
    if not config.proxy_address:
        return None
    address = config.proxy_address
    if "://" not in address:
        address = f"http://{address}"
    try:
        url = httpx.URL(address)
        if config.proxy_port is not None:
            url = url.copy_with(port=config.proxy_port)
        if config.proxy_username:
            url = url.copy_with(
                username=_resolve(config.proxy_username),
                password=_resolve(config.proxy_password) or "",
            )
    except httpx.InvalidURL as exc:
        raise ConfigError(f"Invalid proxy settings for {address!r}: {exc}") from exc
    return str(url)


def build_timeout(config: ClientConfig) -> httpx.Timeout:
    if config.read_timeout is None:
        return httpx.Timeout(DEFAULT_TIMEOUT)
    return httpx.Timeout(DEFAULT_TIMEOUT, read=config.read_timeout)


def build_auth(config: ClientConfig) -> tuple[Optional[httpx.Auth], dict[str, str]]:
    """Pick the credential scheme from the configured fields.

    Returns:
        A ``(auth, headers)`` pair: an :class:`httpx.BasicAuth` or ``None``,
        plus any static headers (the bearer token) to send with every request.
    """
    username = _resolve(config.username)
    secret = _resolve(config.password)
    if secret is None:
        secret = _resolve(config.api_token)

    if username is not None and secret is not None:
        return httpx.BasicAuth(username, secret), {}

    shared_secret = _resolve(config.shared_secret)
    if shared_secret:
        return None, {"Authorization": f"Bearer {shared_secret}"}

    if username is not None:
        return httpx.BasicAuth(username, ""), {}

    logger.debug("No credentials configured; requests will be unauthenticated")
    return None, {}


def encode_body(body: Any) -> Optional[bytes]:
    """Encode a request body. ``None`` and ``""`` mean no body; other non-bytes values become JSON."""
    if body is None or body == "":
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body).encode("utf-8")


class BasicAuthTransport(RequestTransport):
    """Send requests through :mod:`httpx` with Basic (or shared-secret) credentials.

    Args:
        config: The frozen client configuration.
        http_transport: Optional :class:`httpx.BaseTransport` for the
            underlying client, e.g. :class:`httpx.MockTransport` in tests.
    """

    def __init__(
        self,
        config: ClientConfig,
        http_transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        from pbclient import __version__

        self._config = config
        auth, auth_headers = build_auth(config)

        headers: dict[str, str] = {
            "Accept": "application/json",
            "User-Agent": f"pbclient/{__version__}",
        }
        headers.update(config.default_headers)
        headers.update(auth_headers)

        client_kwargs: dict[str, Any] = {
            "base_url": effective_site(config),
            "headers": headers,
            "timeout": build_timeout(config),
            "verify": build_verify(config.ssl_verify_mode, config.ssl_version),
        }
        if auth is not None:
            client_kwargs["auth"] = auth
        proxy_url = build_proxy_url(config)
        if http_transport is not None:
            # A proxy would mount its own transport over the injected one.
            client_kwargs["transport"] = http_transport
        elif proxy_url is not None:
            client_kwargs["proxy"] = proxy_url

        self._client = httpx.Client(**client_kwargs)
        logger.debug("Basic auth transport ready for %s", client_kwargs["base_url"])

    @property
    def http_client(self) -> httpx.Client:
        """The underlying :class:`httpx.Client`."""
        return self._client

    def make_request(
        self, method: str, path: str, body: Any, headers: dict[str, str]
    ) -> httpx.Response:
        content = encode_body(body)
        kwargs: dict[str, Any] = {"headers": headers}
        if content is not None:
            kwargs["content"] = content
        return self._client.request(method.upper(), path, **kwargs)

    def make_multipart_request(
        self, path: str, file: FileInput, headers: dict[str, str]
    ) -> httpx.Response:
        if isinstance(file, (str, os.PathLike)):
            file_path = Path(file)
            with file_path.open("rb") as handle:
                return self._send_multipart(path, (file_path.name, handle), headers)
        if isinstance(file, bytes):
            return self._send_multipart(path, (MULTIPART_FIELD, file), headers)
        return self._send_multipart(path, file, headers)

    def _send_multipart(self, path: str, payload: Any, headers: dict[str, str]) -> httpx.Response:
        return self._client.post(path, files={MULTIPART_FIELD: payload}, headers=headers)

    def close(self) -> None:
        self._client.close()
