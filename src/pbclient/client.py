"""The pbclient entry point: configuration, header merging and verb dispatch.

:class:`Client` validates its options once, picks a transport by
``auth_type``, and exposes one method per HTTP verb. Every verb merges
headers the same way and funnels through :meth:`Client.request`, so
success/failure handling is identical for all of them (see
:mod:`pbclient.transport.base`).

Example::

    from pbclient import Client

    with Client({"username": "me@example.com", "api_token": "env:PB_TOKEN"}) as client:
        response = client.get("/features")
        features = response.json()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional

import httpx

from pbclient.exceptions import ConfigError
from pbclient.models import ClientConfig
from pbclient.transport.base import FileInput, RequestTransport
from pbclient.transport.basic import BasicAuthTransport

if TYPE_CHECKING:
    from pbclient.resources import ComponentsFactory, FeaturesFactory, VersionFactory

JSON_CONTENT_TYPE = "application/json"


def merge_headers(*layers: Optional[Mapping[str, str]]) -> dict[str, str]:
    """Merge header mappings left to right; later layers win.

    Header names compare case-insensitively, and the winning layer's
    spelling of the name is kept.
    """
    merged: dict[str, str] = {}
    for layer in layers:
        for key, value in (layer or {}).items():
            for existing in [k for k in merged if k.lower() == key.lower()]:
                del merged[existing]
            merged[key] = value
    return merged


class Client:
    """Configured access point for the REST API.

    The client must be initialised with an options mapping. The available
    options (see :data:`~pbclient.models.DEFINED_OPTIONS`) and their
    defaults are::

        site               = "https://api.productboard.com"
        context_path       = "/"
        rest_base_path     = ""       # effective value: context_path + rest_base_path
        ssl_verify_mode    = SSLVerifyMode.PEER
        ssl_version        = None
        use_ssl            = True
        auth_type          = "basic"  # the only supported strategy
        username / password / api_token / shared_secret = None
        proxy_address / proxy_port / proxy_username / proxy_password = None
        use_cookies        = False    # accepted, not supported
        additional_cookies = None     # accepted, not supported
        default_headers    = {"X-Version": "1"}
        read_timeout       = None
        http_debug         = False

    Args:
        options: Caller options merged over the defaults.
        logger: Where ``http_debug`` traces go. Defaults to this module's
            logger.
        http_transport: Optional :class:`httpx.BaseTransport` handed to the
            underlying HTTP client (not an option key).

    Raises:
        ConfigError: On unknown option keys, an unsupported ``auth_type``,
            or malformed option values.

    Attributes:
        cache: A per-client dict left entirely to the caller. The client
            never reads, fills or evicts it.
    """

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        *,
        logger: Optional[logging.Logger] = None,
        http_transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = ClientConfig.from_options(options)
        self._logger = logger or logging.getLogger(__name__)
        self._transport = self._build_transport(self._config, http_transport)
        self.cache: dict[Any, Any] = {}

        if self._config.use_cookies or self._config.additional_cookies:
            self._logger.warning(
                "use_cookies and additional_cookies are not supported and will be ignored"
            )

    @staticmethod
    def _build_transport(
        config: ClientConfig, http_transport: Optional[httpx.BaseTransport]
    ) -> RequestTransport:
        """Select the transport for ``config.auth_type``."""
        if config.auth_type == "basic":
            return BasicAuthTransport(config, http_transport=http_transport)
        raise ConfigError(
            f"Unsupported auth_type {config.auth_type!r}: 'basic' is the only supported auth type"
        )

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    @property
    def config(self) -> ClientConfig:
        """The frozen configuration."""
        return self._config

    @property
    def options(self) -> dict[str, Any]:
        """A mutable copy of the effective options; changing it does not affect the client."""
        return self._config.as_options()

    @property
    def transport(self) -> RequestTransport:
        return self._transport

    @property
    def http_debug(self) -> bool:
        return self._config.http_debug

    def api_path(self, *segments: Any) -> str:
        """Join ``rest_base_path`` and *segments* into one absolute path.

        Example::

            client.api_path("features", 42)  # "/features/42" with the defaults
        """
        parts = [self._config.rest_base_path, *(str(segment) for segment in segments)]
        return "/" + "/".join(part.strip("/") for part in parts if part.strip("/"))

    # ------------------------------------------------------------------ #
    # Resource factories
    # ------------------------------------------------------------------ #

    def Features(self) -> FeaturesFactory:  # noqa: N802
        from pbclient.resources import FeaturesFactory

        return FeaturesFactory(self)

    def Components(self) -> ComponentsFactory:  # noqa: N802
        from pbclient.resources import ComponentsFactory

        return ComponentsFactory(self)

    def Version(self) -> VersionFactory:  # noqa: N802
        from pbclient.resources import VersionFactory

        return VersionFactory(self)

    # ------------------------------------------------------------------ #
    # HTTP methods without a body
    # ------------------------------------------------------------------ #

    def delete(self, path: str, headers: Optional[Mapping[str, str]] = None) -> httpx.Response:
        return self.request("delete", path, None, self._merge_default_headers(headers))

    def get(self, path: str, headers: Optional[Mapping[str, str]] = None) -> httpx.Response:
        return self.request("get", path, None, self._merge_default_headers(headers))

    def head(self, path: str, headers: Optional[Mapping[str, str]] = None) -> httpx.Response:
        return self.request("head", path, None, self._merge_default_headers(headers))

    # ------------------------------------------------------------------ #
    # HTTP methods with a body
    # ------------------------------------------------------------------ #

    def post(
        self, path: str, body: Any = "", headers: Optional[Mapping[str, str]] = None
    ) -> httpx.Response:
        call_headers = merge_headers({"Content-Type": JSON_CONTENT_TYPE}, headers)
        return self.request("post", path, body, self._merge_default_headers(call_headers))

    def put(
        self, path: str, body: Any = "", headers: Optional[Mapping[str, str]] = None
    ) -> httpx.Response:
        call_headers = merge_headers({"Content-Type": JSON_CONTENT_TYPE}, headers)
        return self.request("put", path, body, self._merge_default_headers(call_headers))

    def post_multipart(
        self, path: str, file: FileInput, headers: Optional[Mapping[str, str]] = None
    ) -> httpx.Response:
        """Upload *file* as multipart form data.

        Skips the JSON ``Content-Type`` and the header merge; the transport
        still sends the configured default headers.
        """
        if self.http_debug:
            self._logger.info("post multipart: %s - [%s]", path, file)
        return self._transport.request_multipart(path, file, headers or {})

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    def request(
        self,
        http_method: str,
        path: str,
        body: Any = "",
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """Send a request through the configured transport.

        Headers are passed through as given; the verb methods are the ones
        that merge defaults.

        Raises:
            HTTPError: If the response status is outside 200-299.
            httpx.TransportError: On connection, timeout or TLS failures.
        """
        if self.http_debug:
            self._logger.info("%s: %s - [%s]", http_method, path, "" if body is None else body)
        return self._transport.request(http_method, path, body, headers or {})

    def _merge_default_headers(self, headers: Optional[Mapping[str, str]]) -> dict[str, str]:
        return merge_headers(
            {"Accept": JSON_CONTENT_TYPE}, self._config.default_headers, headers
        )

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        """Release the transport's pooled connections."""
        self._transport.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        # Never include options: they carry credentials.
        return f"<pbclient.Client:{id(self):#x}>"
