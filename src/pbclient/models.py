"""Pydantic models and option tables for pbclient.

This is the single source of truth for the client's configuration shape.
:class:`ClientConfig` is built once from a plain options mapping by
:meth:`ClientConfig.from_options` and is frozen afterwards; every other
module reads its settings from there.

The option names mirror the keyword vocabulary the client has always
accepted (``site``, ``context_path``, ``auth_type`` ...). The full list is
:data:`DEFINED_OPTIONS`; anything outside it is rejected before any value
validation happens.
"""

from __future__ import annotations

import enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pbclient.exceptions import ConfigError


DEFINED_OPTIONS: tuple[str, ...] = (
    "site",
    "context_path",
    "rest_base_path",
    "ssl_verify_mode",
    "ssl_version",
    "use_ssl",
    "username",
    "password",
    "api_token",
    "auth_type",
    "proxy_address",
    "proxy_port",
    "proxy_username",
    "proxy_password",
    "use_cookies",
    "additional_cookies",
    "default_headers",
    "read_timeout",
    "http_debug",
    "shared_secret",
)
"""Every option name a client accepts. Order follows the historical docs."""

DEFAULT_SITE = "https://api.productboard.com"


class SSLVerifyMode(int, enum.Enum):
    """Peer certificate verification mode.

    The integer values match OpenSSL's ``SSL_VERIFY_NONE`` and
    ``SSL_VERIFY_PEER`` so configs written against the OpenSSL constants
    keep working.
    """

    NONE = 0
    PEER = 1


DEFAULT_OPTIONS: Mapping[str, Any] = MappingProxyType(
    {
        "site": DEFAULT_SITE,
        "context_path": "/",
        "rest_base_path": "",
        "ssl_verify_mode": SSLVerifyMode.PEER,
        "use_ssl": True,
        "auth_type": "basic",
        "http_debug": False,
        "use_cookies": False,
        "default_headers": {"X-Version": "1"},
    }
)


class ClientConfig(BaseModel):
    """Validated, immutable connection settings for one :class:`~pbclient.client.Client`.

    Build instances through :meth:`from_options`, which applies
    :data:`DEFAULT_OPTIONS`, rejects unknown keys and derives the
    effective ``rest_base_path``. Direct construction skips those steps.

    ``use_cookies`` and ``additional_cookies`` are accepted for
    compatibility with existing configs but have no effect.

    Example::

        config = ClientConfig.from_options({"context_path": "/jira", "rest_base_path": "/rest/api/2"})
        assert config.rest_base_path == "/jira/rest/api/2"
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    site: str = DEFAULT_SITE
    context_path: str = "/"
    rest_base_path: str = Field(
        default="", description="Effective API root: context_path + configured rest_base_path"
    )
    ssl_verify_mode: SSLVerifyMode = SSLVerifyMode.PEER
    ssl_version: Optional[str] = Field(
        default=None, description="Pin the TLS protocol, e.g. 'TLSv1_2'"
    )
    use_ssl: bool = True
    # Any value is accepted here; Client rejects everything but "basic"
    auth_type: Any = "basic"
    # Credentials; values may be 'env:VAR' or 'file:/path' source descriptors
    username: Optional[str] = None
    password: Optional[str] = None
    api_token: Optional[str] = None
    shared_secret: Optional[str] = None
    # Proxy
    proxy_address: Optional[str] = None
    proxy_port: Optional[int] = Field(default=None, ge=1, le=65535)
    proxy_username: Optional[str] = None
    proxy_password: Optional[str] = None
    # Not supported; kept so existing option sets still validate
    use_cookies: Optional[bool] = False
    additional_cookies: Optional[tuple[str, ...]] = None
    default_headers: Mapping[str, str] = Field(
        default_factory=lambda: MappingProxyType({"X-Version": "1"})
    )
    read_timeout: Optional[float] = Field(
        default=None, description="Seconds to wait for response data"
    )
    http_debug: bool = False

    @field_validator("ssl_verify_mode", mode="before")
    @classmethod
    def _parse_verify_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            name = value.strip().upper()
            if name.startswith("VERIFY_"):
                name = name[len("VERIFY_"):]
            if name in SSLVerifyMode.__members__:
                return SSLVerifyMode[name]
        return value

    @field_validator("default_headers", mode="after")
    @classmethod
    def _freeze_headers(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    def __hash__(self) -> int:
        values = [getattr(self, name) for name in DEFINED_OPTIONS]
        values[DEFINED_OPTIONS.index("default_headers")] = tuple(sorted(self.default_headers.items()))
        return hash(tuple(values))

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None) -> ClientConfig:
        """Merge *options* over the defaults and validate the result.

        Args:
            options: Caller-supplied options, possibly partial. Keys must
                be names from :data:`DEFINED_OPTIONS`.

        Returns:
            The frozen configuration.

        Raises:
            ConfigError: If any key is not a recognised option (the message
                lists every unknown key), or a value has the wrong shape.
        """
        merged: dict[str, Any] = dict(DEFAULT_OPTIONS)
        merged.update({str(key): value for key, value in (options or {}).items()})

        unknown = sorted(key for key in merged if key not in DEFINED_OPTIONS)
        if unknown:
            raise ConfigError(f"Unknown option(s) given: {', '.join(unknown)}")

        context_path = merged.get("context_path")
        rest_base_path = merged.get("rest_base_path")
        if isinstance(context_path, str) and isinstance(rest_base_path, str):
            merged["rest_base_path"] = context_path + rest_base_path

        try:
            return cls(**merged)
        except ValidationError as exc:
            raise ConfigError(f"Invalid client options: {exc}") from exc

    def as_options(self) -> dict[str, Any]:
        """Return a plain, mutable snapshot of the settings keyed by option name."""
        snapshot = {name: getattr(self, name) for name in DEFINED_OPTIONS}
        snapshot["default_headers"] = dict(self.default_headers)
        return snapshot
