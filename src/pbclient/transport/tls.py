"""TLS settings for the httpx transport.

Turns the ``ssl_verify_mode`` / ``ssl_version`` options into the value
httpx expects for its ``verify`` argument.
"""

from __future__ import annotations

import ssl
from typing import Optional, Union

from pbclient.exceptions import ConfigError
from pbclient.models import SSLVerifyMode

_TLS_VERSIONS = {
    "TLSV1": ssl.TLSVersion.TLSv1,
    "TLSV1_1": ssl.TLSVersion.TLSv1_1,
    "TLSV1_2": ssl.TLSVersion.TLSv1_2,
    "TLSV1_3": ssl.TLSVersion.TLSv1_3,
}


def parse_tls_version(name: str) -> ssl.TLSVersion:
    """Map names like ``"TLSv1_2"``, ``"TLSv1.2"`` or ``"tlsv1_2"`` to :class:`ssl.TLSVersion`.

    Raises:
        ConfigError: For names that are not a known TLS protocol version.
    """
    key = name.strip().upper().replace(".", "_")
    try:
        return _TLS_VERSIONS[key]
    except KeyError:
        raise ConfigError(
            f"Unsupported ssl_version {name!r}; expected one of "
            "TLSv1, TLSv1_1, TLSv1_2, TLSv1_3"
        ) from None


def create_tls_context(ssl_version: str) -> ssl.SSLContext:
    """Create a verifying SSL context pinned to a single protocol version."""
    version = parse_tls_version(ssl_version)
    ssl_context = ssl.create_default_context()
    ssl_context.minimum_version = version
    ssl_context.maximum_version = version
    return ssl_context


def build_verify(
    verify_mode: SSLVerifyMode, ssl_version: Optional[str] = None
) -> Union[bool, ssl.SSLContext]:
    """Return the ``verify`` argument for :class:`httpx.Client`.

    ``NONE`` disables certificate checks entirely (and ignores
    ``ssl_version``). ``PEER`` yields ``True``, or a pinned
    :class:`ssl.SSLContext` when a protocol version is configured.
    """
    if verify_mode == SSLVerifyMode.NONE:
        return False
    if ssl_version:
        return create_tls_context(ssl_version)
    return True
