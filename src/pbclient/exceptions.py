"""Exception hierarchy for pbclient.

All exceptions inherit from :class:`PbclientError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`pbclient.exit_codes`.
The library itself never catches these; the command line entry point in
:func:`pbclient.app.main` is the only place they are turned into exit codes.

Subclass hierarchy::

    PbclientError (exit 1)
    +-- ConfigError   (exit 2)
    +-- HTTPError     (exit 3 / 4 / 5 / 1 depending on the response status)

Network-level failures (connection refused, timeouts, TLS handshakes) are
*not* part of this hierarchy: they surface as the underlying
:class:`httpx.TransportError` subclasses, untranslated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pbclient.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONFIG_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)

if TYPE_CHECKING:
    import httpx


class PbclientError(Exception):
    """Base exception for all pbclient errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(PbclientError):
    """Raised for configuration problems.

    Covers unknown option keys, an unsupported ``auth_type``, option values
    of the wrong shape, and unreadable config files or credential sources.
    Always raised synchronously while building a client, never at request
    time.
    """

    exit_code = EXIT_CONFIG_ERROR


class HTTPError(PbclientError):
    """Raised when a completed request returns a status outside 200-299.

    The full :class:`httpx.Response` is attached so callers can tell a 404
    from a 500 or an auth failure by inspecting it, rather than through a
    taxonomy of error types.

    Args:
        response: The response that triggered the error.
    """

    def __init__(self, response: httpx.Response):
        self.response = response
        super().__init__(_describe(response), exit_code=_exit_code_for(response.status_code))

    @property
    def status_code(self) -> int:
        """The HTTP status code of the attached response."""
        return self.response.status_code


def _exit_code_for(status: int) -> int:
    if status in (401, 403):
        return EXIT_AUTH_FAILURE
    if status == 404:
        return EXIT_NOT_FOUND
    if status >= 500:
        return EXIT_SERVER_ERROR
    return EXIT_GENERIC_FAILURE


def _describe(response: httpx.Response) -> str:
    """Build ``HTTP <status>: <detail>`` from an error response."""
    prefix = f"HTTP {response.status_code}"
    try:
        detail = response.json()
        if isinstance(detail, dict):
            msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
            if isinstance(msg, (dict, list)):
                msg = str(msg)
        else:
            msg = str(detail)
    except ValueError:
        msg = response.text[:200] if response.text else ""
    if not msg:
        msg = response.reason_phrase or ""
    return f"{prefix}: {msg}" if msg else prefix
