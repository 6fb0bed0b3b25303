"""Numeric process exit codes for the ``pbclient`` command line.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~pbclient.exceptions.PbclientError` subclass.
Shell wrappers can inspect the exit code to tell a rejected credential
from a missing resource without parsing stderr.

Example::

    $ pbclient get /features/unknown
    $ echo $?
    4   # EXIT_NOT_FOUND -- the API answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including non-2xx statuses without a dedicated code)."""

EXIT_CONFIG_ERROR = 2
"""The client options were invalid (unknown keys, unsupported auth type, bad values)."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the credentials (HTTP 401 / 403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote API returned an HTTP 5xx server error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused, TLS)."""
