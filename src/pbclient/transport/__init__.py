"""Request transports for pbclient.

A transport performs the network call for a :class:`~pbclient.client.Client`
and classifies the result: 2xx responses are returned, everything else
raises :class:`~pbclient.exceptions.HTTPError`.

Classes:
    :class:`RequestTransport` -- the abstract contract and classification wrapper.
    :class:`BasicAuthTransport` -- the ``auth_type="basic"`` implementation on :mod:`httpx`.
"""

from pbclient.transport.base import RequestTransport
from pbclient.transport.basic import BasicAuthTransport

__all__ = ["RequestTransport", "BasicAuthTransport"]
