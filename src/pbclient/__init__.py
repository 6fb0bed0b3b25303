"""pbclient -- a configurable HTTP client for the Productboard REST API.

The package validates connection options once, builds an authenticated
transport, and exposes one method per HTTP verb. Every non-2xx response
surfaces as a single :class:`~pbclient.exceptions.HTTPError` carrying the
full response.

Typical use::

    from pbclient import Client, HTTPError

    client = Client({"shared_secret": "env:PB_TOKEN"})
    try:
        features = client.Features().all()
    except HTTPError as exc:
        print(exc.status_code, exc.response.text)

Modules:
    client: :class:`Client` -- configuration, header merging, verb dispatch.
    transport: Abstract request transport and the HTTP Basic variant.
    models: The frozen :class:`~pbclient.models.ClientConfig` and option tables.
    resources: Features / Components / Version factories.
    config: Option loading from config files and environment variables.
    exceptions: Exception hierarchy with exit-code mapping.
    app: Typer command line.
"""

__version__ = "0.1.0"

from pbclient.client import Client  # noqa: E402
from pbclient.exceptions import ConfigError, HTTPError, PbclientError  # noqa: E402
from pbclient.models import ClientConfig, SSLVerifyMode  # noqa: E402

__all__ = [
    "Client",
    "ClientConfig",
    "ConfigError",
    "HTTPError",
    "PbclientError",
    "SSLVerifyMode",
    "__version__",
]
