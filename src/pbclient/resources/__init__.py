"""Resource factories returned by :meth:`Client.Features`, :meth:`Client.Components` and :meth:`Client.Version`.

Each factory is bound to one live client and issues all of its requests
through that client's verb methods.
"""

from pbclient.resources.base import ResourceFactory, decode_body
from pbclient.resources.components import ComponentsFactory
from pbclient.resources.features import FeaturesFactory
from pbclient.resources.version import VersionFactory

__all__ = [
    "ResourceFactory",
    "FeaturesFactory",
    "ComponentsFactory",
    "VersionFactory",
    "decode_body",
]
