"""Components resource."""

from __future__ import annotations

from pbclient.resources.base import ResourceFactory


class ComponentsFactory(ResourceFactory):
    """Operations on ``/components``."""

    path = "/components"
