"""Features resource."""

from __future__ import annotations

from pbclient.resources.base import ResourceFactory


class FeaturesFactory(ResourceFactory):
    """Operations on ``/features``."""

    path = "/features"
