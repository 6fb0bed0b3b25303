"""Version resource.

Unlike features and components this is a single document, so the factory
adds :meth:`VersionFactory.get` next to the inherited collection helpers.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pbclient.resources.base import ResourceFactory, decode_body


class VersionFactory(ResourceFactory):
    """Operations on ``/version``."""

    path = "/version"

    def get(self, headers: Optional[Mapping[str, str]] = None) -> Any:
        """Fetch the version document."""
        response = self.client.get(self.client.api_path(self.path), headers)
        return decode_body(response)
