"""Root entry point of the SharePoint REST API."""

from __future__ import annotations

from sprest.profiles import Profiles
from sprest.search import Search
from sprest.site import Site
from sprest.utility import Utility
from sprest.utils import RequestConfig, Transport


class SharePoint:
    """Root object that hands out API objects for one site."""

    def __init__(
        self, transport: Transport, site_url: str, config: RequestConfig | None = None
    ) -> None:
        self.transport = transport
        self.site_url = site_url
        self.config = config

    def to_url(self) -> str:
        """The site URL."""
        return self.site_url

    def site(self) -> Site:
        """Site collection API object."""
        return Site(self.transport, f"{self.to_url()}/_api/Site", self.config)

    def search(self) -> Search:
        """Search API object."""
        return Search(self.transport, f"{self.to_url()}/_api/Search", self.config)

    def profiles(self) -> Profiles:
        """User profiles API object."""
        return Profiles(
            self.transport, f"{self.to_url()}/_api/sp.userprofiles.peoplemanager", self.config
        )

    def utility(self) -> Utility:
        """Utilities API object."""
        return Utility(self.transport, self.to_url(), self.config)

    def metadata(self) -> bytes:
        """The ``$metadata`` document."""
        return self.transport.get(f"{self.to_url()}/_api/$metadata", self.config)