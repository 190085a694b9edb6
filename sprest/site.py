"""Site collection API."""

from __future__ import annotations

import json

from sprest.models import SiteInfo
from sprest.odata import ODataMods, to_url
from sprest.recycle_bin import RecycleBin
from sprest.users import User
from sprest.utils import RequestConfig, Transport, normalize_odata_item, patch_metadata_type


class SiteResponse(bytes):
    """Raw site response body with typed accessors."""

    def data(self) -> SiteInfo:
        """Typed site; an unreadable body gives an empty site."""
        try:
            parsed = json.loads(normalize_odata_item(bytes(self)))
        except ValueError:
            return SiteInfo()
        return SiteInfo.from_dict(parsed) if isinstance(parsed, dict) else SiteInfo()

    def normalized(self) -> bytes:
        """Body with the verbose OData wrapper removed."""
        return normalize_odata_item(bytes(self))


class Site:
    """A site collection endpoint."""

    def __init__(
        self, transport: Transport, endpoint: str, config: RequestConfig | None = None
    ) -> None:
        self.transport = transport
        self.endpoint = endpoint
        self.config = config
        self.modifiers = ODataMods()

    def to_url(self) -> str:
        """Endpoint with the query modifiers applied."""
        return to_url(self.endpoint, self.modifiers)

    def from_url(self, url: str) -> Site:
        """Site object for an API URL, its query string dropped."""
        return Site(self.transport, url.split("?")[0], self.config)

    def select(self, props: str) -> Site:
        """Set ``$select``."""
        self.modifiers.add_select(props)
        return self

    def expand(self, props: str) -> Site:
        """Set ``$expand``."""
        self.modifiers.add_expand(props)
        return self

    def get(self) -> SiteResponse:
        """Fetch the site."""
        return SiteResponse(self.transport.get(self.to_url(), self.config))

    def update(self, body: bytes | str) -> SiteResponse:
        """Update the site with a JSON payload of ``SP.Site`` properties."""
        payload = body.encode("utf-8") if isinstance(body, str) else body
        payload = patch_metadata_type(payload, "SP.Site")
        return SiteResponse(self.transport.update(self.endpoint, payload, self.config))

    def delete(self) -> None:
        """Delete the site; it cannot be restored from a recycle bin."""
        self.transport.delete(self.endpoint, self.config)

    def open_web_by_id(self, web_id: str) -> bytes:
        """Raw data of the web with the given ID."""
        endpoint = f"{self.endpoint}/OpenWebById('{web_id}')"
        return self.transport.post(endpoint, None, self.config)

    def recycle_bin(self) -> RecycleBin:
        """Recycle bin of the site."""
        return RecycleBin(self.transport, f"{self.endpoint}/RecycleBin", self.config)

    def owner(self) -> User:
        """Owner of the site."""
        return User(self.transport, f"{self.endpoint}/Owner", self.config)