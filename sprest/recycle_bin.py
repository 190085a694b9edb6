"""Recycle bin API."""

from __future__ import annotations

import json

from sprest.models import RecycleBinItemInfo
from sprest.odata import ODataMods, to_url
from sprest.utils import (
    RequestConfig,
    Transport,
    fix_dates_in_response,
    normalize_odata_collection,
    normalize_odata_item,
    split_odata_collection,
)

_DATE_FIELDS = ("DeletedDate",)


class RecycleBinItemResponse(bytes):
    """Raw recycle bin item response body with typed accessors."""

    def data(self) -> RecycleBinItemInfo:
        """Typed item; an unreadable body gives an empty item."""
        payload = fix_dates_in_response(normalize_odata_item(bytes(self)), _DATE_FIELDS)
        try:
            parsed = json.loads(payload)
        except ValueError:
            return RecycleBinItemInfo()
        if not isinstance(parsed, dict):
            return RecycleBinItemInfo()
        return RecycleBinItemInfo.from_dict(parsed)

    def normalized(self) -> bytes:
        """Body with the verbose OData wrapper removed."""
        return normalize_odata_item(bytes(self))


class RecycleBinResponse(bytes):
    """Raw recycle bin collection response body with typed accessors."""

    def data(self) -> list[RecycleBinItemResponse]:
        """One response per recycled item."""
        chunks, _ = split_odata_collection(bytes(self))
        return [RecycleBinItemResponse(chunk) for chunk in chunks]

    def normalized(self) -> bytes:
        """Body as a flat JSON array of normalised items."""
        normalized, _ = normalize_odata_collection(bytes(self))
        return normalized


class RecycleBinItem:
    """A recycled item endpoint."""

    def __init__(
        self, transport: Transport, endpoint: str, config: RequestConfig | None = None
    ) -> None:
        self.transport = transport
        self.endpoint = endpoint
        self.config = config
        self.modifiers = ODataMods()

    def get(self) -> RecycleBinItemResponse:
        """Fetch the recycled item."""
        return RecycleBinItemResponse(self.transport.get(self.endpoint, self.config))

    def restore(self) -> None:
        """Restore the item from the recycle bin."""
        self.transport.post(f"{self.endpoint}/Restore()", None, self.config)


class RecycleBin:
    """Recycle bin collection endpoint."""

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

    def select(self, props: str) -> RecycleBin:
        """Set ``$select``."""
        self.modifiers.add_select(props)
        return self

    def filter(self, expression: str) -> RecycleBin:
        """Set ``$filter``."""
        self.modifiers.add_filter(expression)
        return self

    def top(self, count: int) -> RecycleBin:
        """Set ``$top``."""
        self.modifiers.add_top(count)
        return self

    def order_by(self, field: str, ascending: bool = True) -> RecycleBin:
        """Append a field to ``$orderby``."""
        self.modifiers.add_order_by(field, ascending)
        return self

    def get(self) -> RecycleBinResponse:
        """Fetch the recycled items."""
        return RecycleBinResponse(self.transport.get(self.to_url(), self.config))

    def get_by_id(self, item_id: str) -> RecycleBinItem:
        """Recycled item by its ID."""
        return RecycleBinItem(self.transport, f"{self.endpoint}('{item_id}')", self.config)