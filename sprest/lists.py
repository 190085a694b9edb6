"""Lists collection API."""

from __future__ import annotations

import json
from typing import Any, Mapping

from sprest.odata import ODataMods, to_url
from sprest.utils import (
    RequestConfig,
    Transport,
    normalize_odata_collection,
    patch_config_headers,
    split_odata_collection,
)

_VERBOSE_HEADERS = {
    "Accept": "application/json;odata=verbose",
    "Content-Type": "application/json;odata=verbose;charset=utf-8",
}

_LIST_DEFAULTS = {
    "BaseTemplate": 100,
    "AllowContentTypes": False,
    "ContentTypesEnabled": False,
}


class ListsResponse(bytes):
    """Raw lists collection response body with typed accessors."""

    def data(self) -> list[dict[str, Any]]:
        """One mapping per list in the collection."""
        chunks, _ = split_odata_collection(bytes(self))
        items = []
        for chunk in chunks:
            try:
                parsed = json.loads(chunk)
            except ValueError:
                continue
            if isinstance(parsed, dict):
                items.append(parsed)
        return items

    def normalized(self) -> bytes:
        """Body as a flat JSON array of normalised items."""
        normalized, _ = normalize_odata_collection(bytes(self))
        return normalized


class Lists:
    """The lists collection of a web."""

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

    def select(self, props: str) -> Lists:
        """Set ``$select``."""
        self.modifiers.add_select(props)
        return self

    def expand(self, props: str) -> Lists:
        """Set ``$expand``."""
        self.modifiers.add_expand(props)
        return self

    def filter(self, expression: str) -> Lists:
        """Set ``$filter``."""
        self.modifiers.add_filter(expression)
        return self

    def top(self, count: int) -> Lists:
        """Set ``$top``."""
        self.modifiers.add_top(count)
        return self

    def order_by(self, field: str, ascending: bool = True) -> Lists:
        """Append a field to ``$orderby``."""
        self.modifiers.add_order_by(field, ascending)
        return self

    def get(self) -> ListsResponse:
        """Fetch the lists collection."""
        return ListsResponse(self.transport.get(self.to_url(), self.config))

    def add(self, title: str, metadata: Mapping[str, Any] | None = None) -> bytes:
        """Create a list titled ``title``; ``metadata`` holds further ``SP.List`` properties.

        ``BaseTemplate`` defaults to 100, ``AllowContentTypes`` and
        ``ContentTypesEnabled`` to false.
        """
        payload: dict[str, Any] = dict(metadata or {})
        payload["__metadata"] = {"type": "SP.List"}
        payload["Title"] = title
        for key, default in _LIST_DEFAULTS.items():
            if payload.get(key) is None:
                payload[key] = default
        body = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
        config = patch_config_headers(self.config, _VERBOSE_HEADERS)
        return self.transport.post(self.endpoint, body, config)