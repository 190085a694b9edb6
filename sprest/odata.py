"""OData query modifiers and URL building."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sprest.utils import trim_multiline


@dataclass
class ODataMods:
    """Collected ``$select``, ``$expand``, ``$filter``, ``$top`` and similar modifiers."""

    mods: dict[str, str] = field(default_factory=dict)

    def get(self) -> dict[str, str]:
        """The modifiers mapping."""
        return self.mods

    def add_select(self, values: str) -> ODataMods:
        """Set ``$select``."""
        self.mods["$select"] = values
        return self

    def add_expand(self, values: str) -> ODataMods:
        """Set ``$expand``."""
        self.mods["$expand"] = values
        return self

    def add_filter(self, values: str) -> ODataMods:
        """Set ``$filter``."""
        self.mods["$filter"] = values
        return self

    def add_skip(self, value: str) -> ODataMods:
        """Set ``$skiptoken``."""
        self.mods["$skiptoken"] = value
        return self

    def add_top(self, value: int) -> ODataMods:
        """Set ``$top``."""
        self.mods["$top"] = str(value)
        return self

    def add_order_by(self, order_by: str, ascending: bool = True) -> ODataMods:
        """Append a field to ``$orderby``."""
        direction = "asc" if ascending else "desc"
        clause = f"{order_by} {direction}"
        current = self.mods.get("$orderby", "")
        self.mods["$orderby"] = f"{current},{clause}" if current else clause
        return self


def to_url(endpoint: str, modifiers: ODataMods | None) -> str:
    """Endpoint with modifiers merged into its query string, keys sorted."""
    parts = urlsplit(endpoint)
    query: dict[str, list[str]] = {}
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        query.setdefault(key, []).append(value)
    if modifiers is not None:
        for key, value in modifiers.get().items():
            query[key] = [trim_multiline(value)]
    pairs = [(key, value) for key in sorted(query) for value in query[key]]
    return urlunsplit(parts._replace(query=urlencode(pairs)))