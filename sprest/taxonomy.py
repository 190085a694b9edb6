"""Helpers for taxonomy (managed metadata) CSOM requests and responses."""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable

from sprest.utils import RequestConfig

_RETRY_HEADER = "X-Gosip-Retry"
_SAVE_CONFLICT = "Term update failed because of save conflict"
_MAX_RETRIES = 5

ProcessQuery = Callable[[str, Any, "RequestConfig | None"], bytes]


class TaxonomyError(Exception):
    """Raised when a CSOM taxonomy response cannot be used."""


def append_taxonomy_prop(props: Iterable[str], prop: str) -> list[str]:
    """Add comma-separated property names to ``props``, skipping duplicates."""
    result = list(props)
    for name in prop.split(","):
        name = name.strip(" ")
        if name not in result:
            result.append(name)
    return result


def trim_taxonomy_guid(guid: str) -> str:
    """Reduce a ``/Guid(...)/`` wrapped identifier to a plain lower-case GUID."""
    guid = guid.lower()
    guid = guid.replace("/guid(", "", 1)
    return guid.replace(")/", "", 1)


def parse_csom_response(payload: bytes | str) -> dict[str, Any]:
    """Return the last object of a CSOM response array."""
    try:
        parsed = json.loads(payload)
    except (ValueError, TypeError) as err:
        raise TaxonomyError(f"can't parse CSOM response: {err}") from err
    if not isinstance(parsed, list) or not parsed:
        raise TaxonomyError(f"can't cast CSOM response, {parsed!r}")
    last = parsed[-1]
    if last is None:
        raise TaxonomyError("object not found")
    if not isinstance(last, dict):
        raise TaxonomyError(f"can't cast CSOM response, {last!r}")
    return last


def _child_items(container: Any) -> list[dict[str, Any]]:
    items = container.get("_Child_Items_") if isinstance(container, dict) else None
    if not isinstance(items, list):
        raise TaxonomyError("can't get child items")
    if not all(isinstance(item, dict) for item in items):
        raise TaxonomyError("can't get child item")
    return list(items)


def csom_child_items(data: dict[str, Any]) -> list[dict[str, Any]]:
    """Child items of a CSOM collection object."""
    return _child_items(data)


def csom_child_items_in_prop(data: dict[str, Any], prop: str) -> list[dict[str, Any]]:
    """Child items of a collection held in property ``prop`` of a CSOM object."""
    prop_data = data.get(prop)
    if not isinstance(prop_data, dict):
        raise TaxonomyError("can't get property data")
    return _child_items(prop_data)


def process_csom_query(
    process_query: ProcessQuery,
    site_url: str,
    package: Any,
    config: RequestConfig | None = None,
) -> dict[str, Any]:
    """Send a CSOM package and return the last response object.

    Term save conflicts are retried up to five times; the attempt count is
    kept in the ``X-Gosip-Retry`` header of ``config``.
    """
    if config is None:
        config = RequestConfig()
    if config.headers is None:
        config.headers = {}
    while True:
        try:
            payload = process_query(site_url, package, config)
        except Exception as err:
            if _SAVE_CONFLICT not in str(err):
                raise
            try:
                retry = int(config.headers.get(_RETRY_HEADER, "0"))
            except ValueError:
                retry = 0
            config.headers[_RETRY_HEADER] = str(retry + 1)
            if retry + 1 <= _MAX_RETRIES:
                continue
            raise
        return parse_csom_response(payload)