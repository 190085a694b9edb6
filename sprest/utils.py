"""Helpers for OData payloads, endpoint strings, request configuration and HTTP transport."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping
from urllib.parse import unquote, urlsplit

_INVALID = object()

# Characters escaped by the JSON encoder on the service side; kept for byte-identical payloads.
_JSON_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def _loads(payload: bytes | str) -> Any:
    """Parse JSON, returning a sentinel instead of raising on malformed input."""
    try:
        return json.loads(payload)
    except (ValueError, TypeError):
        return _INVALID


def _dumps(value: Any) -> bytes:
    """Serialise to compact JSON with sorted keys."""
    text = json.dumps(value, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    for char, escaped in _JSON_ESCAPES:
        text = text.replace(char, escaped)
    return text.encode("utf-8")


@dataclass
class RequestConfig:
    """Per-request overrides: extra headers and an optional timeout in seconds."""

    headers: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None


class Transport:
    """Minimal HTTP transport for SharePoint REST endpoints."""

    DEFAULT_HEADERS: Mapping[str, str] = {
        "Accept": "application/json;odata=verbose",
        "Content-Type": "application/json;odata=verbose;charset=utf-8",
    }

    def __init__(
        self,
        headers: Mapping[str, str] | None = None,
        timeout: float = 30.0,
        opener: urllib.request.OpenerDirector | None = None,
    ) -> None:
        self.headers = dict(headers or {})
        self.timeout = timeout
        self._open = opener.open if opener is not None else urllib.request.urlopen

    def get(self, url: str, config: RequestConfig | None = None) -> bytes:
        """Send a GET request and return the response body."""
        return self._send("GET", url, None, config, {})

    def post(
        self, url: str, body: bytes | str | None = None, config: RequestConfig | None = None
    ) -> bytes:
        """Send a POST request and return the response body."""
        return self._send("POST", url, body, config, {})

    def update(
        self, url: str, body: bytes | str | None, config: RequestConfig | None = None
    ) -> bytes:
        """Send a MERGE request (POST with method override)."""
        extra = {"X-HTTP-Method": "MERGE", "IF-MATCH": "*"}
        return self._send("POST", url, body, config, extra)

    def delete(self, url: str, config: RequestConfig | None = None) -> bytes:
        """Send a DELETE request (POST with method override)."""
        extra = {"X-HTTP-Method": "DELETE", "IF-MATCH": "*"}
        return self._send("POST", url, None, config, extra)

    def _send(
        self,
        method: str,
        url: str,
        body: bytes | str | None,
        config: RequestConfig | None,
        extra: Mapping[str, str],
    ) -> bytes:
        headers = {**self.DEFAULT_HEADERS, **self.headers, **extra}
        if config is not None:
            headers.update(config.headers)
        data = body.encode("utf-8") if isinstance(body, str) else body
        request = urllib.request.Request(url, data=data, headers=headers, method=method)
        timeout = self.timeout
        if config is not None and config.timeout is not None:
            timeout = config.timeout
        try:
            with self._open(request, timeout=timeout) as response:
                return response.read()
        except urllib.error.HTTPError as err:
            detail = err.read().decode("utf-8", "replace")
            raise RuntimeError(f"{err.code} {err.reason} :: {detail}") from err


def trim_multiline(multi: str) -> str:
    """Join lines into one, trimming tabs around each line."""
    return "".join(line.strip("\t") for line in multi.split("\n"))


def normalize_odata_item(payload: bytes) -> bytes:
    """Unwrap a verbose ``{"d": {...}}`` item; other payloads come back unchanged."""
    parsed = _loads(payload)
    if not isinstance(parsed, dict):
        return payload
    inner = parsed.get("d")
    if not isinstance(inner, dict) or not inner:
        return payload
    return _dumps(normalize_multi_lookups_map(inner))


def normalize_odata_collection(payload: bytes) -> tuple[bytes, str]:
    """Return a collection as a flat JSON array of normalised items, with the next page URL."""
    chunks, next_url = split_odata_collection(payload)
    items = []
    for chunk in chunks:
        item = _loads(chunk)
        if isinstance(item, dict):
            items.append(normalize_multi_lookups_map(item))
    return _dumps(items), next_url


def extract_entity_uri(payload: bytes) -> str:
    """Get the entity URI from ``__metadata.id`` or ``odata.id``."""
    parsed = _loads(normalize_odata_item(payload))
    if not isinstance(parsed, dict):
        return ""
    entity_uri = parsed.get("odata.id")
    if not isinstance(entity_uri, str):
        entity_uri = ""
    metadata = parsed.get("__metadata")
    if isinstance(metadata, dict):
        metadata_id = metadata.get("id")
        if isinstance(metadata_id, str) and metadata_id:
            entity_uri = metadata_id
    return entity_uri


def get_conf_headers(config: RequestConfig | None) -> dict[str, str]:
    """Headers of a config, or a new empty mapping when there is none."""
    if config is None:
        return {}
    return config.headers


def patch_config_headers(
    config: RequestConfig | None, headers: Mapping[str, str]
) -> RequestConfig:
    """Return a copy of ``config`` with ``headers`` merged over its own."""
    merged: dict[str, str] = {}
    timeout = None
    if config is not None:
        merged.update(config.headers or {})
        timeout = config.timeout
    merged.update(headers)
    return RequestConfig(headers=merged, timeout=timeout)


def get_relative_url(abs_url: str) -> str:
    """Path part of an absolute URL."""
    return unquote(urlsplit(abs_url).path)


def check_get_relative_url(relative_uri: str, ctx_url: str) -> str:
    """Prefix a web-relative URI with the server-relative path of the context web."""
    if not relative_uri.startswith("/"):
        web_url = get_prior_endpoint(ctx_url, "/_api")
        relative_uri = f"{get_relative_url(web_url)}/{relative_uri}"
    return relative_uri


def _find_part(endpoint: str, part: str) -> int:
    return endpoint.lower().find(part.lower())


def get_prior_endpoint(endpoint: str, part: str) -> str:
    """Endpoint up to the first occurrence of ``part``, ignoring case."""
    index = _find_part(endpoint, part)
    return endpoint if index < 0 else endpoint[:index]


def get_include_endpoint(endpoint: str, part: str) -> str:
    """Endpoint up to and including ``part``, ignoring case."""
    index = _find_part(endpoint, part)
    if index < 0:
        return endpoint
    return endpoint[:index] + part


def get_include_endpoints(endpoint: str, parts: Iterable[str]) -> str:
    """Like :func:`get_include_endpoint` for several parts; the last one that shortens wins."""
    result = endpoint
    for part in parts:
        reduced = get_include_endpoint(endpoint, part)
        if len(reduced) < len(endpoint):
            result = reduced
    return result


def contains_metadata_type(payload: bytes) -> bool:
    """Whether a payload holds an OData ``__metadata`` property."""
    return b'"__metadata"' in payload


def patch_metadata_type(payload: bytes, odata_type: str) -> bytes:
    """Add ``__metadata.type`` to a JSON object payload that lacks it."""
    if contains_metadata_type(payload):
        return payload
    parsed = _loads(payload)
    if not isinstance(parsed, dict):
        return payload
    parsed["__metadata"] = {"type": odata_type}
    return _dumps(parsed)


def patch_metadata_type_cb(payload: bytes, resolver: Callable[[], str]) -> bytes:
    """Like :func:`patch_metadata_type`; the type is only resolved when needed."""
    if contains_metadata_type(payload):
        return payload
    return patch_metadata_type(payload, resolver())


def _dict_list(value: Any) -> list[dict] | None:
    if isinstance(value, list) and all(isinstance(item, dict) for item in value):
        return value
    return None


def split_odata_collection(payload: bytes) -> tuple[list[bytes], str]:
    """Split a verbose, minimal or plain-array collection into item payloads and next URL."""
    parsed = _loads(payload)
    items: list[dict] | None = None
    next_url = ""
    if isinstance(parsed, dict):
        items = _dict_list(parsed.get("value"))
        if items is not None:
            link = parsed.get("odata.nextLink")
            next_url = link if isinstance(link, str) else ""
        else:
            verbose = parsed.get("d")
            if isinstance(verbose, dict):
                items = _dict_list(verbose.get("results"))
                link = verbose.get("__next")
                next_url = link if isinstance(link, str) else ""
    elif parsed is not _INVALID:
        items = _dict_list(parsed)
    if items is None:
        return [payload], ""
    return [_dumps(item) for item in items], next_url


def get_odata_collection_next_page_url(payload: bytes) -> str:
    """Next page URL of a collection response, or an empty string."""
    parsed = _loads(payload)
    if not isinstance(parsed, dict):
        return ""
    link = parsed.get("odata.nextLink")
    if isinstance(link, str) and link:
        return link
    verbose = parsed.get("d")
    if isinstance(verbose, dict):
        link = verbose.get("__next")
        if isinstance(link, str) and link:
            return link
    return ""


def normalize_multi_lookups(payload: bytes) -> bytes:
    """Flatten verbose ``{"results": [...]}`` wrappers in a JSON object payload."""
    parsed = _loads(payload)
    if not isinstance(parsed, dict):
        return payload
    return _dumps(normalize_multi_lookups_map(parsed))


def normalize_multi_lookups_map(item: dict[str, Any]) -> dict[str, Any]:
    """Flatten verbose ``results`` wrappers in place, recursively, and return the mapping."""
    for key, value in item.items():
        if not isinstance(value, dict):
            continue
        results = value.get("results")
        if results is not None:
            item[key] = results
        current = item[key]
        if isinstance(current, dict):
            item[key] = normalize_multi_lookups_map(current)
        elif isinstance(current, list):
            current[:] = [
                normalize_multi_lookups_map(element) if isinstance(element, dict) else element
                for element in current
            ]
    return item


def fix_dates_in_response(data: bytes, date_fields: Iterable[str]) -> bytes:
    """Append a ``Z`` zone to zone-less ISO date strings in the given fields."""
    parsed = _loads(data)
    if not isinstance(parsed, dict):
        return data
    for key in date_fields:
        value = parsed.get(key)
        if isinstance(value, str) and len(value) == len("2019-12-03T12:19:45"):
            parsed[key] = f"{value}Z"
    return _dumps(parsed)