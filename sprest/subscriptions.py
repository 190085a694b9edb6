"""List webhook subscriptions API."""

from __future__ import annotations

import json
from datetime import datetime, timedelta
from typing import Any, Mapping

from sprest.models import SubscriptionInfo
from sprest.utils import (
    RequestConfig,
    Transport,
    get_prior_endpoint,
    normalize_odata_collection,
    normalize_odata_item,
    patch_config_headers,
)

_JSON_HEADERS = {"Content-Type": "application/json"}


def _format_time(value: datetime) -> str:
    """RFC 3339 timestamp with trailing zeros of the fraction removed."""
    if value.tzinfo is None:
        value = value.astimezone()
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _default(value: Any) -> Any:
    if isinstance(value, datetime):
        return _format_time(value)
    raise TypeError(f"cannot encode {value!r} as JSON")


def _encode(payload: Mapping[str, Any]) -> bytes:
    return json.dumps(
        dict(payload), default=_default, sort_keys=True, separators=(",", ":")
    ).encode("utf-8")


def _parse_item(payload: bytes) -> SubscriptionInfo | None:
    parsed = json.loads(normalize_odata_item(payload))
    if parsed is None:
        return None
    if not isinstance(parsed, dict):
        raise ValueError(f"unexpected subscription response: {parsed!r}")
    return SubscriptionInfo.from_dict(parsed)


class Subscription:
    """A single list webhook subscription."""

    def __init__(
        self, transport: Transport, endpoint: str, config: RequestConfig | None = None
    ) -> None:
        self.transport = transport
        self.endpoint = endpoint
        self.config = config

    def get(self) -> SubscriptionInfo | None:
        """Fetch the subscription."""
        return _parse_item(self.transport.get(self.endpoint, self.config))

    def delete(self) -> None:
        """Delete the subscription."""
        self.transport.delete(self.endpoint, self.config)

    def update(self, metadata: Mapping[str, Any]) -> SubscriptionInfo | None:
        """Update subscription properties and return the refreshed subscription."""
        body = _encode(metadata)
        config = patch_config_headers(self.config, _JSON_HEADERS)
        self.transport.update(self.endpoint, body, config)
        return self.get()

    def set_expiration(self, expiration: datetime) -> SubscriptionInfo | None:
        """Set a new expiration time."""
        return self.update({"expirationDateTime": expiration})

    def set_notification_url(self, notification_url: str) -> SubscriptionInfo | None:
        """Set a new notification URL."""
        return self.update({"notificationUrl": notification_url})

    def set_client_state(self, client_state: str) -> SubscriptionInfo | None:
        """Set a new client state."""
        return self.update({"clientState": client_state})


class Subscriptions:
    """Webhook subscriptions of a list."""

    def __init__(
        self, transport: Transport, endpoint: str, config: RequestConfig | None = None
    ) -> None:
        self.transport = transport
        self.endpoint = endpoint
        self.config = config

    def get(self) -> list[SubscriptionInfo]:
        """All subscriptions of the list."""
        data, _ = normalize_odata_collection(self.transport.get(self.endpoint, self.config))
        parsed = json.loads(data)
        if parsed is None:
            return []
        if not isinstance(parsed, list):
            raise ValueError(f"unexpected subscriptions response: {parsed!r}")
        return [SubscriptionInfo.from_dict(item) for item in parsed if isinstance(item, dict)]

    def get_by_id(self, subscription_id: str) -> Subscription:
        """Subscription by its ID."""
        return Subscription(
            self.transport, f"{self.endpoint}('{subscription_id}')", self.config
        )

    def add(
        self, notification_url: str, expiration: datetime, client_state: str = ""
    ) -> SubscriptionInfo | None:
        """Create a subscription that notifies ``notification_url`` until ``expiration``."""
        payload = {
            "notificationUrl": notification_url,
            "expirationDateTime": expiration,
            "resource": get_prior_endpoint(self.endpoint, "/subscriptions"),
            "clientState": client_state,
        }
        config = patch_config_headers(self.config, _JSON_HEADERS)
        return _parse_item(self.transport.post(self.endpoint, _encode(payload), config))