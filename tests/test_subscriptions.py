import json
from datetime import datetime, timedelta, timezone

import pytest

from sprest.subscriptions import Subscription, Subscriptions


class FakeTransport:
    def __init__(self, reply=b"{}"):
        self.reply = reply
        self.calls = []

    def get(self, url, config):
        self.calls.append(("get", url, None, config))
        return self.reply

    def post(self, url, body, config):
        self.calls.append(("post", url, body, config))
        return self.reply

    def update(self, url, body, config):
        self.calls.append(("update", url, body, config))
        return b""

    def delete(self, url, config):
        self.calls.append(("delete", url, None, config))
        return b""


LIST = "https://contoso/_api/Web/Lists/GetByTitle('Site Pages')"
ENDPOINT = LIST + "/subscriptions"

ITEM = {
    "id": "sub-1",
    "notificationUrl": "https://example.com/hook",
    "expirationDateTime": "2019-01-01T08:00:00Z",
    "resource": "res",
    "clientState": "client state",
    "resourceData": "",
}


def test_get_collection():
    transport = FakeTransport(json.dumps({"value": [ITEM]}).encode())
    subs = Subscriptions(transport, ENDPOINT).get()
    assert len(subs) == 1
    assert subs[0].id == "sub-1"
    assert subs[0].client_state == "client state"
    assert subs[0].expiration_date_time == datetime(2019, 1, 1, 8, tzinfo=timezone.utc)


def test_get_empty_collection():
    transport = FakeTransport(b'{"value":[]}')
    assert Subscriptions(transport, ENDPOINT).get() == []


def test_get_by_id_endpoint():
    sub = Subscriptions(FakeTransport(), ENDPOINT).get_by_id("abc")
    assert isinstance(sub, Subscription)
    assert sub.endpoint == ENDPOINT + "('abc')"


def test_add_payload():
    transport = FakeTransport(json.dumps(ITEM).encode())
    expiration = datetime(2019, 1, 1, 8, 0, 0, tzinfo=timezone.utc)
    sub = Subscriptions(transport, ENDPOINT).add("https://example.com/hook", expiration, "")
    method, url, body, config = transport.calls[0]
    assert (method, url) == ("post", ENDPOINT)
    assert json.loads(body) == {
        "notificationUrl": "https://example.com/hook",
        "expirationDateTime": "2019-01-01T08:00:00Z",
        "resource": LIST,
        "clientState": "",
    }
    assert config.headers["Content-Type"] == "application/json"
    assert sub.id == "sub-1"


def test_add_formats_offset_and_fraction():
    transport = FakeTransport(json.dumps(ITEM).encode())
    tz = timezone(timedelta(hours=3))
    expiration = datetime(2020, 5, 6, 7, 8, 9, 500000, tzinfo=tz)
    Subscriptions(transport, ENDPOINT).add("https://example.com/hook", expiration)
    payload = json.loads(transport.calls[0][2])
    assert payload["expirationDateTime"] == "2020-05-06T07:08:09.5+03:00"


def test_subscription_get_verbose():
    transport = FakeTransport(json.dumps({"d": ITEM}).encode())
    sub = Subscription(transport, ENDPOINT + "('sub-1')").get()
    assert sub.notification_url == "https://example.com/hook"


def test_set_client_state_updates_then_gets():
    transport = FakeTransport(json.dumps(ITEM).encode())
    result = Subscription(transport, ENDPOINT + "('sub-1')").set_client_state("client state")
    assert [call[0] for call in transport.calls] == ["update", "get"]
    assert json.loads(transport.calls[0][2]) == {"clientState": "client state"}
    assert result.client_state == "client state"


def test_set_expiration_body():
    transport = FakeTransport(json.dumps(ITEM).encode())
    when = datetime(2019, 1, 1, 8, 1, 0, tzinfo=timezone.utc)
    Subscription(transport, ENDPOINT).set_expiration(when)
    assert json.loads(transport.calls[0][2]) == {"expirationDateTime": "2019-01-01T08:01:00Z"}


def test_set_notification_url_body():
    transport = FakeTransport(json.dumps(ITEM).encode())
    Subscription(transport, ENDPOINT).set_notification_url("https://example.com/new")
    assert json.loads(transport.calls[0][2]) == {"notificationUrl": "https://example.com/new"}


def test_delete_calls_transport():
    transport = FakeTransport()
    Subscription(transport, ENDPOINT + "('x')").delete()
    assert transport.calls == [("delete", ENDPOINT + "('x')", None, None)]


def test_update_rejects_unencodable_value():
    with pytest.raises(TypeError):
        Subscription(FakeTransport(), ENDPOINT).update({"clientState": object()})