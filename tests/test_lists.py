import json

from sprest.lists import Lists, ListsResponse


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
        return self.reply

    def delete(self, url, config):
        self.calls.append(("delete", url, None, config))
        return self.reply


ENDPOINT = "https://contoso/_api/Web/Lists"


def test_to_url_without_modifiers():
    assert Lists(FakeTransport(), ENDPOINT).to_url() == ENDPOINT


def test_to_url_with_modifiers():
    lists = Lists(FakeTransport(), ENDPOINT).select("Id,Title").top(1)
    assert lists.to_url() == ENDPOINT + "?%24select=Id%2CTitle&%24top=1"


def test_order_by_chain():
    lists = Lists(FakeTransport(), ENDPOINT).order_by("Created", True)
    assert lists.modifiers.get()["$orderby"] == "Created asc"


def test_get_uses_url_and_wraps_response():
    reply = b'{"d":{"results":[{"Id":"1","Title":"A"},{"Id":"2","Title":"B"}]}}'
    transport = FakeTransport(reply)
    data = Lists(transport, ENDPOINT).select("Id,Title").get()
    assert isinstance(data, ListsResponse)
    assert transport.calls[0][1] == ENDPOINT + "?%24select=Id%2CTitle"
    assert [item["Title"] for item in data.data()] == ["A", "B"]


def test_normalized_flattens_verbose_collection():
    data = ListsResponse(b'{"d":{"results":[{"Id":"1"}]}}')
    assert json.loads(data.normalized()) == [{"Id": "1"}]


def test_add_with_defaults():
    transport = FakeTransport(b'{"d":{"Id":"x"}}')
    Lists(transport, ENDPOINT).add("My List")
    method, url, body, config = transport.calls[0]
    assert method == "post"
    assert url == ENDPOINT
    payload = json.loads(body)
    assert payload == {
        "__metadata": {"type": "SP.List"},
        "Title": "My List",
        "BaseTemplate": 100,
        "AllowContentTypes": False,
        "ContentTypesEnabled": False,
    }
    assert config.headers["Accept"] == "application/json;odata=verbose"
    assert config.headers["Content-Type"] == "application/json;odata=verbose;charset=utf-8"


def test_add_keeps_given_metadata_and_does_not_mutate_it():
    transport = FakeTransport()
    metadata = {"BaseTemplate": 101, "Description": "Docs"}
    Lists(transport, ENDPOINT).add("Docs", metadata)
    payload = json.loads(transport.calls[0][2])
    assert payload["BaseTemplate"] == 101
    assert payload["Description"] == "Docs"
    assert payload["AllowContentTypes"] is False
    assert metadata == {"BaseTemplate": 101, "Description": "Docs"}