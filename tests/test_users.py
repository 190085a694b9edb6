import json

import pytest

from sprest.users import User, UserResponse, Users, UsersResponse
from sprest.utils import RequestConfig

SITE = "https://contoso.sharepoint.com/sites/site"


class FakeTransport:
    def __init__(self, response=b"{}"):
        self.response = response
        self.calls = []

    def get(self, url, config=None):
        self.calls.append(("GET", url, None, config))
        return self.response

    def post(self, url, body=None, config=None):
        self.calls.append(("POST", url, body, config))
        return self.response

    def update(self, url, body, config=None):
        self.calls.append(("MERGE", url, body, config))
        return self.response

    def delete(self, url, config=None):
        self.calls.append(("DELETE", url, None, config))
        return self.response


def test_user_to_url_without_modifiers():
    endpoint = SITE + "/_api/Web/CurrentUser"
    user = User(FakeTransport(), endpoint)
    assert user.to_url() == endpoint


def test_users_to_url_without_modifiers():
    endpoint = SITE + "/_api/Web/SiteUsers"
    users = Users(FakeTransport(), endpoint)
    assert users.to_url() == endpoint


def test_user_select_get_uses_modifiers():
    transport = FakeTransport(b'{"d":{"Id":7}}')
    config = RequestConfig(headers={"X": "1"})
    user = User(transport, SITE + "/_api/Web/CurrentUser", config)
    resp = user.select("Id").expand("Groups").get()
    method, url, _, used = transport.calls[0]
    assert method == "GET"
    assert url == SITE + "/_api/Web/CurrentUser?%24expand=Groups&%24select=Id"
    assert used is config
    assert resp.data().id == 7


def test_user_response_data_and_normalized():
    resp = UserResponse(
        b'{"d":{"Id":12,"Email":"user@example.com","LoginName":"i:0#.f|membership|user@example.com",'
        b'"IsSiteAdmin":true,"Title":"User"}}'
    )
    info = resp.data()
    assert info.id == 12
    assert info.email == "user@example.com"
    assert info.is_site_admin is True
    assert info.title == "User"
    assert json.loads(resp.normalized())["Id"] == 12


def test_user_response_invalid_body_gives_empty_user():
    info = UserResponse(b"not json").data()
    assert info.id == 0
    assert info.email == ""


def test_user_update_patches_metadata_type():
    transport = FakeTransport(b"{}")
    user = User(transport, SITE + "/_api/Web/GetUserById(3)")
    user.update(b'{"Title":"New"}')
    method, url, body, _ = transport.calls[0]
    assert method == "MERGE"
    assert url == SITE + "/_api/Web/GetUserById(3)"
    assert body == b'{"Title":"New","__metadata":{"type":"SP.User"}}'


def test_user_update_keeps_existing_metadata():
    transport = FakeTransport(b"{}")
    payload = '{"__metadata":{"type":"SP.Any"},"Title":"New"}'
    User(transport, SITE + "/_api/Web/CurrentUser").update(payload)
    assert transport.calls[0][2] == payload.encode()


def test_users_collection_modifiers():
    transport = FakeTransport(b'{"d":{"results":[]}}')
    users = Users(transport, SITE + "/_api/Web/SiteUsers")
    users.select("Id").top(5).filter("Id gt 1").order_by("Title", False).get()
    url = transport.calls[0][1]
    assert url == (
        SITE
        + "/_api/Web/SiteUsers?%24filter=Id+gt+1&%24orderby=Title+desc&%24select=Id&%24top=5"
    )


def test_users_response_data_verbose_and_minimal():
    verbose = UsersResponse(b'{"d":{"results":[{"Id":1},{"Id":2}]}}')
    minimal = UsersResponse(b'{"value":[{"Id":1},{"Id":2}]}')
    assert [item.data().id for item in verbose.data()] == [1, 2]
    assert [item.data().id for item in minimal.data()] == [1, 2]
    assert verbose.normalized() == b'[{"Id":1},{"Id":2}]'


def test_users_get_by_id():
    users = Users(FakeTransport(), SITE + "/_api/Web/SiteUsers")
    assert users.get_by_id(15).endpoint == SITE + "/_api/Web/SiteUsers/GetById(15)"


def test_users_get_by_login_name_escapes():
    users = Users(FakeTransport(), SITE + "/_api/Web/SiteUsers")
    user = users.get_by_login_name("i:0#.f|membership|user@example.com")
    assert user.endpoint == (
        SITE + "/_api/Web/SiteUsers('i%3A0%23.f%7Cmembership%7Cuser%40example.com')"
    )


def test_users_get_by_email_escapes():
    config = RequestConfig()
    users = Users(FakeTransport(), SITE + "/_api/Web/SiteUsers", config)
    user = users.get_by_email("user@example.com")
    assert user.endpoint == SITE + "/_api/Web/SiteUsers/GetByEmail('user%40example.com')"
    assert user.config is config


@pytest.mark.parametrize("user_id", [1, 42])
def test_get_by_id_then_get_hits_endpoint(user_id):
    transport = FakeTransport(b'{"Id":%d}' % user_id)
    resp = Users(transport, SITE + "/_api/Web/SiteUsers").get_by_id(user_id).select("Id").get()
    assert transport.calls[0][1] == SITE + f"/_api/Web/SiteUsers/GetById({user_id})?%24select=Id"
    assert resp.data().id == user_id