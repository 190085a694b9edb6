"""Site users API: a single user and the site users collection."""

from __future__ import annotations

import json
from urllib.parse import quote_plus

from sprest.models import UserInfo
from sprest.odata import ODataMods, to_url
from sprest.utils import (
    RequestConfig,
    Transport,
    normalize_odata_collection,
    normalize_odata_item,
    patch_metadata_type,
    split_odata_collection,
)


def _escape(value: str) -> str:
    return quote_plus(value, safe="")


class UserResponse(bytes):
    """Raw user response body with typed accessors."""

    def data(self) -> UserInfo:
        """Typed user; an unreadable body gives an empty user."""
        try:
            parsed = json.loads(normalize_odata_item(bytes(self)))
        except ValueError:
            return UserInfo()
        return UserInfo.from_dict(parsed) if isinstance(parsed, dict) else UserInfo()

    def normalized(self) -> bytes:
        """Body with the verbose OData wrapper removed."""
        return normalize_odata_item(bytes(self))


class UsersResponse(bytes):
    """Raw users collection response body with typed accessors."""

    def data(self) -> list[UserResponse]:
        """One response per user in the collection."""
        chunks, _ = split_odata_collection(bytes(self))
        return [UserResponse(chunk) for chunk in chunks]

    def normalized(self) -> bytes:
        """Body as a flat JSON array of normalised items."""
        normalized, _ = normalize_odata_collection(bytes(self))
        return normalized


class User:
    """A site user endpoint."""

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

    def select(self, props: str) -> User:
        """Set ``$select``."""
        self.modifiers.add_select(props)
        return self

    def expand(self, props: str) -> User:
        """Set ``$expand``."""
        self.modifiers.add_expand(props)
        return self

    def get(self) -> UserResponse:
        """Fetch the user."""
        return UserResponse(self.transport.get(self.to_url(), self.config))

    def update(self, body: bytes | str) -> UserResponse:
        """Update the user with a JSON payload of ``SP.User`` properties."""
        payload = body.encode("utf-8") if isinstance(body, str) else body
        payload = patch_metadata_type(payload, "SP.User")
        return UserResponse(self.transport.update(self.endpoint, payload, self.config))


class Users:
    """The site users collection endpoint."""

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

    def select(self, props: str) -> Users:
        """Set ``$select``."""
        self.modifiers.add_select(props)
        return self

    def expand(self, props: str) -> Users:
        """Set ``$expand``."""
        self.modifiers.add_expand(props)
        return self

    def filter(self, expression: str) -> Users:
        """Set ``$filter``."""
        self.modifiers.add_filter(expression)
        return self

    def top(self, count: int) -> Users:
        """Set ``$top``."""
        self.modifiers.add_top(count)
        return self

    def order_by(self, field: str, ascending: bool = True) -> Users:
        """Append a field to ``$orderby``."""
        self.modifiers.add_order_by(field, ascending)
        return self

    def get(self) -> UsersResponse:
        """Fetch the users collection."""
        return UsersResponse(self.transport.get(self.to_url(), self.config))

    def get_by_id(self, user_id: int) -> User:
        """User by numeric ID from the user information list."""
        return User(self.transport, f"{self.endpoint}/GetById({int(user_id)})", self.config)

    def get_by_login_name(self, login_name: str) -> User:
        """User by login name."""
        return User(self.transport, f"{self.endpoint}('{_escape(login_name)}')", self.config)

    def get_by_email(self, email: str) -> User:
        """User by e-mail address."""
        return User(
            self.transport, f"{self.endpoint}/GetByEmail('{_escape(email)}')", self.config
        )