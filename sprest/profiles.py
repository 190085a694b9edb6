"""User profiles API."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable
from urllib.parse import quote_plus

from sprest.models import TypedKeyValue, _bool, _decode, _int, _str
from sprest.odata import ODataMods, to_url
from sprest.utils import (
    RequestConfig,
    Transport,
    _dumps,
    get_prior_endpoint,
    normalize_multi_lookups,
    normalize_odata_collection,
    normalize_odata_item,
)


def _escape(value: str) -> str:
    return quote_plus(value, safe="")


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _key_values(value: Any) -> list[TypedKeyValue]:
    if not isinstance(value, list):
        return []
    return [TypedKeyValue.from_dict(item) for item in value if isinstance(item, dict)]


def _list_field(key: str, convert: Callable[[Any], list]) -> Any:
    return field(default_factory=list, metadata={"json": key, "convert": convert})


@dataclass
class ProfileInfo:
    """User profile summary."""

    account_name: str = _str("AccountName")
    display_name: str = _str("DisplayName")
    follow_personal_site_url: str = _str("FollowPersonalSiteUrl")
    is_default_document_library_blocked: bool = _bool("IsDefaultDocumentLibraryBlocked")
    is_people_list_public: bool = _bool("IsPeopleListPublic")
    is_privacy_setting_on: bool = _bool("IsPrivacySettingOn")
    is_self: bool = _bool("IsSelf")
    job_title: str = _str("JobTitle")
    my_site_first_run_experience: int = _int("MySiteFirstRunExperience")
    my_site_host_url: str = _str("MySiteHostUrl")
    o15_first_run_experience: int = _int("O15FirstRunExperience")
    personal_site_capabilities: int = _int("PersonalSiteCapabilities")
    personal_site_first_creation_error: str = _str("PersonalSiteFirstCreationError")
    personal_site_first_creation_time: str = _str("PersonalSiteFirstCreationTime")
    personal_site_instantiation_state: int = _int("PersonalSiteInstantiationState")
    personal_site_last_creation_time: str = _str("PersonalSiteLastCreationTime")
    personal_site_number_of_retries: int = _int("PersonalSiteNumberOfRetries")
    picture_import_enabled: bool = _bool("PictureImportEnabled")
    picture_url: str = _str("PictureUrl")
    public_url: str = _str("PublicUrl")
    sip_address: str = _str("SipAddress")
    url_to_create_personal_site: str = _str("UrlToCreatePersonalSite")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProfileInfo:
        """Build from a JSON mapping."""
        return _decode(cls, data)


@dataclass
class ProfilePropsInfo:
    """User profile properties."""

    account_name: str = _str("AccountName")
    direct_reports: list[str] = _list_field("DirectReports", _str_list)
    display_name: str = _str("DisplayName")
    email: str = _str("Email")
    extended_managers: list[str] = _list_field("ExtendedManagers", _str_list)
    extended_reports: list[str] = _list_field("ExtendedReports", _str_list)
    peers: list[str] = _list_field("Peers", _str_list)
    is_followed: bool = _bool("IsFollowed")
    personal_site_host_url: str = _str("PersonalSiteHostUrl")
    personal_url: str = _str("PersonalUrl")
    picture_url: str = _str("PictureUrl")
    title: str = _str("Title")
    user_url: str = _str("UserUrl")
    user_profile_properties: list[TypedKeyValue] = _list_field(
        "UserProfileProperties", _key_values
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProfilePropsInfo:
        """Build from a JSON mapping."""
        return _decode(cls, data)


def _parsed_item(payload: bytes) -> dict[str, Any]:
    data = normalize_multi_lookups(normalize_odata_item(payload))
    try:
        parsed = json.loads(data)
    except ValueError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


class ProfileResponse(bytes):
    """Raw user profile response body with typed accessors."""

    def data(self) -> ProfileInfo:
        """Typed profile; an unreadable body gives an empty profile."""
        return ProfileInfo.from_dict(_parsed_item(bytes(self)))

    def normalized(self) -> bytes:
        """Body with the verbose OData wrapper removed."""
        return normalize_odata_item(bytes(self))


class ProfilePropsResponse(bytes):
    """Raw user profile properties response body with typed accessors."""

    def data(self) -> ProfilePropsInfo:
        """Typed properties; an unreadable body gives empty properties."""
        return ProfilePropsInfo.from_dict(_parsed_item(bytes(self)))

    def normalized(self) -> bytes:
        """Body normalised as an OData collection."""
        normalized, _ = normalize_odata_collection(bytes(self))
        return normalized


class Profiles:
    """People manager (user profiles) endpoint."""

    def __init__(
        self, transport: Transport, endpoint: str, config: RequestConfig | None = None
    ) -> None:
        self.transport = transport
        self.endpoint = endpoint
        self.config = config
        self.modifiers = ODataMods()

    def _site_api(self, path: str) -> str:
        return get_prior_endpoint(self.endpoint, "/_api") + "/_api/" + path

    def get_my_properties(self) -> ProfilePropsResponse:
        """Profile properties of the current user."""
        url = to_url(self.endpoint + "/GetMyProperties", self.modifiers)
        return ProfilePropsResponse(self.transport.post(url, None, self.config))

    def get_properties_for(self, login_name: str) -> ProfilePropsResponse:
        """Profile properties of the user with ``login_name``."""
        endpoint = f"{self.endpoint}/GetPropertiesFor('{_escape(login_name)}')"
        url = to_url(endpoint, self.modifiers)
        return ProfilePropsResponse(self.transport.get(url, self.config))

    def get_user_profile_property_for(self, login_name: str, prop: str) -> str:
        """Value of one profile property of the user with ``login_name``."""
        endpoint = (
            f"{self.endpoint}/GetUserProfilePropertyFor("
            f"accountname='{_escape(login_name)}',"
            f"propertyname='{_escape(prop)}')"
        )
        data = normalize_odata_item(self.transport.get(endpoint, self.config))
        parsed = json.loads(data)
        if not isinstance(parsed, dict):
            raise ValueError(f"unexpected profile property response: {parsed!r}")
        values = {}
        for key in ("value", "GetUserProfilePropertyFor"):
            raw = parsed.get(key)
            if raw is not None and not isinstance(raw, str):
                raise ValueError(f"unexpected value for {key}: {raw!r}")
            values[key] = raw or ""
        return values["value"] or values["GetUserProfilePropertyFor"]

    def get_owner_user_profile(self) -> ProfileResponse:
        """Profile of the site owner."""
        url = to_url(
            self._site_api("sp.userprofiles.profileloader.getowneruserprofile"),
            self.modifiers,
        )
        return ProfileResponse(self.transport.post(url, None, self.config))

    def user_profile(self) -> ProfileResponse:
        """Profile of the current user."""
        url = to_url(
            self._site_api("sp.userprofiles.profileloader.getprofileloader/GetUserProfile"),
            self.modifiers,
        )
        return ProfileResponse(self.transport.post(url, None, self.config))

    def set_single_value_profile_property(self, login_name: str, prop: str, value: str) -> None:
        """Set a single-valued profile property."""
        body = _dumps(
            {"accountName": login_name, "propertyName": prop, "propertyValue": value}
        )
        self.transport.post(
            self.endpoint + "/SetSingleValueProfileProperty", body, self.config
        )

    def set_multi_valued_profile_property(
        self, login_name: str, prop: str, values: Iterable[str] | None
    ) -> None:
        """Set a multi-valued profile property."""
        body = _dumps(
            {
                "accountName": login_name,
                "propertyName": prop,
                "propertyValues": None if values is None else list(values),
            }
        )
        self.transport.post(
            self.endpoint + "/SetMultiValuedProfileProperty", body, self.config
        )

    def hide_suggestion(self, login_name: str) -> bytes:
        """Remove a user from the current user's suggestions to follow."""
        endpoint = f"{self.endpoint}/HideSuggestion('{_escape(login_name)}')"
        return self.transport.post(endpoint, None, self.config)