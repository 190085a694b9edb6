"""Typed payload models for SharePoint REST responses."""

from __future__ import annotations

import re
from dataclasses import MISSING, dataclass, field, fields
from datetime import datetime
from typing import Any, Callable, Mapping, TypeVar

from sprest.permissions import BasePermissions

_T = TypeVar("_T")

_DATE_RE = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})$"
)


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _as_bool(value: Any) -> bool:
    return value if isinstance(value, bool) else False


def _as_datetime(value: Any) -> datetime | None:
    """Parse an RFC 3339 timestamp; ``None`` stays ``None``."""
    if value is None:
        return None
    match = _DATE_RE.match(value) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"invalid RFC 3339 date: {value!r}")
    base, fraction, zone = match.groups()
    micro = (fraction or "")[:6].ljust(6, "0")
    offset = "+00:00" if zone in ("Z", "z") else zone
    return datetime.fromisoformat(f"{base}.{micro}{offset}")


def _nested(model: Any) -> Callable[[Any], Any]:
    def convert(value: Any) -> Any:
        return model.from_dict(value) if isinstance(value, Mapping) else None

    return convert


def _json(key: str, convert: Callable[[Any], Any], default: Any = None) -> Any:
    return field(default=default, metadata={"json": key, "convert": convert})


def _str(key: str) -> Any:
    return _json(key, _as_str, "")


def _int(key: str) -> Any:
    return _json(key, _as_int, 0)


def _bool(key: str) -> Any:
    return _json(key, _as_bool, False)


def _decode(cls: type[_T], data: Mapping[str, Any]) -> _T:
    kwargs = {}
    for spec in fields(cls):  # type: ignore[arg-type]
        key = spec.metadata["json"]
        if key in data:
            kwargs[spec.name] = spec.metadata["convert"](data[key])
        elif spec.default is not MISSING:
            kwargs[spec.name] = spec.default
    return cls(**kwargs)


@dataclass
class StringValue:
    """Single string value property."""

    string_value: str = _str("StringValue")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StringValue:
        """Build from a JSON mapping."""
        return _decode(cls, data)


@dataclass
class DecodedURL:
    """Decoded URL property."""

    decoded_url: str = _str("DecodedUrl")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DecodedURL:
        """Build from a JSON mapping."""
        return _decode(cls, data)


@dataclass
class TypedKeyValue:
    """Key, value and value type triple."""

    key: str = _str("Key")
    value: str = _str("Value")
    value_type: str = _str("ValueType")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TypedKeyValue:
        """Build from a JSON mapping."""
        return _decode(cls, data)


@dataclass
class RoleDefInfo:
    """Permission role definition."""

    base_permissions: BasePermissions | None = _json(
        "BasePermissions", _nested(BasePermissions)
    )
    description: str = _str("Description")
    hidden: bool = _bool("Hidden")
    id: int = _int("Id")
    name: str = _str("Name")
    order: int = _int("Order")
    role_type_kind: int = _int("RoleTypeKind")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RoleDefInfo:
        """Build from a JSON mapping."""
        return _decode(cls, data)


@dataclass
class SiteInfo:
    """Site collection properties."""

    allow_create_declarative_workflow: bool = _bool("AllowCreateDeclarativeWorkflow")
    allow_designer: bool = _bool("AllowDesigner")
    allow_master_page_editing: bool = _bool("AllowMasterPageEditing")
    allow_revert_from_template: bool = _bool("AllowRevertFromTemplate")
    allow_save_declarative_workflow_as_template: bool = _bool(
        "AllowSaveDeclarativeWorkflowAsTemplate"
    )
    allow_save_publish_declarative_workflow: bool = _bool(
        "AllowSavePublishDeclarativeWorkflow"
    )
    allow_self_service_upgrade: bool = _bool("AllowSelfServiceUpgrade")
    allow_self_service_upgrade_evaluation: bool = _bool("AllowSelfServiceUpgradeEvaluation")
    audit_log_trimming_retention: int = _int("AuditLogTrimmingRetention")
    compatibility_level: int = _int("CompatibilityLevel")
    current_change_token: StringValue | None = _json(
        "CurrentChangeToken", _nested(StringValue)
    )
    disable_app_views: bool = _bool("DisableAppViews")
    disable_company_wide_sharing_links: bool = _bool("DisableCompanyWideSharingLinks")
    disable_flows: bool = _bool("DisableFlows")
    external_sharing_tips_enabled: bool = _bool("ExternalSharingTipsEnabled")
    geo_location: str = _str("GeoLocation")
    group_id: str = _str("GroupId")
    hub_site_id: str = _str("HubSiteId")
    id: str = _str("Id")
    is_hub_site: bool = _bool("IsHubSite")
    max_items_per_throttled_operation: int = _int("MaxItemsPerThrottledOperation")
    needs_b2b_upgrade: bool = _bool("NeedsB2BUpgrade")
    primary_uri: str = _str("PrimaryUri")
    read_only: bool = _bool("ReadOnly")
    required_designer_version: str = _str("RequiredDesignerVersion")
    resource_path: DecodedURL | None = _json("ResourcePath", _nested(DecodedURL))
    sandboxed_code_activation_capability: int = _int("SandboxedCodeActivationCapability")
    sensitivity_label: str = _str("SensitivityLabel")
    sensitivity_label_id: str = _str("SensitivityLabelId")
    server_relative_url: str = _str("ServerRelativeUrl")
    share_by_email_enabled: bool = _bool("ShareByEmailEnabled")
    share_by_link_enabled: bool = _bool("ShareByLinkEnabled")
    show_url_structure: bool = _bool("ShowUrlStructure")
    trim_audit_log: bool = _bool("TrimAuditLog")
    ui_version_configuration_enabled: bool = _bool("UIVersionConfigurationEnabled")
    upgrade_reminder_date: str = _str("UpgradeReminderDate")
    upgrade_scheduled: bool = _bool("UpgradeScheduled")
    upgrade_scheduled_date: str = _str("UpgradeScheduledDate")
    upgrading: bool = _bool("Upgrading")
    url: str = _str("Url")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SiteInfo:
        """Build from a JSON mapping."""
        return _decode(cls, data)


@dataclass
class UserInfo:
    """Site user properties."""

    email: str = _str("Email")
    id: int = _int("Id")
    is_hidden_in_ui: bool = _bool("IsHiddenInUI")
    is_site_admin: bool = _bool("IsSiteAdmin")
    login_name: str = _str("LoginName")
    principal_type: int = _int("PrincipalType")
    title: str = _str("Title")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UserInfo:
        """Build from a JSON mapping."""
        return _decode(cls, data)


@dataclass
class RecycleBinItemInfo:
    """Recycle bin item properties."""

    author_email: str = _str("AuthorEmail")
    author_name: str = _str("AuthorName")
    deleted_by_email: str = _str("DeletedByEmail")
    deleted_by_name: str = _str("DeletedByName")
    deleted_date: datetime | None = _json("DeletedDate", _as_datetime)
    deleted_date_local_formatted: str = _str("DeletedDateLocalFormatted")
    dir_name: str = _str("DirName")
    id: str = _str("Id")
    item_state: int = _int("ItemState")
    item_type: int = _int("ItemType")
    leaf_name: str = _str("LeafName")
    size: int = _int("Size")
    title: str = _str("Title")
    leaf_name_path: DecodedURL | None = _json("LeafNamePath", _nested(DecodedURL))
    dir_name_path: DecodedURL | None = _json("DirNamePath", _nested(DecodedURL))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RecycleBinItemInfo:
        """Build from a JSON mapping."""
        return _decode(cls, data)


@dataclass
class SubscriptionInfo:
    """List webhook subscription."""

    id: str = _str("id")
    notification_url: str = _str("notificationUrl")
    expiration_date_time: datetime | None = _json("expirationDateTime", _as_datetime)
    resource: str = _str("resource")
    client_state: str = _str("clientState")
    resource_data: str = _str("resourceData")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SubscriptionInfo:
        """Build from a JSON mapping."""
        return _decode(cls, data)