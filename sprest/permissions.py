"""Base permission masks and permission-kind checks."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Mapping

_UINT64 = (1 << 64) - 1


class PermissionKind(IntEnum):
    """Permission kinds; each value is a one-based bit position in the permission mask."""

    EMPTY_MASK = 0
    VIEW_LIST_ITEMS = 1
    ADD_LIST_ITEMS = 2
    EDIT_LIST_ITEMS = 3
    DELETE_LIST_ITEMS = 4
    APPROVE_ITEMS = 5
    OPEN_ITEMS = 6
    VIEW_VERSIONS = 7
    DELETE_VERSIONS = 8
    CANCEL_CHECKOUT = 9
    MANAGE_PERSONAL_VIEWS = 10
    MANAGE_LISTS = 12
    VIEW_FORM_PAGES = 13
    ANONYMOUS_SEARCH_ACCESS_LIST = 14
    OPEN = 17
    VIEW_PAGES = 18
    ADD_AND_CUSTOMIZE_PAGES = 19
    APPLY_THEME_AND_BORDER = 20
    APPLY_STYLE_SHEETS = 21
    VIEW_USAGE_DATA = 22
    CREATE_SSC_SITE = 23
    MANAGE_SUBWEBS = 24
    CREATE_GROUPS = 25
    MANAGE_PERMISSIONS = 26
    BROWSE_DIRECTORIES = 27
    BROWSE_USER_INFO = 28
    ADD_DEL_PRIVATE_WEB_PARTS = 29
    UPDATE_PERSONAL_WEB_PARTS = 30
    MANAGE_WEB = 31
    ANONYMOUS_SEARCH_ACCESS_WEB_LISTS = 32
    USE_CLIENT_INTEGRATION = 37
    USE_REMOTE_APIS = 38
    MANAGE_ALERTS = 39
    CREATE_ALERTS = 40
    EDIT_MY_USER_INFO = 41
    ENUMERATE_PERMISSIONS = 63
    FULL_MASK = 65


def _as_int64(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"invalid permission mask value: {value!r}")
    if isinstance(value, (int, str)):
        return int(value)
    raise ValueError(f"invalid permission mask value: {value!r}")


@dataclass(frozen=True)
class BasePermissions:
    """High and low 32-bit halves of a permission mask."""

    high: int = 0
    low: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BasePermissions:
        """Build from a payload where ``High`` and ``Low`` are numeric strings."""
        return cls(high=_as_int64(data.get("High")), low=_as_int64(data.get("Low")))


def has_permissions(base_permissions: BasePermissions, permission_kind: int) -> bool:
    """Whether the mask in ``base_permissions`` grants ``permission_kind``."""
    kind = int(permission_kind)
    if kind == PermissionKind.EMPTY_MASK:
        return True

    perm = (kind - 1) & _UINT64
    low = base_permissions.low & _UINT64
    high = base_permissions.high & _UINT64

    if kind == PermissionKind.FULL_MASK:
        return (high & 32767) == 32767 and low == 65535

    if perm < 32:
        return (low & (1 << perm)) != 0
    if perm < 64:
        mask = ((1 << perm) - 32) & _UINT64
        return (high & mask) != 0
    return False