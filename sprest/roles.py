"""Permission roles: inheritance, role assignments and role definitions."""

from __future__ import annotations

import json
from enum import IntEnum
from typing import Any

from sprest.models import RoleDefInfo
from sprest.utils import (
    RequestConfig,
    Transport,
    normalize_odata_item,
    patch_config_headers,
)

_VERBOSE_HEADERS = {
    "Accept": "application/json;odata=verbose",
    "Content-Type": "application/json;odata=verbose;charset=utf-8",
}


class RoleTypeKind(IntEnum):
    """Standard role type kinds."""

    NONE = 0
    GUEST = 1
    READER = 2
    CONTRIBUTOR = 3
    WEB_DESIGNER = 4
    ADMINISTRATOR = 5
    EDITOR = 6
    SYSTEM = 7


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _bool_field(data: dict[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"unexpected value for {key}: {value!r}")
    return value


class Roles:
    """Role assignments of a securable object."""

    def __init__(
        self, transport: Transport, endpoint: str, config: RequestConfig | None = None
    ) -> None:
        self.transport = transport
        self.endpoint = endpoint
        self.config = config

    def has_unique_assignments(self) -> bool:
        """Whether the object has unique (non-inherited) permissions."""
        data = self.transport.post(
            f"{self.endpoint}/HasUniqueRoleAssignments", None, self.config
        )
        parsed = json.loads(normalize_odata_item(data))
        if not isinstance(parsed, dict):
            raise ValueError(f"unexpected response: {parsed!r}")
        return _bool_field(parsed, "HasUniqueRoleAssignments") or _bool_field(parsed, "value")

    def reset_inheritance(self) -> None:
        """Restore permission inheritance."""
        self.transport.post(f"{self.endpoint}/ResetRoleInheritance", None, self.config)

    def break_inheritance(self, copy_role_assignments: bool, clear_sub_scopes: bool) -> None:
        """Break permission inheritance, optionally copying parent assignments."""
        endpoint = (
            f"{self.endpoint}/BreakRoleInheritance("
            f"copyroleassignments={_flag(copy_role_assignments)},"
            f"clearsubscopes={_flag(clear_sub_scopes)})"
        )
        self.transport.post(endpoint, None, self.config)

    def add_assignment(self, principal_id: int, role_def_id: int) -> None:
        """Grant a role definition to a user or group."""
        endpoint = (
            f"{self.endpoint}/RoleAssignments/AddRoleAssignment("
            f"principalid={int(principal_id)},roledefid={int(role_def_id)})"
        )
        self.transport.post(endpoint, None, self.config)

    def remove_assignment(self, principal_id: int, role_def_id: int) -> None:
        """Revoke a role definition from a user or group."""
        endpoint = (
            f"{self.endpoint}/RoleAssignments/RemoveRoleAssignment("
            f"principalid={int(principal_id)},roledefid={int(role_def_id)})"
        )
        self.transport.post(endpoint, None, self.config)


class RoleDefinitions:
    """Role definitions of a web."""

    def __init__(
        self, transport: Transport, endpoint: str, config: RequestConfig | None = None
    ) -> None:
        self.transport = transport
        self.endpoint = endpoint
        self.config = config

    def get_by_id(self, role_def_id: int) -> RoleDefInfo | None:
        """Role definition by ID."""
        return self._get_one(f"{self.endpoint}/GetById({int(role_def_id)})")

    def get_by_name(self, name: str) -> RoleDefInfo | None:
        """Role definition by name."""
        return self._get_one(f"{self.endpoint}/GetByName('{name}')")

    def get_by_type(self, role_type_kind: int) -> RoleDefInfo | None:
        """Role definition by role type kind."""
        return self._get_one(f"{self.endpoint}/GetByType({int(role_type_kind)})")

    def get(self) -> list[RoleDefInfo]:
        """All role definitions."""
        parsed = json.loads(self.transport.get(self.endpoint, self.config))
        verbose = parsed.get("d") if isinstance(parsed, dict) else None
        results = verbose.get("results") if isinstance(verbose, dict) else None
        if results is None:
            return []
        if not isinstance(results, list):
            raise ValueError(f"unexpected role definitions: {results!r}")
        return [RoleDefInfo.from_dict(item) for item in results if isinstance(item, dict)]

    def _get_one(self, endpoint: str) -> RoleDefInfo | None:
        config = patch_config_headers(self.config, _VERBOSE_HEADERS)
        parsed = json.loads(self.transport.post(endpoint, None, config))
        if not isinstance(parsed, dict):
            raise ValueError(f"unexpected response: {parsed!r}")
        info = parsed.get("d")
        if info is None:
            return None
        if not isinstance(info, dict):
            raise ValueError(f"unexpected role definition: {info!r}")
        return RoleDefInfo.from_dict(info)