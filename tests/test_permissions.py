import pytest

from sprest.permissions import BasePermissions, PermissionKind, has_permissions

EDIT = BasePermissions(high=432, low=1011030767)
LIMITED = BasePermissions(high=48, low=134287360)


def test_edit_permissions_include_edit_list_items():
    assert has_permissions(EDIT, PermissionKind.EDIT_LIST_ITEMS) is True


def test_limited_permissions_exclude_view_list_items():
    assert has_permissions(LIMITED, PermissionKind.VIEW_LIST_ITEMS) is False


def test_empty_mask_always_granted():
    assert has_permissions(EDIT, PermissionKind.EMPTY_MASK) is True
    assert has_permissions(BasePermissions(), PermissionKind.EMPTY_MASK) is True


def test_full_mask_not_granted_for_edit():
    assert has_permissions(EDIT, PermissionKind.FULL_MASK) is False


def test_full_mask_granted_for_full_permissions():
    full = BasePermissions(high=32767, low=65535)
    assert has_permissions(full, PermissionKind.FULL_MASK) is True


def test_no_permissions_on_zero_mask():
    empty = BasePermissions()
    assert has_permissions(empty, PermissionKind.VIEW_LIST_ITEMS) is False
    assert has_permissions(empty, PermissionKind.MANAGE_WEB) is False


@pytest.mark.parametrize("kind", [k for k in PermissionKind if 1 <= k <= 32])
def test_low_bit_matches_kind(kind):
    perms = BasePermissions(low=1 << (kind - 1))
    assert has_permissions(perms, kind) is True


def test_plain_int_kind_accepted():
    assert has_permissions(EDIT, 3) is has_permissions(EDIT, PermissionKind.EDIT_LIST_ITEMS)


def test_edit_list_items_maps_to_third_low_bit():
    assert has_permissions(BasePermissions(low=0b100), PermissionKind.EDIT_LIST_ITEMS) is True
    assert has_permissions(BasePermissions(low=0b011), PermissionKind.EDIT_LIST_ITEMS) is False


def test_from_dict_parses_string_values():
    perms = BasePermissions.from_dict({"High": "432", "Low": "1011030767"})
    assert perms == EDIT


def test_from_dict_missing_values_are_zero():
    assert BasePermissions.from_dict({}) == BasePermissions()


def test_from_dict_rejects_non_numeric():
    with pytest.raises(ValueError):
        BasePermissions.from_dict({"High": "abc", "Low": "1"})