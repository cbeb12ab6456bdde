"""Role preview: the owner views the application as another role.

Preview never changes what is stored; it only swaps the role and bundle used
for the owner's own checks.  For anyone but the owner the preview role is
ignored.
"""
from __future__ import annotations

from erp_rbac.models import UserProfile
from erp_rbac.permissions import PermissionBundle, get_default_permissions
from erp_rbac.roles import ALL_ROLES, MANAGER, OWNER

PREVIEW_ROLES: tuple[str, ...] = ALL_ROLES


def can_use_preview_feature(role: str | None) -> bool:
    return role == OWNER


def get_effective_role(actual_role: str, preview_role: str | None) -> str:
    if can_use_preview_feature(actual_role) and preview_role in PREVIEW_ROLES:
        return preview_role
    return actual_role


def get_effective_permissions(
    actual_role: str,
    actual_permissions: PermissionBundle,
    preview_role: str | None,
) -> PermissionBundle:
    if can_use_preview_feature(actual_role) and preview_role in PREVIEW_ROLES:
        return get_default_permissions(preview_role)
    return actual_permissions


def preview_profile(profile: UserProfile, preview_role: str | None) -> UserProfile:
    """Return the profile the owner's checks run against while previewing."""
    role = get_effective_role(profile.role, preview_role)
    if role == profile.role:
        return profile
    return profile.model_copy(update={
        "role": role,
        "permissions": get_default_permissions(role),
        "department_scope": profile.department_scope if role == MANAGER else frozenset(),
    })
