"""
Administrative meta-rules — who may change whose access.

* The owner is immutable: nobody may modify the owner's assignment, and the
  owner role is never assignable.  It is derived from the configured email
  (see ``erp_rbac.owner``).
* Only owner, director and sysadmin may modify other users.
* The last user-manager may not remove their own user-management flag.
* A profile with no linked login (``user_id`` is NULL) is pending.

These checks answer yes/no; persisting or refusing the change is the
caller's job.
"""
from __future__ import annotations

import dataclasses

from erp_rbac.models import UserProfile
from erp_rbac.owner import is_owner_email, resolve_role
from erp_rbac.roles import ALL_ROLES, OWNER, USER_ADMIN_ROLES

__all__ = [
    "GuardResult",
    "can_modify_user",
    "can_remove_admin_permission",
    "get_assignable_roles",
    "is_owner_email",
    "is_pending_user",
    "resolve_role",
    "validate_role_change",
]


@dataclasses.dataclass(frozen=True)
class GuardResult:
    allowed: bool
    reason: str | None = None


# ---------------------------------------------------------------------------
# Role assignment
# ---------------------------------------------------------------------------

def get_assignable_roles() -> list[str]:
    """Every catalog role except ``owner``, in catalog order."""
    return [role for role in ALL_ROLES if role != OWNER]


def can_modify_user(actor_role: str | None, target_role: str | None) -> bool:
    if target_role == OWNER:
        return False
    return isinstance(actor_role, str) and actor_role in USER_ADMIN_ROLES


def validate_role_change(
    actor_role: str | None,
    target_role: str | None,
    new_role: str | None,
) -> GuardResult:
    """Check whether *actor_role* may move a *target_role* user to *new_role*."""
    if target_role == OWNER:
        return GuardResult(False, "The owner account cannot be modified")
    if not can_modify_user(actor_role, target_role):
        return GuardResult(False, f"Role '{actor_role}' may not modify users")
    if new_role not in get_assignable_roles():
        return GuardResult(False, f"Role '{new_role}' cannot be assigned")
    return GuardResult(True)


# ---------------------------------------------------------------------------
# Last-admin protection
# ---------------------------------------------------------------------------

def can_remove_admin_permission(
    current_admin_count: int,
    target_user_id: str,
    acting_user_id: str,
) -> GuardResult:
    """Guard to run before revoking ``can_manage_users`` from a profile.

    The caller supplies the current number of profiles holding the flag.
    Only the sole remaining admin demoting themselves is refused.
    """
    if current_admin_count <= 1 and target_user_id == acting_user_id:
        return GuardResult(
            False,
            "Cannot remove your own user-management permission: "
            "you are the last user with this permission",
        )
    return GuardResult(True)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

def is_pending_user(profile: UserProfile | None) -> bool:
    """True if the profile was provisioned but has never logged in."""
    if profile is None:
        return False
    return profile.user_id is None
