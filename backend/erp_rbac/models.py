"""User profile — the runtime subject of every authorization check."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from erp_rbac.owner import resolve_role
from erp_rbac.permissions import PERMISSION_FLAGS, PermissionBundle, get_default_permissions
from erp_rbac.roles import DEFAULT_DASHBOARD, MANAGER, NO_ROLE, OWNER


class UserProfile(BaseModel):
    """A user's role, capability flags and department scope.

    ``permissions`` defaults to the role's bundle when not supplied, so a
    profile is never partially constructed.  Only managers keep a department
    scope; for every other role it is cleared.  A null ``user_id`` marks a
    pending profile (provisioned, never logged in).
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    user_id: str | None = None
    email: str | None = None
    full_name: str | None = None
    role: str
    permissions: PermissionBundle
    department_scope: frozenset[str] = frozenset()
    custom_dashboard: str | None = DEFAULT_DASHBOARD
    is_active: bool = True

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        if data.get("permissions") is None:
            data["permissions"] = get_default_permissions(data.get("role"))
        if data.get("role") != MANAGER or data.get("department_scope") is None:
            data["department_scope"] = frozenset()
        return data

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> UserProfile:
        """Build a profile from a flat ``user_profiles`` row.

        The role is resolved from the email first: the owner email becomes
        ``owner`` whatever is stored, and a stored ``owner`` on any other
        email gets no role.  ``can_*`` columns present in the row override the
        role defaults; missing or NULL columns fall back to them.  Neither the
        owner nor a role-less row takes stored flags.
        """
        role = resolve_role(row.get("email"), row.get("role"))
        stored = {}
        if role not in (OWNER, NO_ROLE):
            stored = {
                name: bool(row[name])
                for name in PERMISSION_FLAGS
                if row.get(name) is not None
            }
        permissions = get_default_permissions(role).model_copy(update=stored)
        return cls(
            id=_str_or_none(row.get("id")),
            user_id=_str_or_none(row.get("user_id")),
            email=row.get("email"),
            full_name=row.get("full_name"),
            role=role,
            permissions=permissions,
            department_scope=row.get("department_scope") or (),
            custom_dashboard=row.get("custom_dashboard") or DEFAULT_DASHBOARD,
            is_active=row.get("is_active") is not False,
        )


def _str_or_none(value: Any) -> str | None:
    return str(value) if value is not None else None
