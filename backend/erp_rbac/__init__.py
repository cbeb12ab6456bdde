"""ERP role-based authorization and feature gating."""
from erp_rbac.admin import (
    GuardResult,
    can_modify_user,
    can_remove_admin_permission,
    get_assignable_roles,
    is_owner_email,
    is_pending_user,
    resolve_role,
    validate_role_change,
)
from erp_rbac.departments import get_department_roles, get_inherited_roles
from erp_rbac.engine import (
    AccessDecision,
    PolicyEngine,
    PolicyTableError,
    can_access_feature,
    get_dashboard_type,
    get_engine,
    is_role,
)
from erp_rbac.models import UserProfile
from erp_rbac.permissions import (
    DEFAULT_PERMISSIONS,
    PermissionBundle,
    get_default_permissions,
    has_permission,
)
from erp_rbac.roles import ALL_ROLES, OWNER

__all__ = [
    "ALL_ROLES",
    "AccessDecision",
    "DEFAULT_PERMISSIONS",
    "GuardResult",
    "OWNER",
    "PermissionBundle",
    "PolicyEngine",
    "PolicyTableError",
    "UserProfile",
    "can_access_feature",
    "can_modify_user",
    "can_remove_admin_permission",
    "get_assignable_roles",
    "get_dashboard_type",
    "get_default_permissions",
    "get_department_roles",
    "get_engine",
    "get_inherited_roles",
    "has_permission",
    "is_owner_email",
    "is_pending_user",
    "is_role",
    "resolve_role",
    "validate_role_change",
]
