"""Resolution engine for feature checks.

Given a user profile and a feature key, the engine:

1. looks up the predicate for the key (unknown keys grant nothing),
2. evaluates it against the profile,
3. for a manager with department scope, re-evaluates it against one virtual
   profile per inherited staff role, returning True on the first match.

All tables are passed in at construction so tests can substitute their own.
The module-level helpers delegate to a lazily built default engine.
"""
from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Iterable, Mapping

from erp_rbac.config import settings
from erp_rbac.departments import DEPARTMENT_INHERITANCE, get_inherited_roles
from erp_rbac.features import FEATURE_RULES, Predicate
from erp_rbac.models import UserProfile
from erp_rbac.permissions import DEFAULT_PERMISSIONS, NO_PERMISSIONS, PermissionBundle
from erp_rbac.roles import ALL_ROLES, DEFAULT_DASHBOARD, ROLE_DASHBOARDS

logger = logging.getLogger(__name__)


class PolicyTableError(Exception):
    """The rule tables are inconsistent (a build defect, not a runtime input)."""


@dataclasses.dataclass(frozen=True)
class AccessDecision:
    feature_key: str
    allowed: bool
    granted_by: str | None = None  # role whose predicate passed
    inherited: bool = False


class PolicyEngine:
    """Evaluates feature keys against user profiles."""

    def __init__(
        self,
        rules: Mapping[str, Predicate] = FEATURE_RULES,
        default_permissions: Mapping[str, PermissionBundle] = DEFAULT_PERMISSIONS,
        department_inheritance: Mapping[str, frozenset[str]] = DEPARTMENT_INHERITANCE,
        inherit_role_defaults: bool = True,
    ) -> None:
        self.rules = rules
        self.default_permissions = default_permissions
        self.department_inheritance = department_inheritance
        self.inherit_role_defaults = inherit_role_defaults

    # ------------------------------------------------------------------
    # Inheritance
    # ------------------------------------------------------------------

    def get_inherited_roles(self, profile: UserProfile | None) -> frozenset[str]:
        return get_inherited_roles(profile, self.department_inheritance)

    def virtual_profile(self, profile: UserProfile, role: str) -> UserProfile:
        """Return a copy of *profile* evaluated as *role*.

        With ``inherit_role_defaults`` the copy carries the role's default
        bundle; otherwise it keeps the manager's own flags.
        """
        update: dict = {"role": role}
        if self.inherit_role_defaults:
            update["permissions"] = self.default_permissions.get(role, NO_PERMISSIONS)
        return profile.model_copy(update=update)

    # ------------------------------------------------------------------
    # Feature checks
    # ------------------------------------------------------------------

    def explain(self, profile: UserProfile | None, feature_key: str) -> AccessDecision:
        """Resolve *feature_key* and report which role granted it, if any."""
        predicate = self.rules.get(feature_key)
        if predicate is None:
            logger.debug(f"No rule registered for feature {feature_key!r}")
            return AccessDecision(feature_key, False)
        if profile is None:
            return AccessDecision(feature_key, False)

        if predicate(profile):
            return AccessDecision(feature_key, True, granted_by=profile.role)

        # Sorted so the reported role is stable; the verdict does not depend on order.
        for role in sorted(self.get_inherited_roles(profile)):
            if predicate(self.virtual_profile(profile, role)):
                logger.debug(
                    f"Feature {feature_key!r} granted to manager {profile.id!r} "
                    f"via inherited role {role!r}"
                )
                return AccessDecision(feature_key, True, granted_by=role, inherited=True)

        return AccessDecision(feature_key, False)

    def can_access_feature(self, profile: UserProfile | None, feature_key: str) -> bool:
        return self.explain(profile, feature_key).allowed

    def allowed_features(self, profile: UserProfile | None) -> list[str]:
        """Return every feature key the profile may access, sorted."""
        if profile is None:
            return []
        return sorted(key for key in self.rules if self.can_access_feature(profile, key))

    # ------------------------------------------------------------------
    # Table validation
    # ------------------------------------------------------------------

    def validate_tables(self, roles: Iterable[str] = ALL_ROLES) -> None:
        """Raise ``PolicyTableError`` if the tables are inconsistent."""
        roles = tuple(roles)
        problems: list[str] = []

        for role in roles:
            bundle = self.default_permissions.get(role)
            if not isinstance(bundle, PermissionBundle):
                problems.append(f"role {role!r} has no default permission bundle")

        for scope, inherited in self.department_inheritance.items():
            for role in inherited:
                if role not in roles:
                    problems.append(f"department {scope!r} inherits unknown role {role!r}")

        for key, predicate in self.rules.items():
            if not callable(predicate):
                problems.append(f"feature {key!r} has no callable predicate")

        if problems:
            raise PolicyTableError("; ".join(problems))


# ---------------------------------------------------------------------------
# Process-wide default engine
# ---------------------------------------------------------------------------

_engine: PolicyEngine | None = None
_engine_lock = threading.Lock()


def get_engine() -> PolicyEngine:
    """Return the default engine, building and validating it on first use."""
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                engine = PolicyEngine(inherit_role_defaults=settings.RBAC_INHERIT_ROLE_DEFAULTS)
                engine.validate_tables()
                logger.info(
                    f"Policy engine ready: {len(engine.rules)} features, "
                    f"{len(engine.default_permissions)} roles"
                )
                _engine = engine
    return _engine


def reset_engine() -> None:
    """Drop the default engine so the next call rebuilds it from settings."""
    global _engine
    with _engine_lock:
        _engine = None


def can_access_feature(profile: UserProfile | None, feature_key: str) -> bool:
    """Return True if *profile* may use *feature_key* (fails closed)."""
    return get_engine().can_access_feature(profile, feature_key)


def is_role(profile: UserProfile | None, role: str | Iterable[str]) -> bool:
    """Direct role test; accepts one role or a collection of roles."""
    if profile is None:
        return False
    if isinstance(role, str):
        return profile.role == role
    return profile.role in set(role)


def get_dashboard_type(profile: UserProfile | None) -> str:
    """Return the dashboard to land on: the custom override, else the role's."""
    if profile is None:
        return DEFAULT_DASHBOARD
    if profile.custom_dashboard and profile.custom_dashboard != DEFAULT_DASHBOARD:
        return profile.custom_dashboard
    return ROLE_DASHBOARDS.get(profile.role, DEFAULT_DASHBOARD)


# ---------------------------------------------------------------------------
# Employee module checks
# ---------------------------------------------------------------------------

def can_view_employees(profile: UserProfile | None) -> bool:
    return can_access_feature(profile, "employees.view")


def can_create_employee(profile: UserProfile | None) -> bool:
    return can_access_feature(profile, "employees.create")


def can_edit_employee(profile: UserProfile | None) -> bool:
    return can_access_feature(profile, "employees.edit")


def can_delete_employee(profile: UserProfile | None) -> bool:
    return can_access_feature(profile, "employees.delete")


def can_view_employee_salary(profile: UserProfile | None) -> bool:
    return can_access_feature(profile, "employees.view_salary")


def can_edit_employee_salary(profile: UserProfile | None) -> bool:
    return can_access_feature(profile, "employees.edit_salary")


def can_see_employees_nav(profile: UserProfile | None) -> bool:
    return can_access_feature(profile, "employees.view")
