"""
Role catalog — ERP access control

The closed set of roles a user profile may hold.  Role values are the plain
strings stored in the ``user_profiles.role`` column.  Exactly one role,
``owner``, is never assignable: it is derived from the configured owner email.
"""
from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

# ---------------------------------------------------------------------------
# Role names
# ---------------------------------------------------------------------------

OWNER = "owner"
DIRECTOR = "director"
MANAGER = "manager"
SYSADMIN = "sysadmin"
ADMINISTRATION = "administration"
FINANCE = "finance"
MARKETING = "marketing"
OPS = "ops"
ENGINEER = "engineer"
HR = "hr"
HSE = "hse"

# Matches no predicate; used when a stored role cannot be trusted.
NO_ROLE = ""

ALL_ROLES: tuple[str, ...] = (
    OWNER,
    DIRECTOR,
    MANAGER,
    SYSADMIN,
    ADMINISTRATION,
    FINANCE,
    MARKETING,
    OPS,
    ENGINEER,
    HR,
    HSE,
)

VALID_ROLES: frozenset[str] = frozenset(ALL_ROLES)


# ---------------------------------------------------------------------------
# Role groups shared by the rule tables
# ---------------------------------------------------------------------------

# Executive roles see everything and sign off on everything.
EXECUTIVE_ROLES: frozenset[str] = frozenset({OWNER, DIRECTOR})

# Roles allowed to change other users' access.
USER_ADMIN_ROLES: frozenset[str] = frozenset({OWNER, DIRECTOR, SYSADMIN})


# ---------------------------------------------------------------------------
# Display names and dashboards
# ---------------------------------------------------------------------------

_DISPLAY_NAMES: dict[str, str] = {
    OWNER: "Owner",
    DIRECTOR: "Director",
    MANAGER: "Manager",
    SYSADMIN: "System Administrator",
    ADMINISTRATION: "Administration",
    FINANCE: "Finance",
    MARKETING: "Marketing",
    OPS: "Operations",
    ENGINEER: "Engineer",
    HR: "Human Resources",
    HSE: "Health, Safety & Environment",
}

ROLE_DASHBOARDS: Mapping[str, str] = MappingProxyType({
    OWNER: "executive",
    DIRECTOR: "executive",
    MANAGER: "manager",
    SYSADMIN: "sysadmin",
    ADMINISTRATION: "admin_finance",
    FINANCE: "admin_finance",
    MARKETING: "marketing",
    OPS: "operations",
    ENGINEER: "engineering",
    HR: "hr",
    HSE: "hse",
})

DEFAULT_DASHBOARD = "default"


def is_valid_role(role: str | None) -> bool:
    """Return True if *role* is part of the catalog."""
    return isinstance(role, str) and role in VALID_ROLES


def get_role_display_name(role: str) -> str:
    """Return a human-readable name for a role, or the capitalized value if unknown."""
    return _DISPLAY_NAMES.get(role, role.capitalize() if role else "Unknown")
