"""
Permission bundles — ERP access control

Every role has exactly one canonical bundle of boolean capability flags.
A user profile carries its own copy of the bundle, defaulted from the role
and optionally overridden per user by an administrator; stored flags always
take precedence over freshly computed defaults.

Flag names match the ``can_*`` columns of ``user_profiles``.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from erp_rbac.roles import (
    ADMINISTRATION,
    DIRECTOR,
    ENGINEER,
    FINANCE,
    HR,
    HSE,
    MANAGER,
    MARKETING,
    OPS,
    OWNER,
    SYSADMIN,
)

if TYPE_CHECKING:
    from erp_rbac.models import UserProfile

logger = logging.getLogger(__name__)


class PermissionBundle(BaseModel):
    """Fixed-shape record of capability flags.  Every field is required."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    can_see_revenue: bool
    can_see_profit: bool
    can_approve_pjo: bool
    can_manage_invoices: bool
    can_manage_users: bool
    can_create_pjo: bool
    can_fill_costs: bool
    can_check_pjo: bool
    can_check_jo: bool
    can_check_bkk: bool
    can_approve_jo: bool
    can_approve_bkk: bool
    can_estimate_costs: bool
    can_see_actual_costs: bool


PERMISSION_FLAGS: tuple[str, ...] = tuple(PermissionBundle.model_fields)


def _grant(*flags: str) -> PermissionBundle:
    """Build a bundle with *flags* set and every other flag explicitly False."""
    unknown = set(flags) - set(PERMISSION_FLAGS)
    if unknown:
        raise ValueError(f"Unknown permission flags: {', '.join(sorted(unknown))}")
    return PermissionBundle(**{name: name in flags for name in PERMISSION_FLAGS})


NO_PERMISSIONS = _grant()


# ---------------------------------------------------------------------------
# Role → default bundle (source of truth)
# ---------------------------------------------------------------------------

DEFAULT_PERMISSIONS: Mapping[str, PermissionBundle] = MappingProxyType({
    # ── Owner ────────────────────────────────────────────────────────────
    # Everything.  Auto-granted by email, never assigned.
    OWNER: _grant(*PERMISSION_FLAGS),

    # ── Director ─────────────────────────────────────────────────────────
    # Final approver for PJO / JO / BKK, sees all financials.
    DIRECTOR: _grant(*PERMISSION_FLAGS),

    # ── Manager ──────────────────────────────────────────────────────────
    # Checker in the maker-checker-approver workflow.  Staff capabilities
    # (cost entry, invoicing) come from department scope, not from here.
    MANAGER: _grant(
        "can_see_revenue", "can_see_profit",
        "can_approve_pjo", "can_create_pjo",
        "can_check_pjo", "can_check_jo", "can_check_bkk",
        "can_see_actual_costs",
    ),

    # ── System Administrator ─────────────────────────────────────────────
    # User management only.  No financial visibility.
    SYSADMIN: _grant("can_manage_users"),

    # ── Administration ───────────────────────────────────────────────────
    # Prepares PJOs and invoices.
    ADMINISTRATION: _grant(
        "can_see_revenue", "can_manage_invoices", "can_create_pjo",
        "can_see_actual_costs",
    ),

    # ── Finance ──────────────────────────────────────────────────────────
    FINANCE: _grant(
        "can_see_revenue", "can_see_profit", "can_manage_invoices",
        "can_check_bkk", "can_see_actual_costs",
    ),

    # ── Marketing ────────────────────────────────────────────────────────
    # Quotes and estimates; never sees actual costs.
    MARKETING: _grant("can_see_revenue", "can_create_pjo", "can_estimate_costs"),

    # ── Operations ───────────────────────────────────────────────────────
    # Fills actual costs.  Never sees revenue or profit.
    OPS: _grant("can_fill_costs", "can_see_actual_costs"),

    # ── Engineer ─────────────────────────────────────────────────────────
    ENGINEER: _grant("can_estimate_costs"),

    # ── HR / HSE ─────────────────────────────────────────────────────────
    # Module access is role-based; no commercial flags.
    HR: _grant(),
    HSE: _grant(),
})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def get_default_permissions(role: str | None) -> PermissionBundle:
    """Return the canonical bundle for a role.

    Unknown or missing roles get ``NO_PERMISSIONS`` rather than an error.
    """
    bundle = DEFAULT_PERMISSIONS.get(role) if isinstance(role, str) and role else None
    if bundle is None:
        logger.warning(f"No default permissions for role {role!r}; using empty bundle")
        return NO_PERMISSIONS
    return bundle


def has_permission(profile: UserProfile | None, flag_name: str) -> bool:
    """Read one flag directly off the profile (no department inheritance)."""
    if profile is None or flag_name not in PERMISSION_FLAGS:
        return False
    return getattr(profile.permissions, flag_name) is True
