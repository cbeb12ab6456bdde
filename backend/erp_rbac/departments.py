"""
Department scope — ERP access control

Two department tables live here:

* ``DEPARTMENT_INHERITANCE`` — a manager scoped to a department additionally
  passes feature checks as that department's staff role(s).  Feature checks
  only; never the displayed role and never the default-permission lookup.
* ``DEPARTMENT_ROLES`` — the roles a new user may request when picking a
  department on the request-access form.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from erp_rbac.roles import (
    ADMINISTRATION,
    ENGINEER,
    FINANCE,
    HR,
    HSE,
    MANAGER,
    MARKETING,
    OPS,
)

if TYPE_CHECKING:
    from erp_rbac.models import UserProfile

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Manager scope → inherited staff roles
# ---------------------------------------------------------------------------

DEPARTMENT_INHERITANCE: Mapping[str, frozenset[str]] = MappingProxyType({
    "marketing": frozenset({MARKETING}),
    "engineering": frozenset({ENGINEER}),
    "administration": frozenset({ADMINISTRATION}),
    "finance": frozenset({FINANCE}),
    "operations": frozenset({OPS}),
    # Assets shares the operations staff pool.
    "assets": frozenset({OPS}),
    "hr": frozenset({HR}),
    "hse": frozenset({HSE}),
})

DEPARTMENT_SCOPES: tuple[str, ...] = tuple(DEPARTMENT_INHERITANCE)


def get_inherited_roles(
    profile: UserProfile | None,
    inheritance: Mapping[str, frozenset[str]] = DEPARTMENT_INHERITANCE,
) -> frozenset[str]:
    """Return the staff roles a scoped manager behaves as for feature checks.

    Empty unless the profile is a manager with a non-empty department scope.
    Unrecognized scope values contribute nothing.
    """
    if profile is None or profile.role != MANAGER or not profile.department_scope:
        return frozenset()

    inherited: set[str] = set()
    for scope in profile.department_scope:
        roles = inheritance.get(scope)
        if roles is None:
            logger.debug(f"Ignoring unknown department scope {scope!r}")
            continue
        inherited.update(roles)
    return frozenset(inherited)


# ---------------------------------------------------------------------------
# Request-access form: department → requestable roles
# ---------------------------------------------------------------------------

DEPARTMENT_ROLES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "Operations": (OPS, MANAGER),
    "Finance": (FINANCE, ADMINISTRATION),
    "Marketing": (MARKETING,),
    "HR": (HR,),
    "HSE": (HSE,),
    "Engineering": (ENGINEER,),
    "Administration": (ADMINISTRATION,),
})


def get_department_roles(department: str) -> list[str]:
    """Return the roles requestable under *department*, or ``[]`` if unknown."""
    return list(DEPARTMENT_ROLES.get(department, ()))
