"""FastAPI guards backed by the policy engine.

Provides:
- ``get_current_profile()`` dependency
- ``require_feature()`` — feature-key checks (department inheritance included)
- ``require_role()`` — direct role checks

The host application's session middleware is expected to place the
authenticated ``UserProfile`` on ``request.state.profile``.
"""
from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, status

from erp_rbac.config import settings
from erp_rbac.engine import get_engine, is_role
from erp_rbac.models import UserProfile

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Current-profile dependency
# ---------------------------------------------------------------------------


async def get_current_profile(request: Request) -> UserProfile | None:
    """Return the profile attached to the request, or ``None``."""
    profile = getattr(request.state, "profile", None)
    return profile if isinstance(profile, UserProfile) else None


def _require_profile(profile: UserProfile | None) -> UserProfile:
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    if not profile.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is deactivated",
        )
    return profile


# ---------------------------------------------------------------------------
# Feature-checking dependency factory
# ---------------------------------------------------------------------------


def require_feature(*feature_keys: str):
    """Return a FastAPI dependency that ensures the current profile may use
    ALL of the specified features.

    Usage::

        @router.delete("/pib/{pib_id}")
        async def delete_pib(
            pib_id: uuid.UUID,
            profile: UserProfile = Depends(require_feature("pib.delete")),
        ):
            ...
    """
    required = tuple(feature_keys)

    async def _check_feature(
        profile: UserProfile | None = Depends(get_current_profile),
    ) -> UserProfile:
        profile = _require_profile(profile)
        engine = get_engine()
        missing = [key for key in required if not engine.can_access_feature(profile, key)]
        if missing:
            if settings.RBAC_LOG_DENIALS:
                logger.warning(
                    f"Denied {', '.join(missing)} to profile {profile.id!r} "
                    f"(role={profile.role!r})"
                )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing features: {', '.join(sorted(missing))}.",
            )
        return profile

    return _check_feature


# ---------------------------------------------------------------------------
# Role-checking dependency factory
# ---------------------------------------------------------------------------


def require_role(*roles: str):
    """Return a FastAPI dependency that ensures the current profile holds one
    of the specified *roles*.  No department inheritance applies.
    """
    allowed = frozenset(roles)

    async def _check_role(
        profile: UserProfile | None = Depends(get_current_profile),
    ) -> UserProfile:
        profile = _require_profile(profile)
        if not is_role(profile, allowed):
            if settings.RBAC_LOG_DENIALS:
                logger.warning(f"Role {profile.role!r} denied; required one of {sorted(allowed)}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{profile.role}' is not permitted. "
                f"Required: {', '.join(sorted(allowed))}.",
            )
        return profile

    return _check_role
