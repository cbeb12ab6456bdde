"""Owner identity: the owner role is derived from the configured email, never stored."""
from __future__ import annotations

import logging

from erp_rbac.config import settings
from erp_rbac.roles import NO_ROLE, OWNER

logger = logging.getLogger(__name__)


def is_owner_email(email: str | None) -> bool:
    """Case-insensitive exact match against the configured owner email."""
    if not isinstance(email, str) or not email:
        return False
    return email.lower() == settings.OWNER_EMAIL.lower()


def resolve_role(email: str | None, stored_role: str | None) -> str:
    """Return the role a signing-in identity actually holds.

    The owner email always resolves to ``owner``.  A stored ``owner`` role on
    any other identity is not trusted and resolves to ``NO_ROLE``.
    """
    if is_owner_email(email):
        return OWNER
    if stored_role == OWNER:
        logger.warning(f"Stored owner role on non-owner identity {email!r}; denying")
        return NO_ROLE
    if not isinstance(stored_role, str):
        return NO_ROLE
    return stored_role
