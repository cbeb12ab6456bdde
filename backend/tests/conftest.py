"""
Test fixtures for the ERP access-control engine.

Profiles are built in-process; the FastAPI guard tests run a small app over
``httpx.ASGITransport`` so no server is needed.
"""
import httpx
import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI, Request

from erp_rbac.config import settings
from erp_rbac.dependencies import require_feature, require_role
from erp_rbac.engine import PolicyEngine, reset_engine
from erp_rbac.models import UserProfile
from erp_rbac.permissions import get_default_permissions
from erp_rbac.roles import ALL_ROLES, MANAGER, OWNER, SYSADMIN

BASE_URL = "http://testserver"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_profile(role: str, **overrides) -> UserProfile:
    """Build an active, logged-in profile with the role's default flags."""
    data = {
        "id": f"profile-{role or 'none'}",
        "user_id": f"auth-{role or 'none'}",
        "email": f"{role or 'none'}@example.com",
        "full_name": f"Test {role.title() if role else 'User'}",
        "role": role,
    }
    data.update(overrides)
    return UserProfile(**data)


def with_flags(role: str, **flags: bool) -> UserProfile:
    """Build a profile whose bundle is the role default with *flags* overridden."""
    permissions = get_default_permissions(role).model_copy(update=flags)
    return make_profile(role, permissions=permissions)


# ---------------------------------------------------------------------------
# Engine fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _fresh_engine():
    """Each test sees a default engine built from current settings."""
    reset_engine()
    yield
    reset_engine()


@pytest.fixture
def engine():
    return PolicyEngine()


@pytest.fixture
def actor_flags_engine():
    """Engine that keeps the manager's own flags on virtual profiles."""
    return PolicyEngine(inherit_role_defaults=False)


@pytest.fixture
def profiles():
    """Default profile for every catalog role, keyed by role."""
    return {role: make_profile(role) for role in ALL_ROLES}


@pytest.fixture
def ops_manager():
    """Manager scoped to operations who cannot fill costs on their own bundle."""
    permissions = get_default_permissions(MANAGER).model_copy(update={"can_fill_costs": False})
    return make_profile(MANAGER, department_scope=["operations"], permissions=permissions)


@pytest.fixture
def owner_email(monkeypatch):
    monkeypatch.setattr(settings, "OWNER_EMAIL", "owner@example.com")
    return settings.OWNER_EMAIL


# ---------------------------------------------------------------------------
# FastAPI app with guarded routes
# ---------------------------------------------------------------------------

def build_app() -> FastAPI:
    app = FastAPI()

    @app.middleware("http")
    async def attach_profile(request: Request, call_next):
        # Tests pass the role (and optional scope) in headers in place of a session.
        role = request.headers.get("X-Test-Role")
        if role is not None:
            scope = request.headers.get("X-Test-Scope")
            request.state.profile = make_profile(
                role,
                department_scope=scope.split(",") if scope else [],
                is_active=request.headers.get("X-Test-Inactive") is None,
            )
        return await call_next(request)

    @app.get("/api/pib/{pib_id}")
    async def view_pib(pib_id: str, profile: UserProfile = Depends(require_feature("pib.view"))):
        return {"id": pib_id, "viewer": profile.role}

    @app.delete("/api/pib/{pib_id}")
    async def delete_pib(pib_id: str, profile: UserProfile = Depends(require_feature("pib.delete"))):
        return {"deleted": pib_id}

    @app.post("/api/job-orders/{jo_id}/costs")
    async def fill_costs(
        jo_id: str,
        profile: UserProfile = Depends(require_feature("jo.view", "jo.fill_costs")),
    ):
        return {"id": jo_id, "filled_by": profile.role}

    @app.get("/api/admin/users")
    async def list_users(profile: UserProfile = Depends(require_role(OWNER, SYSADMIN))):
        return {"items": []}

    return app


@pytest_asyncio.fixture
async def client():
    transport = httpx.ASGITransport(app=build_app())
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as c:
        yield c


def role_headers(role: str, scope: str | None = None) -> dict:
    headers = {"X-Test-Role": role}
    if scope:
        headers["X-Test-Scope"] = scope
    return headers
