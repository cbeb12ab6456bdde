"""Sidebar navigation filtered by feature access."""
from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from erp_rbac.engine import PolicyEngine, get_engine
from erp_rbac.models import UserProfile
from erp_rbac.roles import DEFAULT_DASHBOARD, ROLE_DASHBOARDS


@dataclasses.dataclass(frozen=True)
class NavItem:
    title: str
    href: str
    feature_key: str


NAV_ITEMS: tuple[NavItem, ...] = (
    NavItem("Dashboard", "/dashboard", "notifications.view"),
    NavItem("Customers", "/customers", "customers.view"),
    NavItem("Projects", "/projects", "projects.view"),
    NavItem("Quotations", "/quotations", "quotations.view"),
    NavItem("Proforma JO", "/proforma-jo", "pjo.view"),
    NavItem("Cost Entry", "/cost-entry", "jo.fill_costs"),
    NavItem("Job Orders", "/job-orders", "jo.view"),
    NavItem("Invoices", "/invoices", "invoices.view"),
    NavItem("Vendor Invoices", "/vendor-invoices", "vendor_invoices.view"),
    NavItem("Disbursements", "/disbursements", "bkk.view"),
    NavItem("Vendors", "/vendors", "vendors.view"),
    NavItem("Employees", "/hr/employees", "employees.view"),
    NavItem("Payroll", "/hr/payroll", "hr.payroll.view"),
    NavItem("HSE", "/hse", "hse.incidents.view"),
    NavItem("Assets", "/assets", "assets.view"),
    NavItem("Maintenance", "/maintenance", "maintenance.view"),
    NavItem("Customs", "/customs", "pib.view"),
    NavItem("Agency", "/agency", "agency.bookings.view"),
    NavItem("Engineering", "/engineering", "engineering.assessments.view"),
    NavItem("Reports", "/reports", "reports.view"),
    NavItem("Settings", "/settings", "settings.view"),
)

# Roles that land on the top-level dashboard rather than a role-specific one.
_ROOT_DASHBOARDS = frozenset({"executive"})


def filter_nav_items(
    profile: UserProfile | None,
    items: Iterable[NavItem] = NAV_ITEMS,
    engine: PolicyEngine | None = None,
) -> list[NavItem]:
    """Keep the menu entries whose feature the profile can access."""
    engine = engine or get_engine()
    return [item for item in items if engine.can_access_feature(profile, item.feature_key)]


def get_dashboard_path(role: str | None) -> str:
    if not isinstance(role, str) or not role:
        return "/dashboard"
    dashboard = ROLE_DASHBOARDS.get(role, DEFAULT_DASHBOARD)
    if dashboard in _ROOT_DASHBOARDS or dashboard == DEFAULT_DASHBOARD:
        return "/dashboard"
    return f"/dashboard/{dashboard}"
