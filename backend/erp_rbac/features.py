"""
Feature rule table — ERP access control

Maps every feature key (one discrete UI surface or server-side action) to a
predicate over a ``UserProfile``.  Predicates test role membership, capability
flags, or boolean combinations of both.  They never look at department scope:
inheritance is applied by the engine, which re-evaluates the same predicate
against virtual profiles.

Feature key format: {module}.{resource}.{action} or {module}.{action}
Keys are append-only.  Retire a key by leaving it out of new call sites, not by
renaming it.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from erp_rbac.permissions import PERMISSION_FLAGS
from erp_rbac.roles import (
    ADMINISTRATION,
    ALL_ROLES,
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

Predicate = Callable[["UserProfile"], bool]


# ---------------------------------------------------------------------------
# Predicate combinators
# ---------------------------------------------------------------------------

def roles(*names: str) -> Predicate:
    """Pass when the profile's role is one of *names*."""
    allowed = frozenset(names)

    def _has_role(profile: UserProfile) -> bool:
        return profile.role in allowed

    return _has_role


def flag(name: str) -> Predicate:
    """Pass when the profile's capability flag *name* is set."""
    if name not in PERMISSION_FLAGS:
        raise ValueError(f"Unknown permission flag: {name!r}")

    def _has_flag(profile: UserProfile) -> bool:
        return getattr(profile.permissions, name) is True

    return _has_flag


def any_of(*predicates: Predicate) -> Predicate:
    def _any(profile: UserProfile) -> bool:
        return any(p(profile) for p in predicates)

    return _any


def all_of(*predicates: Predicate) -> Predicate:
    def _all(profile: UserProfile) -> bool:
        return all(p(profile) for p in predicates)

    return _all


ANYONE = roles(*ALL_ROLES)
EXECUTIVES = roles(OWNER, DIRECTOR)
USER_ADMINS = roles(OWNER, DIRECTOR, SYSADMIN)


# ---------------------------------------------------------------------------
# Feature key → predicate (source of truth)
# ---------------------------------------------------------------------------

FEATURE_RULES: Mapping[str, Predicate] = MappingProxyType({
    # ── Dashboards ───────────────────────────────────────────────────────
    "dashboard.executive": EXECUTIVES,
    "dashboard.manager": roles(OWNER, DIRECTOR, MANAGER),
    "dashboard.finance": roles(OWNER, DIRECTOR, ADMINISTRATION, FINANCE),
    "dashboard.marketing": roles(OWNER, DIRECTOR, MARKETING),
    "dashboard.operations": roles(OWNER, DIRECTOR, OPS),
    "dashboard.engineering": roles(OWNER, DIRECTOR, ENGINEER),
    "dashboard.hr": roles(OWNER, DIRECTOR, HR),
    "dashboard.hse": roles(OWNER, DIRECTOR, HSE),
    "dashboard.sysadmin": roles(OWNER, SYSADMIN),
    "dashboard.revenue_kpis": flag("can_see_revenue"),
    "dashboard.profit_kpis": flag("can_see_profit"),

    # ── Customers ────────────────────────────────────────────────────────
    "customers.view": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, FINANCE, MARKETING),
    "customers.create": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, MARKETING),
    "customers.edit": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, MARKETING),
    "customers.delete": EXECUTIVES,
    "customers.view_financials": all_of(
        roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, FINANCE, MARKETING),
        flag("can_see_revenue"),
    ),

    # ── Projects ─────────────────────────────────────────────────────────
    "projects.view": roles(
        OWNER, DIRECTOR, MANAGER, ADMINISTRATION, FINANCE, MARKETING, OPS, ENGINEER,
    ),
    "projects.create": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, MARKETING),
    "projects.edit": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, MARKETING),
    "projects.delete": EXECUTIVES,

    # ── Quotations ───────────────────────────────────────────────────────
    "quotations.view": roles(
        OWNER, DIRECTOR, MANAGER, ADMINISTRATION, FINANCE, MARKETING, ENGINEER,
    ),
    "quotations.create": roles(OWNER, DIRECTOR, MANAGER, MARKETING),
    "quotations.edit": roles(OWNER, DIRECTOR, MANAGER, MARKETING),
    "quotations.submit": roles(OWNER, DIRECTOR, MANAGER, MARKETING),
    "quotations.approve": roles(OWNER, DIRECTOR, MANAGER),
    "quotations.mark_result": roles(OWNER, DIRECTOR, MANAGER, MARKETING),
    "quotations.view_revenue": flag("can_see_revenue"),
    "quotations.delete": EXECUTIVES,

    # ── Proforma job orders (PJO) ────────────────────────────────────────
    "pjo.view": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, FINANCE, MARKETING, OPS),
    "pjo.create": flag("can_create_pjo"),
    "pjo.edit": flag("can_create_pjo"),
    "pjo.delete": EXECUTIVES,
    "pjo.check": flag("can_check_pjo"),
    "pjo.approve": flag("can_approve_pjo"),
    "pjo.reject": any_of(flag("can_check_pjo"), flag("can_approve_pjo")),
    "pjo.estimate_costs": flag("can_estimate_costs"),
    "pjo.view_revenue": flag("can_see_revenue"),
    "pjo.view_profit": flag("can_see_profit"),

    # ── Job orders (JO) ──────────────────────────────────────────────────
    "jo.view": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, FINANCE, OPS),
    "jo.create": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION),
    "jo.edit": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION),
    "jo.delete": EXECUTIVES,
    "jo.fill_costs": flag("can_fill_costs"),
    "jo.view_actual_costs": flag("can_see_actual_costs"),
    "jo.check": flag("can_check_jo"),
    "jo.approve": flag("can_approve_jo"),
    "jo.complete": roles(OWNER, DIRECTOR, MANAGER, OPS),
    "jo.submit_to_finance": roles(OWNER, DIRECTOR, MANAGER, OPS),
    "jo.view_profit": flag("can_see_profit"),

    # ── Customer invoices ────────────────────────────────────────────────
    "invoices.view": any_of(flag("can_manage_invoices"), roles(OWNER, DIRECTOR, MANAGER)),
    "invoices.create": flag("can_manage_invoices"),
    "invoices.edit": flag("can_manage_invoices"),
    "invoices.send": flag("can_manage_invoices"),
    "invoices.record_payment": all_of(
        flag("can_manage_invoices"), roles(OWNER, DIRECTOR, FINANCE),
    ),
    "invoices.void": EXECUTIVES,
    "invoices.delete": EXECUTIVES,

    # ── Vendor invoices ──────────────────────────────────────────────────
    "vendor_invoices.view": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, FINANCE),
    "vendor_invoices.create": roles(OWNER, DIRECTOR, ADMINISTRATION, FINANCE),
    "vendor_invoices.edit": roles(OWNER, DIRECTOR, ADMINISTRATION, FINANCE),
    "vendor_invoices.verify": roles(OWNER, DIRECTOR, FINANCE),
    "vendor_invoices.approve": roles(OWNER, DIRECTOR, MANAGER),
    "vendor_invoices.delete": EXECUTIVES,

    # ── Cash disbursements (BKK) ─────────────────────────────────────────
    # Maker (administration/finance) → checker (manager) → approver (director).
    "bkk.view": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, FINANCE),
    "bkk.create": roles(OWNER, DIRECTOR, ADMINISTRATION, FINANCE),
    "bkk.edit": roles(OWNER, DIRECTOR, ADMINISTRATION, FINANCE),
    "bkk.check": flag("can_check_bkk"),
    "bkk.approve": flag("can_approve_bkk"),
    "bkk.release_payment": roles(OWNER, DIRECTOR, FINANCE),
    "bkk.delete": EXECUTIVES,

    # ── Vendors ──────────────────────────────────────────────────────────
    "vendors.view": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, FINANCE, OPS),
    "vendors.create": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION),
    "vendors.edit": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION),
    "vendors.delete": EXECUTIVES,
    "vendors.rate": roles(OWNER, DIRECTOR, MANAGER, OPS),
    "vendors.view_bank_details": roles(OWNER, DIRECTOR, FINANCE),

    # ── Employees ────────────────────────────────────────────────────────
    "employees.view": roles(OWNER, DIRECTOR, MANAGER, HR),
    "employees.create": roles(OWNER, DIRECTOR, HR),
    "employees.edit": roles(OWNER, DIRECTOR, HR),
    "employees.delete": EXECUTIVES,
    "employees.view_salary": roles(OWNER, DIRECTOR, FINANCE, HR),
    "employees.edit_salary": roles(OWNER, DIRECTOR, HR),

    # ── HR ───────────────────────────────────────────────────────────────
    "hr.attendance.view": roles(OWNER, DIRECTOR, MANAGER, HR),
    "hr.attendance.manage": roles(OWNER, DIRECTOR, HR),
    "hr.attendance.clock": ANYONE,
    "hr.leave.request": ANYONE,
    "hr.leave.view": roles(OWNER, DIRECTOR, MANAGER, HR),
    "hr.leave.approve": roles(OWNER, DIRECTOR, MANAGER, HR),
    "hr.payroll.view": roles(OWNER, DIRECTOR, FINANCE, HR),
    "hr.payroll.run": roles(OWNER, DIRECTOR, HR),
    "hr.payroll.approve": EXECUTIVES,
    "hr.skills.manage": roles(OWNER, DIRECTOR, HR),
    "hr.performance.view": roles(OWNER, DIRECTOR, MANAGER, HR),
    "hr.performance.manage": roles(OWNER, DIRECTOR, HR),

    # ── HSE ──────────────────────────────────────────────────────────────
    "hse.incidents.view": ANYONE,
    "hse.incidents.report": ANYONE,
    "hse.incidents.investigate": roles(OWNER, DIRECTOR, HSE),
    "hse.incidents.close": roles(OWNER, DIRECTOR, HSE),
    "hse.permits.view": roles(OWNER, DIRECTOR, MANAGER, OPS, HSE),
    "hse.permits.request": roles(OWNER, DIRECTOR, MANAGER, OPS, HSE),
    "hse.permits.approve": roles(OWNER, DIRECTOR, HSE),
    "hse.ppe.view": roles(OWNER, DIRECTOR, MANAGER, OPS, HR, HSE),
    "hse.ppe.issue": roles(OWNER, DIRECTOR, HSE),
    "hse.documents.view": ANYONE,
    "hse.documents.manage": roles(OWNER, DIRECTOR, HSE),
    "hse.documents.approve": roles(OWNER, DIRECTOR, HSE),
    "hse.training.manage": roles(OWNER, DIRECTOR, HR, HSE),

    # ── Assets ───────────────────────────────────────────────────────────
    "assets.view": roles(OWNER, DIRECTOR, MANAGER, FINANCE, OPS),
    "assets.create": roles(OWNER, DIRECTOR, MANAGER, OPS),
    "assets.edit": roles(OWNER, DIRECTOR, MANAGER, OPS),
    "assets.delete": EXECUTIVES,
    "assets.dispose": EXECUTIVES,
    "assets.view_financials": all_of(
        roles(OWNER, DIRECTOR, MANAGER, FINANCE), flag("can_see_actual_costs"),
    ),
    "assets.depreciation.run": roles(OWNER, DIRECTOR, FINANCE),
    "assets.gps.view": roles(OWNER, DIRECTOR, MANAGER, OPS),

    # ── Maintenance ──────────────────────────────────────────────────────
    "maintenance.view": roles(OWNER, DIRECTOR, MANAGER, OPS),
    "maintenance.schedule": roles(OWNER, DIRECTOR, MANAGER, OPS),
    "maintenance.record": roles(OWNER, DIRECTOR, OPS),
    "maintenance.approve": roles(OWNER, DIRECTOR, MANAGER),
    "maintenance.view_costs": all_of(
        roles(OWNER, DIRECTOR, MANAGER, FINANCE, OPS), flag("can_see_actual_costs"),
    ),

    # ── Customs: import declarations (PIB) ───────────────────────────────
    "pib.view": roles(OWNER, DIRECTOR, MANAGER, SYSADMIN, ADMINISTRATION, FINANCE, OPS),
    "pib.create": roles(OWNER, DIRECTOR, ADMINISTRATION, OPS),
    "pib.edit": roles(OWNER, DIRECTOR, ADMINISTRATION, OPS),
    "pib.submit": roles(OWNER, DIRECTOR, ADMINISTRATION),
    "pib.delete": USER_ADMINS,

    # ── Customs: export declarations (PEB) ───────────────────────────────
    "peb.view": roles(OWNER, DIRECTOR, MANAGER, SYSADMIN, ADMINISTRATION, FINANCE, OPS),
    "peb.create": roles(OWNER, DIRECTOR, ADMINISTRATION, OPS),
    "peb.edit": roles(OWNER, DIRECTOR, ADMINISTRATION, OPS),
    "peb.submit": roles(OWNER, DIRECTOR, ADMINISTRATION),
    "peb.delete": USER_ADMINS,

    # ── Customs: fees and reference data ─────────────────────────────────
    "customs.fees.view": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, FINANCE),
    "customs.fees.manage": roles(OWNER, DIRECTOR, ADMINISTRATION, FINANCE),
    "customs.hs_codes.view": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, OPS),
    "customs.hs_codes.manage": roles(OWNER, DIRECTOR, ADMINISTRATION),

    # ── Shipping agency ──────────────────────────────────────────────────
    "agency.bookings.view": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, MARKETING, OPS),
    "agency.bookings.create": roles(OWNER, DIRECTOR, MANAGER, MARKETING, OPS),
    "agency.bookings.edit": roles(OWNER, DIRECTOR, MANAGER, MARKETING, OPS),
    "agency.shipping_lines.manage": roles(OWNER, DIRECTOR, MANAGER),
    "agency.bl.issue": roles(OWNER, DIRECTOR, OPS),
    "agency.cost_revenue.view": flag("can_see_revenue"),

    # ── Engineering ──────────────────────────────────────────────────────
    "engineering.assessments.view": roles(OWNER, DIRECTOR, MANAGER, MARKETING, ENGINEER),
    "engineering.assessments.create": roles(OWNER, DIRECTOR, ENGINEER),
    "engineering.assessments.complete": roles(OWNER, DIRECTOR, ENGINEER),
    "engineering.assessments.waive": EXECUTIVES,
    "engineering.surveys.view": roles(OWNER, DIRECTOR, MANAGER, MARKETING, OPS, ENGINEER),
    "engineering.surveys.manage": roles(OWNER, DIRECTOR, ENGINEER),
    "engineering.jmp.view": roles(OWNER, DIRECTOR, MANAGER, OPS, ENGINEER, HSE),
    "engineering.jmp.manage": roles(OWNER, DIRECTOR, OPS, ENGINEER),
    "engineering.drawings.manage": roles(OWNER, DIRECTOR, ENGINEER),

    # ── Handover documents (Berita Acara) ────────────────────────────────
    "ba.view": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, OPS),
    "ba.create": roles(OWNER, DIRECTOR, ADMINISTRATION, OPS),
    "ba.edit": roles(OWNER, DIRECTOR, ADMINISTRATION, OPS),
    "ba.approve": roles(OWNER, DIRECTOR, MANAGER),

    # ── Reports ──────────────────────────────────────────────────────────
    "reports.view": roles(
        OWNER, DIRECTOR, MANAGER, ADMINISTRATION, FINANCE, MARKETING, OPS, HR, HSE,
    ),
    "reports.financial": all_of(
        roles(OWNER, DIRECTOR, MANAGER, FINANCE), flag("can_see_profit"),
    ),
    "reports.ar": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, FINANCE),
    "reports.sales": roles(OWNER, DIRECTOR, MANAGER, MARKETING),
    "reports.operational": roles(OWNER, DIRECTOR, MANAGER, OPS),
    "reports.hr": roles(OWNER, DIRECTOR, MANAGER, HR),
    "reports.hse": roles(OWNER, DIRECTOR, MANAGER, HSE),
    "reports.export": roles(OWNER, DIRECTOR, MANAGER, FINANCE),

    # ── Finance ──────────────────────────────────────────────────────────
    "finance.ar_aging.view": roles(OWNER, DIRECTOR, MANAGER, ADMINISTRATION, FINANCE),
    "finance.cash_flow.view": roles(OWNER, DIRECTOR, FINANCE),
    "finance.budget.view": roles(OWNER, DIRECTOR, MANAGER, FINANCE),
    "finance.budget.manage": roles(OWNER, DIRECTOR, FINANCE),
    "finance.accounting_sync": roles(OWNER, DIRECTOR, FINANCE, SYSADMIN),

    # ── CRM ──────────────────────────────────────────────────────────────
    "crm.leads.view": roles(OWNER, DIRECTOR, MANAGER, MARKETING),
    "crm.leads.manage": roles(OWNER, DIRECTOR, MARKETING),
    "crm.pipeline.view": roles(OWNER, DIRECTOR, MANAGER, MARKETING),
    "crm.campaigns.manage": roles(OWNER, DIRECTOR, MARKETING),

    # ── User administration ──────────────────────────────────────────────
    "users.view": any_of(flag("can_manage_users"), USER_ADMINS),
    "users.manage": flag("can_manage_users"),
    "users.approve_requests": flag("can_manage_users"),
    "users.manage_permissions": all_of(flag("can_manage_users"), USER_ADMINS),

    # ── Settings ─────────────────────────────────────────────────────────
    "settings.view": USER_ADMINS,
    "settings.company": EXECUTIVES,
    "settings.integrations": roles(OWNER, SYSADMIN),
    "settings.scheduled_tasks": roles(OWNER, SYSADMIN),
    "settings.templates": roles(OWNER, DIRECTOR, SYSADMIN, ADMINISTRATION),
    "settings.notifications": ANYONE,

    # ── System ───────────────────────────────────────────────────────────
    "audit_logs.view": USER_ADMINS,
    "system_logs.view": roles(OWNER, SYSADMIN),
    "changelog.view": ANYONE,
    "changelog.manage": roles(OWNER, SYSADMIN),
    "feedback.submit": ANYONE,
    "feedback.manage": USER_ADMINS,
    "help_center.view": ANYONE,
    "help_center.manage": roles(OWNER, SYSADMIN),
    "notifications.view": ANYONE,
    "ai.query": EXECUTIVES,
    "ai.insights.view": roles(OWNER, DIRECTOR, MANAGER),
    "co_builder.submit": ANYONE,
    "co_builder.review": EXECUTIVES,
    "preview.use": roles(OWNER),
    "data.export": USER_ADMINS,
    "data.import": roles(OWNER, SYSADMIN),
})

FEATURE_KEYS: tuple[str, ...] = tuple(sorted(FEATURE_RULES))
