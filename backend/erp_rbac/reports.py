"""
Report catalog and role-based report visibility.

Each report declares the roles allowed to open it.  Owner and director are
on every report.  The role lists drive the catalog pages; opening a report
also goes through the ``reports.<category>`` feature, so flag overrides
(``can_see_profit`` for financial reports) and department inheritance apply
there.
"""
from __future__ import annotations

import dataclasses

from erp_rbac.engine import PolicyEngine, get_engine
from erp_rbac.models import UserProfile
from erp_rbac.roles import (
    ADMINISTRATION,
    DIRECTOR,
    FINANCE,
    HR,
    HSE,
    MANAGER,
    MARKETING,
    OPS,
    OWNER,
)

REPORT_CATEGORIES: tuple[str, ...] = ("financial", "ar", "sales", "operational", "hr", "hse")


@dataclasses.dataclass(frozen=True)
class ReportDefinition:
    id: str
    title: str
    category: str
    allowed_roles: frozenset[str]

    @property
    def feature_key(self) -> str:
        return f"reports.{self.category}"


def _report(report_id: str, title: str, category: str, *roles: str) -> ReportDefinition:
    return ReportDefinition(report_id, title, category, frozenset({OWNER, DIRECTOR, *roles}))


REPORTS: tuple[ReportDefinition, ...] = (
    # Financial
    _report("profit-loss", "Profit & Loss Statement", "financial", MANAGER, FINANCE),
    _report("revenue-project", "Revenue by Project", "financial", MANAGER, FINANCE),
    _report("cost-analysis", "Cost Analysis", "financial", MANAGER, FINANCE),
    # Accounts receivable
    _report("ar-aging", "AR Aging", "ar", MANAGER, ADMINISTRATION, FINANCE),
    _report("outstanding-invoices", "Outstanding Invoices", "ar", MANAGER, ADMINISTRATION, FINANCE),
    _report("customer-payment-history", "Customer Payment History", "ar", MANAGER, FINANCE),
    # Sales
    _report("quotation-conversion", "Quotation Conversion", "sales", MANAGER, MARKETING),
    _report("revenue-customer", "Revenue by Customer", "sales", MANAGER, MARKETING),
    _report("sales-pipeline", "Sales Pipeline", "sales", MANAGER, MARKETING),
    _report("customer-acquisition", "Customer Acquisition", "sales", MANAGER, MARKETING),
    # Operational
    _report("budget-variance", "Budget vs Actual", "operational", MANAGER, OPS),
    _report("jo-summary", "Job Order Summary", "operational", MANAGER, OPS),
    _report("on-time-delivery", "On-Time Delivery", "operational", MANAGER, OPS),
    _report("vendor-performance", "Vendor Performance", "operational", MANAGER, OPS),
    _report("asset-utilization", "Asset Utilization", "operational", MANAGER, OPS),
    # HR
    _report("headcount", "Headcount", "hr", HR),
    _report("attendance-summary", "Attendance Summary", "hr", MANAGER, HR),
    # HSE
    _report("incident-summary", "Incident Summary", "hse", MANAGER, HSE),
    _report("ppe-compliance", "PPE Compliance", "hse", HSE),
)

_REPORTS_BY_ID: dict[str, ReportDefinition] = {r.id: r for r in REPORTS}


def get_visible_reports(role: str | None) -> list[ReportDefinition]:
    if not isinstance(role, str):
        return []
    return [r for r in REPORTS if role in r.allowed_roles]


def can_access_report(role: str | None, report_id: str) -> bool:
    report = _REPORTS_BY_ID.get(report_id)
    return report is not None and isinstance(role, str) and role in report.allowed_roles


def get_reports_by_category(role: str | None) -> dict[str, list[ReportDefinition]]:
    """Visible reports grouped by category; categories with none are omitted."""
    grouped: dict[str, list[ReportDefinition]] = {}
    for report in get_visible_reports(role):
        grouped.setdefault(report.category, []).append(report)
    return grouped


def can_access_category(role: str | None, category: str) -> bool:
    return any(r.category == category for r in get_visible_reports(role))


def can_open_report(
    profile: UserProfile | None,
    report_id: str,
    engine: PolicyEngine | None = None,
) -> bool:
    """Return True if *profile* may open the report.

    The profile's role must be on the report and the profile must pass the
    report's category feature.
    """
    if profile is None or not can_access_report(profile.role, report_id):
        return False
    engine = engine or get_engine()
    return engine.can_access_feature(profile, _REPORTS_BY_ID[report_id].feature_key)
