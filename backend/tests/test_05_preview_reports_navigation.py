"""
Tests 501-540: Role preview, report catalog and sidebar navigation.
"""
from conftest import make_profile, with_flags
from erp_rbac.engine import can_access_feature
from erp_rbac.features import FEATURE_RULES
from erp_rbac.navigation import NAV_ITEMS, filter_nav_items, get_dashboard_path
from erp_rbac.permissions import DEFAULT_PERMISSIONS
from erp_rbac.preview import (
    PREVIEW_ROLES,
    can_use_preview_feature,
    get_effective_permissions,
    get_effective_role,
    preview_profile,
)
from erp_rbac.reports import (
    REPORT_CATEGORIES,
    REPORTS,
    can_access_category,
    can_access_report,
    can_open_report,
    get_reports_by_category,
    get_visible_reports,
)
from erp_rbac.roles import (
    ALL_ROLES,
    DIRECTOR,
    FINANCE,
    HR,
    MANAGER,
    MARKETING,
    OPS,
    OWNER,
    SYSADMIN,
)


class TestRolePreview:

    # =================================================================
    # Tests 501-510
    # =================================================================

    def test_501_only_owner_can_preview(self):
        for role in ALL_ROLES:
            assert can_use_preview_feature(role) is (role == OWNER), role
        assert can_use_preview_feature(None) is False

    def test_502_preview_roles_cover_catalog(self):
        assert set(PREVIEW_ROLES) == set(ALL_ROLES)

    def test_503_owner_effective_role(self):
        assert get_effective_role(OWNER, OPS) == OPS
        assert get_effective_role(OWNER, None) == OWNER

    def test_504_preview_ignored_for_non_owner(self):
        assert get_effective_role(DIRECTOR, OPS) == DIRECTOR
        assert get_effective_role(OPS, OWNER) == OPS

    def test_505_unknown_preview_role_ignored(self):
        assert get_effective_role(OWNER, "intern") == OWNER

    def test_506_effective_permissions(self):
        owner_bundle = DEFAULT_PERMISSIONS[OWNER]
        assert get_effective_permissions(OWNER, owner_bundle, FINANCE) == DEFAULT_PERMISSIONS[FINANCE]
        assert get_effective_permissions(OWNER, owner_bundle, None) == owner_bundle
        ops_bundle = DEFAULT_PERMISSIONS[OPS]
        assert get_effective_permissions(OPS, ops_bundle, FINANCE) == ops_bundle

    def test_507_preview_profile_restricts_checks(self):
        """Previewing as ops hides what ops cannot see."""
        owner = make_profile(OWNER)
        preview = preview_profile(owner, OPS)
        assert preview.role == OPS
        assert can_access_feature(preview, "jo.fill_costs") is True
        assert can_access_feature(preview, "users.manage") is False
        assert can_access_feature(preview, "pjo.view_revenue") is False

    def test_508_preview_does_not_touch_the_stored_profile(self):
        owner = make_profile(OWNER)
        preview_profile(owner, SYSADMIN)
        assert owner.role == OWNER
        assert owner.permissions == DEFAULT_PERMISSIONS[OWNER]

    def test_509_no_preview_returns_same_profile(self):
        owner = make_profile(OWNER)
        assert preview_profile(owner, None) is owner
        ops = make_profile(OPS)
        assert preview_profile(ops, FINANCE) is ops

    def test_510_preview_as_manager_has_no_scope(self):
        preview = preview_profile(make_profile(OWNER), MANAGER)
        assert preview.role == MANAGER
        assert preview.department_scope == frozenset()
        assert can_access_feature(preview, "jo.fill_costs") is False


class TestReports:

    # =================================================================
    # Tests 521-535
    # =================================================================

    def test_521_report_ids_unique(self):
        ids = [r.id for r in REPORTS]
        assert len(ids) == len(set(ids))

    def test_522_categories_declared(self):
        for report in REPORTS:
            assert report.category in REPORT_CATEGORIES, report.id

    def test_523_executives_see_every_report(self):
        for role in (OWNER, DIRECTOR):
            assert get_visible_reports(role) == list(REPORTS)

    def test_524_ops_reports(self):
        visible = {r.id for r in get_visible_reports(OPS)}
        assert visible == {
            "budget-variance",
            "jo-summary",
            "on-time-delivery",
            "vendor-performance",
            "asset-utilization",
        }

    def test_525_sysadmin_sees_no_reports(self):
        assert get_visible_reports(SYSADMIN) == []
        assert get_reports_by_category(SYSADMIN) == {}

    def test_526_can_access_report(self):
        assert can_access_report(FINANCE, "profit-loss") is True
        assert can_access_report(MARKETING, "profit-loss") is False
        assert can_access_report(MARKETING, "sales-pipeline") is True

    def test_527_unknown_report_or_role(self):
        assert can_access_report(OWNER, "no-such-report") is False
        assert can_access_report("intern", "profit-loss") is False
        assert can_access_report(None, "profit-loss") is False

    def test_528_reports_by_category(self):
        grouped = get_reports_by_category(HR)
        assert set(grouped) == {"hr"}
        assert [r.id for r in grouped["hr"]] == ["headcount", "attendance-summary"]

    def test_529_owner_sees_every_category(self):
        assert set(get_reports_by_category(OWNER)) == set(REPORT_CATEGORIES)

    def test_530_category_access(self):
        assert can_access_category(OPS, "operational") is True
        assert can_access_category(MARKETING, "hr") is False
        assert can_access_category(OWNER, "no-such-category") is False

    def test_531_finance_sees_financial_and_ar_only(self):
        assert set(get_reports_by_category(FINANCE)) == {"financial", "ar"}
        assert can_access_category(FINANCE, "operational") is False
        assert can_access_category(FINANCE, "sales") is False

    def test_532_ops_sees_operational_only(self):
        assert set(get_reports_by_category(OPS)) == {"operational"}
        for category in ("financial", "ar", "sales"):
            assert can_access_category(OPS, category) is False, category

    def test_533_marketing_sees_sales_only(self):
        visible = {r.id for r in get_visible_reports(MARKETING)}
        assert {"quotation-conversion", "revenue-customer", "sales-pipeline"} <= visible
        assert set(get_reports_by_category(MARKETING)) == {"sales"}

    def test_534_non_string_role_sees_nothing(self):
        assert get_visible_reports(["owner"]) == []
        assert can_access_report(["owner"], "profit-loss") is False

    def test_535_listed_roles_pass_the_category_feature(self):
        """Every role on a report can open it with its default flags."""
        for report in REPORTS:
            for role in report.allowed_roles:
                assert can_open_report(make_profile(role), report.id) is True, (role, report.id)

    def test_536_open_report_honours_flag_overrides(self):
        """A manager without profit visibility cannot open financial reports."""
        manager = with_flags(MANAGER, can_see_profit=False)
        assert can_access_report(MANAGER, "profit-loss") is True
        assert can_open_report(manager, "profit-loss") is False
        assert can_open_report(manager, "ar-aging") is True

    def test_537_open_report_unknown_inputs(self):
        assert can_open_report(None, "profit-loss") is False
        assert can_open_report(make_profile(OWNER), "no-such-report") is False
        assert can_open_report(make_profile(OPS), "profit-loss") is False


class TestNavigation:

    # =================================================================
    # Tests 541-555
    # =================================================================

    def test_541_nav_keys_are_registered(self):
        for item in NAV_ITEMS:
            assert item.feature_key in FEATURE_RULES, item.title

    def test_542_owner_sees_full_menu(self):
        assert filter_nav_items(make_profile(OWNER)) == list(NAV_ITEMS)

    def test_543_null_profile_sees_nothing(self):
        assert filter_nav_items(None) == []

    def test_544_sysadmin_menu(self):
        titles = [item.title for item in filter_nav_items(make_profile(SYSADMIN))]
        assert titles == ["Dashboard", "HSE", "Customs", "Settings"]

    def test_545_ops_menu(self):
        titles = {item.title for item in filter_nav_items(make_profile(OPS))}
        assert {"Cost Entry", "Job Orders", "Assets", "Maintenance"} <= titles
        assert "Invoices" not in titles
        assert "Settings" not in titles

    def test_546_menu_keeps_declared_order(self):
        items = filter_nav_items(make_profile(FINANCE))
        positions = [NAV_ITEMS.index(item) for item in items]
        assert positions == sorted(positions)

    def test_547_scoped_manager_menu_includes_inherited(self, ops_manager):
        titles = {item.title for item in filter_nav_items(ops_manager)}
        assert "Cost Entry" in titles
        unscoped = {item.title for item in filter_nav_items(make_profile(MANAGER))}
        assert "Cost Entry" not in unscoped

    def test_548_substitute_engine(self, actor_flags_engine, ops_manager):
        titles = {item.title for item in filter_nav_items(ops_manager, engine=actor_flags_engine)}
        assert "Cost Entry" not in titles

    def test_549_dashboard_paths(self):
        assert get_dashboard_path(OWNER) == "/dashboard"
        assert get_dashboard_path(DIRECTOR) == "/dashboard"
        assert get_dashboard_path(OPS) == "/dashboard/operations"
        assert get_dashboard_path(FINANCE) == "/dashboard/admin_finance"
        assert get_dashboard_path(HR) == "/dashboard/hr"

    def test_550_dashboard_path_unknown(self):
        assert get_dashboard_path(None) == "/dashboard"
        assert get_dashboard_path("intern") == "/dashboard"
