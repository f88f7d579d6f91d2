"""
Tests for dashboard aggregates
"""
from conftest import TODAY, YEAR
from dashboard import dashboard_charts, dashboard_overview, dashboard_stats, monthly_comparison


def test_stats_summary(store):
    summary = dashboard_stats(store)["summary"]
    assert summary == {
        "totalUsers": 3,
        "totalProjects": 4,
        "activeProjects": 2,
        "totalInvestments": 550000.0,
        "totalExpenses": 176000.5,
        "netBalance": 550000.0 - 176000.5,
    }


def test_stats_recent_activity(store):
    recent = dashboard_stats(store)["recentActivities"]
    assert [p["name"] for p in recent["projects"]] == [
        "Clinic app", "Road survey", "Company website", "ERP rollout",
    ]
    assert recent["projects"][0]["createdBy"] == {
        "id": "u2", "name": "Bilal Ahmed", "email": "bilal@example.com",
    }
    assert [i["amount"] for i in recent["investments"]] == [50000.0, 100000.0, 150000.0, 250000.0]
    assert len(recent["expenses"]) == 5
    assert recent["expenses"][0] == {
        "name": "Payroll", "amount": 90000.0, "category": "Salary",
        "createdBy": {"id": "u2", "name": "Bilal Ahmed", "email": "bilal@example.com"},
    }


def test_monthly_comparison_covers_trailing_six_months(store):
    assert monthly_comparison(store, TODAY) == [
        {"month": "Jun", "year": YEAR, "investments": 150000.0, "expenses": 3000.5},
        {"month": "Jul", "year": YEAR, "investments": 100000.0, "expenses": 45000.0},
        {"month": "Aug", "year": YEAR, "investments": 50000.0, "expenses": 20000.0},
        {"month": "Sep", "year": YEAR, "investments": 0.0, "expenses": 90000.0},
    ]


def test_charts(store):
    charts = dashboard_charts(store, TODAY)
    assert charts["projectByStatus"] == [
        {"_id": "Completed", "count": 1},
        {"_id": "Ongoing", "count": 2},
        {"_id": "Pending", "count": 1},
    ]
    assert charts["investmentsByStatus"] == [
        {"status": "Active", "total": 200000.0},
        {"status": "Completed", "total": 100000.0},
        {"status": "Pending", "total": 250000.0},
    ]
    assert charts["expenseByCategory"] == [
        {"_id": "Rent", "total": 83000.0},
        {"_id": "Salary", "total": 90000.0},
        {"_id": "Utility", "total": 3000.5},
    ]
    assert len(charts["monthlyComparison"]) == 4


def test_empty_dashboard(empty_store):
    stats = dashboard_stats(empty_store)
    assert stats["summary"]["netBalance"] == 0
    assert stats["recentActivities"] == {"projects": [], "investments": [], "expenses": []}
    assert dashboard_charts(empty_store, TODAY)["monthlyComparison"] == []


def test_overview_combines_stats_and_charts(store):
    overview = dashboard_overview(store, TODAY)
    assert overview["summary"] == dashboard_stats(store)["summary"]
    assert overview["charts"] == dashboard_charts(store, TODAY)
