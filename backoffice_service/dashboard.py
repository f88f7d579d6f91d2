"""
Dashboard aggregates: headline numbers, recent activity and chart series.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from data_port import EXPENSES, INVESTMENTS, PROJECTS, DataAccessPort, gte, sort_desc
from query_dispatcher import company_summary
from response_formatter import clean_documents

RECENT_ACTIVITY_LIMIT = 5
TREND_MONTHS = 6

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def dashboard_stats(port: DataAccessPort) -> Dict[str, Any]:
    summary = company_summary(port)

    projects = port.find_many(
        PROJECTS, sort=sort_desc("createdAt"), limit=RECENT_ACTIVITY_LIMIT,
    )
    investments = port.find_many(
        INVESTMENTS, sort=sort_desc("date"), limit=RECENT_ACTIVITY_LIMIT,
    )
    expenses = port.find_many(
        EXPENSES, sort=sort_desc("date"), limit=RECENT_ACTIVITY_LIMIT,
    )

    return {
        "summary": {
            "totalUsers": summary["userCount"],
            "totalProjects": summary["projectCount"],
            "activeProjects": summary["activeProjects"],
            "totalInvestments": summary["totalInvestments"],
            "totalExpenses": summary["totalExpenses"],
            "netBalance": summary["netBalance"],
        },
        "recentActivities": {
            "projects": clean_documents([
                {"name": p.name, "createdBy": p.creator} for p in projects
            ]),
            "investments": clean_documents([
                {"source": i.source, "amount": i.amount, "createdBy": i.creator}
                for i in investments
            ]),
            "expenses": clean_documents([
                {"name": e.name, "amount": e.amount, "category": e.category,
                 "createdBy": e.creator}
                for e in expenses
            ]),
        },
    }


def _monthly_totals(records: List[Any]) -> Dict[Tuple[int, int], Decimal]:
    totals: Dict[Tuple[int, int], Decimal] = {}
    for record in records:
        key = (record.date.year, record.date.month)
        totals[key] = totals.get(key, Decimal(0)) + record.amount
    return totals


def monthly_comparison(port: DataAccessPort, today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Investment vs expense totals per month over the trailing six months."""
    today = today or date.today()
    since = datetime(today.year, today.month, today.day) - relativedelta(months=TREND_MONTHS)

    investments = _monthly_totals(port.find_many(INVESTMENTS, [gte("date", since)]))
    expenses = _monthly_totals(port.find_many(EXPENSES, [gte("date", since)]))

    rows = []
    for year, month in sorted(set(investments) | set(expenses)):
        rows.append({
            "month": MONTH_ABBR[month - 1],
            "year": year,
            "investments": float(investments.get((year, month), 0)),
            "expenses": float(expenses.get((year, month), 0)),
        })
    return rows


def dashboard_charts(port: DataAccessPort, today: Optional[date] = None) -> Dict[str, Any]:
    return {
        "projectByStatus": [
            {"_id": status, "count": count}
            for status, count in port.count_by(PROJECTS, "status").items()
        ],
        "investmentsByStatus": [
            {"status": status, "total": float(total)}
            for status, total in port.sum_by(INVESTMENTS, "amount", "status").items()
        ],
        "expenseByCategory": [
            {"_id": category, "total": float(total)}
            for category, total in port.sum_by(EXPENSES, "amount", "category").items()
        ],
        "monthlyComparison": monthly_comparison(port, today),
    }


def dashboard_overview(port: DataAccessPort, today: Optional[date] = None) -> Dict[str, Any]:
    """Stats, recent activity and charts in one payload."""
    return {**dashboard_stats(port), "charts": dashboard_charts(port, today)}
