"""
Query dispatcher: turns (intent, params) into one data-port request and a
human-readable message.

List intents go through ``build_request`` so the filter/sort/limit chosen
for an intent can be inspected without a store; ``dispatch`` runs the
request and words the result.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from data_port import (
    EXPENSES,
    INVESTMENTS,
    PROJECTS,
    USERS,
    DataAccessPort,
    contains,
    date_range,
    eq,
    gte,
    sort_desc,
)
from intent_classifier import (
    EXPENSE_RECENT,
    EXPENSE_RENT_MONTH,
    EXPENSE_RENT_RECENT,
    EXPENSE_UTILITY,
    INVESTMENT_ACTIVE,
    INVESTMENT_RECENT,
    INVESTMENT_THRESHOLD,
    PROJECT_ACTIVE,
    PROJECT_BY_SOURCE,
    PROJECT_COMPLETED,
    PROJECT_RECENT,
    SUMMARY,
    TYPE_GENERAL,
    TYPE_SUMMARY,
    UNRECOGNIZED,
    USER_LISTING,
    intent_type,
)
from logger import logger
from models import ExpenseCategory, InvestmentStatus, ProjectStatus

RECENT_LIMIT = 10
USER_LIMIT = 20

HELP_TEXT = (
    "I can help you with:\n"
    '- Projects (e.g., "Show projects from Nadeem & sons")\n'
    '- Investments (e.g., "List active investments above 100000")\n'
    '- Expenses (e.g., "How much rent in July?")\n'
    '- Users (e.g., "Show all members")\n'
    '- Summary (e.g., "Give me an overview")'
)

_EXTRACTION_FAILED_MESSAGES = {
    PROJECT_BY_SOURCE: "Could not find a project source in your query",
    INVESTMENT_THRESHOLD: "Could not find an amount in your query",
    EXPENSE_RENT_MONTH: "Could not find a month in your query",
}


# ---------------------- HELPERS ----------------------

def format_currency(amount: Decimal) -> str:
    """``$`` with thousands separators and at most two decimals.

    Trailing fractional zeros are dropped: 45000 → ``$45,000``,
    1234.5 → ``$1,234.5``.
    """
    text = f"{Decimal(amount).quantize(Decimal('0.01')):,.2f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"${text}"


def month_range(month: int, today: Optional[date] = None):
    """``[first of month, first of next month)`` in the current year."""
    year = (today or date.today()).year
    start = datetime(year, month, 1)
    if month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


def _request(
    collection: str,
    conditions: Optional[List[Dict[str, Any]]] = None,
    sort: Optional[Dict[str, str]] = None,
    limit: Optional[int] = None,
    exclude: Optional[List[str]] = None,
) -> Dict[str, Any]:
    return {
        "collection": collection,
        "conditions": conditions or [],
        "sort": sort,
        "limit": limit,
        "exclude": exclude,
    }


# ---------------------- REQUEST BUILDING ----------------------

def build_request(
    intent: str,
    params: Dict[str, Any],
    today: Optional[date] = None,
) -> Optional[Dict[str, Any]]:
    """Data-port request for a list intent, ``None`` for the others."""
    if intent == PROJECT_BY_SOURCE:
        return _request(PROJECTS, [contains("source", params["source"])])
    if intent == PROJECT_ACTIVE:
        return _request(PROJECTS, [eq("status", ProjectStatus.ONGOING.value)])
    if intent == PROJECT_COMPLETED:
        return _request(PROJECTS, [eq("status", ProjectStatus.COMPLETED.value)])
    if intent == PROJECT_RECENT:
        return _request(PROJECTS, sort=sort_desc("createdAt"), limit=RECENT_LIMIT)

    if intent == INVESTMENT_THRESHOLD:
        return _request(INVESTMENTS, [gte("amount", params["threshold"])])
    if intent == INVESTMENT_ACTIVE:
        return _request(INVESTMENTS, [eq("status", InvestmentStatus.ACTIVE.value)])
    if intent == INVESTMENT_RECENT:
        return _request(INVESTMENTS, sort=sort_desc("date"), limit=RECENT_LIMIT)

    if intent == EXPENSE_RENT_MONTH:
        start, end = month_range(params["month"], today)
        return _request(
            EXPENSES,
            [eq("category", ExpenseCategory.RENT.value)] + date_range("date", start, end),
        )
    if intent == EXPENSE_RENT_RECENT:
        return _request(
            EXPENSES,
            [eq("category", ExpenseCategory.RENT.value)],
            sort=sort_desc("date"),
            limit=RECENT_LIMIT,
        )
    if intent == EXPENSE_UTILITY:
        return _request(
            EXPENSES,
            [eq("category", ExpenseCategory.UTILITY.value)],
            sort=sort_desc("date"),
            limit=RECENT_LIMIT,
        )
    if intent == EXPENSE_RECENT:
        return _request(EXPENSES, sort=sort_desc("date"), limit=RECENT_LIMIT)

    if intent == USER_LISTING:
        return _request(USERS, limit=USER_LIMIT, exclude=["password"])

    return None


def _message(intent: str, params: Dict[str, Any], records: List[Any]) -> str:
    n = len(records)
    if intent == PROJECT_BY_SOURCE:
        return f'Found {n} project(s) from "{params["source"]}"'
    if intent == PROJECT_ACTIVE:
        return f"Found {n} active project(s)"
    if intent == PROJECT_COMPLETED:
        return f"Found {n} completed project(s)"
    if intent == PROJECT_RECENT:
        return "Showing recent projects"
    if intent == INVESTMENT_THRESHOLD:
        return f"Found {n} investment(s) above {params['threshold']}"
    if intent == INVESTMENT_ACTIVE:
        return f"Found {n} active investment(s)"
    if intent == INVESTMENT_RECENT:
        return "Showing recent investments"
    if intent == EXPENSE_RENT_MONTH:
        total = sum((record.amount for record in records), Decimal(0))
        return f"Total rent in {params['month_name'].lower()}: {format_currency(total)}"
    if intent == EXPENSE_RENT_RECENT:
        return "Showing rent expenses"
    if intent == EXPENSE_UTILITY:
        return "Showing utility expenses"
    if intent == EXPENSE_RECENT:
        return "Showing recent expenses"
    if intent == USER_LISTING:
        return f"Found {n} user(s)"
    return ""


# ---------------------- SUMMARY ----------------------

def company_summary(port: DataAccessPort) -> Dict[str, Any]:
    """Totals, counts and net balance across all collections."""
    total_investments = float(port.sum(INVESTMENTS, "amount"))
    total_expenses = float(port.sum(EXPENSES, "amount"))
    return {
        "totalInvestments": total_investments,
        "totalExpenses": total_expenses,
        "projectCount": port.count(PROJECTS),
        "activeProjects": port.count(PROJECTS, [eq("status", ProjectStatus.ONGOING.value)]),
        "userCount": port.count(USERS),
        "netBalance": total_investments - total_expenses,
    }


# ---------------------- DISPATCH ----------------------

def dispatch(
    intent: str,
    params: Optional[Dict[str, Any]],
    port: DataAccessPort,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Run the query for ``intent`` and return ``{data, type, message}``.

    ``params`` of ``None`` means extraction failed: no query is issued and
    ``data`` stays ``None``.
    """
    if intent == UNRECOGNIZED:
        return {"data": None, "type": TYPE_GENERAL, "message": HELP_TEXT}

    if params is None:
        logger.info("[DISPATCH] %s: parameter extraction failed", intent)
        return {
            "data": None,
            "type": intent_type(intent),
            "message": _EXTRACTION_FAILED_MESSAGES.get(
                intent, "Could not understand the query"
            ),
        }

    if intent == SUMMARY:
        data = company_summary(port)
        logger.info("[DISPATCH] summary: %s", data)
        return {"data": data, "type": TYPE_SUMMARY, "message": "Company overview summary"}

    request = build_request(intent, params, today)
    if request is None:
        raise ValueError(f"Unknown intent: {intent}")

    records = port.find_many(
        request["collection"],
        conditions=request["conditions"],
        sort=request["sort"],
        limit=request["limit"],
        exclude=request["exclude"],
    )
    logger.info(
        "[DISPATCH] %s on %s: conditions=%s sort=%s limit=%s → %d record(s)",
        intent, request["collection"], request["conditions"],
        request["sort"], request["limit"], len(records),
    )

    return {
        "data": records,
        "type": intent_type(intent),
        "message": _message(intent, params, records),
    }
