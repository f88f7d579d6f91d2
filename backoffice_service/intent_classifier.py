"""
Intent classifier: maps a lower-cased free-text query onto one intent.

Classification is plain keyword membership, evaluated as an ordered rule
table.  The first category whose trigger keywords are present wins, and
inside a category the first sub-rule that matches wins; a category with no
matching sub-rule falls back to its default intent.  Queries that hit no
category are ``unrecognized``.

Category priority:

    project  >  investment  >  expense  >  user  >  summary
"""

import re
from typing import Callable, List, Tuple

# ---------------------- INTENTS ----------------------

PROJECT_BY_SOURCE = "project_by_source"
PROJECT_ACTIVE = "project_active"
PROJECT_COMPLETED = "project_completed"
PROJECT_RECENT = "project_recent"

INVESTMENT_THRESHOLD = "investment_threshold"
INVESTMENT_ACTIVE = "investment_active"
INVESTMENT_RECENT = "investment_recent"

EXPENSE_RENT_MONTH = "expense_rent_month"
EXPENSE_RENT_RECENT = "expense_rent_recent"
EXPENSE_UTILITY = "expense_utility"
EXPENSE_RECENT = "expense_recent"

USER_LISTING = "user_listing"
SUMMARY = "summary"
UNRECOGNIZED = "unrecognized"

# Envelope ``type`` per intent family
TYPE_PROJECTS = "projects"
TYPE_INVESTMENTS = "investments"
TYPE_EXPENSES = "expenses"
TYPE_USERS = "users"
TYPE_SUMMARY = "summary"
TYPE_GENERAL = "general"

MONTH_RE = re.compile(
    r"(january|february|march|april|may|june|july|august"
    r"|september|october|november|december)",
    re.IGNORECASE,
)

Predicate = Callable[[str], bool]


def _has_any(*keywords: str) -> Predicate:
    def predicate(query: str) -> bool:
        return any(keyword in query for keyword in keywords)
    return predicate


def _has_month(query: str) -> bool:
    return MONTH_RE.search(query) is not None


def _rent_with_month(query: str) -> bool:
    return "rent" in query and _has_month(query)


# ---------------------- RULE TABLES ----------------------

PROJECT_RULES: List[Tuple[Predicate, str]] = [
    (_has_any("from", "by", "brought"), PROJECT_BY_SOURCE),
    (_has_any("active", "ongoing"), PROJECT_ACTIVE),
    (_has_any("completed"), PROJECT_COMPLETED),
]

INVESTMENT_RULES: List[Tuple[Predicate, str]] = [
    (_has_any("above", "greater", ">"), INVESTMENT_THRESHOLD),
    (_has_any("active"), INVESTMENT_ACTIVE),
]

EXPENSE_RULES: List[Tuple[Predicate, str]] = [
    (_rent_with_month, EXPENSE_RENT_MONTH),
    (_has_any("rent"), EXPENSE_RENT_RECENT),
    (_has_any("utility", "utilities"), EXPENSE_UTILITY),
]

# (category trigger, sub-rules, default intent)
CATEGORY_RULES: List[Tuple[Predicate, List[Tuple[Predicate, str]], str]] = [
    (_has_any("project", "projects"), PROJECT_RULES, PROJECT_RECENT),
    (_has_any("investment", "investments"), INVESTMENT_RULES, INVESTMENT_RECENT),
    (_has_any("expense", "rent", "paid"), EXPENSE_RULES, EXPENSE_RECENT),
    (_has_any("user", "member", "employee"), [], USER_LISTING),
    (_has_any("summary", "overview", "dashboard"), [], SUMMARY),
]

_INTENT_TYPES = {
    PROJECT_BY_SOURCE: TYPE_PROJECTS,
    PROJECT_ACTIVE: TYPE_PROJECTS,
    PROJECT_COMPLETED: TYPE_PROJECTS,
    PROJECT_RECENT: TYPE_PROJECTS,
    INVESTMENT_THRESHOLD: TYPE_INVESTMENTS,
    INVESTMENT_ACTIVE: TYPE_INVESTMENTS,
    INVESTMENT_RECENT: TYPE_INVESTMENTS,
    EXPENSE_RENT_MONTH: TYPE_EXPENSES,
    EXPENSE_RENT_RECENT: TYPE_EXPENSES,
    EXPENSE_UTILITY: TYPE_EXPENSES,
    EXPENSE_RECENT: TYPE_EXPENSES,
    USER_LISTING: TYPE_USERS,
    SUMMARY: TYPE_SUMMARY,
    UNRECOGNIZED: TYPE_GENERAL,
}


# ---------------------- PUBLIC API ----------------------

def classify(query: str) -> str:
    """Return the intent for an already lower-cased query. Never fails."""
    for category, sub_rules, default in CATEGORY_RULES:
        if not category(query):
            continue
        for predicate, intent in sub_rules:
            if predicate(query):
                return intent
        return default
    return UNRECOGNIZED


def intent_type(intent: str) -> str:
    """Envelope ``type`` for an intent (``general`` when unknown)."""
    return _INTENT_TYPES.get(intent, TYPE_GENERAL)
