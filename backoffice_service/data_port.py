"""
Data access port: the read-only capability the query interpreter and the
dashboard need from the store.

Requests are described with plain dicts, the same way on every backend:

    condition  {"field": "status", "operator": "eq", "value": "Ongoing"}
    sort       {"field": "date", "direction": "desc"}

Supported operators:
    contains – case-insensitive substring match (strings)
    eq       – exact match
    gte      – greater than or equal (numbers and dates)
    lt       – strictly less than (numbers and dates)

Field names are the stored (camelCase) document names.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from models import Expense, Investment, Project, Record, User

# ---------------------- COLLECTIONS ----------------------

PROJECTS = "projects"
INVESTMENTS = "investments"
EXPENSES = "expenses"
USERS = "users"

MODELS = {
    PROJECTS: Project,
    INVESTMENTS: Investment,
    EXPENSES: Expense,
    USERS: User,
}

# Collections whose records carry a ``createdBy`` reference to a user
CREATOR_JOINED = frozenset({PROJECTS, INVESTMENTS, EXPENSES})

ALLOWED_OPERATORS = frozenset({"contains", "eq", "gte", "lt"})


# ---------------------- REQUEST HELPERS ----------------------

def contains(field: str, value: str) -> Dict[str, Any]:
    return {"field": field, "operator": "contains", "value": value}


def eq(field: str, value: Any) -> Dict[str, Any]:
    return {"field": field, "operator": "eq", "value": value}


def gte(field: str, value: Any) -> Dict[str, Any]:
    return {"field": field, "operator": "gte", "value": value}


def lt(field: str, value: Any) -> Dict[str, Any]:
    return {"field": field, "operator": "lt", "value": value}


def date_range(field: str, start: datetime, end: datetime) -> List[Dict[str, Any]]:
    """Half-open ``[start, end)`` range as two conditions."""
    return [gte(field, start), lt(field, end)]


def sort_desc(field: str) -> Dict[str, str]:
    return {"field": field, "direction": "desc"}


# ---------------------- PORT ----------------------

class DataAccessPort(ABC):
    """Read-only access to projects, investments, expenses and users.

    ``find_many`` on a creator-joined collection returns records whose
    ``creator`` holds the referenced user's id, name and email.  User
    records never include the password.  Implementations raise on store
    failures; callers do not retry.
    """

    @abstractmethod
    def find_many(
        self,
        collection: str,
        conditions: Optional[List[Dict[str, Any]]] = None,
        sort: Optional[Dict[str, str]] = None,
        limit: Optional[int] = None,
        exclude: Optional[List[str]] = None,
    ) -> List[Record]:
        ...

    @abstractmethod
    def count(
        self,
        collection: str,
        conditions: Optional[List[Dict[str, Any]]] = None,
    ) -> int:
        ...

    @abstractmethod
    def sum(
        self,
        collection: str,
        field: str,
        conditions: Optional[List[Dict[str, Any]]] = None,
    ) -> Decimal:
        """Sum of ``field`` over matching records; ``Decimal(0)`` when none match."""

    @abstractmethod
    def count_by(
        self,
        collection: str,
        group_field: str,
        conditions: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, int]:
        ...

    @abstractmethod
    def sum_by(
        self,
        collection: str,
        field: str,
        group_field: str,
        conditions: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Decimal]:
        ...
