"""
Pytest fixtures for the back-office assistant test suite.

Provides:
- ``InMemoryDataPort``: a dict-backed data access port with the same
  filter / sort / limit / creator-join semantics as the MongoDB port
- ``store``: a port seeded with a small company dataset
- ``empty_store``: a port with no records at all
- ``TODAY``: the fixed "current date" the dataset is built around
"""

import time
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import pytest

from data_port import (
    CREATOR_JOINED,
    EXPENSES,
    INVESTMENTS,
    MODELS,
    PROJECTS,
    USERS,
    DataAccessPort,
)
from enrichment import TextEnricher

TODAY = date(2025, 10, 1)
YEAR = TODAY.year


def _matches(doc: Dict[str, Any], condition: Dict[str, Any]) -> bool:
    value = doc.get(condition["field"])
    target = condition["value"]
    operator = condition["operator"]
    if value is None:
        return False
    if operator == "contains":
        return str(target).lower() in str(value).lower()
    if operator == "eq":
        return value == target
    if operator == "gte":
        return value >= target
    if operator == "lt":
        return value < target
    raise ValueError(f"Unsupported operator: {operator}")


class InMemoryDataPort(DataAccessPort):
    def __init__(self, data: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.data = {name: [] for name in MODELS}
        for name, docs in (data or {}).items():
            self.data[name] = [dict(doc) for doc in docs]
        self.calls: List[tuple] = []

    def _select(self, collection, conditions):
        return [
            doc for doc in self.data[collection]
            if all(_matches(doc, c) for c in (conditions or []))
        ]

    def _creator(self, user_id):
        for user in self.data[USERS]:
            if user["id"] == user_id:
                return {"id": user["id"], "name": user["name"], "email": user["email"]}
        return None

    def find_many(self, collection, conditions=None, sort=None, limit=None, exclude=None):
        self.calls.append(("find_many", collection, conditions, sort, limit, exclude))
        docs = self._select(collection, conditions)
        if sort:
            docs = sorted(
                docs,
                key=lambda d: d.get(sort["field"]),
                reverse=sort.get("direction") == "desc",
            )
        if limit:
            docs = docs[:limit]

        records = []
        for doc in docs:
            doc = {k: v for k, v in doc.items() if k not in (exclude or [])}
            if collection == USERS:
                doc.pop("password", None)
            if collection in CREATOR_JOINED:
                doc["creator"] = self._creator(doc.get("createdBy"))
            records.append(MODELS[collection].model_validate(doc))
        return records

    def count(self, collection, conditions=None):
        self.calls.append(("count", collection, conditions))
        return len(self._select(collection, conditions))

    def sum(self, collection, field, conditions=None):
        self.calls.append(("sum", collection, field, conditions))
        return sum((Decimal(d[field]) for d in self._select(collection, conditions)), Decimal(0))

    def count_by(self, collection, group_field, conditions=None):
        counts: Dict[str, int] = {}
        for doc in self._select(collection, conditions):
            key = str(doc.get(group_field))
            counts[key] = counts.get(key, 0) + 1
        return dict(sorted(counts.items()))

    def sum_by(self, collection, field, group_field, conditions=None):
        totals: Dict[str, Decimal] = {}
        for doc in self._select(collection, conditions):
            key = str(doc.get(group_field))
            totals[key] = totals.get(key, Decimal(0)) + Decimal(doc[field])
        return dict(sorted(totals.items()))


class FailingDataPort(InMemoryDataPort):
    """Port whose store is unreachable."""

    def find_many(self, *args, **kwargs):
        raise ConnectionError("store unreachable")

    def count(self, *args, **kwargs):
        raise ConnectionError("store unreachable")

    def sum(self, *args, **kwargs):
        raise ConnectionError("store unreachable")


def company_data() -> Dict[str, List[Dict[str, Any]]]:
    return {
        USERS: [
            {"id": "u1", "name": "Ayesha Khan", "email": "ayesha@example.com",
             "role": "admin", "password": "$2b$10$hashed", "department": "Finance"},
            {"id": "u2", "name": "Bilal Ahmed", "email": "bilal@example.com",
             "role": "manager", "password": "$2b$10$hashed"},
            {"id": "u3", "name": "Sara Malik", "email": "sara@example.com",
             "role": "employee", "password": "$2b$10$hashed", "isActive": False},
        ],
        PROJECTS: [
            {"id": "p1", "name": "ERP rollout", "source": "Nadeem & Sons",
             "type": "Client", "budget": Decimal("500000"), "startDate": datetime(YEAR, 1, 5),
             "status": "Ongoing", "progress": 40, "assignedMembers": ["u2", "u3"],
             "createdBy": "u1", "createdAt": datetime(YEAR, 1, 5)},
            {"id": "p2", "name": "Company website", "source": "Acme Corp",
             "type": "Internal", "budget": Decimal("80000"), "startDate": datetime(YEAR, 2, 1),
             "status": "Completed", "progress": 100, "createdBy": "u2",
             "createdAt": datetime(YEAR, 2, 1)},
            {"id": "p3", "name": "Road survey", "source": "nadeem & sons ltd",
             "type": "Government", "budget": Decimal("1200000"), "startDate": datetime(YEAR, 3, 10),
             "status": "Pending", "progress": 0, "createdBy": "u1",
             "createdAt": datetime(YEAR, 3, 10)},
            {"id": "p4", "name": "Clinic app", "source": "City Health",
             "type": "Client", "budget": Decimal("250000"), "startDate": datetime(YEAR, 5, 20),
             "status": "Ongoing", "progress": 65, "createdBy": "u2",
             "createdAt": datetime(YEAR, 5, 20)},
        ],
        INVESTMENTS: [
            {"id": "i1", "investmentId": "INV-001", "source": "Nadeem & Sons",
             "amount": Decimal("150000"), "date": datetime(YEAR, 6, 1),
             "status": "Active", "createdBy": "u1"},
            {"id": "i2", "investmentId": "INV-002", "source": "Angel round",
             "amount": Decimal("100000"), "date": datetime(YEAR, 7, 15),
             "status": "Completed", "createdBy": "u1"},
            {"id": "i3", "investmentId": "INV-003", "source": "Family office",
             "amount": Decimal("50000"), "date": datetime(YEAR, 8, 3),
             "status": "Active", "createdBy": "u2"},
            {"id": "i4", "investmentId": "INV-004", "source": "Bank loan",
             "amount": Decimal("250000"), "date": datetime(YEAR - 1, 12, 20),
             "status": "Pending", "createdBy": "u2"},
        ],
        EXPENSES: [
            {"id": "e1", "name": "Office rent", "amount": Decimal("20000"),
             "category": "Rent", "date": datetime(YEAR, 7, 1), "createdBy": "u1"},
            {"id": "e2", "name": "Warehouse rent", "amount": Decimal("25000"),
             "category": "Rent", "date": datetime(YEAR, 7, 31, 18, 0), "createdBy": "u1"},
            {"id": "e3", "name": "Office rent", "amount": Decimal("20000"),
             "category": "Rent", "date": datetime(YEAR, 8, 1), "createdBy": "u1"},
            {"id": "e4", "name": "Office rent", "amount": Decimal("18000"),
             "category": "Rent", "date": datetime(YEAR - 1, 7, 1), "createdBy": "u1"},
            {"id": "e5", "name": "Electricity", "amount": Decimal("3000.50"),
             "category": "Utility", "date": datetime(YEAR, 6, 12), "createdBy": "u2"},
            {"id": "e6", "name": "Payroll", "amount": Decimal("90000"),
             "category": "Salary", "date": datetime(YEAR, 9, 30), "createdBy": "u2"},
        ],
    }


@pytest.fixture
def store():
    return InMemoryDataPort(company_data())


@pytest.fixture
def empty_store():
    return InMemoryDataPort()


@pytest.fixture
def failing_store():
    return FailingDataPort()


class StubEnricher(TextEnricher):
    """Enrichment provider with a canned reply, delay or error."""

    name = "stub"

    def __init__(self, reply="Here is what I found.", delay=0.0, error=None):
        self.reply = reply
        self.delay = delay
        self.error = error
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        return self.reply
