"""
Parameter extractor: pulls typed parameters out of the query text for the
intents that need them.

``extract`` returns a params dict, or ``None`` when an intent's required
parameter is missing.  ``None`` is not an error; the dispatcher answers it
with an empty result.
"""

import re
from typing import Any, Dict, Optional

from intent_classifier import (
    EXPENSE_RENT_MONTH,
    INVESTMENT_THRESHOLD,
    MONTH_RE,
    PROJECT_BY_SOURCE,
)

# "from X", "by X", "brought by X", where X is letters, spaces and "&", up to
# punctuation, a digit or the end of the text.
_SOURCE_RE = re.compile(
    r"\b(?:brought\s+by|from|by)\s+([A-Za-z&][A-Za-z\s&]*)",
    re.IGNORECASE,
)

# First run of digits, optionally comma-grouped
_AMOUNT_RE = re.compile(r"(\d+[\d,]*)")

MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}


def extract_source(query: str) -> Optional[str]:
    """Source name following ``from`` / ``by`` / ``brought by``, trimmed."""
    match = _SOURCE_RE.search(query)
    if not match:
        return None
    source = match.group(1).strip()
    return source or None


def extract_amount(query: str) -> Optional[int]:
    """First integer in the query, thousands commas removed."""
    match = _AMOUNT_RE.search(query)
    if not match:
        return None
    digits = match.group(1).replace(",", "")
    return int(digits) if digits else None


def extract_month(query: str) -> Optional[Dict[str, Any]]:
    """Month name as written in the query plus its calendar number (1-12)."""
    match = MONTH_RE.search(query)
    if not match:
        return None
    name = match.group(1)
    return {"month_name": name, "month": MONTHS[name.lower()]}


def extract(intent: str, query: str) -> Optional[Dict[str, Any]]:
    """Parameters for ``intent``; ``None`` when a required one is missing."""
    if intent == PROJECT_BY_SOURCE:
        source = extract_source(query)
        return {"source": source} if source else None

    if intent == INVESTMENT_THRESHOLD:
        threshold = extract_amount(query)
        return {"threshold": threshold} if threshold is not None else None

    if intent == EXPENSE_RENT_MONTH:
        return extract_month(query)

    return {}
