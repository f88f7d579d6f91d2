"""
Port-request to MongoDB compiler.

Turns the condition/sort dicts described in ``data_port`` into filter
documents and aggregation pipelines:

  - ``contains``  → case-insensitive un-anchored ``$regex`` on the escaped literal
  - ``eq``        → plain equality
  - ``gte``/``lt``→ ``$gte``/``$lt``; several bounds on one field are merged
                    into a single range document

List pipelines optionally join the creating user through ``$lookup``.
"""

import re
from typing import Any, Dict, List, Optional

_RANGE_OPERATORS = {
    "gte": "$gte",
    "lt": "$lt",
}

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def _bson_value(value: Any) -> Any:
    """Integers past int64 are sent as doubles; BSON cannot encode them."""
    if isinstance(value, int) and not isinstance(value, bool):
        if _INT64_MIN <= value <= _INT64_MAX:
            return value
        try:
            return float(value)
        except OverflowError:
            return float("inf") if value > 0 else float("-inf")
    return value


def _case_insensitive_contains(value: Any) -> Any:
    """For string values, return a case-insensitive partial match."""
    if isinstance(value, str):
        return {"$regex": re.escape(value), "$options": "i"}
    return value


def build_match_stage(conditions: Optional[List[Dict[str, Any]]]) -> Dict[str, Any]:
    """Build a MongoDB filter document from port conditions."""
    if not conditions:
        return {}

    mongo_filter: Dict[str, Any] = {}
    and_conditions: List[Dict[str, Any]] = []

    for condition in conditions:
        field = condition["field"]
        operator = condition["operator"]
        value = _bson_value(condition["value"])

        if operator in _RANGE_OPERATORS:
            bounds = mongo_filter.setdefault(field, {})
            if not isinstance(bounds, dict) or "$regex" in bounds:
                # field already constrained by equality / regex
                and_conditions.append({field: {_RANGE_OPERATORS[operator]: value}})
            else:
                bounds[_RANGE_OPERATORS[operator]] = value
        elif operator == "contains":
            clause = _case_insensitive_contains(value)
            if field in mongo_filter:
                and_conditions.append({field: clause})
            else:
                mongo_filter[field] = clause
        elif operator == "eq":
            if field in mongo_filter:
                and_conditions.append({field: value})
            else:
                mongo_filter[field] = value
        else:
            raise ValueError(f"Unsupported operator: {operator}")

    if and_conditions:
        return {"$and": [mongo_filter] + and_conditions}
    return mongo_filter


def build_sort(sort: Optional[Dict[str, str]]) -> Optional[Dict[str, int]]:
    if not sort:
        return None
    direction = 1 if sort.get("direction") == "asc" else -1
    return {sort["field"]: direction}


def build_find_pipeline(
    conditions: Optional[List[Dict[str, Any]]] = None,
    sort: Optional[Dict[str, str]] = None,
    limit: Optional[int] = None,
    exclude: Optional[List[str]] = None,
    creator_collection: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Pipeline for a filtered, sorted, limited listing.

    When ``creator_collection`` is given, each document gains a ``creator``
    sub-document looked up from that collection via ``createdBy``.
    """
    pipeline: List[Dict[str, Any]] = []

    match_stage = build_match_stage(conditions)
    if match_stage:
        pipeline.append({"$match": match_stage})

    sort_stage = build_sort(sort)
    if sort_stage:
        pipeline.append({"$sort": sort_stage})

    if limit is not None and limit > 0:
        pipeline.append({"$limit": int(limit)})

    if creator_collection:
        pipeline.append({
            "$lookup": {
                "from": creator_collection,
                "localField": "createdBy",
                "foreignField": "_id",
                "as": "creator",
            }
        })
        pipeline.append({
            "$unwind": {"path": "$creator", "preserveNullAndEmptyArrays": True}
        })
        pipeline.append({"$project": {"creator.password": 0}})

    if exclude:
        pipeline.append({"$project": {field: 0 for field in exclude}})

    return pipeline


def build_sum_pipeline(
    field: str,
    conditions: Optional[List[Dict[str, Any]]] = None,
) -> List[Dict[str, Any]]:
    pipeline: List[Dict[str, Any]] = []
    match_stage = build_match_stage(conditions)
    if match_stage:
        pipeline.append({"$match": match_stage})
    pipeline.append({"$group": {"_id": None, "result": {"$sum": f"${field}"}}})
    return pipeline


def build_group_pipeline(
    group_field: str,
    field: Optional[str] = None,
    conditions: Optional[List[Dict[str, Any]]] = None,
) -> List[Dict[str, Any]]:
    """Group by ``group_field``; sums ``field`` or counts when it is ``None``."""
    pipeline: List[Dict[str, Any]] = []
    match_stage = build_match_stage(conditions)
    if match_stage:
        pipeline.append({"$match": match_stage})
    accumulator = {"$sum": f"${field}"} if field else {"$sum": 1}
    pipeline.append({"$group": {"_id": f"${group_field}", "result": accumulator}})
    pipeline.append({"$sort": {"_id": 1}})
    return pipeline
