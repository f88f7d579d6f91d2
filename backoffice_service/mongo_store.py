"""
MongoDB implementation of the data access port.

Every query runs with ``maxTimeMS`` so a slow store cannot hang a request,
and server selection is bounded so an unreachable cluster fails fast.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from bson import Decimal128, ObjectId
from pymongo import MongoClient
from pymongo.errors import ExecutionTimeout

from config import (
    DATABASE_NAME,
    EXPENSES_COLLECTION,
    INVESTMENTS_COLLECTION,
    MONGO_URI,
    PROJECTS_COLLECTION,
    QUERY_TIMEOUT_MS,
    USERS_COLLECTION,
)
from data_port import (
    CREATOR_JOINED,
    EXPENSES,
    INVESTMENTS,
    MODELS,
    PROJECTS,
    USERS,
    DataAccessPort,
)
from logger import logger
from models import Record
from query_compiler import (
    build_find_pipeline,
    build_group_pipeline,
    build_match_stage,
    build_sum_pipeline,
)

SERVER_SELECTION_TIMEOUT_MS = 5000


# ---------------------- HELPERS ----------------------

def _to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _plain_value(value: Any) -> Any:
    """Convert BSON-specific types into plain Python values."""
    if isinstance(value, dict):
        return {k: _plain_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain_value(v) for v in value]
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, Decimal128):
        return value.to_decimal()
    return value


def document_to_record(collection: str, doc: Dict[str, Any]) -> Record:
    """Map a raw document onto the collection's model (``_id`` → ``id``)."""
    doc = _plain_value(doc)
    doc["id"] = str(doc.pop("_id", ""))

    creator = doc.pop("creator", None)
    if creator:
        doc["creator"] = {
            "id": str(creator.get("_id", "")),
            "name": creator.get("name", ""),
            "email": creator.get("email", ""),
        }

    doc.pop("password", None)
    return MODELS[collection].model_validate(doc)


# ---------------------- PORT ----------------------

class MongoDataPort(DataAccessPort):
    """Data access port over one MongoDB database."""

    def __init__(
        self,
        mongo_uri: str = MONGO_URI,
        database_name: str = DATABASE_NAME,
        client: Optional[MongoClient] = None,
    ):
        self._client = client or MongoClient(
            mongo_uri,
            serverSelectionTimeoutMS=SERVER_SELECTION_TIMEOUT_MS,
        )
        self._db = self._client[database_name]
        self._names = {
            PROJECTS: PROJECTS_COLLECTION,
            INVESTMENTS: INVESTMENTS_COLLECTION,
            EXPENSES: EXPENSES_COLLECTION,
            USERS: USERS_COLLECTION,
        }

    def close(self) -> None:
        self._client.close()

    def _collection(self, collection: str):
        if collection not in self._names:
            raise ValueError(f"Unknown collection: {collection}")
        return self._db[self._names[collection]]

    def _aggregate(self, collection: str, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        logger.debug("[MONGO] %s aggregate: %s", collection, pipeline)
        try:
            return list(
                self._collection(collection).aggregate(pipeline, maxTimeMS=QUERY_TIMEOUT_MS)
            )
        except ExecutionTimeout:
            raise TimeoutError("Query timed out after exceeding the time limit.")

    def find_many(self, collection, conditions=None, sort=None, limit=None, exclude=None):
        exclude = list(exclude or [])
        if collection == USERS and "password" not in exclude:
            exclude.append("password")

        creator_collection = self._names[USERS] if collection in CREATOR_JOINED else None
        pipeline = build_find_pipeline(
            conditions,
            sort=sort,
            limit=limit,
            exclude=exclude,
            creator_collection=creator_collection,
        )
        docs = self._aggregate(collection, pipeline)
        return [document_to_record(collection, doc) for doc in docs]

    def count(self, collection, conditions=None):
        try:
            return self._collection(collection).count_documents(
                build_match_stage(conditions),
                maxTimeMS=QUERY_TIMEOUT_MS,
            )
        except ExecutionTimeout:
            raise TimeoutError("Count timed out after exceeding the time limit.")

    def sum(self, collection, field, conditions=None):
        rows = self._aggregate(collection, build_sum_pipeline(field, conditions))
        return _to_decimal(rows[0].get("result")) if rows else Decimal(0)

    def count_by(self, collection, group_field, conditions=None):
        rows = self._aggregate(
            collection, build_group_pipeline(group_field, conditions=conditions)
        )
        return {str(row["_id"]): int(row["result"]) for row in rows}

    def sum_by(self, collection, field, group_field, conditions=None):
        rows = self._aggregate(
            collection, build_group_pipeline(group_field, field, conditions)
        )
        return {str(row["_id"]): _to_decimal(row["result"]) for row in rows}
