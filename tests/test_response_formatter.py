"""
Tests for the response envelope and best-effort enrichment
"""
import time
from datetime import datetime
from decimal import Decimal

from bson import ObjectId

from conftest import StubEnricher
from models import CreatorRef, Expense, User
import response_formatter
from response_formatter import (
    clean_documents,
    compose_envelope,
    enrich_envelope,
    shutdown_enrichment,
)


def _envelope():
    return compose_envelope(
        {"data": [{"amount": Decimal("10.5")}], "type": "expenses", "message": "Showing recent expenses"},
        "recent expenses",
    )


def test_compose_envelope_shape():
    envelope = _envelope()
    assert envelope == {
        "data": [{"amount": 10.5}],
        "type": "expenses",
        "message": "Showing recent expenses",
        "query": "recent expenses",
    }


def test_compose_envelope_serialises_records():
    expense = Expense(
        id="e1", name="Office rent", amount=Decimal("20000"), category="Rent",
        date=datetime(2025, 7, 1), created_by="u1",
        creator=CreatorRef(id="u1", name="Ayesha Khan", email="ayesha@example.com"),
    )
    envelope = compose_envelope({"data": [expense], "type": "expenses", "message": ""}, "q")
    row = envelope["data"][0]
    assert row["amount"] == 20000.0
    assert row["date"] == "2025-07-01T00:00:00"
    assert row["createdBy"] == "u1"
    assert row["creator"] == {"id": "u1", "name": "Ayesha Khan", "email": "ayesha@example.com"}


def test_user_password_never_serialised():
    user = User(id="u1", name="A", email="a@example.com", password="$2b$hash")
    row = clean_documents([user])[0]
    assert "password" not in row
    assert row["role"] == "employee"
    assert row["isActive"] is True


def test_clean_documents_stringifies_unknown_types():
    oid = ObjectId()
    assert clean_documents([{"_id": oid}]) == [{"_id": str(oid)}]


def test_null_data_stays_null():
    envelope = compose_envelope({"data": None, "type": "general", "message": "help"}, "weather")
    assert envelope["data"] is None


def test_enrich_without_enricher_is_noop():
    envelope = _envelope()
    assert enrich_envelope(envelope, None) is envelope


def test_enrich_attaches_ai_response():
    enricher = StubEnricher()
    enriched = enrich_envelope(_envelope(), enricher, timeout_s=2)
    assert enriched["aiResponse"] == "Here is what I found."
    assert enricher.prompts == [
        'Query: recent expenses\nData: [{"amount": 10.5}]\nProvide a helpful response.'
    ]


def test_enrich_failure_leaves_envelope_untouched():
    envelope = _envelope()
    enriched = enrich_envelope(envelope, StubEnricher(error=RuntimeError("503")), timeout_s=2)
    assert enriched == envelope
    assert "aiResponse" not in enriched


def test_enrich_timeout_leaves_envelope_untouched():
    """A slow provider is abandoned at the deadline"""
    envelope = _envelope()
    start = time.time()
    enriched = enrich_envelope(envelope, StubEnricher(delay=1.0), timeout_s=0.05)
    assert time.time() - start < 0.9
    assert enriched == envelope
    assert "aiResponse" not in enriched


def test_enrich_empty_reply_is_omitted():
    enriched = enrich_envelope(_envelope(), StubEnricher(reply=""), timeout_s=2)
    assert "aiResponse" not in enriched


def test_pool_size_from_config(monkeypatch):
    shutdown_enrichment()
    monkeypatch.setattr(response_formatter, "ENRICHMENT_WORKERS", 2)
    assert response_formatter._get_pool()._max_workers == 2
    shutdown_enrichment()


def test_enrichment_works_after_shutdown():
    shutdown_enrichment()
    assert response_formatter._enrich_pool is None
    enriched = enrich_envelope(_envelope(), StubEnricher(), timeout_s=2)
    assert enriched["aiResponse"] == "Here is what I found."
