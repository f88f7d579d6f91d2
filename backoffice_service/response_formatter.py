"""
Response formatter: builds the uniform assistant envelope

    {"data": ..., "type": ..., "message": ..., "query": ...}

and optionally attaches an ``aiResponse`` from the enrichment provider.
"""

from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from config import ENRICHMENT_TIMEOUT_S, ENRICHMENT_WORKERS
from enrichment import TextEnricher, build_prompt
from logger import logger

# Enrichment calls run here so the caller can stop waiting at the deadline
_enrich_pool: Optional[ThreadPoolExecutor] = None


def _get_pool() -> ThreadPoolExecutor:
    global _enrich_pool
    if _enrich_pool is None:
        _enrich_pool = ThreadPoolExecutor(
            max_workers=ENRICHMENT_WORKERS, thread_name_prefix="enrich",
        )
    return _enrich_pool


def shutdown_enrichment() -> None:
    """Stop the enrichment workers; queued calls are cancelled."""
    global _enrich_pool
    if _enrich_pool is not None:
        _enrich_pool.shutdown(wait=False, cancel_futures=True)
        _enrich_pool = None


def _sanitise_value(obj: Any) -> Any:
    """Recursively convert records and non-JSON-safe types to safe values."""
    if isinstance(obj, BaseModel):
        return _sanitise_value(obj.model_dump(by_alias=True))
    if isinstance(obj, dict):
        return {k: _sanitise_value(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_sanitise_value(item) for item in obj]
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, bytes):
        return f"[binary {len(obj)} bytes]"
    if isinstance(obj, (int, float, str, type(None))):
        return obj
    # ObjectId, UUID, etc.
    return str(obj)


def clean_documents(results: List[Any]) -> List[Any]:
    """Records / dicts → JSON-safe dicts (datetimes ISO, decimals float)."""
    return [_sanitise_value(doc) for doc in results]


def compose_envelope(result: Dict[str, Any], original_query: str) -> Dict[str, Any]:
    """Envelope for a dispatcher result; ``data`` is made JSON-safe."""
    return {
        "data": _sanitise_value(result.get("data")),
        "type": result.get("type", "general"),
        "message": result.get("message", ""),
        "query": original_query,
    }


def enrich_envelope(
    envelope: Dict[str, Any],
    enricher: Optional[TextEnricher],
    timeout_s: float = ENRICHMENT_TIMEOUT_S,
) -> Dict[str, Any]:
    """Return the envelope with ``aiResponse`` added when enrichment succeeds.

    Never raises: a missing enricher, a provider error or a call that runs
    past ``timeout_s`` all leave ``data``/``type``/``message`` untouched and
    omit ``aiResponse``.
    """
    if enricher is None:
        return envelope

    prompt = build_prompt(envelope["query"], envelope["data"])
    future = _get_pool().submit(enricher.generate, prompt)
    try:
        text = future.result(timeout=timeout_s)
    except FuturesTimeoutError:
        future.cancel()
        logger.warning(
            "[ENRICH] %s timed out after %.1fs, returning data only",
            enricher.name, timeout_s,
        )
        return envelope
    except Exception as e:
        logger.warning(
            "[ENRICH] %s failed, returning data only: %s", enricher.name, e,
        )
        return envelope

    if not text:
        return envelope
    return {**envelope, "aiResponse": text}
