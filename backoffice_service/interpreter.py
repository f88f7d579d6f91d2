"""
Natural-language query interpreter.

Pipeline for one request (stateless, nothing carried between calls):

    classify → extract → dispatch → compose → enrich

Classification runs on the lower-cased text; parameters are extracted
from the text as typed so a source name keeps its casing.
"""

from datetime import date
from typing import Any, Dict, Optional

from config import ENRICHMENT_TIMEOUT_S
from data_port import DataAccessPort
from enrichment import TextEnricher
from intent_classifier import classify
from logger import logger
from param_extractor import extract
from query_dispatcher import dispatch
from response_formatter import compose_envelope, enrich_envelope


def interpret_query(
    raw_query: str,
    caller: Optional[Dict[str, Any]],
    port: DataAccessPort,
    enricher: Optional[TextEnricher] = None,
    timeout_s: float = ENRICHMENT_TIMEOUT_S,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Answer ``raw_query`` with the uniform envelope.

    ``caller`` is the authenticated identity; no intent filters on it yet.
    Data-access errors propagate; enrichment errors never do.
    """
    intent = classify(raw_query.lower())
    params = extract(intent, raw_query)
    logger.info(
        "[CLASSIFY] caller=%s intent=%s params=%s",
        (caller or {}).get("id", "anonymous"), intent, params,
    )

    result = dispatch(intent, params, port, today=today)
    envelope = compose_envelope(result, raw_query)
    return enrich_envelope(envelope, enricher, timeout_s=timeout_s)
