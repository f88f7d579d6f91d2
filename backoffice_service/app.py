"""
FastAPI back-office assistant service.

Features:
- Natural-language assistant over projects, investments, expenses and users
- Optional AI phrasing of answers (Hugging Face or Gemini), best-effort
- Dashboard headline numbers, recent activity and chart series
- Query timeout protection on every store call
"""

from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from config import ENRICHMENT_PROVIDER, ENRICHMENT_TIMEOUT_S
from dashboard import dashboard_charts, dashboard_overview, dashboard_stats
from data_port import DataAccessPort
from enrichment import TextEnricher, build_enricher
from interpreter import interpret_query
from logger import logger
from mongo_store import MongoDataPort
from response_formatter import shutdown_enrichment

app = FastAPI(title="Back-office Assistant", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------- DEPENDENCIES ----------------------


@lru_cache()
def get_data_port() -> DataAccessPort:
    return MongoDataPort()


@lru_cache()
def get_enricher() -> Optional[TextEnricher]:
    return build_enricher()


def get_caller(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Dict[str, Any]:
    """Identity set by the upstream auth layer."""
    return {"id": x_user_id or "anonymous", "role": x_user_role or "employee"}


# ---------------------- REQUEST MODELS ----------------------


class AIQueryRequest(BaseModel):
    query: Optional[str] = None


# ---------------------- ENDPOINTS ----------------------


@app.post("/api/ai/query")
def ai_query(
    request: AIQueryRequest,
    caller: Dict[str, Any] = Depends(get_caller),
    port: DataAccessPort = Depends(get_data_port),
    enricher: Optional[TextEnricher] = Depends(get_enricher),
):
    """Interpret a natural-language question and return the envelope."""
    if not request.query or not request.query.strip():
        raise HTTPException(status_code=400, detail="Query is required")

    try:
        return interpret_query(
            request.query,
            caller,
            port,
            enricher=enricher,
            timeout_s=ENRICHMENT_TIMEOUT_S,
        )
    except Exception as e:
        logger.error("ai-query error: %s", e)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/ai/status")
def ai_status(enricher: Optional[TextEnricher] = Depends(get_enricher)):
    """Whether AI phrasing of answers is configured."""
    return {
        "enrichment_configured": enricher is not None,
        "provider": enricher.name if enricher is not None else None,
        "requested_provider": ENRICHMENT_PROVIDER,
        "timeout_s": ENRICHMENT_TIMEOUT_S,
        "info": (
            "AI enrichment active: answers include an aiResponse when the provider replies in time"
            if enricher is not None
            else "AI enrichment inactive: answers contain data and message only. "
                 "Set HUGGINGFACE_API_KEY or GEMINI_API_KEY to enable it."
        ),
    }


@app.get("/api/dashboard")
def get_dashboard(port: DataAccessPort = Depends(get_data_port)):
    """Stats, recent activity and charts combined."""
    try:
        return dashboard_overview(port)
    except Exception as e:
        logger.error("dashboard error: %s", e)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/dashboard/stats")
def get_dashboard_stats(port: DataAccessPort = Depends(get_data_port)):
    try:
        return dashboard_stats(port)
    except Exception as e:
        logger.error("dashboard-stats error: %s", e)
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/dashboard/charts")
def get_dashboard_charts(port: DataAccessPort = Depends(get_data_port)):
    try:
        return dashboard_charts(port)
    except Exception as e:
        logger.error("dashboard-charts error: %s", e)
        raise HTTPException(status_code=500, detail=str(e))


@app.on_event("shutdown")
def shutdown_event():
    logger.info("Back-office Assistant shutting down...")
    shutdown_enrichment()


@app.get("/api/health")
def health_check():
    return {"status": "ok", "version": "1.0.0"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=8000)
