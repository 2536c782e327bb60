from __future__ import annotations
import time
from contextlib import asynccontextmanager
from typing import Optional

import requests
import uvicorn
from fastapi import FastAPI, Depends, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from avito_proxy.settings import settings
from avito_proxy.auth_handler import TokenCache
from avito_proxy.avito_client import AvitoClient
from avito_proxy.main import StatsOrchestrator
from avito_proxy.errors import StatsError
from avito_proxy.utils.logs import log_event


# -------------------------------------------------------------------------
# Lifespan
# -------------------------------------------------------------------------

def build_orchestrator(session: Optional[requests.Session] = None) -> StatsOrchestrator:
    """Wire the token cache, the Avito client and the orchestrator around one HTTP session."""
    session = session or requests.Session()
    token_cache = TokenCache(settings, session=session)
    client = AvitoClient(settings, token_cache, session=session)
    return StatsOrchestrator(client)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the process-wide token cache and upstream session; close the session on shutdown."""
    app.state.orchestrator = build_orchestrator()
    log_event("STARTUP", f"Avito account {settings.AVITO_USER_ID}, upstream {settings.AVITO_API_BASE_URL}")

    yield

    app.state.orchestrator.client.session.close()


app = FastAPI(
    title="Avito Stats Proxy",
    description="Item views, contacts and calls from Avito, grouped for the dashboard.",
    version="1.0.0",
    lifespan=lifespan
)

# -------------------------------------------------------------------------
# CORS Configuration
# -------------------------------------------------------------------------
print("\n[STARTUP] Loading CORS settings...")
print(f"[STARTUP] ALLOW_ORIGIN: {settings.ALLOW_ORIGIN}")

allowed_origins = settings.ALLOWED_ORIGINS
print(f"[STARTUP] Final allowed_origins for CORS: {allowed_origins}\n")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------------------------------------------------------------
# Request logging
# -------------------------------------------------------------------------

@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    log_event("HTTP", f"{request.method} {request.url.path} {response.status_code} - {elapsed_ms:.1f} ms")
    return response


# -------------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------------

def get_orchestrator(request: Request) -> StatsOrchestrator:
    """FastAPI dependency: the orchestrator created in lifespan."""
    return request.app.state.orchestrator


def error_response(e: Exception) -> JSONResponse:
    """Every unrecovered failure is a plain 500 with the message."""
    if not isinstance(e, StatsError):
        log_event("HTTP", f"Unexpected {type(e).__name__}: {e}", "ERROR")
    return JSONResponse(status_code=500, content={"error": str(e)})


# -------------------------
# Health
# -------------------------

@app.get("/health", response_class=PlainTextResponse)
def health_check():
    return "ok"


# -------------------------------------------------------------------------
# Debug passthrough (raw upstream JSON)
# -------------------------------------------------------------------------

@app.get("/debug/items")
def debug_items(
    item_id: Optional[str] = Query(None, alias="itemId"),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    orchestrator: StatsOrchestrator = Depends(get_orchestrator),
):
    """Raw item-stats response, for checking field names when the adapter misses data."""
    try:
        return orchestrator.fetch_raw_items(item_id, date_from, date_to)
    except Exception as e:
        return error_response(e)


@app.get("/debug/calls")
def debug_calls(
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    orchestrator: StatsOrchestrator = Depends(get_orchestrator),
):
    """Raw call-stats response."""
    try:
        return orchestrator.fetch_raw_calls(date_from, date_to)
    except Exception as e:
        return error_response(e)


# -------------------------------------------------------------------------
# Dashboard stats
# -------------------------------------------------------------------------

@app.get("/stats")
def get_stats(
    item_id: Optional[str] = Query(None, alias="itemId"),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    grouping: str = "day",
    orchestrator: StatsOrchestrator = Depends(get_orchestrator),
):
    """Views, contacts and calls for one item, grouped by day, week or month."""
    try:
        return orchestrator.build_stats(item_id, date_from, date_to, grouping)
    except Exception as e:
        return error_response(e)


def run():
    """Console entry point."""
    log_event("STARTUP", f"API listening on :{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
