from __future__ import annotations

import os

from fastapi import FastAPI, Request

from unitcalc.api.routes_calc import router as calc_router
from unitcalc.observability import bind_request_id, log_event, new_request_id, reset_request_id
from unitcalc.version import __version__

ENGINE_VERSION = os.getenv("UNITCALC_ENGINE_VERSION", __version__)

app = FastAPI(title="unitcalc", version=ENGINE_VERSION)
app.include_router(calc_router)


@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or new_request_id()
    token = bind_request_id(request_id)
    try:
        response = await call_next(request)
    finally:
        reset_request_id(token)
    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/health")
def health() -> dict:
    log_event("health.checked", version=ENGINE_VERSION)
    return {"status": "ok", "version": ENGINE_VERSION}


__all__ = ["ENGINE_VERSION", "app"]
