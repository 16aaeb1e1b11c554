"""
Monthly Ledger - HTTP entry point

A thin FastAPI transport over the RequestRouter:

    GET  /?action=...&year=...&month=...   action requests
    POST /                                 JSON body, always appends
    GET  /health                           liveness

Errors are reported in-band ({"status": "error", "message": ...}) with
HTTP 200, the contract existing clients rely on.

Run with: uvicorn app.main:app
"""

import json
from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool

from monthly_ledger import __version__
from monthly_ledger.router import RequestRouter, create_app_components


app = FastAPI(title="Monthly Ledger", version=__version__)


@lru_cache(maxsize=1)
def get_router() -> RequestRouter:
    """Build the router once per process."""
    return create_app_components()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def handle_action(request: Request, router: RequestRouter = Depends(get_router)) -> dict:
    return router.handle(dict(request.query_params))


@app.post("/")
async def handle_entry(request: Request, router: RequestRouter = Depends(get_router)) -> dict:
    raw = await request.body()
    try:
        body = json.loads(raw or b"{}")
    except ValueError as e:
        return {"status": "error", "message": f"Invalid JSON body: {e}"}
    if not isinstance(body, dict):
        return {"status": "error", "message": "JSON body must be an object"}
    return await run_in_threadpool(router.handle_entry, body)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=False)
