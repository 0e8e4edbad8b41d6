"""Wholesale FastAPI application.

Web server that processes commands synchronously via HTTP. Every request
runs inside the Wholesale domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay and the log format.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wholesale.domain import wholesale
from wholesale.utils.logging import add_context, clear_context, configure_logging

configure_logging(log_file_prefix="wholesale")
wholesale.init()


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Wholesale API",
    description="B2B ordering — price lists, associations, orders and approvals",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the Wholesale domain context for each request."""
    clear_context()
    add_context(method=request.method, path=request.url.path)
    with wholesale.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from wholesale.api import (  # noqa: E402
    association_router,
    catalogue_router,
    notification_router,
    order_router,
    price_list_router,
)
from wholesale.api.errors import register_error_handlers  # noqa: E402

register_error_handlers(app)
app.include_router(catalogue_router)
app.include_router(price_list_router)
app.include_router(association_router)
app.include_router(order_router)
app.include_router(notification_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": wholesale.name})
