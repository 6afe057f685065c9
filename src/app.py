"""Delivery platform FastAPI application.

Processes commands synchronously over HTTP. Every request runs inside the
delivery domain context, with the caller and path bound to the log context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects Protean's config overlay; the defaults are in-memory
# providers.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from delivery.api.errors import install_error_handlers
from delivery.api.responses import success
from delivery.domain import delivery
from delivery.utils.logging import add_context, clear_context

delivery.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Delivery API",
    description="Food delivery platform: carts, orders, reviews",
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
    """Push the delivery domain context and a fresh log context for each request."""
    clear_context()
    add_context(path=request.url.path, method=request.method)
    with delivery.domain_context():
        response = await call_next(request)
    return response


install_error_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from delivery.api.routes import admin_router, cart_router, order_router  # noqa: E402

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(admin_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return success({"status": "ok", "domain": delivery.name})
