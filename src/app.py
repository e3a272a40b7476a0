"""Prep-center back-office FastAPI application.

Web server that processes admin commands synchronously via HTTP. Each
request is wrapped in the warehouse domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV controls which config overlay is applied:
#   - "test"       → event_processing = "sync"  (handlers fire in UoW commit)
#   - "production" → event_processing = "async" (handlers fire via Engine)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from warehouse.domain import warehouse
from warehouse.utils.logging import add_context, clear_context, configure_logging

configure_logging()
warehouse.init()

_DOMAIN_PREFIXES = ("/inventory", "/shipment-requests", "/product-returns", "/pricing")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Prepdesk API",
    description="Warehouse back office: inventory, shipment requests and product returns",
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
    """Push the warehouse domain context for API requests."""
    if request.url.path.startswith(_DOMAIN_PREFIXES):
        add_context(tenant_id=request.headers.get("x-tenant-id"), path=request.url.path)
        try:
            with warehouse.domain_context():
                response = await call_next(request)
        finally:
            clear_context()
        return response
    # Health check, docs
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from warehouse.api import (  # noqa: E402
    inventory_router,
    pricing_router,
    register_warehouse_exception_handlers,
    return_router,
    shipment_router,
)

app.include_router(inventory_router)
app.include_router(shipment_router)
app.include_router(return_router)
app.include_router(pricing_router)
register_warehouse_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": warehouse.name}})
