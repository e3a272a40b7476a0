"""HTTP error mapping for the warehouse API.

Protean's handlers cover validation (400) and missing objects (404).
Concurrent-write conflicts surface as a retryable 409.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers

from warehouse.exceptions import ConflictError


async def _conflict_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=409, content={"error": str(exc), "retryable": True})


def register_warehouse_exception_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(ConflictError, _conflict_handler)
    app.add_exception_handler(ExpectedVersionError, _conflict_handler)
