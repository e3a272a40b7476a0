"""Warehouse back-office API package."""

from warehouse.api.errors import register_warehouse_exception_handlers
from warehouse.api.routes import inventory_router, pricing_router, return_router, shipment_router

__all__ = [
    "inventory_router",
    "shipment_router",
    "return_router",
    "pricing_router",
    "register_warehouse_exception_handlers",
]
