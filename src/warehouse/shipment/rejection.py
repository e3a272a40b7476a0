"""Shipment rejection, restoring stock when the request had been confirmed."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from warehouse.domain import warehouse
from warehouse.inventory.ledger import InventoryLedger
from warehouse.shipment.request import ShipmentRequest
from warehouse.utils.tenancy import load_for_tenant

logger = structlog.get_logger(__name__)


@warehouse.command(part_of="ShipmentRequest")
class RejectShipmentRequest:
    tenant_id = Identifier(required=True)
    request_id = Identifier(required=True)
    rejected_by = String(required=True, max_length=100)
    reason = Text(required=True)


@warehouse.command_handler(part_of=ShipmentRequest)
class RejectShipmentRequestHandler:
    @handle(RejectShipmentRequest)
    def reject(self, command):
        request = load_for_tenant(ShipmentRequest, command.request_id, command.tenant_id)
        was_confirmed = request.reject(command.rejected_by, command.reason)

        if was_confirmed:
            self._restore_stock(request)

        current_domain.repository_for(ShipmentRequest).add(request)
        logger.info(
            "Shipment request rejected",
            tenant_id=str(command.tenant_id),
            request_id=str(request.id),
            restored=was_confirmed,
        )

    def _restore_stock(self, request: ShipmentRequest) -> None:
        """Put back exactly what confirmation deducted, per product."""
        ledger = InventoryLedger(str(request.tenant_id))

        restore: dict[str, int] = {}
        for line in request.lines:
            product_id = str(line.product_id)
            if ledger.find(product_id) is None:
                logger.warning(
                    "Inventory item no longer exists, skipping restore",
                    request_id=str(request.id),
                    product_id=product_id,
                    units=line.total_units,
                )
                continue
            restore[product_id] = restore.get(product_id, 0) + line.total_units

        for product_id, units in restore.items():
            ledger.adjust(product_id, units)
