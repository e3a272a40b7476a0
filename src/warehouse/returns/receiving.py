"""Receiving returned units into the warehouse."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from warehouse.domain import warehouse
from warehouse.returns.product_return import ProductReturn
from warehouse.utils.tenancy import load_for_tenant

logger = structlog.get_logger(__name__)


@warehouse.command(part_of="ProductReturn")
class ReceiveProductReturn:
    tenant_id = Identifier(required=True)
    return_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    received_by = String(required=True, max_length=100)
    notes = Text()


@warehouse.command_handler(part_of=ProductReturn)
class ReceiveProductReturnHandler:
    @handle(ReceiveProductReturn)
    def receive(self, command):
        product_return = load_for_tenant(ProductReturn, command.return_id, command.tenant_id)
        product_return.receive(command.quantity, command.received_by, command.notes)
        current_domain.repository_for(ProductReturn).add(product_return)

        if product_return.is_over_received:
            logger.warning(
                "Product return received beyond requested quantity",
                tenant_id=str(command.tenant_id),
                return_id=str(product_return.id),
                requested_quantity=product_return.requested_quantity,
                received_quantity=product_return.received_quantity,
            )

        logger.info(
            "Product return units received",
            tenant_id=str(command.tenant_id),
            return_id=str(product_return.id),
            quantity=command.quantity,
            received_quantity=product_return.received_quantity,
        )
        return product_return.received_quantity
