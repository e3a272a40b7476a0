"""Product return submission: command and handler."""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from warehouse.domain import warehouse
from warehouse.inventory.ledger import InventoryLedger
from warehouse.returns.product_return import (
    ProductReturn,
    ReturnServices,
    ReturnType,
    ShippingAddress,
)

logger = structlog.get_logger(__name__)


@warehouse.command(part_of="ProductReturn")
class SubmitProductReturn:
    tenant_id = Identifier(required=True)
    return_type = String(max_length=20, default=ReturnType.NEW.value)
    product_id = Identifier()
    product_name = String(max_length=255)
    sku = String(max_length=100)
    requested_quantity = Integer(required=True, min_value=1)
    requested_by = String(max_length=100)
    notes = Text()
    additional_services = Text()  # JSON dict
    shipping_address = Text()  # JSON dict


@warehouse.command_handler(part_of=ProductReturn)
class SubmitProductReturnHandler:
    @handle(SubmitProductReturn)
    def submit(self, command):
        product_name = command.product_name
        sku = command.sku
        if command.return_type == ReturnType.EXISTING.value and command.product_id:
            # Existing returns are named after the inventory item they credit
            item = InventoryLedger(command.tenant_id).get(command.product_id)
            product_name = product_name or item.product_name
            sku = sku or item.sku

        services = None
        if command.additional_services:
            services = ReturnServices(**json.loads(command.additional_services))
        address = None
        if command.shipping_address:
            address = ShippingAddress(**json.loads(command.shipping_address))

        product_return = ProductReturn.submit(
            tenant_id=command.tenant_id,
            product_name=product_name,
            requested_quantity=command.requested_quantity,
            return_type=command.return_type,
            product_id=command.product_id,
            sku=sku,
            requested_by=command.requested_by,
            notes=command.notes,
            additional_services=services,
            shipping_address=address,
        )
        current_domain.repository_for(ProductReturn).add(product_return)

        logger.info(
            "Product return submitted",
            tenant_id=str(command.tenant_id),
            return_id=str(product_return.id),
            return_type=command.return_type,
            requested_quantity=command.requested_quantity,
        )
        return str(product_return.id)
