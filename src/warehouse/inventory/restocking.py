"""Restocking: add units to an item and record the restock history."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from warehouse.domain import warehouse
from warehouse.inventory.audit import RestockHistory
from warehouse.inventory.item import InventoryItem
from warehouse.inventory.ledger import InventoryLedger

logger = structlog.get_logger(__name__)


@warehouse.command(part_of="InventoryItem")
class RestockInventoryItem:
    tenant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    restocked_by = String(required=True, max_length=100)


@warehouse.command_handler(part_of=InventoryItem)
class RestockHandler:
    @handle(RestockInventoryItem)
    def restock(self, command):
        ledger = InventoryLedger(command.tenant_id)
        item = ledger.get(command.item_id)
        previous_quantity = item.quantity

        item.restock(command.quantity, command.restocked_by)
        ledger.save(command.item_id)
        current_domain.repository_for(RestockHistory).add(
            RestockHistory.record(
                item,
                previous_quantity=previous_quantity,
                restocked_quantity=command.quantity,
                restocked_by=command.restocked_by,
            )
        )

        logger.info(
            "Inventory restocked",
            tenant_id=str(command.tenant_id),
            item_id=str(item.id),
            restocked_quantity=command.quantity,
            new_quantity=item.quantity,
        )
        return item.quantity
