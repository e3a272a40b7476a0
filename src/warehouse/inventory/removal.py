"""Removing stock from the ledger: outright deletion and recycling.

Both leave evidence behind. Deletion writes a DeleteLog; recycling writes a
RecycledInventoryItem snapshot, of the whole item when everything is
recycled or of just the recycled units otherwise.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from warehouse.domain import warehouse
from warehouse.inventory.audit import DeleteLog, RecycledInventoryItem
from warehouse.inventory.item import InventoryItem
from warehouse.inventory.ledger import InventoryLedger

logger = structlog.get_logger(__name__)


@warehouse.command(part_of="InventoryItem")
class DeleteInventoryItem:
    tenant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    deleted_by = String(required=True, max_length=100)
    reason = Text()


@warehouse.command(part_of="InventoryItem")
class RecycleInventoryItem:
    tenant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    recycled_by = String(required=True, max_length=100)
    remarks = Text()


@warehouse.command_handler(part_of=InventoryItem)
class InventoryRemovalHandler:
    @handle(DeleteInventoryItem)
    def delete_item(self, command):
        ledger = InventoryLedger(command.tenant_id)
        item = ledger.get(command.item_id)

        current_domain.repository_for(DeleteLog).add(
            DeleteLog.record(item, deleted_by=command.deleted_by, reason=command.reason)
        )
        ledger.remove(command.item_id)

        logger.info(
            "Inventory item deleted",
            tenant_id=str(command.tenant_id),
            item_id=str(command.item_id),
            quantity=item.quantity,
        )

    @handle(RecycleInventoryItem)
    def recycle_item(self, command):
        ledger = InventoryLedger(command.tenant_id)
        item = ledger.get(command.item_id)
        if not item.quantity:
            raise ValidationError({"quantity": [f"{item.product_name} has no stock to recycle"]})

        recycled_quantity = min(command.quantity, item.quantity)
        recycled = current_domain.repository_for(RecycledInventoryItem)
        if command.quantity >= item.quantity:
            recycled.add(
                RecycledInventoryItem.snapshot(
                    item,
                    quantity=item.quantity,
                    recycled_by=command.recycled_by,
                    remarks=command.remarks,
                )
            )
            ledger.remove(command.item_id)
            remaining = 0
        else:
            recycled.add(
                RecycledInventoryItem.snapshot(
                    item,
                    quantity=command.quantity,
                    recycled_by=command.recycled_by,
                    remarks=command.remarks,
                    partial=True,
                )
            )
            remaining = ledger.adjust(command.item_id, -command.quantity)

        logger.info(
            "Inventory recycled",
            tenant_id=str(command.tenant_id),
            item_id=str(command.item_id),
            recycled_quantity=recycled_quantity,
            remaining=remaining,
        )
        return remaining
