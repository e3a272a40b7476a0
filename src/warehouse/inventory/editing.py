"""Administrative correction of an inventory item, logged to EditLog."""

from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from warehouse.domain import warehouse
from warehouse.inventory.audit import EditLog
from warehouse.inventory.item import InventoryItem
from warehouse.inventory.ledger import InventoryLedger


@warehouse.command(part_of="InventoryItem")
class EditInventoryItem:
    tenant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=0)
    edited_by = String(required=True, max_length=100)
    reason = Text()


@warehouse.command_handler(part_of=InventoryItem)
class EditInventoryItemHandler:
    @handle(EditInventoryItem)
    def edit_item(self, command):
        ledger = InventoryLedger(command.tenant_id)
        item = ledger.get(command.item_id)

        previous_product_name = item.product_name
        previous_quantity = item.quantity
        previous_status = item.status

        item.edit(command.product_name, command.quantity, command.edited_by)
        ledger.save(command.item_id)
        current_domain.repository_for(EditLog).add(
            EditLog.record(
                item,
                previous_product_name=previous_product_name,
                previous_quantity=previous_quantity,
                previous_status=previous_status,
                edited_by=command.edited_by,
                reason=command.reason,
            )
        )
