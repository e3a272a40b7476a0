"""Inventory registration: command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from warehouse.domain import warehouse
from warehouse.inventory.item import InventoryItem, MirrorReference


@warehouse.command(part_of="InventoryItem")
class RegisterInventoryItem:
    """Add a product to a tenant's inventory."""

    tenant_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(min_value=0, default=0)
    sku = String(max_length=100)
    mirror_source = String(max_length=50)
    mirror_shop = String(max_length=255)
    mirror_variant_id = String(max_length=100)
    mirror_inventory_item_id = String(max_length=100)


@warehouse.command_handler(part_of=InventoryItem)
class RegisterInventoryItemHandler:
    @handle(RegisterInventoryItem)
    def register_item(self, command):
        mirror = None
        if command.mirror_source:
            mirror = MirrorReference(
                source=command.mirror_source,
                shop=command.mirror_shop,
                variant_id=command.mirror_variant_id,
                inventory_item_id=command.mirror_inventory_item_id,
            )

        item = InventoryItem.register(
            tenant_id=command.tenant_id,
            product_name=command.product_name,
            quantity=command.quantity or 0,
            sku=command.sku,
            mirror=mirror,
        )
        current_domain.repository_for(InventoryItem).add(item)
        return str(item.id)
