"""Inventory domain events.

``InventoryQuantityChanged`` carries the absolute quantity after the change,
so consumers (the external mirror sync) can apply it idempotently.
"""

from protean.fields import DateTime, Identifier, Integer, String

from warehouse.domain import warehouse


@warehouse.event(part_of="InventoryItem")
class InventoryItemRegistered:
    """A new item was added to a tenant's inventory."""

    __version__ = 1

    item_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    product_name = String(required=True)
    quantity = Integer(required=True)
    registered_at = DateTime(required=True)


@warehouse.event(part_of="InventoryItem")
class InventoryQuantityChanged:
    """Stock on hand for an item changed."""

    __version__ = 1

    item_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    delta = Integer(required=True)
    mirror_source = String()
    mirror_shop = String()
    mirror_variant_id = String()
    mirror_inventory_item_id = String()
    changed_at = DateTime(required=True)


@warehouse.event(part_of="InventoryItem")
class InventoryItemRestocked:
    """An administrator added stock to an item."""

    __version__ = 1

    item_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    restocked_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    restocked_by = String(required=True)
    restocked_at = DateTime(required=True)


@warehouse.event(part_of="InventoryItem")
class InventoryItemEdited:
    """An administrator corrected an item's name or quantity."""

    __version__ = 1

    item_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    product_name = String(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    edited_by = String(required=True)
    edited_at = DateTime(required=True)
