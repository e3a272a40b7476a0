"""InventoryItem aggregate (CQRS): one stocked product in a tenant's ledger.

Stock status is never set independently: it is recomputed from ``quantity``
on every change and a post-invariant rejects any state where the two
disagree.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, ValueObject

from warehouse.domain import warehouse
from warehouse.inventory.events import (
    InventoryItemEdited,
    InventoryItemRegistered,
    InventoryItemRestocked,
    InventoryQuantityChanged,
)


class InventoryStatus(Enum):
    IN_STOCK = "In Stock"
    OUT_OF_STOCK = "Out of Stock"


def status_for(quantity: int) -> str:
    """Return the stock status implied by a quantity."""
    if quantity > 0:
        return InventoryStatus.IN_STOCK.value
    return InventoryStatus.OUT_OF_STOCK.value


@warehouse.value_object(part_of="InventoryItem")
class MirrorReference:
    """Link to the same product in an external storefront."""

    source = String(max_length=50)
    shop = String(max_length=255)
    variant_id = String(max_length=100)
    inventory_item_id = String(max_length=100)

    @property
    def is_linked(self) -> bool:
        return bool(self.source and self.shop and self.variant_id)


@warehouse.aggregate
class InventoryItem:
    tenant_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    sku = String(max_length=100)
    quantity = Integer(min_value=0, default=0)
    status = String(
        choices=InventoryStatus,
        default=InventoryStatus.OUT_OF_STOCK.value,
    )
    mirror = ValueObject(MirrorReference)
    date_added = DateTime()
    updated_at = DateTime()

    @invariant.post
    def status_must_follow_quantity(self):
        if self.quantity is None:
            return
        if self.quantity < 0:
            raise ValidationError({"quantity": ["Inventory quantity cannot be negative"]})
        if self.status != status_for(self.quantity):
            raise ValidationError({"status": ["Status must be In Stock exactly when quantity is positive"]})

    @classmethod
    def register(
        cls,
        tenant_id: str,
        product_name: str,
        quantity: int = 0,
        sku: str | None = None,
        mirror: MirrorReference | None = None,
    ):
        """Create a new item with its status derived from the opening quantity."""
        now = datetime.now(UTC)
        item = cls(
            tenant_id=tenant_id,
            product_name=product_name,
            sku=sku,
            quantity=quantity,
            status=status_for(quantity),
            mirror=mirror,
            date_added=now,
            updated_at=now,
        )
        item.raise_(
            InventoryItemRegistered(
                item_id=str(item.id),
                tenant_id=tenant_id,
                product_name=product_name,
                quantity=quantity,
                registered_at=now,
            )
        )
        return item

    @property
    def is_mirrored(self) -> bool:
        return self.mirror is not None and self.mirror.is_linked

    def adjust_quantity(self, delta: int) -> int:
        """Apply a signed stock movement and return the new quantity."""
        previous = self.quantity or 0
        new_quantity = previous + delta
        if new_quantity < 0:
            raise ValidationError(
                {"quantity": [f"Cannot remove {-delta} units from {self.product_name}; only {previous} on hand"]}
            )

        now = datetime.now(UTC)
        with atomic_change(self):
            self.quantity = new_quantity
            self.status = status_for(new_quantity)
        self.updated_at = now

        self.raise_(
            InventoryQuantityChanged(
                item_id=str(self.id),
                tenant_id=str(self.tenant_id),
                previous_quantity=previous,
                new_quantity=new_quantity,
                delta=delta,
                mirror_source=self.mirror.source if self.mirror else None,
                mirror_shop=self.mirror.shop if self.mirror else None,
                mirror_variant_id=self.mirror.variant_id if self.mirror else None,
                mirror_inventory_item_id=self.mirror.inventory_item_id if self.mirror else None,
                changed_at=now,
            )
        )
        return new_quantity

    def restock(self, quantity: int, restocked_by: str) -> int:
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Restock quantity must be a positive integer"]})

        new_quantity = self.adjust_quantity(quantity)
        self.raise_(
            InventoryItemRestocked(
                item_id=str(self.id),
                tenant_id=str(self.tenant_id),
                restocked_quantity=quantity,
                new_quantity=new_quantity,
                restocked_by=restocked_by,
                restocked_at=self.updated_at,
            )
        )
        return new_quantity

    def edit(self, product_name: str, quantity: int, edited_by: str) -> None:
        """Correct the product name and/or the counted quantity."""
        if not product_name or not product_name.strip():
            raise ValidationError({"product_name": ["Product name is required"]})
        if quantity is None or quantity < 0:
            raise ValidationError({"quantity": ["Quantity cannot be negative"]})

        previous_quantity = self.quantity or 0
        self.product_name = product_name.strip()
        if quantity != previous_quantity:
            self.adjust_quantity(quantity - previous_quantity)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            InventoryItemEdited(
                item_id=str(self.id),
                tenant_id=str(self.tenant_id),
                product_name=self.product_name,
                previous_quantity=previous_quantity,
                new_quantity=quantity,
                edited_by=edited_by,
                edited_at=self.updated_at,
            )
        )
