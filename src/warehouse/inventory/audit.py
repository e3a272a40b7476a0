"""Append-only audit records written alongside inventory mutations.

These are evidence, not state: nothing reads them back except for display.
Each factory snapshots the item as it was at the moment of the change.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from warehouse.domain import warehouse


@warehouse.aggregate
class RestockHistory:
    tenant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    previous_quantity = Integer(required=True)
    restocked_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    restocked_by = String(required=True, max_length=100)
    restocked_at = DateTime(required=True)

    @classmethod
    def record(cls, item, previous_quantity: int, restocked_quantity: int, restocked_by: str):
        return cls(
            tenant_id=str(item.tenant_id),
            item_id=str(item.id),
            product_name=item.product_name,
            previous_quantity=previous_quantity,
            restocked_quantity=restocked_quantity,
            new_quantity=item.quantity,
            restocked_by=restocked_by,
            restocked_at=datetime.now(UTC),
        )


@warehouse.aggregate
class EditLog:
    tenant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    previous_product_name = String(max_length=255)  # only set when renamed
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    previous_status = String(max_length=50)
    new_status = String(max_length=50)
    date_added = DateTime()
    edited_by = String(required=True, max_length=100)
    edited_at = DateTime(required=True)
    reason = Text()

    @classmethod
    def record(
        cls,
        item,
        previous_product_name: str,
        previous_quantity: int,
        previous_status: str,
        edited_by: str,
        reason: str | None = None,
    ):
        renamed = previous_product_name != item.product_name
        return cls(
            tenant_id=str(item.tenant_id),
            item_id=str(item.id),
            product_name=item.product_name,
            previous_product_name=previous_product_name if renamed else None,
            previous_quantity=previous_quantity,
            new_quantity=item.quantity,
            previous_status=previous_status,
            new_status=item.status,
            date_added=item.date_added,
            edited_by=edited_by,
            edited_at=datetime.now(UTC),
            reason=reason,
        )


@warehouse.aggregate
class DeleteLog:
    tenant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True)
    status = String(max_length=50)
    date_added = DateTime()
    deleted_by = String(required=True, max_length=100)
    deleted_at = DateTime(required=True)
    reason = Text()

    @classmethod
    def record(cls, item, deleted_by: str, reason: str | None = None):
        return cls(
            tenant_id=str(item.tenant_id),
            item_id=str(item.id),
            product_name=item.product_name,
            quantity=item.quantity,
            status=item.status,
            date_added=item.date_added,
            deleted_by=deleted_by,
            deleted_at=datetime.now(UTC),
            reason=reason,
        )


@warehouse.aggregate
class RecycledInventoryItem:
    """Snapshot of stock moved to the recycle bin, whole or in part."""

    tenant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    sku = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    status = String(max_length=50)
    date_added = DateTime()
    partial = Boolean(default=False)
    recycled_by = String(required=True, max_length=100)
    recycled_at = DateTime(required=True)
    remarks = Text()

    @classmethod
    def snapshot(cls, item, quantity: int, recycled_by: str, remarks: str | None = None, partial: bool = False):
        return cls(
            tenant_id=str(item.tenant_id),
            item_id=str(item.id),
            product_name=item.product_name,
            sku=item.sku,
            quantity=quantity,
            status=item.status,
            date_added=item.date_added,
            partial=partial,
            recycled_by=recycled_by,
            recycled_at=datetime.now(UTC),
            remarks=remarks,
        )
