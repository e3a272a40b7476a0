"""ShippedRecord aggregate: one record per outbound movement of goods.

A confirmed shipment request produces exactly one record covering all of its
lines. Closing a product return with ship-to-address produces one record
linked to the return.
"""

import json
from datetime import UTC, datetime

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from warehouse.domain import warehouse
from warehouse.shipment.events import ShippedRecordCreated

RETURN_SHIPMENT_SERVICE = "Product Return Shipment"


@warehouse.entity(part_of="ShippedRecord")
class ShippedItem:
    product_id = Identifier()
    product_name = String(max_length=255)
    boxes_shipped = Integer(default=0)
    shipped_qty = Integer(default=0)
    pack_of = Integer(default=1)
    unit_price = Float(default=0.0)
    pack_of_price = Float(default=0.0)
    remaining_qty = Integer(default=0)
    line_total = Float(default=0.0)


@warehouse.aggregate
class ShippedRecord:
    tenant_id = Identifier(required=True)
    shipment_request_id = Identifier()
    product_return_id = Identifier()
    service = String(max_length=100)
    product_type = String(max_length=50)
    shipment_type = String(max_length=50)
    pallet_sub_type = String(max_length=50)
    label_url = String(max_length=500)
    custom_dimensions = Text()  # JSON dict
    ship_to = String(max_length=500)
    remarks = Text()
    items = HasMany(ShippedItem)
    total_boxes = Integer(default=0)
    total_units = Integer(default=0)
    total_skus = Integer(default=0)
    bubble_wrap_feet = Float(default=0.0)
    sticker_removal_items = Integer(default=0)
    warning_labels = Integer(default=0)
    subtotal = Float(default=0.0)
    additional_services_total = Float(default=0.0)
    grand_total = Float(default=0.0)
    shipped_at = DateTime()

    @classmethod
    def _assemble(cls, items_data: list[dict], additional_services_total: float = 0.0, **fields):
        now = datetime.now(UTC)
        subtotal = round(sum(item.get("line_total", 0.0) for item in items_data), 2)
        record = cls(
            total_boxes=sum(item["boxes_shipped"] for item in items_data),
            total_units=sum(item["shipped_qty"] for item in items_data),
            total_skus=len(items_data),
            subtotal=subtotal,
            additional_services_total=additional_services_total,
            grand_total=round(subtotal + additional_services_total, 2),
            shipped_at=now,
            **fields,
        )
        for item_data in items_data:
            record.add_items(ShippedItem(**item_data))

        record.raise_(
            ShippedRecordCreated(
                shipped_record_id=str(record.id),
                tenant_id=str(record.tenant_id),
                shipment_request_id=record.shipment_request_id,
                product_return_id=record.product_return_id,
                service=record.service,
                total_units=record.total_units,
                grand_total=record.grand_total,
                created_at=now,
            )
        )
        return record

    @classmethod
    def for_shipment_request(cls, request, items_data: list[dict], additional_services):
        """Aggregate every line of a confirmed request into one record."""
        return cls._assemble(
            items_data,
            additional_services_total=additional_services.total or 0.0,
            tenant_id=str(request.tenant_id),
            shipment_request_id=str(request.id),
            service=request.service_label,
            product_type=request.product_type,
            shipment_type=request.shipment_type,
            pallet_sub_type=request.pallet_sub_type or None,
            label_url=request.label_url,
            custom_dimensions=json.dumps(request.custom_dimensions.to_dict()) if request.custom_dimensions else None,
            remarks=request.remarks,
            bubble_wrap_feet=additional_services.bubble_wrap_feet or 0.0,
            sticker_removal_items=additional_services.sticker_removal_items or 0,
            warning_labels=additional_services.warning_labels or 0,
        )

    @classmethod
    def for_product_return(cls, product_return, quantity: int, shipping_unit_price: float, ship_to: str):
        """Record the remainder of a return being shipped back on close."""
        boxes = product_return.boxes_count or 1
        return cls._assemble(
            [
                {
                    "product_id": product_return.product_id,
                    "product_name": product_return.product_name,
                    "boxes_shipped": boxes,
                    "shipped_qty": quantity,
                    "pack_of": 1,
                    "unit_price": shipping_unit_price,
                    "pack_of_price": 0.0,
                    "remaining_qty": 0,
                    "line_total": round(quantity * shipping_unit_price, 2),
                }
            ],
            tenant_id=str(product_return.tenant_id),
            product_return_id=str(product_return.id),
            service=RETURN_SHIPMENT_SERVICE,
            product_type="Standard",
            ship_to=ship_to,
            remarks=f"Product Return - Request ID: {product_return.id}",
        )
