"""Shipment domain events."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from warehouse.domain import warehouse


@warehouse.event(part_of="ShipmentRequest")
class ShipmentRequestSubmitted:
    """A customer asked for stock to be shipped out."""

    __version__ = 1

    request_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    shipment_type = String()
    line_count = Integer(required=True)
    requested_at = DateTime(required=True)


@warehouse.event(part_of="ShipmentRequest")
class ShipmentRequestConfirmed:
    """An administrator confirmed a request and stock was deducted."""

    __version__ = 1

    request_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    shipped_record_id = Identifier(required=True)
    total_units = Integer(required=True)
    grand_total = Float(required=True)
    confirmed_by = String(required=True)
    confirmed_at = DateTime(required=True)


@warehouse.event(part_of="ShipmentRequest")
class ShipmentRequestRejected:
    """A request was rejected; ``restored`` is set when stock was put back."""

    __version__ = 1

    request_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    reason = String(required=True)
    restored = Boolean(default=False)
    rejected_by = String(required=True)
    rejected_at = DateTime(required=True)


@warehouse.event(part_of="ShippedRecord")
class ShippedRecordCreated:
    """Goods left the warehouse, from a shipment request or a product return."""

    __version__ = 1

    shipped_record_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    shipment_request_id = Identifier()
    product_return_id = Identifier()
    service = String()
    total_units = Integer(required=True)
    grand_total = Float(required=True)
    created_at = DateTime(required=True)
