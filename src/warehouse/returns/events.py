"""Product return domain events."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from warehouse.domain import warehouse


@warehouse.event(part_of="ProductReturn")
class ProductReturnSubmitted:
    __version__ = 1

    return_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    return_type = String(required=True)
    product_name = String(required=True)
    requested_quantity = Integer(required=True)
    submitted_at = DateTime(required=True)


@warehouse.event(part_of="ProductReturn")
class ProductReturnApproved:
    __version__ = 1

    return_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    approved_by = String(required=True)
    approved_at = DateTime(required=True)


@warehouse.event(part_of="ProductReturn")
class ProductReturnCancelled:
    __version__ = 1

    return_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    reason = String(required=True)
    cancelled_by = String(required=True)
    cancelled_at = DateTime(required=True)


@warehouse.event(part_of="ProductReturn")
class ReturnUnitsReceived:
    """Units of a return physically arrived at the warehouse."""

    __version__ = 1

    return_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    quantity = Integer(required=True)
    received_quantity = Integer(required=True)
    received_by = String(required=True)
    received_at = DateTime(required=True)


@warehouse.event(part_of="ProductReturn")
class ReturnUnitsShipped:
    """Received units were shipped onward to the customer's destination."""

    __version__ = 1

    return_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    quantity = Integer(required=True)
    shipped_quantity = Integer(required=True)
    shipped_by = String(required=True)
    invoice_id = Identifier()
    shipped_at = DateTime(required=True)


@warehouse.event(part_of="ProductReturn")
class ProductReturnClosed:
    __version__ = 1

    return_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    received_quantity = Integer(required=True)
    shipped_on_close = Integer(default=0)
    credited_quantity = Integer(default=0)
    total = Float(required=True)
    closed_by = String(required=True)
    closed_at = DateTime(required=True)
