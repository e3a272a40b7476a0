"""Partial shipment of received return units, with an optional invoice."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from warehouse.domain import warehouse
from warehouse.invoice.invoice import Invoice
from warehouse.returns.invoicing import parse_sold_to, shipment_invoice
from warehouse.returns.product_return import ProductReturn
from warehouse.utils.tenancy import load_for_tenant

logger = structlog.get_logger(__name__)


@warehouse.command(part_of="ProductReturn")
class ShipProductReturn:
    tenant_id = Identifier(required=True)
    return_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    shipped_by = String(required=True, max_length=100)
    ship_to = String(max_length=500)
    notes = Text()
    shipping_unit_price = Float(min_value=0.0)
    shipping_cost = Float(min_value=0.0)
    create_invoice = Boolean(default=False)
    sold_to = Text()  # JSON {name, email, phone, address}


def shipping_charge(quantity: int, unit_price: float | None, total_cost: float | None) -> tuple[float, float]:
    """Resolve (unit_price, total) from an admin-entered unit price or total cost."""
    if unit_price is not None:
        total = total_cost if total_cost is not None else quantity * unit_price
        return unit_price, round(total, 2)
    if total_cost is not None:
        return round(total_cost / quantity, 2), round(total_cost, 2)
    raise ValidationError({"shipping_unit_price": ["A shipping unit price or total cost is required"]})


@warehouse.command_handler(part_of=ProductReturn)
class ShipProductReturnHandler:
    @handle(ShipProductReturn)
    def ship(self, command):
        if not command.ship_to or not command.ship_to.strip():
            raise ValidationError({"ship_to": ["Please enter a ship to destination"]})

        product_return = load_for_tenant(ProductReturn, command.return_id, command.tenant_id)

        unit_price = command.shipping_unit_price
        total = None
        invoice = None
        if command.create_invoice:
            sold_to = parse_sold_to(command.sold_to)
            unit_price, total = shipping_charge(command.quantity, command.shipping_unit_price, command.shipping_cost)
            invoice = shipment_invoice(product_return, sold_to, command.quantity, unit_price, total, command.ship_to)
        elif unit_price is not None or command.shipping_cost is not None:
            unit_price, total = shipping_charge(command.quantity, command.shipping_unit_price, command.shipping_cost)

        product_return.ship(
            quantity=command.quantity,
            shipped_by=command.shipped_by,
            ship_to=command.ship_to,
            notes=command.notes,
            invoice_id=str(invoice.id) if invoice else None,
            invoice_number=invoice.invoice_number if invoice else None,
            shipping_unit_price=unit_price,
            shipping_total=total,
        )

        current_domain.repository_for(ProductReturn).add(product_return)
        if invoice:
            current_domain.repository_for(Invoice).add(invoice)

        logger.info(
            "Product return units shipped",
            tenant_id=str(command.tenant_id),
            return_id=str(product_return.id),
            quantity=command.quantity,
            shipped_quantity=product_return.shipped_quantity,
            invoice_number=invoice.invoice_number if invoice else None,
        )
        return str(invoice.id) if invoice else None
