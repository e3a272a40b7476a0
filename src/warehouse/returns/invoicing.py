"""Invoice drafting for product return workflows.

Builders here only shape line data; the ``Invoice`` aggregate computes the
totals from the line amounts.
"""

from protean.exceptions import ValidationError

from warehouse.invoice.invoice import Invoice, InvoiceType, SoldTo
from warehouse.pricing.calculator import ReturnClosePricing
from warehouse.shipment.shipped import RETURN_SHIPMENT_SERVICE
from warehouse.utils.payloads import load_json_object

RETURN_SERVICE = "Product Return"


def parse_sold_to(raw: str | None) -> SoldTo:
    """Build the billing recipient; a name is mandatory."""
    data = load_json_object(raw, "sold_to")
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError({"sold_to": ["A recipient name is required to create an invoice"]})
    return SoldTo(
        name=name.strip(),
        email=data.get("email"),
        phone=data.get("phone"),
        address=data.get("address"),
    )


def _line(description, quantity, unit_price, amount, sku=None, ship_to=None) -> dict:
    return {
        "description": description,
        "sku": sku,
        "quantity": quantity,
        "unit_price": round(unit_price, 2),
        "amount": round(amount, 2),
        "ship_to": ship_to,
    }


def shipment_invoice(product_return, sold_to: SoldTo, quantity: int, unit_price: float, total: float, ship_to: str):
    return Invoice.generate(
        tenant_id=str(product_return.tenant_id),
        invoice_type=InvoiceType.PRODUCT_RETURN_SHIPMENT.value,
        service=RETURN_SHIPMENT_SERVICE,
        sold_to=sold_to,
        lines_data=[
            _line(
                f"{product_return.product_name} (Return Shipment)",
                quantity,
                unit_price,
                total,
                sku=product_return.sku,
                ship_to=ship_to,
            )
        ],
        product_return_id=str(product_return.id),
    )


def close_invoice(
    product_return,
    sold_to: SoldTo,
    pricing: ReturnClosePricing,
    box_quantity: int = 1,
    pallet_quantity: int = 1,
):
    lines = [
        _line(
            f"{product_return.product_name} (Return Handling)",
            pricing.received_quantity,
            pricing.return_fee,
            pricing.return_handling,
            sku=product_return.sku,
        )
    ]
    if pricing.packing_fee:
        box_quantity = box_quantity or 1
        lines.append(_line("Packing Service", box_quantity, pricing.packing_fee / box_quantity, pricing.packing_fee))
    if pricing.pallet_fee:
        pallet_quantity = pallet_quantity or 1
        lines.append(
            _line("Palletizing Service", pallet_quantity, pricing.pallet_fee / pallet_quantity, pricing.pallet_fee)
        )
    if pricing.shipping_fee:
        lines.append(
            _line(
                f"{product_return.product_name} (Return Shipment)",
                pricing.shipping_quantity,
                pricing.shipping_unit_price,
                pricing.shipping_fee,
                sku=product_return.sku,
                ship_to=product_return.ship_to_line,
            )
        )

    return Invoice.generate(
        tenant_id=str(product_return.tenant_id),
        invoice_type=InvoiceType.PRODUCT_RETURN.value,
        service=RETURN_SERVICE,
        sold_to=sold_to,
        lines_data=lines,
        product_return_id=str(product_return.id),
    )
