"""Closing a product return.

Closing settles everything received but not yet shipped: the remainder is
either shipped to the customer's address (one ShippedRecord linked to the
return) or credited back to the tenant's inventory. Inventory lookups all
happen before the first write, and an optional invoice is persisted in the
same unit of work. Rendering its document happens after commit.
"""

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from warehouse.domain import warehouse
from warehouse.inventory.ledger import InventoryLedger
from warehouse.invoice.invoice import Invoice
from warehouse.pricing.calculator import return_close_pricing
from warehouse.returns.invoicing import close_invoice, parse_sold_to
from warehouse.returns.product_return import ProductReturn, ReturnType
from warehouse.shipment.shipped import ShippedRecord
from warehouse.utils.tenancy import load_for_tenant

logger = structlog.get_logger(__name__)


@warehouse.command(part_of="ProductReturn")
class CloseProductReturn:
    tenant_id = Identifier(required=True)
    return_id = Identifier(required=True)
    closed_by = String(required=True, max_length=100)
    return_fee = Float(required=True, min_value=0.0)
    packing_fee = Float(min_value=0.0)
    box_quantity = Integer(min_value=1, default=1)
    pallet_fee = Float(min_value=0.0)
    pallet_quantity = Integer(min_value=1, default=1)
    shipping_unit_price = Float(min_value=0.0)
    create_invoice = Boolean(default=False)
    sold_to = Text()  # JSON {name, email, phone, address}


@warehouse.command_handler(part_of=ProductReturn)
class CloseProductReturnHandler:
    @handle(CloseProductReturn)
    def close(self, command):
        product_return = load_for_tenant(ProductReturn, command.return_id, command.tenant_id)
        product_return.assert_closable()
        sold_to = parse_sold_to(command.sold_to) if command.create_invoice else None

        services = product_return.additional_services
        packing_fee = command.packing_fee
        if packing_fee is None and services and services.packing:
            packing_fee = services.packing_fee
        pallet_fee = command.pallet_fee
        if pallet_fee is None and services and services.palletizing:
            pallet_fee = services.pallet_fee

        remaining = product_return.remaining_quantity
        will_ship = product_return.will_ship_on_close
        pricing = return_close_pricing(
            return_fee=command.return_fee,
            received_quantity=product_return.received_quantity,
            remaining_quantity=remaining,
            packing_fee=packing_fee or 0.0,
            pallet_fee=pallet_fee or 0.0,
            shipping_unit_price=command.shipping_unit_price or 0.0,
            ship_to_address=product_return.ships_to_address,
        )

        # -------------------------------------------------------------------
        # Read phase
        # -------------------------------------------------------------------
        ledger = InventoryLedger(command.tenant_id)
        credit_item = None
        if not will_ship and remaining > 0 and product_return.return_type == ReturnType.EXISTING.value:
            credit_item = ledger.find(product_return.product_id) if product_return.product_id else None

        # -------------------------------------------------------------------
        # Write phase
        # -------------------------------------------------------------------
        ship_to = product_return.ship_to_line
        product_return.close(command.closed_by, pricing)

        record = None
        if will_ship:
            record = ShippedRecord.for_product_return(
                product_return,
                quantity=remaining,
                shipping_unit_price=pricing.shipping_unit_price,
                ship_to=ship_to,
            )
            current_domain.repository_for(ShippedRecord).add(record)
        elif remaining > 0:
            if credit_item is not None:
                ledger.adjust(str(credit_item.id), remaining)
            else:
                ledger.stock_new(product_return.product_name, remaining, sku=product_return.sku)

        invoice = None
        if sold_to is not None:
            invoice = close_invoice(
                product_return,
                sold_to,
                pricing,
                box_quantity=command.box_quantity,
                pallet_quantity=command.pallet_quantity,
            )
            product_return.attach_invoice(str(invoice.id), invoice.invoice_number)
            current_domain.repository_for(Invoice).add(invoice)

        current_domain.repository_for(ProductReturn).add(product_return)

        logger.info(
            "Product return closed",
            tenant_id=str(command.tenant_id),
            return_id=str(product_return.id),
            received_quantity=product_return.received_quantity,
            shipped_on_close=remaining if will_ship else 0,
            credited_quantity=0 if will_ship else remaining,
            total=pricing.total,
            shipped_record_id=str(record.id) if record else None,
            invoice_number=invoice.invoice_number if invoice else None,
        )
        return pricing.as_document()
