"""Invoice aggregate (CQRS): billing artifacts produced by return workflows.

Monetary fields are computed and persisted inside the workflow's unit of
work. Rendering the document happens afterwards (see ``rendering.py``) and
only ever touches ``document_url``/``render_error``.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, String, Text, ValueObject

from warehouse.domain import warehouse
from warehouse.invoice.events import InvoiceGenerated, InvoiceRendered


class InvoiceStatus(Enum):
    PENDING = "pending"
    PAID = "paid"


class InvoiceType(Enum):
    PRODUCT_RETURN = "product_return"
    PRODUCT_RETURN_SHIPMENT = "product_return_shipment"


def invoice_number_for(issued_at: datetime) -> str:
    return f"INV-{issued_at:%Y%m%d}-{uuid4().hex[:8].upper()}"


def order_number_for(issued_at: datetime) -> str:
    return f"ORD-{issued_at:%Y%m%d}-{uuid4().hex[:4].upper()}"


@warehouse.value_object(part_of="Invoice")
class SoldTo:
    """Billing recipient."""

    name = String(required=True, max_length=255)
    email = String(max_length=255)
    phone = String(max_length=50)
    address = String(max_length=500)


@warehouse.entity(part_of="Invoice")
class InvoiceLine:
    description = String(required=True, max_length=500)
    sku = String(max_length=100)
    quantity = Float(required=True)
    unit_price = Float(required=True)
    amount = Float(required=True)
    ship_to = String(max_length=500)


@warehouse.aggregate
class Invoice:
    tenant_id = Identifier(required=True)
    invoice_number = String(required=True, max_length=50)
    order_number = String(required=True, max_length=50)
    invoice_type = String(required=True, choices=InvoiceType)
    service = String(max_length=100)
    status = String(
        choices=InvoiceStatus,
        default=InvoiceStatus.PENDING.value,
    )
    sold_to = ValueObject(SoldTo)
    lines = HasMany(InvoiceLine)
    subtotal = Float(default=0.0)
    grand_total = Float(default=0.0)
    product_return_id = Identifier()
    document_url = String(max_length=500)
    render_error = Text()
    issued_at = DateTime()
    rendered_at = DateTime()

    @classmethod
    def generate(
        cls,
        tenant_id: str,
        invoice_type: str,
        service: str,
        sold_to: SoldTo,
        lines_data: list[dict],
        product_return_id: str | None = None,
    ):
        """Create a pending invoice whose totals are the sum of its line amounts."""
        if not lines_data:
            raise ValidationError({"lines": ["An invoice needs at least one line"]})

        now = datetime.now(UTC)
        subtotal = round(sum(line["amount"] for line in lines_data), 2)
        invoice = cls(
            tenant_id=tenant_id,
            invoice_number=invoice_number_for(now),
            order_number=order_number_for(now),
            invoice_type=invoice_type,
            service=service,
            status=InvoiceStatus.PENDING.value,
            sold_to=sold_to,
            subtotal=subtotal,
            grand_total=subtotal,
            product_return_id=product_return_id,
            issued_at=now,
        )
        for line_data in lines_data:
            invoice.add_lines(InvoiceLine(**line_data))

        invoice.raise_(
            InvoiceGenerated(
                invoice_id=str(invoice.id),
                tenant_id=tenant_id,
                invoice_number=invoice.invoice_number,
                invoice_type=invoice_type,
                grand_total=invoice.grand_total,
                product_return_id=product_return_id,
                generated_at=now,
            )
        )
        return invoice

    def mark_rendered(self, document_url: str) -> None:
        now = datetime.now(UTC)
        self.document_url = document_url
        self.render_error = None
        self.rendered_at = now
        self.raise_(
            InvoiceRendered(
                invoice_id=str(self.id),
                invoice_number=self.invoice_number,
                document_url=document_url,
                rendered_at=now,
            )
        )

    def mark_render_failed(self, error: str) -> None:
        self.render_error = error

    def as_document(self) -> dict:
        """Assemble the data object handed to the renderer."""
        return {
            "invoice_number": self.invoice_number,
            "order_number": self.order_number,
            "date": self.issued_at.strftime("%d/%m/%Y") if self.issued_at else None,
            "type": self.invoice_type,
            "service": self.service,
            "status": self.status,
            "sold_to": {
                "name": self.sold_to.name,
                "email": self.sold_to.email or "",
                "phone": self.sold_to.phone or "",
                "address": self.sold_to.address or "",
            }
            if self.sold_to
            else None,
            "items": [
                {
                    "description": line.description,
                    "sku": line.sku,
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                    "amount": line.amount,
                    "ship_to": line.ship_to or "",
                }
                for line in self.lines or []
            ],
            "subtotal": self.subtotal,
            "grand_total": self.grand_total,
        }
