"""Invoice domain events."""

from protean.fields import DateTime, Float, Identifier, String

from warehouse.domain import warehouse


@warehouse.event(part_of="Invoice")
class InvoiceGenerated:
    """An invoice was created with its monetary fields final."""

    __version__ = 1

    invoice_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    invoice_number = String(required=True)
    invoice_type = String(required=True)
    grand_total = Float(required=True)
    product_return_id = Identifier()
    generated_at = DateTime(required=True)


@warehouse.event(part_of="Invoice")
class InvoiceRendered:
    """The invoice document was produced by the renderer."""

    __version__ = 1

    invoice_id = Identifier(required=True)
    invoice_number = String(required=True)
    document_url = String(required=True)
    rendered_at = DateTime(required=True)
