"""Application tests for post-commit invoice rendering."""

from datetime import UTC, datetime
from uuid import uuid4

from protean import current_domain
from warehouse.invoice.events import InvoiceGenerated
from warehouse.invoice.invoice import Invoice, InvoiceType, SoldTo
from warehouse.invoice.rendering import InvoiceDocumentRenderer
from warehouse.renderer import get_renderer


def _stored_invoice():
    invoice = Invoice.generate(
        tenant_id=str(uuid4()),
        invoice_type=InvoiceType.PRODUCT_RETURN.value,
        service="Product Return",
        sold_to=SoldTo(name="Acme Outfitters"),
        lines_data=[
            {"description": "Mug (Return Handling)", "quantity": 10, "unit_price": 2.0, "amount": 20.0},
            {"description": "Packing Service", "quantity": 1, "unit_price": 5.0, "amount": 5.0},
        ],
    )
    current_domain.repository_for(Invoice).add(invoice)
    return invoice


def _generated(invoice):
    return InvoiceGenerated(
        invoice_id=str(invoice.id),
        tenant_id=str(invoice.tenant_id),
        invoice_number=invoice.invoice_number,
        invoice_type=invoice.invoice_type,
        grand_total=invoice.grand_total,
        generated_at=datetime.now(UTC),
    )


class TestInvoiceAggregate:
    def test_totals_are_sum_of_lines(self):
        invoice = _stored_invoice()
        assert invoice.subtotal == 25.0
        assert invoice.grand_total == 25.0

    def test_numbers_follow_issue_date(self):
        invoice = _stored_invoice()
        today = invoice.issued_at.strftime("%Y%m%d")
        assert invoice.invoice_number.startswith(f"INV-{today}-")
        assert len(invoice.invoice_number.split("-")[-1]) == 8
        assert invoice.order_number.startswith(f"ORD-{today}-")

    def test_document_shape(self):
        document = _stored_invoice().as_document()
        assert document["sold_to"]["name"] == "Acme Outfitters"
        assert [item["amount"] for item in document["items"]] in ([20.0, 5.0], [5.0, 20.0])
        assert document["grand_total"] == 25.0


class TestInvoiceDocumentRenderer:
    def test_renders_and_stores_url(self):
        invoice = _stored_invoice()
        get_renderer().calls.clear()

        InvoiceDocumentRenderer().on_invoice_generated(_generated(invoice))

        stored = current_domain.repository_for(Invoice).get(invoice.id)
        assert stored.document_url == f"https://documents.example.com/invoices/{invoice.invoice_number}.pdf"
        assert stored.render_error is None

    def test_failure_is_recorded_without_touching_totals(self):
        get_renderer().configure(should_succeed=False, failure_reason="Template missing")
        invoice = _stored_invoice()

        InvoiceDocumentRenderer().on_invoice_generated(_generated(invoice))

        stored = current_domain.repository_for(Invoice).get(invoice.id)
        assert stored.document_url is None
        assert stored.render_error == "Template missing"
        assert stored.grand_total == 25.0

    def test_missing_invoice_is_ignored(self):
        invoice = Invoice.generate(
            tenant_id=str(uuid4()),
            invoice_type=InvoiceType.PRODUCT_RETURN.value,
            service="Product Return",
            sold_to=SoldTo(name="Acme Outfitters"),
            lines_data=[{"description": "Mug", "quantity": 1, "unit_price": 1.0, "amount": 1.0}],
        )
        InvoiceDocumentRenderer().on_invoice_generated(_generated(invoice))
        assert get_renderer().calls == []
