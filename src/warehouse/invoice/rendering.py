"""Post-commit invoice rendering.

Reacts to InvoiceGenerated once the workflow's unit of work has committed.
Rendering is best effort: a failure is logged and recorded on the invoice,
and the invoice's monetary fields are never touched here.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from warehouse.domain import warehouse
from warehouse.invoice.events import InvoiceGenerated
from warehouse.invoice.invoice import Invoice
from warehouse.renderer import get_renderer

logger = structlog.get_logger(__name__)


@warehouse.event_handler(part_of=Invoice)
class InvoiceDocumentRenderer:
    @handle(InvoiceGenerated)
    def on_invoice_generated(self, event: InvoiceGenerated) -> None:
        repo = current_domain.repository_for(Invoice)

        try:
            invoice = repo.get(event.invoice_id)
        except ObjectNotFoundError:
            logger.error("Invoice to render was not found", invoice_id=str(event.invoice_id))
            return

        if invoice.document_url:
            return

        try:
            result = get_renderer().render(invoice.as_document())
        except Exception as exc:
            logger.error(
                "Invoice rendering failed",
                invoice_id=str(invoice.id),
                invoice_number=invoice.invoice_number,
                error=str(exc),
            )
            invoice.mark_render_failed(str(exc))
        else:
            if result.success:
                invoice.mark_rendered(result.document_url)
                logger.info(
                    "Invoice rendered",
                    invoice_id=str(invoice.id),
                    invoice_number=invoice.invoice_number,
                )
            else:
                logger.error(
                    "Invoice renderer refused document",
                    invoice_id=str(invoice.id),
                    invoice_number=invoice.invoice_number,
                    error=result.failure_reason,
                )
                invoice.mark_render_failed(result.failure_reason or "Unknown rendering error")

        repo.add(invoice)
