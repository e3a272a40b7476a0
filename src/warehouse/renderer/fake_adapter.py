"""Fake invoice renderer: returns a predictable document URL."""

from warehouse.renderer.port import InvoiceRenderer, RenderResult


class FakeRenderer(InvoiceRenderer):
    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Renderer unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Renderer unavailable") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def render(self, invoice_data: dict) -> RenderResult:
        self.calls.append(invoice_data)
        if not self.should_succeed:
            return RenderResult(success=False, failure_reason=self.failure_reason)
        return RenderResult(
            success=True,
            document_url=f"https://documents.example.com/invoices/{invoice_data['invoice_number']}.pdf",
        )
