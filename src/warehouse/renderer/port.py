"""Invoice renderer port: turns an assembled invoice into a document."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RenderResult:
    success: bool
    document_url: str | None = None
    failure_reason: str | None = None


class InvoiceRenderer(ABC):
    @abstractmethod
    def render(self, invoice_data: dict) -> RenderResult:
        """Render ``invoice_data`` (see ``Invoice.as_document``)."""
        ...
