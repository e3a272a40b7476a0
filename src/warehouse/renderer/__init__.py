"""Invoice renderer factory.

Provides get_renderer() / set_renderer() to swap implementations. Only the
fake renderer ships with the service; production deployments inject theirs
with set_renderer() at startup.
"""

import os

from warehouse.renderer.port import InvoiceRenderer

_renderer_instance: InvoiceRenderer | None = None


def get_renderer() -> InvoiceRenderer:
    global _renderer_instance
    if _renderer_instance is None:
        adapter = os.environ.get("INVOICE_RENDERER", "fake")
        if adapter == "fake":
            from warehouse.renderer.fake_adapter import FakeRenderer

            _renderer_instance = FakeRenderer()
        else:
            raise ValueError(f"Unknown invoice renderer: {adapter}")
    return _renderer_instance


def set_renderer(renderer: InvoiceRenderer) -> None:
    """Override the active renderer (useful for tests)."""
    global _renderer_instance
    _renderer_instance = renderer


def reset_renderer() -> None:
    global _renderer_instance
    _renderer_instance = None
