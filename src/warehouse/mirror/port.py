"""External inventory mirror port.

Storefronts (e.g. Shopify) keep their own copy of stock levels. Adapters
push the ledger's *absolute* quantity, so repeating a call is harmless.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class MirrorRef:
    """Identifies one product in an external storefront."""

    source: str
    shop: str
    variant_id: str
    inventory_item_id: str | None = None


@dataclass(frozen=True)
class SyncResult:
    success: bool
    external_quantity: int | None = None
    failure_reason: str | None = None


class MirrorPort(ABC):
    """Abstract interface for inventory mirror adapters."""

    @abstractmethod
    def sync_inventory(self, tenant_id: str, ref: MirrorRef, new_quantity: int) -> SyncResult:
        """Set the external quantity for ``ref`` to ``new_quantity``.

        Raises:
            ExternalSyncError: when the external system cannot be reached or
                refuses the update.
        """
        ...
