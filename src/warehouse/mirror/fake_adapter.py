"""Fake inventory mirror for development and testing.

Records every call and can be configured to fail, raising the same
``ExternalSyncError`` a real adapter would.
"""

from warehouse.exceptions import ExternalSyncError
from warehouse.mirror.port import MirrorPort, MirrorRef, SyncResult


class FakeMirror(MirrorPort):
    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Mirror unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Mirror unavailable") -> None:
        """Configure the fake mirror behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def sync_inventory(self, tenant_id: str, ref: MirrorRef, new_quantity: int) -> SyncResult:
        self.calls.append(
            {
                "tenant_id": tenant_id,
                "source": ref.source,
                "shop": ref.shop,
                "variant_id": ref.variant_id,
                "inventory_item_id": ref.inventory_item_id,
                "new_quantity": new_quantity,
            }
        )
        if not self.should_succeed:
            raise ExternalSyncError(self.failure_reason)
        return SyncResult(success=True, external_quantity=new_quantity)
