"""HTTP inventory mirror: POSTs absolute quantities to a sync endpoint."""

import requests

from warehouse.exceptions import ExternalSyncError
from warehouse.mirror.port import MirrorPort, MirrorRef, SyncResult


class HttpMirror(MirrorPort):
    def __init__(self, sync_url: str, timeout: float = 10.0, session: requests.Session | None = None) -> None:
        self.sync_url = sync_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def sync_inventory(self, tenant_id: str, ref: MirrorRef, new_quantity: int) -> SyncResult:
        payload = {
            "tenantId": tenant_id,
            "shop": ref.shop,
            "variantId": ref.variant_id,
            "inventoryItemId": ref.inventory_item_id,
            "newQuantity": new_quantity,
        }
        try:
            response = self.session.post(self.sync_url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ExternalSyncError(f"Sync request failed: {exc}") from exc

        if not response.ok:
            raise ExternalSyncError(
                f"Sync rejected with HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        body = response.json() if response.content else {}
        return SyncResult(success=True, external_quantity=body.get("quantity", new_quantity))
