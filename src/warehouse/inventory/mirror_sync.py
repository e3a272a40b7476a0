"""External sync notifier: pushes committed stock levels to storefronts.

Runs as an event handler, so it only ever sees quantities that are already
committed to the ledger. Failures are logged and dropped. The ledger stays
the source of truth and the next quantity change re-sends the absolute
level, so no retry is attempted here.
"""

import structlog
from protean.utils.mixins import handle

from warehouse.domain import warehouse
from warehouse.exceptions import ExternalSyncError
from warehouse.inventory.events import InventoryQuantityChanged
from warehouse.inventory.item import InventoryItem
from warehouse.mirror import get_mirror
from warehouse.mirror.port import MirrorRef

logger = structlog.get_logger(__name__)


@warehouse.event_handler(part_of=InventoryItem)
class InventoryMirrorSync:
    @handle(InventoryQuantityChanged)
    def on_quantity_changed(self, event: InventoryQuantityChanged) -> None:
        if not (event.mirror_source and event.mirror_shop and event.mirror_variant_id):
            logger.debug("Item is not mirrored, skipping sync", item_id=str(event.item_id))
            return

        ref = MirrorRef(
            source=event.mirror_source,
            shop=event.mirror_shop,
            variant_id=event.mirror_variant_id,
            inventory_item_id=event.mirror_inventory_item_id,
        )
        new_quantity = max(0, event.new_quantity)

        try:
            get_mirror().sync_inventory(str(event.tenant_id), ref, new_quantity)
        except ExternalSyncError as exc:
            logger.error(
                "Inventory mirror sync failed",
                item_id=str(event.item_id),
                shop=ref.shop,
                variant_id=ref.variant_id,
                new_quantity=new_quantity,
                error=str(exc),
            )
            return
        except Exception as exc:
            logger.error(
                "Unexpected error during inventory mirror sync",
                item_id=str(event.item_id),
                error=str(exc),
            )
            return

        logger.info(
            "Inventory mirrored",
            item_id=str(event.item_id),
            shop=ref.shop,
            variant_id=ref.variant_id,
            new_quantity=new_quantity,
        )
