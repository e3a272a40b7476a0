"""Inventory ledger: the transactional gateway to a tenant's stock.

Workflows never touch ``InventoryItem`` repositories directly. A ledger is
created per unit of work and enforces read-before-write ordering: every
item must be read through ``get``/``find`` before it can be adjusted or
removed, so all reads of a transaction complete before its first write.
"""

import structlog
from protean.exceptions import InvalidOperationError, ObjectNotFoundError
from protean.utils.globals import current_domain, current_uow

from warehouse.exceptions import MissingReferenceError
from warehouse.inventory.item import InventoryItem

logger = structlog.get_logger(__name__)


class InventoryLedger:
    def __init__(self, tenant_id: str):
        self.tenant_id = str(tenant_id)
        self._repo = current_domain.repository_for(InventoryItem)
        self._read: dict[str, InventoryItem] = {}

    def find(self, product_id: str) -> InventoryItem | None:
        """Read an item, returning None when it is not in this tenant's ledger."""
        product_id = str(product_id)
        if product_id in self._read:
            return self._read[product_id]

        try:
            item = self._repo.get(product_id)
        except ObjectNotFoundError:
            return None
        if str(item.tenant_id) != self.tenant_id:
            return None

        self._read[product_id] = item
        return item

    def get(self, product_id: str) -> InventoryItem:
        item = self.find(product_id)
        if item is None:
            raise MissingReferenceError("Inventory item", str(product_id))
        return item

    def adjust(self, product_id: str, delta: int) -> int:
        """Apply a stock movement to an item read earlier in this transaction."""
        item = self._item_for_write(product_id)
        new_quantity = item.adjust_quantity(delta)
        self._repo.add(item)
        logger.debug(
            "Inventory adjusted",
            tenant_id=self.tenant_id,
            item_id=str(item.id),
            delta=delta,
            quantity=new_quantity,
        )
        return new_quantity

    def stock_new(self, product_name: str, quantity: int, sku: str | None = None) -> InventoryItem:
        """Schedule creation of a new item holding returned or received stock."""
        self._assert_in_transaction()
        item = InventoryItem.register(
            tenant_id=self.tenant_id,
            product_name=product_name,
            quantity=quantity,
            sku=sku,
        )
        self._repo.add(item)
        self._read[str(item.id)] = item
        return item

    def save(self, product_id: str) -> InventoryItem:
        """Persist non-quantity changes made to an item read earlier."""
        item = self._item_for_write(product_id)
        self._repo.add(item)
        return item

    def remove(self, product_id: str) -> None:
        item = self._item_for_write(product_id)
        self._repo._dao.delete(item)
        del self._read[str(product_id)]

    def _item_for_write(self, product_id: str) -> InventoryItem:
        self._assert_in_transaction()
        item = self._read.get(str(product_id))
        if item is None:
            raise InvalidOperationError(f"Inventory item `{product_id}` must be read before it is written")
        return item

    def _assert_in_transaction(self) -> None:
        if not current_uow or not current_uow.in_progress:
            raise InvalidOperationError("Inventory writes require an active unit of work")
