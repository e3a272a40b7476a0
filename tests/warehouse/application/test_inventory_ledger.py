"""Application tests for the InventoryLedger transactional gateway."""

from uuid import uuid4

import pytest
from protean import UnitOfWork, current_domain
from protean.exceptions import InvalidOperationError
from warehouse.exceptions import MissingReferenceError
from warehouse.inventory.item import InventoryItem
from warehouse.inventory.ledger import InventoryLedger
from warehouse.inventory.registration import RegisterInventoryItem


def _register(tenant_id, quantity=10):
    return current_domain.process(
        RegisterInventoryItem(tenant_id=tenant_id, product_name="Widget", quantity=quantity),
        asynchronous=False,
    )


class TestLedgerReads:
    def test_get_returns_tenant_item(self):
        tenant = str(uuid4())
        item_id = _register(tenant)
        assert InventoryLedger(tenant).get(item_id).quantity == 10

    def test_get_missing_raises(self):
        with pytest.raises(MissingReferenceError) as exc:
            InventoryLedger(str(uuid4())).get("no-such-item")
        assert "Inventory item `no-such-item` was not found" in str(exc.value)

    def test_find_hides_other_tenants(self):
        item_id = _register(str(uuid4()))
        assert InventoryLedger(str(uuid4())).find(item_id) is None


class TestLedgerWrites:
    def test_adjust_outside_unit_of_work_is_refused(self):
        tenant = str(uuid4())
        item_id = _register(tenant)
        ledger = InventoryLedger(tenant)
        ledger.get(item_id)

        with pytest.raises(InvalidOperationError) as exc:
            ledger.adjust(item_id, -1)
        assert "active unit of work" in str(exc.value)

    def test_adjust_requires_prior_read(self):
        tenant = str(uuid4())
        item_id = _register(tenant)

        with UnitOfWork():
            with pytest.raises(InvalidOperationError) as exc:
                InventoryLedger(tenant).adjust(item_id, -1)
        assert "must be read before it is written" in str(exc.value)

    def test_adjust_inside_unit_of_work_persists(self):
        tenant = str(uuid4())
        item_id = _register(tenant)

        with UnitOfWork():
            ledger = InventoryLedger(tenant)
            ledger.get(item_id)
            assert ledger.adjust(item_id, -4) == 6

        assert current_domain.repository_for(InventoryItem).get(item_id).quantity == 6

    def test_stock_new_creates_in_stock_item(self):
        tenant = str(uuid4())

        with UnitOfWork():
            item = InventoryLedger(tenant).stock_new("Returned Mug", 7, sku="RM-1")

        stored = current_domain.repository_for(InventoryItem).get(item.id)
        assert stored.quantity == 7
        assert stored.status == "In Stock"
