"""Tests for the InventoryItem aggregate: status derivation and quantity guards."""

from uuid import uuid4

import pytest
from protean.exceptions import ValidationError
from warehouse.inventory.events import InventoryQuantityChanged
from warehouse.inventory.item import (
    InventoryItem,
    InventoryStatus,
    MirrorReference,
    status_for,
)


def _make_item(quantity=10, mirror=None):
    return InventoryItem.register(
        tenant_id=str(uuid4()),
        product_name="Bamboo Cutting Board",
        quantity=quantity,
        sku="BCB-001",
        mirror=mirror,
    )


def _quantity_events(item):
    return [e for e in item._events if isinstance(e, InventoryQuantityChanged)]


class TestStatusDerivation:
    def test_positive_quantity_is_in_stock(self):
        assert status_for(1) == InventoryStatus.IN_STOCK.value

    def test_zero_quantity_is_out_of_stock(self):
        assert status_for(0) == InventoryStatus.OUT_OF_STOCK.value

    def test_register_derives_status(self):
        assert _make_item(quantity=5).status == InventoryStatus.IN_STOCK.value
        assert _make_item(quantity=0).status == InventoryStatus.OUT_OF_STOCK.value

    def test_status_cannot_disagree_with_quantity(self):
        item = _make_item(quantity=5)
        with pytest.raises(ValidationError) as exc:
            item.status = InventoryStatus.OUT_OF_STOCK.value
        assert "Status must be In Stock" in str(exc.value)


class TestAdjustQuantity:
    def test_decrement(self):
        item = _make_item(quantity=10)
        assert item.adjust_quantity(-4) == 6
        assert item.quantity == 6
        assert item.status == InventoryStatus.IN_STOCK.value

    def test_decrement_to_zero_goes_out_of_stock(self):
        item = _make_item(quantity=3)
        item.adjust_quantity(-3)
        assert item.quantity == 0
        assert item.status == InventoryStatus.OUT_OF_STOCK.value

    def test_increment_from_zero_goes_in_stock(self):
        item = _make_item(quantity=0)
        item.adjust_quantity(7)
        assert item.status == InventoryStatus.IN_STOCK.value

    def test_cannot_go_negative(self):
        item = _make_item(quantity=2)
        with pytest.raises(ValidationError) as exc:
            item.adjust_quantity(-3)
        assert "only 2 on hand" in str(exc.value)
        assert item.quantity == 2

    def test_raises_quantity_changed_with_absolute_level(self):
        item = _make_item(quantity=10)
        item.adjust_quantity(-4)
        event = _quantity_events(item)[-1]
        assert event.previous_quantity == 10
        assert event.new_quantity == 6
        assert event.delta == -4

    def test_quantity_changed_carries_mirror_reference(self):
        mirror = MirrorReference(source="shopify", shop="acme.myshopify.com", variant_id="v-1", inventory_item_id="ii-1")
        item = _make_item(quantity=10, mirror=mirror)
        item.adjust_quantity(1)
        event = _quantity_events(item)[-1]
        assert event.mirror_shop == "acme.myshopify.com"
        assert event.mirror_variant_id == "v-1"
        assert item.is_mirrored


class TestRestockAndEdit:
    def test_restock_adds_units(self):
        item = _make_item(quantity=0)
        assert item.restock(12, "admin@prep.test") == 12
        assert item.status == InventoryStatus.IN_STOCK.value

    def test_restock_requires_positive_quantity(self):
        item = _make_item()
        with pytest.raises(ValidationError):
            item.restock(0, "admin@prep.test")

    def test_edit_renames_and_recounts(self):
        item = _make_item(quantity=10)
        item.edit("Walnut Cutting Board", 0, "admin@prep.test")
        assert item.product_name == "Walnut Cutting Board"
        assert item.quantity == 0
        assert item.status == InventoryStatus.OUT_OF_STOCK.value

    def test_edit_requires_name(self):
        item = _make_item()
        with pytest.raises(ValidationError):
            item.edit("  ", 3, "admin@prep.test")

    def test_edit_without_quantity_change_raises_no_movement(self):
        item = _make_item(quantity=10)
        before = len(_quantity_events(item))
        item.edit("Renamed", 10, "admin@prep.test")
        assert len(_quantity_events(item)) == before
