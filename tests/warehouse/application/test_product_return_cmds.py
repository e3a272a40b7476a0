"""Application tests for the product return lifecycle via domain.process()."""

import json
from uuid import uuid4

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from warehouse.inventory.item import InventoryItem, InventoryStatus
from warehouse.inventory.registration import RegisterInventoryItem
from warehouse.invoice.invoice import Invoice, InvoiceStatus, InvoiceType
from warehouse.returns.approval import ApproveProductReturn, RejectProductReturn
from warehouse.returns.closing import CloseProductReturn
from warehouse.returns.product_return import ProductReturn, ProductReturnStatus
from warehouse.returns.receiving import ReceiveProductReturn
from warehouse.returns.shipping import ShipProductReturn
from warehouse.returns.submission import SubmitProductReturn
from warehouse.shipment.shipped import ShippedRecord

ADMIN = "admin@prep.test"
ADDRESS = {
    "name": "Dana Reyes",
    "address": "12 Harbor Rd",
    "city": "Portland",
    "state": "OR",
    "zip_code": "97201",
    "country": "USA",
}
SOLD_TO = json.dumps({"name": "Acme Outfitters", "email": "billing@acme.test"})


def _submit(tenant_id, requested_quantity=50, services=None, address=None, **fields):
    fields.setdefault("product_name", "Ceramic Mug")
    return current_domain.process(
        SubmitProductReturn(
            tenant_id=tenant_id,
            requested_quantity=requested_quantity,
            additional_services=json.dumps(services) if services else None,
            shipping_address=json.dumps(address) if address else None,
            **fields,
        ),
        asynchronous=False,
    )


def _receive(tenant_id, return_id, quantity, notes=None):
    return current_domain.process(
        ReceiveProductReturn(
            tenant_id=tenant_id, return_id=return_id, quantity=quantity, received_by="dock-1", notes=notes
        ),
        asynchronous=False,
    )


def _approved(tenant_id, received=0, **kwargs):
    return_id = _submit(tenant_id, **kwargs)
    current_domain.process(
        ApproveProductReturn(tenant_id=tenant_id, return_id=return_id, approved_by=ADMIN),
        asynchronous=False,
    )
    if received:
        _receive(tenant_id, return_id, received)
    return return_id


def _ship(tenant_id, return_id, quantity, **fields):
    fields.setdefault("ship_to", "Acme DC, Reno NV")
    return current_domain.process(
        ShipProductReturn(tenant_id=tenant_id, return_id=return_id, quantity=quantity, shipped_by=ADMIN, **fields),
        asynchronous=False,
    )


def _close(tenant_id, return_id, return_fee=2.0, **fields):
    return current_domain.process(
        CloseProductReturn(tenant_id=tenant_id, return_id=return_id, closed_by=ADMIN, return_fee=return_fee, **fields),
        asynchronous=False,
    )


def _load(return_id):
    return current_domain.repository_for(ProductReturn).get(return_id)


def _items(tenant_id):
    return current_domain.repository_for(InventoryItem)._dao.query.filter(tenant_id=tenant_id).all().items


class TestSubmitAndDecide:
    def test_submit_existing_return_names_it_after_item(self):
        tenant = str(uuid4())
        item_id = current_domain.process(
            RegisterInventoryItem(tenant_id=tenant, product_name="Desk Lamp", quantity=2, sku="DL-9"),
            asynchronous=False,
        )

        return_id = _submit(tenant, return_type="existing", product_id=item_id, product_name=None)

        product_return = _load(return_id)
        assert product_return.product_name == "Desk Lamp"
        assert product_return.sku == "DL-9"

    def test_submit_existing_return_for_unknown_item(self):
        with pytest.raises(ObjectNotFoundError):
            _submit(str(uuid4()), return_type="existing", product_id=str(uuid4()))

    def test_reject_cancels(self):
        tenant = str(uuid4())
        return_id = _submit(tenant)

        current_domain.process(
            RejectProductReturn(tenant_id=tenant, return_id=return_id, rejected_by=ADMIN, reason="Not eligible"),
            asynchronous=False,
        )

        product_return = _load(return_id)
        assert product_return.status == ProductReturnStatus.CANCELLED.value
        assert product_return.admin_remarks == "Not eligible"

    def test_other_tenant_cannot_approve(self):
        return_id = _submit(str(uuid4()))
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                ApproveProductReturn(tenant_id=str(uuid4()), return_id=return_id, approved_by=ADMIN),
                asynchronous=False,
            )


class TestReceive:
    def test_receipts_accumulate(self):
        tenant = str(uuid4())
        return_id = _approved(tenant, requested_quantity=50)

        _receive(tenant, return_id, 20)
        assert _load(return_id).status == ProductReturnStatus.IN_PROGRESS.value
        assert _receive(tenant, return_id, 30, notes="Second pallet") == 50

        product_return = _load(return_id)
        assert product_return.received_quantity == 50
        assert len(product_return.receiving_log) == 2
        assert any(entry.notes == "Second pallet" for entry in product_return.receiving_log)

    def test_over_receipt_is_accepted(self):
        tenant = str(uuid4())
        return_id = _approved(tenant, requested_quantity=5)
        assert _receive(tenant, return_id, 9) == 9

    def test_pending_return_cannot_receive(self):
        tenant = str(uuid4())
        return_id = _submit(tenant)
        with pytest.raises(ValidationError):
            _receive(tenant, return_id, 1)


class TestShip:
    def test_ship_partial(self):
        tenant = str(uuid4())
        return_id = _approved(tenant, received=50)

        assert _ship(tenant, return_id, 10) is None

        product_return = _load(return_id)
        assert product_return.shipped_quantity == 10
        assert product_return.status == ProductReturnStatus.IN_PROGRESS.value

    def test_ship_beyond_remaining_is_rejected(self):
        tenant = str(uuid4())
        return_id = _approved(tenant, received=5)
        _ship(tenant, return_id, 3)

        with pytest.raises(ValidationError) as exc:
            _ship(tenant, return_id, 3)
        assert "Only 2 units available" in str(exc.value)
        assert _load(return_id).shipped_quantity == 3

    def test_ship_requires_destination(self):
        tenant = str(uuid4())
        return_id = _approved(tenant, received=5)
        with pytest.raises(ValidationError):
            _ship(tenant, return_id, 1, ship_to="")

    def test_ship_with_invoice_from_total_cost(self):
        tenant = str(uuid4())
        return_id = _approved(tenant, received=20)

        invoice_id = _ship(tenant, return_id, 8, shipping_cost=20.0, create_invoice=True, sold_to=SOLD_TO)

        invoice = current_domain.repository_for(Invoice).get(invoice_id)
        assert invoice.invoice_type == InvoiceType.PRODUCT_RETURN_SHIPMENT.value
        assert invoice.service == "Product Return Shipment"
        assert invoice.status == InvoiceStatus.PENDING.value
        assert invoice.grand_total == 20.0
        assert invoice.lines[0].unit_price == 2.5
        assert invoice.lines[0].description == "Ceramic Mug (Return Shipment)"

        entry = _load(return_id).shipping_log[0]
        assert entry.invoice_id == invoice_id
        assert entry.invoice_number == invoice.invoice_number

    def test_invoice_requires_recipient(self):
        tenant = str(uuid4())
        return_id = _approved(tenant, received=20)
        with pytest.raises(ValidationError) as exc:
            _ship(tenant, return_id, 8, shipping_unit_price=1.0, create_invoice=True)
        assert "recipient name is required" in str(exc.value)
        assert _load(return_id).shipped_quantity == 0

    @pytest.mark.parametrize(
        "sold_to,message",
        [
            ("{not json", "Must be a JSON object"),
            (json.dumps(["Acme Outfitters"]), "Must be a JSON object"),
            (json.dumps({"name": 42}), "recipient name is required"),
        ],
    )
    def test_malformed_recipient_is_a_validation_error(self, sold_to, message):
        tenant = str(uuid4())
        return_id = _approved(tenant, received=20)
        with pytest.raises(ValidationError) as exc:
            _ship(tenant, return_id, 8, shipping_unit_price=1.0, create_invoice=True, sold_to=sold_to)
        assert message in str(exc.value)
        assert _load(return_id).shipped_quantity == 0


class TestClose:
    def test_close_prices_handling_and_packing(self):
        tenant = str(uuid4())
        return_id = _approved(tenant, received=50)

        pricing = _close(tenant, return_id, return_fee=2.0, packing_fee=10.0)

        assert pricing == {"return_fee": 2.0, "total": 110.0, "packing_fee": 10.0}
        product_return = _load(return_id)
        assert product_return.status == ProductReturnStatus.CLOSED.value
        assert product_return.pricing.total == 110.0

    def test_remaining_units_are_credited_as_new_stock(self):
        tenant = str(uuid4())
        return_id = _approved(tenant, received=50)
        _ship(tenant, return_id, 10)

        _close(tenant, return_id)

        [item] = _items(tenant)
        assert item.product_name == "Ceramic Mug"
        assert item.quantity == 40
        assert item.status == InventoryStatus.IN_STOCK.value

    def test_existing_return_credits_the_item(self):
        tenant = str(uuid4())
        item_id = current_domain.process(
            RegisterInventoryItem(tenant_id=tenant, product_name="Desk Lamp", quantity=3),
            asynchronous=False,
        )
        return_id = _approved(tenant, received=12, return_type="existing", product_id=item_id)

        _close(tenant, return_id)

        assert current_domain.repository_for(InventoryItem).get(item_id).quantity == 15
        assert len(_items(tenant)) == 1

    def test_ship_to_address_ships_remainder(self):
        tenant = str(uuid4())
        return_id = _approved(
            tenant,
            received=20,
            services={"ship_to_address": True, "boxes_count": 2},
            address=ADDRESS,
        )
        _ship(tenant, return_id, 5)

        pricing = _close(tenant, return_id, return_fee=1.0, shipping_unit_price=2.0)

        assert pricing["shipping_fee"] == 30.0
        assert pricing["total"] == 50.0
        product_return = _load(return_id)
        assert product_return.shipped_quantity == 20
        assert _items(tenant) == []

        [record] = current_domain.repository_for(ShippedRecord)._dao.query.filter(product_return_id=return_id).all().items
        assert record.service == "Product Return Shipment"
        assert record.product_type == "Standard"
        assert record.total_boxes == 2
        assert record.total_units == 15
        assert record.ship_to == "12 Harbor Rd, Portland OR 97201, USA"
        assert record.remarks == f"Product Return - Request ID: {return_id}"

    def test_close_requires_received_units(self):
        tenant = str(uuid4())
        return_id = _approved(tenant)
        with pytest.raises(ValidationError) as exc:
            _close(tenant, return_id)
        assert "zero received quantity" in str(exc.value)

    def test_second_close_is_rejected_without_double_credit(self):
        tenant = str(uuid4())
        return_id = _approved(tenant, received=10)
        _close(tenant, return_id)

        with pytest.raises(ValidationError):
            _close(tenant, return_id)
        [item] = _items(tenant)
        assert item.quantity == 10

    def test_close_with_invoice(self):
        tenant = str(uuid4())
        return_id = _approved(tenant, received=50)

        _close(
            tenant,
            return_id,
            return_fee=2.0,
            packing_fee=10.0,
            box_quantity=4,
            pallet_fee=30.0,
            create_invoice=True,
            sold_to=SOLD_TO,
        )

        product_return = _load(return_id)
        invoice = current_domain.repository_for(Invoice).get(product_return.invoice_id)
        assert invoice.invoice_number == product_return.invoice_number
        assert invoice.invoice_type == InvoiceType.PRODUCT_RETURN.value
        assert invoice.service == "Product Return"
        assert invoice.sold_to.name == "Acme Outfitters"
        assert invoice.grand_total == 140.0
        descriptions = {line.description: line for line in invoice.lines}
        assert descriptions["Ceramic Mug (Return Handling)"].amount == 100.0
        assert descriptions["Packing Service"].quantity == 4
        assert descriptions["Packing Service"].unit_price == 2.5
        assert descriptions["Palletizing Service"].amount == 30.0

    def test_close_invoice_requires_recipient(self):
        tenant = str(uuid4())
        return_id = _approved(tenant, received=10)
        with pytest.raises(ValidationError):
            _close(tenant, return_id, create_invoice=True)
        assert _load(return_id).status == ProductReturnStatus.IN_PROGRESS.value
        assert _items(tenant) == []

    def test_requested_services_supply_default_fees(self):
        tenant = str(uuid4())
        return_id = _approved(
            tenant,
            received=10,
            services={"packing": True, "packing_fee": 7.5},
        )

        pricing = _close(tenant, return_id, return_fee=1.0)

        assert pricing["packing_fee"] == 7.5
        assert pricing["total"] == 17.5
