"""Tests for the ShipmentRequest aggregate: submission, classification and state machine."""

from uuid import uuid4

import pytest
from protean.exceptions import ValidationError
from warehouse.pricing.calculator import LinePrice
from warehouse.shipment.request import (
    AdditionalServicesCharge,
    ShipmentRequest,
    ShipmentRequestStatus,
)


def _make_request(**overrides):
    defaults = {
        "tenant_id": str(uuid4()),
        "lines_data": [
            {"product_id": "prod-a", "product_name": "Widget A", "quantity": 5, "pack_of": 2, "unit_price": 3.0},
            {"product_id": "prod-b", "product_name": "Widget B", "quantity": 1, "pack_of": 1, "unit_price": 4.0},
        ],
        "product_type": "Standard",
        "shipment_type": "product",
        "service": "FBA/WFS/TFS",
    }
    defaults.update(overrides)
    return ShipmentRequest.submit(**defaults)


def _confirm(request):
    prices = {str(line.id): LinePrice(unit_price=line.unit_price, pack_of=line.pack_of) for line in request.lines}
    request.confirm(
        confirmed_by="admin@prep.test",
        line_prices=prices,
        additional_services=AdditionalServicesCharge(total=0.0),
        shipped_record_id=str(uuid4()),
    )


class TestSubmission:
    def test_submit_creates_pending_request(self):
        request = _make_request()
        assert request.status == ShipmentRequestStatus.PENDING.value
        assert len(request.lines) == 2

    def test_submit_requires_a_line(self):
        with pytest.raises(ValidationError) as exc:
            _make_request(lines_data=[])
        assert "at least one line" in str(exc.value)

    def test_line_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            _make_request(lines_data=[{"product_id": "prod-a", "quantity": 0}])


class TestClassification:
    def test_custom_product_request(self):
        assert _make_request(product_type="custom", shipment_type="Product").is_custom

    def test_custom_box_request_is_not_hand_priced(self):
        assert not _make_request(product_type="Custom", shipment_type="box").is_custom

    @pytest.mark.parametrize(
        "shipment_type,pallet_sub_type,label",
        [
            ("box", None, "Box Forwarding"),
            ("pallet", "forwarding", "Pallet Forwarding"),
            ("pallet", "existing_inventory", "Pallet Existing Inventory"),
            ("product", None, "FBA/WFS/TFS"),
        ],
    )
    def test_service_label(self, shipment_type, pallet_sub_type, label):
        request = _make_request(shipment_type=shipment_type, pallet_sub_type=pallet_sub_type)
        assert request.service_label == label

    def test_service_label_uses_requested_service(self):
        assert _make_request(service="FBM").service_label == "FBM"


class TestTransitions:
    def test_confirm_records_effective_pack_of(self):
        request = _make_request()
        _confirm(request)
        assert request.status == ShipmentRequestStatus.CONFIRMED.value
        assert [line.total_units for line in request.lines] == [10, 1]
        assert request.lines[0].line_total == 15.0

    def test_cannot_confirm_twice(self):
        request = _make_request()
        _confirm(request)
        with pytest.raises(ValidationError) as exc:
            _confirm(request)
        assert "Cannot transition from confirmed to confirmed" in str(exc.value)

    def test_reject_pending(self):
        request = _make_request()
        assert request.reject("admin@prep.test", "Duplicate request") is False
        assert request.status == ShipmentRequestStatus.REJECTED.value
        assert request.rejection_reason == "Duplicate request"

    def test_reject_confirmed_reports_restore(self):
        request = _make_request()
        _confirm(request)
        assert request.reject("admin@prep.test", "Customer cancelled") is True

    def test_reject_requires_reason(self):
        request = _make_request()
        with pytest.raises(ValidationError) as exc:
            request.reject("admin@prep.test", "   ")
        assert "rejection reason is required" in str(exc.value)

    def test_rejected_is_terminal(self):
        request = _make_request()
        request.reject("admin@prep.test", "No longer needed")
        with pytest.raises(ValidationError):
            _confirm(request)
