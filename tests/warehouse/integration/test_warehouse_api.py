"""Integration tests for the warehouse API endpoints via TestClient."""

from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from warehouse.api import (
    inventory_router,
    pricing_router,
    register_warehouse_exception_handlers,
    return_router,
    shipment_router,
)
from warehouse.exceptions import ConflictError
from warehouse.inventory.item import InventoryItem


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(inventory_router)
    app.include_router(shipment_router)
    app.include_router(return_router)
    app.include_router(pricing_router)
    register_warehouse_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def tenant():
    return {"X-Tenant-ID": str(uuid4())}


def _register(client, tenant, quantity=20, name="Widget"):
    response = client.post("/inventory", json={"product_name": name, "quantity": quantity}, headers=tenant)
    assert response.status_code == 201
    return response.json()["item_id"]


def _stock(item_id):
    return current_domain.repository_for(InventoryItem).get(item_id).quantity


class TestInventoryAPI:
    def test_register_and_read(self, client, tenant):
        item_id = _register(client, tenant, quantity=5)
        response = client.get(f"/inventory/{item_id}", headers=tenant)
        assert response.status_code == 200
        assert response.json()["quantity"] == 5

    def test_tenant_header_is_required(self, client):
        response = client.post("/inventory", json={"product_name": "Widget"})
        assert response.status_code == 422

    def test_restock(self, client, tenant):
        item_id = _register(client, tenant, quantity=5)
        response = client.put(
            f"/inventory/{item_id}/restock",
            json={"quantity": 7, "restocked_by": "admin@prep.test"},
            headers=tenant,
        )
        assert response.status_code == 200
        assert response.json() == {"item_id": item_id, "quantity": 12}

    def test_edit_negative_quantity_is_400(self, client, tenant):
        item_id = _register(client, tenant)
        response = client.put(
            f"/inventory/{item_id}",
            json={"product_name": "Widget", "quantity": -1, "edited_by": "admin@prep.test"},
            headers=tenant,
        )
        assert response.status_code == 400

    def test_recycle_and_delete(self, client, tenant):
        item_id = _register(client, tenant, quantity=10)
        response = client.put(
            f"/inventory/{item_id}/recycle",
            json={"quantity": 4, "recycled_by": "admin@prep.test"},
            headers=tenant,
        )
        assert response.json()["quantity"] == 6

        response = client.post(f"/inventory/{item_id}/delete", json={"deleted_by": "admin@prep.test"}, headers=tenant)
        assert response.status_code == 200
        assert client.get(f"/inventory/{item_id}", headers=tenant).status_code == 404

    def test_other_tenant_gets_404(self, client, tenant):
        item_id = _register(client, tenant)
        response = client.get(f"/inventory/{item_id}", headers={"X-Tenant-ID": str(uuid4())})
        assert response.status_code == 404


class TestShipmentRequestAPI:
    def _submit(self, client, tenant, lines):
        response = client.post(
            "/shipment-requests",
            json={"lines": lines, "product_type": "Standard", "shipment_type": "product"},
            headers=tenant,
        )
        assert response.status_code == 201
        return response.json()["request_id"]

    def test_confirm_then_reject_round_trip(self, client, tenant):
        item_id = _register(client, tenant, quantity=20)
        request_id = self._submit(client, tenant, [{"product_id": item_id, "quantity": 5, "pack_of": 2}])

        response = client.put(
            f"/shipment-requests/{request_id}/confirm",
            json={"confirmed_by": "admin@prep.test"},
            headers=tenant,
        )
        assert response.status_code == 200
        assert response.json()["shipped_record_id"]
        assert _stock(item_id) == 10

        response = client.put(
            f"/shipment-requests/{request_id}/reject",
            json={"rejected_by": "admin@prep.test", "reason": "Customer cancelled"},
            headers=tenant,
        )
        assert response.status_code == 200
        assert _stock(item_id) == 20
        assert client.get(f"/shipment-requests/{request_id}", headers=tenant).json()["status"] == "rejected"

    def test_insufficient_stock_is_400(self, client, tenant):
        item_a = _register(client, tenant, quantity=20)
        item_b = _register(client, tenant, quantity=0)
        request_id = self._submit(
            client,
            tenant,
            [{"product_id": item_a, "quantity": 5, "pack_of": 2}, {"product_id": item_b, "quantity": 1}],
        )

        response = client.put(
            f"/shipment-requests/{request_id}/confirm",
            json={"confirmed_by": "admin@prep.test"},
            headers=tenant,
        )

        assert response.status_code == 400
        assert _stock(item_a) == 20

    def test_unknown_request_is_404(self, client, tenant):
        response = client.put(
            f"/shipment-requests/{uuid4()}/confirm",
            json={"confirmed_by": "admin@prep.test"},
            headers=tenant,
        )
        assert response.status_code == 404


class TestProductReturnAPI:
    def test_full_lifecycle_credits_remainder(self, client, tenant):
        response = client.post(
            "/product-returns",
            json={"product_name": "Ceramic Mug", "requested_quantity": 50},
            headers=tenant,
        )
        return_id = response.json()["return_id"]

        client.put(f"/product-returns/{return_id}/approve", json={"approved_by": "admin@prep.test"}, headers=tenant)
        client.put(
            f"/product-returns/{return_id}/receive",
            json={"quantity": 50, "received_by": "dock-1"},
            headers=tenant,
        )
        response = client.put(
            f"/product-returns/{return_id}/ship",
            json={"quantity": 10, "shipped_by": "dock-1", "ship_to": "Acme DC"},
            headers=tenant,
        )
        assert response.status_code == 200

        response = client.put(
            f"/product-returns/{return_id}/close",
            json={"closed_by": "admin@prep.test", "return_fee": 2.0, "packing_fee": 10.0},
            headers=tenant,
        )

        assert response.status_code == 200
        assert response.json()["pricing"] == {"return_fee": 2.0, "total": 110.0, "packing_fee": 10.0}
        product_return = client.get(f"/product-returns/{return_id}", headers=tenant).json()
        assert product_return["status"] == "closed"
        credited = (
            current_domain.repository_for(InventoryItem)
            ._dao.query.filter(tenant_id=tenant["X-Tenant-ID"])
            .all()
            .items
        )
        assert [item.quantity for item in credited] == [40]

    def test_reject_without_reason_is_400(self, client, tenant):
        response = client.post(
            "/product-returns",
            json={"product_name": "Ceramic Mug", "requested_quantity": 5},
            headers=tenant,
        )
        return_id = response.json()["return_id"]

        response = client.put(
            f"/product-returns/{return_id}/reject",
            json={"rejected_by": "admin@prep.test", "reason": " "},
            headers=tenant,
        )
        assert response.status_code == 400

    def test_close_before_receiving_is_400(self, client, tenant):
        response = client.post(
            "/product-returns",
            json={"product_name": "Ceramic Mug", "requested_quantity": 5},
            headers=tenant,
        )
        return_id = response.json()["return_id"]
        client.put(f"/product-returns/{return_id}/approve", json={"approved_by": "admin@prep.test"}, headers=tenant)

        response = client.put(
            f"/product-returns/{return_id}/close",
            json={"closed_by": "admin@prep.test", "return_fee": 2.0},
            headers=tenant,
        )
        assert response.status_code == 400


class TestPricingAPI:
    def test_define_rule(self, client, tenant):
        response = client.post(
            "/pricing/rules",
            json={
                "service": "FBM",
                "product_type": "Standard",
                "package": "Starter",
                "quantity_range": "<25",
                "rate": 1.5,
            },
            headers=tenant,
        )
        assert response.status_code == 201

    def test_unknown_range_is_400(self, client, tenant):
        response = client.post(
            "/pricing/rules",
            json={
                "service": "FBM",
                "product_type": "Standard",
                "package": "Starter",
                "quantity_range": "10-20",
                "rate": 1.5,
            },
            headers=tenant,
        )
        assert response.status_code == 400

    def test_set_service_rates(self, client, tenant):
        response = client.post("/pricing/service-rates", json={"bubble_wrap_price": 0.2}, headers=tenant)
        assert response.status_code == 201
        assert response.json()["id"]


class TestConflictMapping:
    def test_conflict_is_retryable_409(self):
        app = FastAPI()
        register_warehouse_exception_handlers(app)

        @app.get("/boom")
        async def boom():
            raise ConflictError("Inventory item was modified concurrently")

        response = TestClient(app).get("/boom")
        assert response.status_code == 409
        assert response.json() == {"error": "Inventory item was modified concurrently", "retryable": True}
