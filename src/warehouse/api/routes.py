"""FastAPI routes for the warehouse back office."""

import json

from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from warehouse.api.schemas import (
    ApproveProductReturnRequest,
    CloseProductReturnRequest,
    ConfirmShipmentRequestRequest,
    DefinePricingRuleRequest,
    DeleteInventoryItemRequest,
    EditInventoryItemRequest,
    ItemIdResponse,
    PricingIdResponse,
    QuantityResponse,
    ReceiveProductReturnRequest,
    RecycleRequest,
    RegisterInventoryItemRequest,
    RejectRequest,
    RequestIdResponse,
    RestockRequest,
    ReturnClosedResponse,
    ReturnIdResponse,
    ReturnShippedResponse,
    SetServiceRatesRequest,
    ShipProductReturnRequest,
    ShippedRecordResponse,
    StatusResponse,
    SubmitProductReturnRequest,
    SubmitShipmentRequestRequest,
)
from warehouse.inventory.editing import EditInventoryItem
from warehouse.inventory.ledger import InventoryLedger
from warehouse.inventory.registration import RegisterInventoryItem
from warehouse.inventory.removal import DeleteInventoryItem, RecycleInventoryItem
from warehouse.inventory.restocking import RestockInventoryItem
from warehouse.pricing.management import DefinePricingRule, SetServiceRates
from warehouse.returns.approval import ApproveProductReturn, RejectProductReturn
from warehouse.returns.closing import CloseProductReturn
from warehouse.returns.product_return import ProductReturn
from warehouse.returns.receiving import ReceiveProductReturn
from warehouse.returns.shipping import ShipProductReturn
from warehouse.returns.submission import SubmitProductReturn
from warehouse.shipment.confirmation import ConfirmShipmentRequest
from warehouse.shipment.rejection import RejectShipmentRequest
from warehouse.shipment.request import ShipmentRequest
from warehouse.shipment.submission import SubmitShipmentRequest
from warehouse.utils.tenancy import load_for_tenant


def _dump(model) -> str | None:
    return json.dumps(model.model_dump()) if model is not None else None


# ---------------------------------------------------------------------------
# Inventory Router
# ---------------------------------------------------------------------------
inventory_router = APIRouter(prefix="/inventory", tags=["inventory"])


@inventory_router.post("", status_code=201, response_model=ItemIdResponse)
async def register_item(body: RegisterInventoryItemRequest, x_tenant_id: str = Header()) -> ItemIdResponse:
    """Register a new stocked item for the tenant."""
    mirror = body.mirror
    command = RegisterInventoryItem(
        tenant_id=x_tenant_id,
        product_name=body.product_name,
        quantity=body.quantity,
        sku=body.sku,
        mirror_source=mirror.source if mirror else None,
        mirror_shop=mirror.shop if mirror else None,
        mirror_variant_id=mirror.variant_id if mirror else None,
        mirror_inventory_item_id=mirror.inventory_item_id if mirror else None,
    )
    result = current_domain.process(command, asynchronous=False)
    return ItemIdResponse(item_id=result)


@inventory_router.get("/{item_id}")
async def get_item(item_id: str, x_tenant_id: str = Header()) -> dict:
    return InventoryLedger(x_tenant_id).get(item_id).to_dict()


@inventory_router.put("/{item_id}/restock", response_model=QuantityResponse)
async def restock_item(item_id: str, body: RestockRequest, x_tenant_id: str = Header()) -> QuantityResponse:
    command = RestockInventoryItem(
        tenant_id=x_tenant_id,
        item_id=item_id,
        quantity=body.quantity,
        restocked_by=body.restocked_by,
    )
    result = current_domain.process(command, asynchronous=False)
    return QuantityResponse(item_id=item_id, quantity=result)


@inventory_router.put("/{item_id}", response_model=StatusResponse)
async def edit_item(item_id: str, body: EditInventoryItemRequest, x_tenant_id: str = Header()) -> StatusResponse:
    command = EditInventoryItem(
        tenant_id=x_tenant_id,
        item_id=item_id,
        product_name=body.product_name,
        quantity=body.quantity,
        edited_by=body.edited_by,
        reason=body.reason,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="edited")


@inventory_router.put("/{item_id}/recycle", response_model=QuantityResponse)
async def recycle_item(item_id: str, body: RecycleRequest, x_tenant_id: str = Header()) -> QuantityResponse:
    """Recycle some or all units; recycling the whole stock removes the item."""
    command = RecycleInventoryItem(
        tenant_id=x_tenant_id,
        item_id=item_id,
        quantity=body.quantity,
        recycled_by=body.recycled_by,
        remarks=body.remarks,
    )
    result = current_domain.process(command, asynchronous=False)
    return QuantityResponse(item_id=item_id, quantity=result)


@inventory_router.post("/{item_id}/delete", response_model=StatusResponse)
async def delete_item(item_id: str, body: DeleteInventoryItemRequest, x_tenant_id: str = Header()) -> StatusResponse:
    command = DeleteInventoryItem(
        tenant_id=x_tenant_id,
        item_id=item_id,
        deleted_by=body.deleted_by,
        reason=body.reason,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Shipment Request Router
# ---------------------------------------------------------------------------
shipment_router = APIRouter(prefix="/shipment-requests", tags=["shipment-requests"])


@shipment_router.post("", status_code=201, response_model=RequestIdResponse)
async def submit_shipment_request(
    body: SubmitShipmentRequestRequest, x_tenant_id: str = Header()
) -> RequestIdResponse:
    command = SubmitShipmentRequest(
        tenant_id=x_tenant_id,
        lines=json.dumps([line.model_dump() for line in body.lines]),
        product_type=body.product_type,
        shipment_type=body.shipment_type,
        service=body.service,
        pallet_sub_type=body.pallet_sub_type,
        custom_dimensions=json.dumps(body.custom_dimensions) if body.custom_dimensions else None,
        label_url=body.label_url,
        remarks=body.remarks,
    )
    result = current_domain.process(command, asynchronous=False)
    return RequestIdResponse(request_id=result)


@shipment_router.get("/{request_id}")
async def get_shipment_request(request_id: str, x_tenant_id: str = Header()) -> dict:
    return load_for_tenant(ShipmentRequest, request_id, x_tenant_id).to_dict()


@shipment_router.put("/{request_id}/confirm", response_model=ShippedRecordResponse)
async def confirm_shipment_request(
    request_id: str, body: ConfirmShipmentRequestRequest, x_tenant_id: str = Header()
) -> ShippedRecordResponse:
    """Deduct stock for every line and create the combined shipped record."""
    command = ConfirmShipmentRequest(
        tenant_id=x_tenant_id,
        request_id=request_id,
        confirmed_by=body.confirmed_by,
        admin_remarks=body.admin_remarks,
        line_pricing=json.dumps(
            {product_id: price.model_dump(exclude_none=True) for product_id, price in body.line_pricing.items()}
        ),
        service_usage=json.dumps({product_id: usage.model_dump() for product_id, usage in body.service_usage.items()}),
        price_per_foot=body.price_per_foot,
        price_per_item=body.price_per_item,
        price_per_label=body.price_per_label,
    )
    result = current_domain.process(command, asynchronous=False)
    return ShippedRecordResponse(request_id=request_id, shipped_record_id=result)


@shipment_router.put("/{request_id}/reject", response_model=StatusResponse)
async def reject_shipment_request(request_id: str, body: RejectRequest, x_tenant_id: str = Header()) -> StatusResponse:
    command = RejectShipmentRequest(
        tenant_id=x_tenant_id,
        request_id=request_id,
        rejected_by=body.rejected_by,
        reason=body.reason,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="rejected")


# ---------------------------------------------------------------------------
# Product Return Router
# ---------------------------------------------------------------------------
return_router = APIRouter(prefix="/product-returns", tags=["product-returns"])


@return_router.post("", status_code=201, response_model=ReturnIdResponse)
async def submit_product_return(body: SubmitProductReturnRequest, x_tenant_id: str = Header()) -> ReturnIdResponse:
    command = SubmitProductReturn(
        tenant_id=x_tenant_id,
        return_type=body.return_type,
        product_id=body.product_id,
        product_name=body.product_name,
        sku=body.sku,
        requested_quantity=body.requested_quantity,
        requested_by=body.requested_by,
        notes=body.notes,
        additional_services=_dump(body.additional_services),
        shipping_address=_dump(body.shipping_address),
    )
    result = current_domain.process(command, asynchronous=False)
    return ReturnIdResponse(return_id=result)


@return_router.get("/{return_id}")
async def get_product_return(return_id: str, x_tenant_id: str = Header()) -> dict:
    return load_for_tenant(ProductReturn, return_id, x_tenant_id).to_dict()


@return_router.put("/{return_id}/approve", response_model=StatusResponse)
async def approve_product_return(
    return_id: str, body: ApproveProductReturnRequest, x_tenant_id: str = Header()
) -> StatusResponse:
    command = ApproveProductReturn(tenant_id=x_tenant_id, return_id=return_id, approved_by=body.approved_by)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="approved")


@return_router.put("/{return_id}/reject", response_model=StatusResponse)
async def reject_product_return(return_id: str, body: RejectRequest, x_tenant_id: str = Header()) -> StatusResponse:
    command = RejectProductReturn(
        tenant_id=x_tenant_id,
        return_id=return_id,
        rejected_by=body.rejected_by,
        reason=body.reason,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="cancelled")


@return_router.put("/{return_id}/receive", response_model=StatusResponse)
async def receive_product_return(
    return_id: str, body: ReceiveProductReturnRequest, x_tenant_id: str = Header()
) -> StatusResponse:
    command = ReceiveProductReturn(
        tenant_id=x_tenant_id,
        return_id=return_id,
        quantity=body.quantity,
        received_by=body.received_by,
        notes=body.notes,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="in_progress")


@return_router.put("/{return_id}/ship", response_model=ReturnShippedResponse)
async def ship_product_return(
    return_id: str, body: ShipProductReturnRequest, x_tenant_id: str = Header()
) -> ReturnShippedResponse:
    command = ShipProductReturn(
        tenant_id=x_tenant_id,
        return_id=return_id,
        quantity=body.quantity,
        shipped_by=body.shipped_by,
        ship_to=body.ship_to,
        notes=body.notes,
        shipping_unit_price=body.shipping_unit_price,
        shipping_cost=body.shipping_cost,
        create_invoice=body.create_invoice,
        sold_to=_dump(body.sold_to),
    )
    result = current_domain.process(command, asynchronous=False)
    return ReturnShippedResponse(return_id=return_id, invoice_id=result)


@return_router.put("/{return_id}/close", response_model=ReturnClosedResponse)
async def close_product_return(
    return_id: str, body: CloseProductReturnRequest, x_tenant_id: str = Header()
) -> ReturnClosedResponse:
    """Close the return: price it, then ship or credit the remainder."""
    command = CloseProductReturn(
        tenant_id=x_tenant_id,
        return_id=return_id,
        closed_by=body.closed_by,
        return_fee=body.return_fee,
        packing_fee=body.packing_fee,
        box_quantity=body.box_quantity,
        pallet_fee=body.pallet_fee,
        pallet_quantity=body.pallet_quantity,
        shipping_unit_price=body.shipping_unit_price,
        create_invoice=body.create_invoice,
        sold_to=_dump(body.sold_to),
    )
    result = current_domain.process(command, asynchronous=False)
    return ReturnClosedResponse(return_id=return_id, pricing=result)


# ---------------------------------------------------------------------------
# Pricing Router
# ---------------------------------------------------------------------------
pricing_router = APIRouter(prefix="/pricing", tags=["pricing"])


@pricing_router.post("/rules", status_code=201, response_model=PricingIdResponse)
async def define_pricing_rule(body: DefinePricingRuleRequest, x_tenant_id: str = Header()) -> PricingIdResponse:
    command = DefinePricingRule(tenant_id=x_tenant_id, **body.model_dump())
    result = current_domain.process(command, asynchronous=False)
    return PricingIdResponse(id=result)


@pricing_router.post("/service-rates", status_code=201, response_model=PricingIdResponse)
async def set_service_rates(body: SetServiceRatesRequest, x_tenant_id: str = Header()) -> PricingIdResponse:
    command = SetServiceRates(tenant_id=x_tenant_id, **body.model_dump())
    result = current_domain.process(command, asynchronous=False)
    return PricingIdResponse(id=result)
