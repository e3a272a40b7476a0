"""Pydantic API schemas for the warehouse back office.

These are the external API contracts, separate from domain commands.
The routes translate between these schemas and domain commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------
class MirrorReferenceRequest(BaseModel):
    source: str
    shop: str | None = None
    variant_id: str | None = None
    inventory_item_id: str | None = None


class RegisterInventoryItemRequest(BaseModel):
    product_name: str
    quantity: int = 0
    sku: str | None = None
    mirror: MirrorReferenceRequest | None = None


class RestockRequest(BaseModel):
    quantity: int
    restocked_by: str


class EditInventoryItemRequest(BaseModel):
    product_name: str
    quantity: int
    edited_by: str
    reason: str | None = None


class RecycleRequest(BaseModel):
    quantity: int
    recycled_by: str
    remarks: str | None = None


class DeleteInventoryItemRequest(BaseModel):
    deleted_by: str
    reason: str | None = None


# ---------------------------------------------------------------------------
# Shipment requests
# ---------------------------------------------------------------------------
class ShipmentLineRequest(BaseModel):
    product_id: str
    product_name: str | None = None
    quantity: int
    pack_of: int = 1
    unit_price: float = 0.0


class SubmitShipmentRequestRequest(BaseModel):
    lines: list[ShipmentLineRequest]
    product_type: str | None = None
    shipment_type: str | None = None
    service: str | None = None
    pallet_sub_type: str | None = None
    custom_dimensions: dict | None = None
    label_url: str | None = None
    remarks: str | None = None


class LinePricingOverride(BaseModel):
    unit_price: float | None = None
    pack_of: int | None = None
    pack_of_price: float | None = None


class ServiceUsageRequest(BaseModel):
    bubble_wrap_feet: float = 0
    sticker_removal_items: int = 0
    warning_labels: int = 0


class ConfirmShipmentRequestRequest(BaseModel):
    confirmed_by: str
    admin_remarks: str | None = None
    line_pricing: dict[str, LinePricingOverride] = Field(default_factory=dict)
    service_usage: dict[str, ServiceUsageRequest] = Field(default_factory=dict)
    price_per_foot: float | None = None
    price_per_item: float | None = None
    price_per_label: float | None = None


class RejectRequest(BaseModel):
    rejected_by: str
    reason: str


# ---------------------------------------------------------------------------
# Product returns
# ---------------------------------------------------------------------------
class ShippingAddressRequest(BaseModel):
    name: str | None = None
    address: str
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    phone: str | None = None
    email: str | None = None


class ReturnServicesRequest(BaseModel):
    ship_to_address: bool = False
    packing: bool = False
    box_quantity: int | None = None
    packing_fee: float | None = None
    palletizing: bool = False
    pallet_quantity: int | None = None
    pallet_fee: float | None = None
    boxes_count: int | None = None


class SubmitProductReturnRequest(BaseModel):
    return_type: str = "new"
    product_id: str | None = None
    product_name: str | None = None
    sku: str | None = None
    requested_quantity: int
    requested_by: str | None = None
    notes: str | None = None
    additional_services: ReturnServicesRequest | None = None
    shipping_address: ShippingAddressRequest | None = None


class ApproveProductReturnRequest(BaseModel):
    approved_by: str


class ReceiveProductReturnRequest(BaseModel):
    quantity: int
    received_by: str
    notes: str | None = None


class SoldToRequest(BaseModel):
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None


class ShipProductReturnRequest(BaseModel):
    quantity: int
    shipped_by: str
    ship_to: str
    notes: str | None = None
    shipping_unit_price: float | None = None
    shipping_cost: float | None = None
    create_invoice: bool = False
    sold_to: SoldToRequest | None = None


class CloseProductReturnRequest(BaseModel):
    closed_by: str
    return_fee: float
    packing_fee: float | None = None
    box_quantity: int = 1
    pallet_fee: float | None = None
    pallet_quantity: int = 1
    shipping_unit_price: float | None = None
    create_invoice: bool = False
    sold_to: SoldToRequest | None = None


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------
class DefinePricingRuleRequest(BaseModel):
    service: str
    product_type: str
    package: str
    quantity_range: str
    rate: float
    pack_of_price: float = 0.0


class SetServiceRatesRequest(BaseModel):
    bubble_wrap_price: float = 0.0
    sticker_removal_price: float = 0.0
    warning_label_price: float = 0.0


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class ItemIdResponse(BaseModel):
    item_id: str


class QuantityResponse(BaseModel):
    item_id: str
    quantity: int


class RequestIdResponse(BaseModel):
    request_id: str


class ShippedRecordResponse(BaseModel):
    request_id: str
    shipped_record_id: str


class ReturnIdResponse(BaseModel):
    return_id: str


class ReturnShippedResponse(BaseModel):
    return_id: str
    invoice_id: str | None = None


class ReturnClosedResponse(BaseModel):
    return_id: str
    pricing: dict


class PricingIdResponse(BaseModel):
    id: str


class StatusResponse(BaseModel):
    status: str
