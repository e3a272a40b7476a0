"""ShipmentRequest aggregate (CQRS): a customer's request to ship stock out.

State Machine:
    PENDING → CONFIRMED | REJECTED
    CONFIRMED → REJECTED (stock is restored by the rejection handler)

The effective pack size and prices used at confirmation are recorded on each
line, so a later rejection restores exactly what was deducted.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from warehouse.domain import warehouse
from warehouse.pricing.calculator import LinePrice, ServiceType
from warehouse.shipment.events import (
    ShipmentRequestConfirmed,
    ShipmentRequestRejected,
    ShipmentRequestSubmitted,
)


class ShipmentRequestStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class ShipmentType(Enum):
    PRODUCT = "product"
    BOX = "box"
    PALLET = "pallet"


class PalletSubType(Enum):
    FORWARDING = "forwarding"
    EXISTING_INVENTORY = "existing_inventory"


_VALID_TRANSITIONS = {
    ShipmentRequestStatus.PENDING: {ShipmentRequestStatus.CONFIRMED, ShipmentRequestStatus.REJECTED},
    ShipmentRequestStatus.CONFIRMED: {ShipmentRequestStatus.REJECTED},
    ShipmentRequestStatus.REJECTED: set(),  # terminal
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@warehouse.value_object(part_of="ShipmentRequest")
class Dimensions:
    """Customer-declared package size for custom shipments."""

    length = Float(min_value=0.0)
    width = Float(min_value=0.0)
    height = Float(min_value=0.0)
    weight = Float(min_value=0.0)
    unit = String(max_length=10, default="in")


@warehouse.value_object(part_of="ShipmentRequest")
class AdditionalServicesCharge:
    """Prep services applied at confirmation, summed across all lines."""

    bubble_wrap_feet = Float(default=0.0)
    sticker_removal_items = Integer(default=0)
    warning_labels = Integer(default=0)
    price_per_foot = Float(default=0.0)
    price_per_item = Float(default=0.0)
    price_per_label = Float(default=0.0)
    total = Float(default=0.0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@warehouse.entity(part_of="ShipmentRequest")
class ShipmentLine:
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)  # boxes/packs requested
    pack_of = Integer(default=1, min_value=1)
    unit_price = Float(default=0.0, min_value=0.0)

    # Recorded at confirmation
    effective_pack_of = Integer(min_value=1)
    confirmed_unit_price = Float()
    pack_of_price = Float()
    line_total = Float()

    @property
    def total_units(self) -> int:
        """Units deducted from stock for this line."""
        return self.quantity * (self.effective_pack_of or self.pack_of or 1)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@warehouse.aggregate
class ShipmentRequest:
    tenant_id = Identifier(required=True)
    status = String(
        choices=ShipmentRequestStatus,
        default=ShipmentRequestStatus.PENDING.value,
    )
    lines = HasMany(ShipmentLine)
    product_type = String(max_length=50)
    shipment_type = String(max_length=50, default=ShipmentType.PRODUCT.value)
    service = String(max_length=50)
    pallet_sub_type = String(max_length=50)
    custom_dimensions = ValueObject(Dimensions)
    label_url = String(max_length=500)
    remarks = Text()
    requested_at = DateTime()

    confirmed_at = DateTime()
    confirmed_by = String(max_length=100)
    admin_remarks = Text()
    additional_services = ValueObject(AdditionalServicesCharge)
    shipped_record_id = Identifier()

    rejected_at = DateTime()
    rejected_by = String(max_length=100)
    rejection_reason = Text()
    updated_at = DateTime()

    @classmethod
    def submit(
        cls,
        tenant_id: str,
        lines_data: list[dict],
        product_type: str | None = None,
        shipment_type: str | None = None,
        service: str | None = None,
        pallet_sub_type: str | None = None,
        custom_dimensions: Dimensions | None = None,
        label_url: str | None = None,
        remarks: str | None = None,
    ):
        if not lines_data:
            raise ValidationError({"lines": ["A shipment request needs at least one line"]})

        now = datetime.now(UTC)
        request = cls(
            tenant_id=tenant_id,
            status=ShipmentRequestStatus.PENDING.value,
            product_type=product_type,
            shipment_type=shipment_type or ShipmentType.PRODUCT.value,
            service=service,
            pallet_sub_type=pallet_sub_type,
            custom_dimensions=custom_dimensions,
            label_url=label_url,
            remarks=remarks,
            requested_at=now,
            updated_at=now,
        )
        for line_data in lines_data:
            request.add_lines(ShipmentLine(**line_data))

        request.raise_(
            ShipmentRequestSubmitted(
                request_id=str(request.id),
                tenant_id=tenant_id,
                shipment_type=request.shipment_type,
                line_count=len(lines_data),
                requested_at=now,
            )
        )
        return request

    # -------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------
    @property
    def is_custom(self) -> bool:
        """Custom products are priced by hand at confirmation time."""
        return (self.product_type or "").lower() == "custom" and (
            self.shipment_type or ""
        ).lower() == ShipmentType.PRODUCT.value

    @property
    def is_pallet_existing_inventory(self) -> bool:
        return (
            self.shipment_type == ShipmentType.PALLET.value
            and self.pallet_sub_type == PalletSubType.EXISTING_INVENTORY.value
        )

    @property
    def service_label(self) -> str:
        """Service name shown on the shipped record."""
        if self.shipment_type == ShipmentType.BOX.value:
            return "Box Forwarding"
        if self.shipment_type == ShipmentType.PALLET.value:
            if self.pallet_sub_type == PalletSubType.FORWARDING.value:
                return "Pallet Forwarding"
            if self.pallet_sub_type == PalletSubType.EXISTING_INVENTORY.value:
                return "Pallet Existing Inventory"
        return self.service or ServiceType.FBA_WFS_TFS.value

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: ShipmentRequestStatus) -> None:
        current = ShipmentRequestStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def assert_confirmable(self) -> None:
        self._assert_can_transition(ShipmentRequestStatus.CONFIRMED)

    def confirm(
        self,
        confirmed_by: str,
        line_prices: dict[str, LinePrice],
        additional_services: AdditionalServicesCharge,
        shipped_record_id: str,
        admin_remarks: str | None = None,
    ) -> None:
        """Record the confirmation; ``line_prices`` is keyed by line id."""
        self.assert_confirmable()
        now = datetime.now(UTC)

        total_units = 0
        subtotal = 0.0
        for line in self.lines:
            price = line_prices[str(line.id)]
            line.effective_pack_of = price.pack_of
            line.confirmed_unit_price = price.unit_price
            line.pack_of_price = price.pack_of_price
            line.line_total = price.total(line.quantity)
            total_units += line.total_units
            subtotal += line.line_total

        self.status = ShipmentRequestStatus.CONFIRMED.value
        self.confirmed_at = now
        self.confirmed_by = confirmed_by
        self.admin_remarks = admin_remarks
        self.additional_services = additional_services
        self.shipped_record_id = shipped_record_id
        self.updated_at = now

        self.raise_(
            ShipmentRequestConfirmed(
                request_id=str(self.id),
                tenant_id=str(self.tenant_id),
                shipped_record_id=shipped_record_id,
                total_units=total_units,
                grand_total=round(subtotal + (additional_services.total or 0.0), 2),
                confirmed_by=confirmed_by,
                confirmed_at=now,
            )
        )

    def reject(self, rejected_by: str, reason: str) -> bool:
        """Reject the request. Returns True when it had already been confirmed."""
        if not reason or not reason.strip():
            raise ValidationError({"reason": ["A rejection reason is required"]})
        self._assert_can_transition(ShipmentRequestStatus.REJECTED)

        was_confirmed = self.status == ShipmentRequestStatus.CONFIRMED.value
        now = datetime.now(UTC)
        self.status = ShipmentRequestStatus.REJECTED.value
        self.rejected_at = now
        self.rejected_by = rejected_by
        self.rejection_reason = reason.strip()
        self.updated_at = now

        self.raise_(
            ShipmentRequestRejected(
                request_id=str(self.id),
                tenant_id=str(self.tenant_id),
                reason=self.rejection_reason,
                restored=was_confirmed,
                rejected_by=rejected_by,
                rejected_at=now,
            )
        )
        return was_confirmed
