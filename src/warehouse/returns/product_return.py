"""ProductReturn aggregate (CQRS): returned goods moving through the warehouse.

State Machine:
    PENDING → APPROVED | CANCELLED
    APPROVED → IN_PROGRESS (first receipt) | CLOSED
    IN_PROGRESS → CLOSED
    CLOSED, CANCELLED → (terminal)

Quantities only grow through the logs: ``received_quantity`` is the sum of
receiving-log entries and ``shipped_quantity`` the sum of shipping-log
entries. Shipped can never exceed received.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
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
from warehouse.pricing.calculator import ReturnClosePricing, compact_pricing
from warehouse.returns.events import (
    ProductReturnApproved,
    ProductReturnCancelled,
    ProductReturnClosed,
    ProductReturnSubmitted,
    ReturnUnitsReceived,
    ReturnUnitsShipped,
)

SHIPPED_ON_CLOSE_NOTE = "Shipped remaining items on close"


class ProductReturnStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"
    CANCELLED = "cancelled"


class ReturnType(Enum):
    NEW = "new"  # product not yet in the tenant's inventory
    EXISTING = "existing"  # returned units belong to an existing item


_VALID_TRANSITIONS = {
    ProductReturnStatus.PENDING: {ProductReturnStatus.APPROVED, ProductReturnStatus.CANCELLED},
    ProductReturnStatus.APPROVED: {ProductReturnStatus.IN_PROGRESS, ProductReturnStatus.CLOSED},
    ProductReturnStatus.IN_PROGRESS: {ProductReturnStatus.CLOSED},
    ProductReturnStatus.CLOSED: set(),
    ProductReturnStatus.CANCELLED: set(),
}

_OPEN_STATUSES = {ProductReturnStatus.APPROVED, ProductReturnStatus.IN_PROGRESS}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@warehouse.value_object(part_of="ProductReturn")
class ShippingAddress:
    name = String(max_length=255)
    address = String(required=True, max_length=500)
    city = String(max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)
    country = String(max_length=100)
    phone = String(max_length=50)
    email = String(max_length=255)

    def as_line(self) -> str:
        """Single-line form used on shipped records and invoices."""
        locality = " ".join(part for part in (self.city, self.state, self.zip_code) if part)
        return ", ".join(part for part in (self.address, locality, self.country) if part)


@warehouse.value_object(part_of="ProductReturn")
class ReturnServices:
    """Services the customer asked for when submitting the return."""

    ship_to_address = Boolean(default=False)
    packing = Boolean(default=False)
    box_quantity = Integer(min_value=0)
    packing_fee = Float(min_value=0.0)
    palletizing = Boolean(default=False)
    pallet_quantity = Integer(min_value=0)
    pallet_fee = Float(min_value=0.0)
    boxes_count = Integer(min_value=0)



@warehouse.value_object(part_of="ProductReturn")
class ReturnPricing:
    return_fee = Float(default=0.0)
    return_handling = Float(default=0.0)
    packing_fee = Float(default=0.0)
    pallet_fee = Float(default=0.0)
    shipping_unit_price = Float(default=0.0)
    shipping_fee = Float(default=0.0)
    total = Float(default=0.0)

    def as_document(self) -> dict:
        return compact_pricing(
            return_fee=self.return_fee,
            total=self.total,
            packing_fee=self.packing_fee,
            pallet_fee=self.pallet_fee,
            shipping_fee=self.shipping_fee,
            shipping_unit_price=self.shipping_unit_price if self.shipping_fee else 0.0,
        )


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@warehouse.entity(part_of="ProductReturn")
class ReceivingLogEntry:
    quantity = Integer(required=True, min_value=1)
    received_at = DateTime(required=True)
    received_by = String(required=True, max_length=100)
    notes = Text()


@warehouse.entity(part_of="ProductReturn")
class ShippingLogEntry:
    quantity = Integer(required=True, min_value=1)
    shipped_at = DateTime(required=True)
    shipped_by = String(required=True, max_length=100)
    ship_to = String(max_length=500)
    notes = Text()
    invoice_id = Identifier()
    invoice_number = String(max_length=50)
    shipping_unit_price = Float()
    shipping_total = Float()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@warehouse.aggregate
class ProductReturn:
    tenant_id = Identifier(required=True)
    return_type = String(choices=ReturnType, default=ReturnType.NEW.value)
    product_id = Identifier()
    product_name = String(required=True, max_length=255)
    sku = String(max_length=100)
    status = String(
        choices=ProductReturnStatus,
        default=ProductReturnStatus.PENDING.value,
    )
    requested_quantity = Integer(required=True, min_value=1)
    received_quantity = Integer(default=0, min_value=0)
    shipped_quantity = Integer(default=0, min_value=0)
    receiving_log = HasMany(ReceivingLogEntry)
    shipping_log = HasMany(ShippingLogEntry)
    additional_services = ValueObject(ReturnServices)
    shipping_address = ValueObject(ShippingAddress)
    notes = Text()
    requested_by = String(max_length=100)
    requested_at = DateTime()

    approved_at = DateTime()
    approved_by = String(max_length=100)
    cancelled_at = DateTime()
    cancelled_by = String(max_length=100)
    admin_remarks = Text()
    closed_at = DateTime()
    closed_by = String(max_length=100)
    pricing = ValueObject(ReturnPricing)
    invoice_id = Identifier()
    invoice_number = String(max_length=50)
    updated_at = DateTime()

    @invariant.post
    def shipped_cannot_exceed_received(self):
        if (self.shipped_quantity or 0) > (self.received_quantity or 0):
            raise ValidationError({"shipped_quantity": ["Shipped quantity cannot exceed received quantity"]})

    @classmethod
    def submit(
        cls,
        tenant_id: str,
        product_name: str,
        requested_quantity: int,
        return_type: str = ReturnType.NEW.value,
        product_id: str | None = None,
        sku: str | None = None,
        requested_by: str | None = None,
        notes: str | None = None,
        additional_services: ReturnServices | None = None,
        shipping_address: ShippingAddress | None = None,
    ):
        if return_type == ReturnType.EXISTING.value and not product_id:
            raise ValidationError({"product_id": ["An existing-product return must reference an inventory item"]})
        if additional_services and additional_services.ship_to_address and not shipping_address:
            raise ValidationError({"shipping_address": ["A shipping address is required for ship-to-address returns"]})

        now = datetime.now(UTC)
        product_return = cls(
            tenant_id=tenant_id,
            return_type=return_type,
            product_id=product_id,
            product_name=product_name,
            sku=sku,
            status=ProductReturnStatus.PENDING.value,
            requested_quantity=requested_quantity,
            additional_services=additional_services,
            shipping_address=shipping_address,
            notes=notes,
            requested_by=requested_by,
            requested_at=now,
            updated_at=now,
        )
        product_return.raise_(
            ProductReturnSubmitted(
                return_id=str(product_return.id),
                tenant_id=tenant_id,
                return_type=return_type,
                product_name=product_name,
                requested_quantity=requested_quantity,
                submitted_at=now,
            )
        )
        return product_return

    # -------------------------------------------------------------------
    # Derived quantities
    # -------------------------------------------------------------------
    @property
    def remaining_quantity(self) -> int:
        """Received units that have not been shipped onward."""
        return max(0, (self.received_quantity or 0) - (self.shipped_quantity or 0))

    @property
    def ships_to_address(self) -> bool:
        return bool(self.additional_services and self.additional_services.ship_to_address)

    @property
    def will_ship_on_close(self) -> bool:
        return self.ships_to_address and self.remaining_quantity > 0

    @property
    def boxes_count(self) -> int | None:
        return self.additional_services.boxes_count if self.additional_services else None

    @property
    def ship_to_line(self) -> str:
        return self.shipping_address.as_line() if self.shipping_address else ""

    @property
    def is_over_received(self) -> bool:
        return (self.received_quantity or 0) > self.requested_quantity

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: ProductReturnStatus) -> None:
        current = ProductReturnStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _assert_open(self, action: str) -> None:
        if ProductReturnStatus(self.status) not in _OPEN_STATUSES:
            raise ValidationError({"status": [f"Cannot {action} a return that is {self.status}"]})

    def approve(self, approved_by: str) -> None:
        if not approved_by:
            raise ValidationError({"approved_by": ["Approver identity is required"]})
        self._assert_can_transition(ProductReturnStatus.APPROVED)

        now = datetime.now(UTC)
        self.status = ProductReturnStatus.APPROVED.value
        self.approved_at = now
        self.approved_by = approved_by
        self.updated_at = now
        self.raise_(
            ProductReturnApproved(
                return_id=str(self.id),
                tenant_id=str(self.tenant_id),
                approved_by=approved_by,
                approved_at=now,
            )
        )

    def reject(self, rejected_by: str, reason: str) -> None:
        if not reason or not reason.strip():
            raise ValidationError({"reason": ["A rejection reason is required"]})
        self._assert_can_transition(ProductReturnStatus.CANCELLED)

        now = datetime.now(UTC)
        self.status = ProductReturnStatus.CANCELLED.value
        self.cancelled_at = now
        self.cancelled_by = rejected_by
        self.admin_remarks = reason.strip()
        self.updated_at = now
        self.raise_(
            ProductReturnCancelled(
                return_id=str(self.id),
                tenant_id=str(self.tenant_id),
                reason=self.admin_remarks,
                cancelled_by=rejected_by,
                cancelled_at=now,
            )
        )

    def receive(self, quantity: int, received_by: str, notes: str | None = None) -> None:
        """Log a receipt of returned units."""
        if not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError({"quantity": ["Received quantity must be a positive integer"]})
        self._assert_open("receive units for")

        now = datetime.now(UTC)
        if self.status == ProductReturnStatus.APPROVED.value:
            self.status = ProductReturnStatus.IN_PROGRESS.value

        self.add_receiving_log(
            ReceivingLogEntry(
                quantity=quantity,
                received_at=now,
                received_by=received_by,
                notes=notes.strip() if notes and notes.strip() else None,
            )
        )
        self.received_quantity = (self.received_quantity or 0) + quantity
        self.updated_at = now
        self.raise_(
            ReturnUnitsReceived(
                return_id=str(self.id),
                tenant_id=str(self.tenant_id),
                quantity=quantity,
                received_quantity=self.received_quantity,
                received_by=received_by,
                received_at=now,
            )
        )

    def ship(
        self,
        quantity: int,
        shipped_by: str,
        ship_to: str,
        notes: str | None = None,
        invoice_id: str | None = None,
        invoice_number: str | None = None,
        shipping_unit_price: float | None = None,
        shipping_total: float | None = None,
    ) -> None:
        """Ship part of the received units onward. Status does not change."""
        if not ship_to or not ship_to.strip():
            raise ValidationError({"ship_to": ["Please enter a ship to destination"]})
        if not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError({"quantity": ["Shipped quantity must be a positive integer"]})
        self._assert_open("ship units from")

        available = self.remaining_quantity
        if quantity > available:
            raise ValidationError(
                {"quantity": [f"Cannot ship {quantity} units. Only {available} units available to ship."]}
            )

        now = datetime.now(UTC)
        self.add_shipping_log(
            ShippingLogEntry(
                quantity=quantity,
                shipped_at=now,
                shipped_by=shipped_by,
                ship_to=ship_to.strip(),
                notes=notes.strip() if notes and notes.strip() else None,
                invoice_id=invoice_id,
                invoice_number=invoice_number,
                shipping_unit_price=shipping_unit_price,
                shipping_total=shipping_total,
            )
        )
        self.shipped_quantity = (self.shipped_quantity or 0) + quantity
        self.updated_at = now
        self.raise_(
            ReturnUnitsShipped(
                return_id=str(self.id),
                tenant_id=str(self.tenant_id),
                quantity=quantity,
                shipped_quantity=self.shipped_quantity,
                shipped_by=shipped_by,
                invoice_id=invoice_id,
                shipped_at=now,
            )
        )

    def assert_closable(self) -> None:
        self._assert_can_transition(ProductReturnStatus.CLOSED)
        if not self.received_quantity or self.received_quantity <= 0:
            raise ValidationError({"received_quantity": ["Cannot close request with zero received quantity"]})

    def close(self, closed_by: str, pricing: ReturnClosePricing) -> None:
        """Close the return, shipping the remainder when ship-to-address was requested."""
        self.assert_closable()

        now = datetime.now(UTC)
        remaining = self.remaining_quantity
        shipped_on_close = remaining if self.will_ship_on_close else 0

        if shipped_on_close:
            self.add_shipping_log(
                ShippingLogEntry(
                    quantity=shipped_on_close,
                    shipped_at=now,
                    shipped_by=closed_by,
                    ship_to=self.ship_to_line,
                    notes=SHIPPED_ON_CLOSE_NOTE,
                    shipping_unit_price=pricing.shipping_unit_price,
                    shipping_total=pricing.shipping_fee,
                )
            )
            self.shipped_quantity = (self.shipped_quantity or 0) + shipped_on_close

        self.status = ProductReturnStatus.CLOSED.value
        self.closed_at = now
        self.closed_by = closed_by
        self.pricing = ReturnPricing(
            return_fee=pricing.return_fee,
            return_handling=pricing.return_handling,
            packing_fee=pricing.packing_fee,
            pallet_fee=pricing.pallet_fee,
            shipping_unit_price=pricing.shipping_unit_price,
            shipping_fee=pricing.shipping_fee,
            total=pricing.total,
        )
        self.updated_at = now
        self.raise_(
            ProductReturnClosed(
                return_id=str(self.id),
                tenant_id=str(self.tenant_id),
                received_quantity=self.received_quantity,
                shipped_on_close=shipped_on_close,
                credited_quantity=remaining - shipped_on_close,
                total=pricing.total,
                closed_by=closed_by,
                closed_at=now,
            )
        )

    def attach_invoice(self, invoice_id: str, invoice_number: str) -> None:
        self.invoice_id = invoice_id
        self.invoice_number = invoice_number
