"""Shipment confirmation: the transactional heart of outbound fulfillment.

The handler runs in a single unit of work with two strict phases:

1. Read phase: load every referenced inventory item, resolve line prices
   and verify stock for all lines. Any failure aborts before a single
   write has been scheduled.
2. Write phase: deduct stock, mark the request confirmed and create the
   one ShippedRecord covering all lines.

Lines that reference the same product are checked against their combined
demand, so two lines can never each pass against the same stock.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from warehouse.domain import warehouse
from warehouse.exceptions import InsufficientStockError
from warehouse.inventory.ledger import InventoryLedger
from warehouse.pricing.calculator import (
    LinePrice,
    ServiceRateCard,
    ServiceUsage,
    additional_services_total,
)
from warehouse.pricing.rates import find_pricing_rule, latest_service_rates
from warehouse.shipment.request import (
    AdditionalServicesCharge,
    ShipmentRequest,
    ShipmentType,
)
from warehouse.shipment.shipped import ShippedRecord
from warehouse.utils.payloads import load_json_object
from warehouse.utils.tenancy import load_for_tenant

logger = structlog.get_logger(__name__)


@warehouse.command(part_of="ShipmentRequest")
class ConfirmShipmentRequest:
    tenant_id = Identifier(required=True)
    request_id = Identifier(required=True)
    confirmed_by = String(required=True, max_length=100)
    admin_remarks = Text()
    line_pricing = Text()  # JSON {product_id: {unit_price, pack_of, pack_of_price}}
    service_usage = Text()  # JSON {product_id: {bubble_wrap_feet, sticker_removal_items, warning_labels}}
    price_per_foot = Float(min_value=0.0)
    price_per_item = Float(min_value=0.0)
    price_per_label = Float(min_value=0.0)


def _custom_price(product_id: str, override: dict | None) -> LinePrice:
    """Validate the admin-entered price for a custom product line."""
    if not override:
        raise ValidationError({"line_pricing": [f"Custom pricing is required for product {product_id}"]})

    unit_price = override.get("unit_price") or 0
    pack_of = override.get("pack_of") or 0
    pack_of_price = override.get("pack_of_price", 0) or 0
    if unit_price <= 0:
        raise ValidationError({"line_pricing": [f"Unit price must be greater than 0 for product {product_id}"]})
    if pack_of <= 0 or int(pack_of) != pack_of:
        raise ValidationError({"line_pricing": [f"Pack of must be a positive integer for product {product_id}"]})
    if pack_of_price < 0:
        raise ValidationError({"line_pricing": [f"Pack of price cannot be negative for product {product_id}"]})

    return LinePrice(unit_price=float(unit_price), pack_of=int(pack_of), pack_of_price=float(pack_of_price))


@warehouse.command_handler(part_of=ShipmentRequest)
class ConfirmShipmentRequestHandler:
    @handle(ConfirmShipmentRequest)
    def confirm(self, command):
        request = load_for_tenant(ShipmentRequest, command.request_id, command.tenant_id)
        request.assert_confirmable()

        overrides = load_json_object(command.line_pricing, "line_pricing")
        usage = load_json_object(command.service_usage, "service_usage")

        # Overrides are validated before any document is read
        custom_prices = {}
        if request.is_custom:
            for line in request.lines:
                custom_prices[str(line.id)] = _custom_price(
                    str(line.product_id), overrides.get(str(line.product_id))
                )

        # -------------------------------------------------------------------
        # Read phase
        # -------------------------------------------------------------------
        ledger = InventoryLedger(command.tenant_id)
        prices: dict[str, LinePrice] = {}
        demand: dict[str, int] = {}
        for line in request.lines:
            product_id = str(line.product_id)
            ledger.get(product_id)
            price = custom_prices.get(str(line.id)) or self._resolve_price(
                request, line, overrides.get(product_id)
            )
            prices[str(line.id)] = price
            demand[product_id] = demand.get(product_id, 0) + line.quantity * price.pack_of

        for product_id, units in demand.items():
            item = ledger.get(product_id)
            if item.quantity < units:
                raise InsufficientStockError(product_id, item.product_name, item.quantity, units)

        rate_card = self._rate_card(command)
        usages = [
            ServiceUsage(
                bubble_wrap_feet=usage.get(str(line.product_id), {}).get("bubble_wrap_feet", 0) or 0,
                sticker_removal_items=usage.get(str(line.product_id), {}).get("sticker_removal_items", 0) or 0,
                warning_labels=usage.get(str(line.product_id), {}).get("warning_labels", 0) or 0,
            )
            for line in request.lines
        ]
        services = AdditionalServicesCharge(
            bubble_wrap_feet=float(sum(u.bubble_wrap_feet for u in usages)),
            sticker_removal_items=int(sum(u.sticker_removal_items for u in usages)),
            warning_labels=int(sum(u.warning_labels for u in usages)),
            price_per_foot=rate_card.price_per_foot,
            price_per_item=rate_card.price_per_item,
            price_per_label=rate_card.price_per_label,
            total=additional_services_total(usages, rate_card),
        )

        # -------------------------------------------------------------------
        # Write phase
        # -------------------------------------------------------------------
        remaining = {product_id: ledger.adjust(product_id, -units) for product_id, units in demand.items()}

        items_data = []
        for line in request.lines:
            price = prices[str(line.id)]
            item = ledger.get(str(line.product_id))
            items_data.append(
                {
                    "product_id": str(line.product_id),
                    "product_name": line.product_name or item.product_name,
                    "boxes_shipped": line.quantity,
                    "shipped_qty": line.quantity * price.pack_of,
                    "pack_of": price.pack_of,
                    "unit_price": price.unit_price,
                    "pack_of_price": price.pack_of_price,
                    "remaining_qty": remaining[str(line.product_id)],
                    "line_total": price.total(line.quantity),
                }
            )

        record = ShippedRecord.for_shipment_request(request, items_data, services)
        request.confirm(
            confirmed_by=command.confirmed_by,
            line_prices=prices,
            additional_services=services,
            shipped_record_id=str(record.id),
            admin_remarks=command.admin_remarks,
        )

        current_domain.repository_for(ShipmentRequest).add(request)
        current_domain.repository_for(ShippedRecord).add(record)

        logger.info(
            "Shipment request confirmed",
            tenant_id=str(command.tenant_id),
            request_id=str(request.id),
            shipped_record_id=str(record.id),
            total_units=record.total_units,
            grand_total=record.grand_total,
        )
        return str(record.id)

    def _resolve_price(self, request: ShipmentRequest, line, override: dict | None) -> LinePrice:
        """Price a non-custom line from the rate table or the submitted price."""
        pack_of = line.pack_of or 1
        if request.is_pallet_existing_inventory:
            unit_price = (override or {}).get("unit_price")
            if unit_price is None:
                unit_price = line.unit_price or 0.0
            if unit_price < 0:
                raise ValidationError({"line_pricing": [f"Unit price cannot be negative for product {line.product_id}"]})
            return LinePrice(unit_price=float(unit_price), pack_of=pack_of)

        if (request.shipment_type or "").lower() == ShipmentType.PRODUCT.value:
            rule = find_pricing_rule(str(request.tenant_id), request.service, request.product_type, line.quantity)
            if rule is not None:
                return LinePrice(
                    unit_price=rule.rate or line.unit_price or 0.0,
                    pack_of=pack_of,
                    pack_of_price=rule.pack_of_price or 0.0,
                )

        return LinePrice(unit_price=line.unit_price or 0.0, pack_of=pack_of)

    def _rate_card(self, command) -> ServiceRateCard:
        """Admin-entered rates win; otherwise the tenant's latest published rates."""
        stored = latest_service_rates(str(command.tenant_id))
        defaults = stored.as_rate_card() if stored else ServiceRateCard()
        return ServiceRateCard(
            price_per_foot=command.price_per_foot if command.price_per_foot is not None else defaults.price_per_foot,
            price_per_item=command.price_per_item if command.price_per_item is not None else defaults.price_per_item,
            price_per_label=(
                command.price_per_label if command.price_per_label is not None else defaults.price_per_label
            ),
        )
