"""Tenant rate tables: tiered prep pricing and flat additional-service rates."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String
from protean.utils.globals import current_domain

from warehouse.domain import warehouse
from warehouse.pricing.calculator import (
    QUANTITY_RANGES,
    PackageType,
    ProductType,
    ServiceRateCard,
    ServiceType,
    select_rule,
)


@warehouse.aggregate
class PricingRule:
    """Per-unit prep rate for one (service, product type, quantity tier) cell."""

    tenant_id = Identifier(required=True)
    service = String(required=True, max_length=50, choices=ServiceType)
    product_type = String(required=True, max_length=50, choices=ProductType)
    package = String(required=True, max_length=50, choices=PackageType)
    quantity_range = String(required=True, max_length=20, sanitize=False)
    rate = Float(required=True, min_value=0.0)
    pack_of_price = Float(default=0.0, min_value=0.0)
    updated_at = DateTime()

    @classmethod
    def define(
        cls,
        tenant_id: str,
        service: str,
        product_type: str,
        package: str,
        quantity_range: str,
        rate: float,
        pack_of_price: float = 0.0,
    ):
        if quantity_range not in QUANTITY_RANGES:
            raise ValidationError({"quantity_range": [f"Unknown quantity range `{quantity_range}`"]})
        return cls(
            tenant_id=tenant_id,
            service=service,
            product_type=product_type,
            package=package,
            quantity_range=quantity_range,
            rate=rate,
            pack_of_price=pack_of_price or 0.0,
            updated_at=datetime.now(UTC),
        )


@warehouse.aggregate
class ServiceRates:
    """Flat per-unit prices for additional prep services."""

    tenant_id = Identifier(required=True)
    bubble_wrap_price = Float(default=0.0, min_value=0.0)  # per linear foot
    sticker_removal_price = Float(default=0.0, min_value=0.0)  # per item
    warning_label_price = Float(default=0.0, min_value=0.0)  # per label
    updated_at = DateTime()

    def as_rate_card(self) -> ServiceRateCard:
        return ServiceRateCard(
            price_per_foot=self.bubble_wrap_price or 0.0,
            price_per_item=self.sticker_removal_price or 0.0,
            price_per_label=self.warning_label_price or 0.0,
        )


def find_pricing_rule(tenant_id: str, service: str, product_type: str, quantity: int) -> PricingRule | None:
    """Look up the applicable prep rate for a shipment line."""
    if not service or not product_type:
        return None
    rules = (
        current_domain.repository_for(PricingRule)
        ._dao.query.filter(tenant_id=tenant_id, service=service, product_type=product_type)
        .all()
        .items
    )
    return select_rule(rules, service, product_type, quantity)


def latest_service_rates(tenant_id: str) -> ServiceRates | None:
    rates = current_domain.repository_for(ServiceRates)._dao.query.filter(tenant_id=tenant_id).all().items
    if not rates:
        return None
    return max(rates, key=lambda r: r.updated_at.timestamp() if r.updated_at else 0.0)
