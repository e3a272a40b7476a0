"""Rate table maintenance commands."""

from datetime import UTC, datetime

from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from warehouse.domain import warehouse
from warehouse.pricing.rates import PricingRule, ServiceRates


@warehouse.command(part_of="PricingRule")
class DefinePricingRule:
    tenant_id = Identifier(required=True)
    service = String(required=True, max_length=50)
    product_type = String(required=True, max_length=50)
    package = String(required=True, max_length=50)
    quantity_range = String(required=True, max_length=20, sanitize=False)
    rate = Float(required=True, min_value=0.0)
    pack_of_price = Float(default=0.0, min_value=0.0)


@warehouse.command(part_of="ServiceRates")
class SetServiceRates:
    tenant_id = Identifier(required=True)
    bubble_wrap_price = Float(default=0.0, min_value=0.0)
    sticker_removal_price = Float(default=0.0, min_value=0.0)
    warning_label_price = Float(default=0.0, min_value=0.0)


@warehouse.command_handler(part_of=PricingRule)
class PricingRuleHandler:
    @handle(DefinePricingRule)
    def define_rule(self, command):
        rule = PricingRule.define(
            tenant_id=command.tenant_id,
            service=command.service,
            product_type=command.product_type,
            package=command.package,
            quantity_range=command.quantity_range,
            rate=command.rate,
            pack_of_price=command.pack_of_price,
        )
        current_domain.repository_for(PricingRule).add(rule)
        return str(rule.id)


@warehouse.command_handler(part_of=ServiceRates)
class ServiceRatesHandler:
    @handle(SetServiceRates)
    def set_rates(self, command):
        rates = ServiceRates(
            tenant_id=command.tenant_id,
            bubble_wrap_price=command.bubble_wrap_price or 0.0,
            sticker_removal_price=command.sticker_removal_price or 0.0,
            warning_label_price=command.warning_label_price or 0.0,
            updated_at=datetime.now(UTC),
        )
        current_domain.repository_for(ServiceRates).add(rates)
        return str(rates.id)
