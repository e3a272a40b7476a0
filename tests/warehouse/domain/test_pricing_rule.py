"""Tests for the PricingRule aggregate."""

from uuid import uuid4

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from warehouse.pricing.calculator import PackageType, ServiceType
from warehouse.pricing.rates import PricingRule, find_pricing_rule


def _define(tenant_id, service, package, quantity_range, rate=1.0):
    return PricingRule.define(
        tenant_id=tenant_id,
        service=service,
        product_type="Standard",
        package=package,
        quantity_range=quantity_range,
        rate=rate,
    )


class TestPricingRuleDefinition:
    @pytest.mark.parametrize(
        "service,quantity_range",
        [
            (ServiceType.FBA_WFS_TFS.value, "<50"),
            (ServiceType.FBM.value, "<25"),
        ],
    )
    def test_starter_ranges_are_stored_verbatim(self, service, quantity_range):
        rule = _define(str(uuid4()), service, PackageType.STARTER.value, quantity_range)
        assert rule.quantity_range == quantity_range

    def test_unknown_range_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _define(str(uuid4()), ServiceType.FBM.value, PackageType.STARTER.value, "10-20")
        assert "Unknown quantity range" in str(exc.value)

    def test_persisted_starter_rule_is_found_for_small_quantities(self):
        tenant = str(uuid4())
        current_domain.repository_for(PricingRule).add(
            _define(tenant, ServiceType.FBM.value, PackageType.STARTER.value, "<25", rate=0.9)
        )

        rule = find_pricing_rule(tenant, ServiceType.FBM.value, "Standard", 10)

        assert rule is not None
        assert rule.quantity_range == "<25"
        assert rule.rate == 0.9
