"""Pricing calculator: deterministic arithmetic with no I/O.

Everything here works on plain numbers and duck-typed rule objects so the
same functions serve the command handlers, the HTTP layer and the tests.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum


class ServiceType(Enum):
    FBA_WFS_TFS = "FBA/WFS/TFS"
    FBM = "FBM"


class ProductType(Enum):
    STANDARD = "Standard"
    LARGE = "Large"
    CUSTOM = "Custom"


class PackageType(Enum):
    PREMIUM = "Premium"
    SMALL_BUSINESS = "Small Business"
    STANDARD = "Standard"
    STARTER = "Starter"


_RANGE_PREDICATES = {
    "1001+": lambda q: q >= 1001,
    "501-1000": lambda q: 501 <= q <= 1000,
    "50-500": lambda q: 50 <= q <= 500,
    "<50": lambda q: q < 50,
    "101+": lambda q: q >= 101,
    "50+": lambda q: 50 <= q <= 100,
    "25+": lambda q: 25 <= q <= 49,
    "<25": lambda q: q < 25,
    "Custom": lambda q: True,
}

QUANTITY_RANGES = tuple(_RANGE_PREDICATES)


def _round(amount: float) -> float:
    return round(amount, 2)


def package_for_quantity(service: str, quantity: int) -> str | None:
    """Return the package tier a quantity falls into for a service."""
    if service == ServiceType.FBA_WFS_TFS.value:
        if quantity >= 1001:
            return PackageType.PREMIUM.value
        if quantity >= 501:
            return PackageType.SMALL_BUSINESS.value
        if quantity >= 50:
            return PackageType.STANDARD.value
        return PackageType.STARTER.value
    if service == ServiceType.FBM.value:
        if quantity >= 101:
            return PackageType.PREMIUM.value
        if quantity >= 50:
            return PackageType.SMALL_BUSINESS.value
        if quantity >= 25:
            return PackageType.STANDARD.value
        return PackageType.STARTER.value
    return None


def quantity_in_range(quantity: int, quantity_range: str) -> bool:
    predicate = _RANGE_PREDICATES.get(quantity_range)
    return bool(predicate and predicate(quantity))


def select_rule(rules: Sequence, service: str, product_type: str, quantity: int):
    """Pick the most recently updated rule matching service, type and quantity.

    Rules are matched on their package tier first. When no rule carries the
    expected package, the tier filter is dropped and any rule whose range
    covers the quantity is accepted.
    """
    candidates = [
        rule
        for rule in rules
        if rule.service == service
        and rule.product_type == product_type
        and quantity_in_range(quantity, rule.quantity_range)
    ]
    if not candidates:
        return None

    expected_package = package_for_quantity(service, quantity)
    tiered = [rule for rule in candidates if expected_package is None or rule.package == expected_package]
    pool = tiered or candidates

    return max(pool, key=lambda rule: rule.updated_at.timestamp() if rule.updated_at else 0.0)


def line_total(unit_price: float, quantity: int, pack_of_price: float, pack_of: int) -> float:
    """Price of one shipment line: units plus the surcharge for each extra pack."""
    return _round(unit_price * quantity + pack_of_price * max(0, pack_of - 1))


@dataclass(frozen=True)
class LinePrice:
    """Resolved pricing for one shipment line."""

    unit_price: float
    pack_of: int
    pack_of_price: float = 0.0

    def total(self, quantity: int) -> float:
        return line_total(self.unit_price, quantity, self.pack_of_price, self.pack_of)


@dataclass(frozen=True)
class ServiceUsage:
    bubble_wrap_feet: float = 0
    sticker_removal_items: int = 0
    warning_labels: int = 0


@dataclass(frozen=True)
class ServiceRateCard:
    price_per_foot: float = 0.0
    price_per_item: float = 0.0
    price_per_label: float = 0.0


def additional_services_total(usages: Iterable[ServiceUsage], rates: ServiceRateCard) -> float:
    """Cost of bubble wrap, sticker removal and warning labels across all lines."""
    total = 0.0
    for usage in usages:
        total += (
            (usage.bubble_wrap_feet or 0) * rates.price_per_foot
            + (usage.sticker_removal_items or 0) * rates.price_per_item
            + (usage.warning_labels or 0) * rates.price_per_label
        )
    return _round(total)


def compact_pricing(return_fee: float, total: float, **components: float) -> dict:
    """Serialise a pricing breakdown, dropping zero or unset optional components."""
    document = {"return_fee": return_fee, "total": total}
    document.update({name: value for name, value in components.items() if value})
    return document


@dataclass(frozen=True)
class ReturnClosePricing:
    """Final charges for a closed product return.

    All components are always populated in memory; ``as_document`` drops the
    zero-valued optional ones when the breakdown is persisted or rendered.
    """

    return_fee: float
    received_quantity: int
    return_handling: float
    packing_fee: float
    pallet_fee: float
    shipping_unit_price: float
    shipping_quantity: int
    shipping_fee: float
    total: float

    def as_document(self) -> dict:
        return compact_pricing(
            return_fee=self.return_fee,
            total=self.total,
            packing_fee=self.packing_fee,
            pallet_fee=self.pallet_fee,
            shipping_fee=self.shipping_fee,
            shipping_unit_price=self.shipping_unit_price if self.shipping_fee else 0.0,
        )


def return_close_pricing(
    return_fee: float,
    received_quantity: int,
    remaining_quantity: int,
    packing_fee: float = 0.0,
    pallet_fee: float = 0.0,
    shipping_unit_price: float = 0.0,
    ship_to_address: bool = False,
) -> ReturnClosePricing:
    """Compute close-out charges for a return.

    ``total = return_fee * received + packing + pallet + shipping``, where
    shipping applies only when the customer asked for the remainder to be
    shipped to an address.
    """
    packing_fee = packing_fee or 0.0
    pallet_fee = pallet_fee or 0.0
    shipping_unit_price = shipping_unit_price or 0.0

    return_handling = _round(return_fee * received_quantity)
    shipping_quantity = max(0, remaining_quantity) if ship_to_address else 0
    shipping_fee = _round(shipping_quantity * shipping_unit_price)

    return ReturnClosePricing(
        return_fee=return_fee,
        received_quantity=received_quantity,
        return_handling=return_handling,
        packing_fee=packing_fee,
        pallet_fee=pallet_fee,
        shipping_unit_price=shipping_unit_price,
        shipping_quantity=shipping_quantity,
        shipping_fee=shipping_fee,
        total=_round(return_handling + packing_fee + pallet_fee + shipping_fee),
    )
