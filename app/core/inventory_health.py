# =========================================================
# INVENTORY HEALTH
#
# Classifies products as expired / expiring soon /
# low stock / healthy, counts them and filters them.
#
# Status is always derived from (stock, expiry, as_of)
# and never stored.
# =========================================================

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta
from enum import Enum

from app.core.coercion import coerce_int


LOW_STOCK_THRESHOLD = 10
EXPIRING_SOON_DAYS = 30


class InventoryStatus(str, Enum):
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    LOW_STOCK = "low_stock"
    HEALTHY = "healthy"


class AggregatePolicy(str, Enum):
    # Each product lands in exactly the bucket classify() gives it
    PARTITION = "partition"
    # Dashboard formula: low stock counted independently of expiry,
    # healthy = total - low_stock - expired - expiring_soon
    LEGACY = "legacy"


@dataclass
class InventorySummary:
    total: int = 0
    low_stock: int = 0
    expired: int = 0
    expiring_soon: int = 0
    healthy: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------
# PREDICATES
# ---------------------------------------------------------
def _to_date(value) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def _expiry(product) -> date | None:
    return _to_date(getattr(product, "expiry_date", None))


def is_expired(product, as_of) -> bool:
    expiry = _expiry(product)
    return expiry is not None and expiry < _to_date(as_of)


def is_expiring_soon(product, as_of) -> bool:
    expiry = _expiry(product)
    if expiry is None:
        return False

    today = _to_date(as_of)
    return today <= expiry <= today + timedelta(days=EXPIRING_SOON_DAYS)


def is_low_stock(product) -> bool:
    stock = coerce_int(getattr(product, "stock_quantity", None), default=0)
    return stock < LOW_STOCK_THRESHOLD


def _is_healthy_legacy(product, as_of) -> bool:
    expiry = _expiry(product)
    window_end = _to_date(as_of) + timedelta(days=EXPIRING_SOON_DAYS)
    return not is_low_stock(product) and (expiry is None or expiry > window_end)


_LEGACY_PREDICATES = {
    InventoryStatus.EXPIRED: is_expired,
    InventoryStatus.EXPIRING_SOON: is_expiring_soon,
    InventoryStatus.LOW_STOCK: lambda product, as_of: is_low_stock(product),
    InventoryStatus.HEALTHY: _is_healthy_legacy,
}


# ---------------------------------------------------------
# CLASSIFICATION
# ---------------------------------------------------------
def classify(product, as_of) -> InventoryStatus:
    # Expiry outranks stock level
    if is_expired(product, as_of):
        return InventoryStatus.EXPIRED
    if is_expiring_soon(product, as_of):
        return InventoryStatus.EXPIRING_SOON
    if is_low_stock(product):
        return InventoryStatus.LOW_STOCK
    return InventoryStatus.HEALTHY


def aggregate(
    products: Iterable,
    as_of,
    policy: AggregatePolicy = AggregatePolicy.PARTITION,
) -> InventorySummary:
    products = list(products)
    summary = InventorySummary(total=len(products))

    if policy == AggregatePolicy.LEGACY:
        summary.low_stock = sum(1 for p in products if is_low_stock(p))
        summary.expired = sum(1 for p in products if is_expired(p, as_of))
        summary.expiring_soon = sum(1 for p in products if is_expiring_soon(p, as_of))
        # Can go negative when a product is both low stock and expiring
        summary.healthy = (
            summary.total - summary.low_stock - summary.expired - summary.expiring_soon
        )
        return summary

    for product in products:
        status = classify(product, as_of)
        setattr(summary, status.value, getattr(summary, status.value) + 1)

    return summary


def filter_by_status(
    products: Iterable,
    status: InventoryStatus | None,
    as_of,
    policy: AggregatePolicy = AggregatePolicy.PARTITION,
) -> list:
    if status is None:
        return list(products)

    status = InventoryStatus(status)

    if policy == AggregatePolicy.LEGACY:
        predicate = _LEGACY_PREDICATES[status]
        return [p for p in products if predicate(p, as_of)]

    return [p for p in products if classify(p, as_of) == status]


# ---------------------------------------------------------
# SEARCH
# ---------------------------------------------------------
def _searchable_fields(product):
    category = getattr(product, "category", None)
    return (
        getattr(product, "name", None),
        getattr(product, "name_localized", None),
        getattr(product, "barcode", None),
        getattr(category, "name", None) if category is not None else None,
    )


def search(products: Iterable, term: str | None) -> list:
    """Case-insensitive substring search over name, localized name, barcode and category."""
    if term is None or not term.strip():
        return list(products)

    needle = term.strip().casefold()

    return [
        product
        for product in products
        if any(
            needle in value.casefold()
            for value in _searchable_fields(product)
            if isinstance(value, str)
        )
    ]
