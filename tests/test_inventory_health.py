from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest

from app.core.inventory_health import (
    EXPIRING_SOON_DAYS,
    LOW_STOCK_THRESHOLD,
    AggregatePolicy,
    InventoryStatus,
    aggregate,
    classify,
    filter_by_status,
    search,
)

TODAY = date(2025, 1, 15)


def make_product(stock=50, expiry=None, name="Product", name_localized=None, barcode=None, category=None):
    return SimpleNamespace(
        stock_quantity=stock,
        expiry_date=expiry,
        name=name,
        name_localized=name_localized,
        barcode=barcode,
        category=SimpleNamespace(name=category) if category else None,
    )


def days(n):
    return TODAY + timedelta(days=n)


# ============================================================================
# CLASSIFY
# ============================================================================

@pytest.mark.parametrize(
    "stock, expiry, expected",
    [
        (5, None, InventoryStatus.LOW_STOCK),
        (50, days(-1), InventoryStatus.EXPIRED),
        (50, days(10), InventoryStatus.EXPIRING_SOON),
        (5, days(5), InventoryStatus.EXPIRING_SOON),
        (5, days(-5), InventoryStatus.EXPIRED),
        (50, days(60), InventoryStatus.HEALTHY),
        (50, None, InventoryStatus.HEALTHY),
        (5, days(60), InventoryStatus.LOW_STOCK),
    ],
)
def test_classify(stock, expiry, expected):
    assert classify(make_product(stock=stock, expiry=expiry), TODAY) == expected


def test_expiry_window_bounds_are_inclusive():
    assert classify(make_product(expiry=TODAY), TODAY) == InventoryStatus.EXPIRING_SOON
    assert classify(make_product(expiry=days(EXPIRING_SOON_DAYS)), TODAY) == InventoryStatus.EXPIRING_SOON
    assert classify(make_product(expiry=days(EXPIRING_SOON_DAYS + 1)), TODAY) == InventoryStatus.HEALTHY


def test_low_stock_threshold_is_exclusive():
    assert classify(make_product(stock=LOW_STOCK_THRESHOLD - 1), TODAY) == InventoryStatus.LOW_STOCK
    assert classify(make_product(stock=LOW_STOCK_THRESHOLD), TODAY) == InventoryStatus.HEALTHY


def test_classify_accepts_datetimes():
    product = make_product(expiry=datetime(2025, 1, 14, 23, 59))

    assert classify(product, datetime(2025, 1, 15, 0, 1)) == InventoryStatus.EXPIRED
    assert classify(product, datetime(2025, 1, 14, 0, 0)) == InventoryStatus.EXPIRING_SOON


def test_classify_depends_on_as_of():
    product = make_product(expiry=days(20))

    assert classify(product, TODAY) == InventoryStatus.EXPIRING_SOON
    assert classify(product, days(21)) == InventoryStatus.EXPIRED
    assert classify(product, days(-30)) == InventoryStatus.HEALTHY


# ============================================================================
# AGGREGATE
# ============================================================================

@pytest.fixture
def mixed_products():
    return [
        make_product(stock=5),                   # low stock
        make_product(stock=50, expiry=days(-1)),  # expired
        make_product(stock=50, expiry=days(10)),  # expiring soon
        make_product(stock=5, expiry=days(5)),    # low stock AND expiring soon
        make_product(stock=50, expiry=days(60)),  # healthy
        make_product(stock=80),                   # healthy
    ]


def test_partition_aggregate(mixed_products):
    summary = aggregate(mixed_products, TODAY)

    assert summary.as_dict() == {
        "total": 6,
        "low_stock": 1,
        "expired": 1,
        "expiring_soon": 2,
        "healthy": 2,
    }


def test_partition_counts_always_sum_to_total(mixed_products):
    for offset in range(-40, 80, 7):
        summary = aggregate(mixed_products, days(offset))
        parts = summary.low_stock + summary.expired + summary.expiring_soon + summary.healthy
        assert parts == summary.total == len(mixed_products)


def test_legacy_aggregate_counts_overlaps_twice(mixed_products):
    summary = aggregate(mixed_products, TODAY, AggregatePolicy.LEGACY)

    # The low stock + expiring product is in both low_stock and expiring_soon
    assert summary.as_dict() == {
        "total": 6,
        "low_stock": 2,
        "expired": 1,
        "expiring_soon": 2,
        "healthy": 1,
    }


def test_legacy_aggregate_healthy_can_go_negative():
    products = [make_product(stock=1, expiry=days(3)), make_product(stock=2, expiry=days(-3))]

    summary = aggregate(products, TODAY, AggregatePolicy.LEGACY)

    assert summary.total == 2
    assert summary.healthy == -2


def test_aggregate_empty():
    assert aggregate([], TODAY).as_dict() == {
        "total": 0,
        "low_stock": 0,
        "expired": 0,
        "expiring_soon": 0,
        "healthy": 0,
    }


def test_aggregate_accepts_generators(mixed_products):
    assert aggregate((p for p in mixed_products), TODAY).total == 6


# ============================================================================
# FILTER
# ============================================================================

def test_filter_by_status_matches_classification(mixed_products):
    for status in InventoryStatus:
        selected = filter_by_status(mixed_products, status, TODAY)
        assert all(classify(p, TODAY) == status for p in selected)

    assert len(filter_by_status(mixed_products, InventoryStatus.LOW_STOCK, TODAY)) == 1
    assert len(filter_by_status(mixed_products, InventoryStatus.EXPIRING_SOON, TODAY)) == 2


def test_filter_by_status_accepts_raw_values(mixed_products):
    assert filter_by_status(mixed_products, "expired", TODAY) == [mixed_products[1]]


def test_filter_without_status_returns_everything(mixed_products):
    assert filter_by_status(mixed_products, None, TODAY) == mixed_products


def test_legacy_filter_uses_independent_predicates(mixed_products):
    low = filter_by_status(mixed_products, InventoryStatus.LOW_STOCK, TODAY, AggregatePolicy.LEGACY)
    healthy = filter_by_status(mixed_products, InventoryStatus.HEALTHY, TODAY, AggregatePolicy.LEGACY)

    assert low == [mixed_products[0], mixed_products[3]]
    assert healthy == [mixed_products[4], mixed_products[5]]


# ============================================================================
# SEARCH
# ============================================================================

@pytest.fixture
def catalog():
    return [
        make_product(name="Coca Cola 330ml", barcode="1234567890123", category="Drinks"),
        make_product(name="Snickers Bar", name_localized="سنيكرز", barcode="9990001", category="Chocolate"),
        make_product(name="Orange Juice 1L", barcode=None, category="Drinks"),
        make_product(name="Digestive", barcode="5550001"),
    ]


def test_search_blank_term_returns_everything_in_order(catalog):
    assert search(catalog, "") == catalog
    assert search(catalog, "   ") == catalog
    assert search(catalog, None) == catalog


def test_search_is_case_insensitive_on_name(catalog):
    assert search(catalog, "COCA") == [catalog[0]]


def test_search_matches_localized_name(catalog):
    assert search(catalog, "سنيك") == [catalog[1]]


def test_search_matches_barcode(catalog):
    assert search(catalog, "555") == [catalog[3]]


def test_search_matches_category_name_and_preserves_order(catalog):
    assert search(catalog, "drinks") == [catalog[0], catalog[2]]


def test_search_without_match(catalog):
    assert search(catalog, "pepsi") == []
